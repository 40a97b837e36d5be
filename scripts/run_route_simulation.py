import argparse
import asyncio
import logging
import os

from routing.models import TravelProfile
from routing.ors_client import ORSClient
from simulation.app import VehicleSimulation
from simulation.clock import PlaybackState
from simulation.policy import SimulationPolicy
from vehicles.formatting import format_coordinates
from vehicles.trace import write_trace_csv

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Play a simulated vehicle along a route.")
    parser.add_argument("--multi", action="store_true", help="load the multi-point demo route")
    parser.add_argument("--offline", action="store_true", help="skip the provider and use the simple diagonal route")
    parser.add_argument("--profile", default="driving", choices=[p.value for p in TravelProfile])
    parser.add_argument("--speedup", type=float, default=1.0, help="divide the tick interval by this factor")
    parser.add_argument("--trace", default=None, help="write the per-point metrics trace to this CSV path")
    return parser.parse_args()


async def run_simulation(args) -> None:
    print("=== STARTING ROUTE SIMULATION ===")

    policy = SimulationPolicy(
        tick_interval_ms=max(1, int(1000 / args.speedup)),
        default_profile=TravelProfile(args.profile),
    )
    policy.validate()

    simulation = VehicleSimulation(ORSClient(profile=policy.default_profile), policy=policy)
    finished = asyncio.Event()

    def report(previous, current):
        if previous.current_index != current.current_index or previous.route != current.route:
            view = simulation.controls_view()
            print(
                f"[{current.current_index:>3}/{current.last_index}] "
                f"{format_coordinates(view.current_point)} | "
                f"{view.speed_label} | {view.elapsed_label} | "
                f"{view.distance_label} | {view.progress_label}"
            )
        if simulation.state is PlaybackState.AT_END and current.playing:
            finished.set()

    simulation.coordinator.subscribe(report)

    if args.offline:
        simulation.loader.load_simple_route()
    elif args.multi:
        await simulation.on_load_multi_point_route()
    else:
        await simulation.on_load_route()

    session = simulation.session
    if session.error:
        print(f"[FAILED] {session.error}")
        simulation.close()
        return

    print(f"Loaded {len(session.route)} route points. Playing...\n")
    simulation.on_play_pause()
    await finished.wait()

    metadata = simulation.metadata
    print("\n=== SIMULATION COMPLETE ===")
    print(f"Distance: {metadata.distance_traveled:.1f} m of {metadata.total_distance:.1f} m")
    print(f"Elapsed route time: {metadata.elapsed_time:.0f} s")

    if args.trace:
        path = write_trace_csv(session.route, os.path.abspath(args.trace))
        print(f"Trace written to '{path}'.")

    simulation.close()


if __name__ == "__main__":
    asyncio.run(run_simulation(parse_args()))
