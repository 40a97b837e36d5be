"""
Purpose: Composition root of the vehicle simulation (the "glue").
What it does:
Wires the session coordinator, route loader, playback clock and metrics
calculator together, and exposes what the view layer may see and do:
- map_view() / controls_view(): read-only snapshots
- on_play_pause(), on_reset(), on_load_route(), on_load_multi_point_route()
- close(): teardown, cancels the pending tick and orphans in-flight loads
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, List, Optional

from vehicles.formatting import format_distance, format_time
from vehicles.metrics import compute_metrics
from vehicles.models import LatLon, RoutePoint, VehicleMetadata
from .clock import AsyncioScheduler, PlaybackController, PlaybackState, Scheduler, playback_state
from .loader import RouteLoader
from .policy import SimulationPolicy, default_simulation_policy
from .session import SessionCoordinator, SimulationSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MapViewState:
    """What the map surface draws: the traveled prefix and the vehicle marker."""
    path: List[LatLon]
    vehicle: Optional[LatLon]
    center: LatLon
    follow_vehicle: bool


@dataclass(frozen=True)
class ControlsViewState:
    playing: bool
    current_point: Optional[RoutePoint]
    metadata: VehicleMetadata

    @property
    def status(self) -> str:
        return "Moving" if self.playing else "Stopped"

    @property
    def progress_label(self) -> str:
        return f"{self.metadata.progress:.1f}%"

    @property
    def distance_label(self) -> str:
        return f"{format_distance(self.metadata.distance_traveled)} / {format_distance(self.metadata.total_distance)}"

    @property
    def elapsed_label(self) -> str:
        return format_time(self.metadata.elapsed_time)

    @property
    def speed_label(self) -> str:
        return f"{self.metadata.current_speed:.1f} km/h"


class VehicleSimulation:
    """
    One simulated vehicle on one route.

    Metrics are recomputed whenever the route or the current index changes,
    and the playback clock is re-synced after every session mutation.
    """
    def __init__(
        self,
        client,
        policy: Optional[SimulationPolicy] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self.policy = policy or default_simulation_policy()
        self.coordinator = SessionCoordinator()
        self.loader = RouteLoader(client, self.coordinator, self.policy)
        self.clock = PlaybackController(
            scheduler or AsyncioScheduler(),
            on_advance=self.coordinator.set_current_index,
            interval_seconds=self.policy.tick_interval_seconds,
        )
        self._metadata = VehicleMetadata.zero()
        self._unsubscribe = self.coordinator.subscribe(self._on_session_change)

    # --- Reads ---

    @property
    def session(self) -> SimulationSession:
        return self.coordinator.session

    @property
    def metadata(self) -> VehicleMetadata:
        return self._metadata

    @property
    def state(self) -> PlaybackState:
        session = self.session
        return playback_state(session.playing, session.current_index, len(session.route))

    def map_view(
        self,
        center_on_vehicle: bool = True,
        show_route: bool = True,
        show_vehicle: bool = True,
    ) -> MapViewState:
        session = self.session
        current = session.current_point
        vehicle = current.position if current is not None else None

        path: List[LatLon] = []
        if show_route and session.route:
            path = [point.position for point in session.route[: session.current_index + 1]]

        if vehicle is not None:
            center = vehicle
        elif session.route:
            center = session.route[0].position
        else:
            center = (0.0, 0.0)

        return MapViewState(
            path=path,
            vehicle=vehicle if show_vehicle else None,
            center=center,
            follow_vehicle=center_on_vehicle,
        )

    def controls_view(self) -> ControlsViewState:
        session = self.session
        return ControlsViewState(
            playing=session.playing,
            current_point=session.current_point,
            metadata=self._metadata,
        )

    # --- User intents ---

    def on_play_pause(self) -> None:
        self.coordinator.set_playing(not self.session.playing)

    def on_reset(self) -> None:
        self.coordinator.reset()

    def on_load_route(self) -> Awaitable[None]:
        self.coordinator.reset()
        return self.loader.load_route()

    def on_load_multi_point_route(self) -> Awaitable[None]:
        self.coordinator.reset()
        return self.loader.load_multi_point_route()

    def close(self) -> None:
        self.clock.close()
        self.loader.cancel()
        self._unsubscribe()
        logger.debug("Simulation closed at index %d", self.session.current_index)

    # --- Internals ---

    def _on_session_change(self, previous: SimulationSession, current: SimulationSession) -> None:
        if previous.route != current.route or previous.current_index != current.current_index:
            self._metadata = compute_metrics(current.route, current.current_index)
        self.clock.sync(current.playing, current.current_index, len(current.route))
