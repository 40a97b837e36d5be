"""
Simulation package.

Public API:
- VehicleSimulation: composition root used by the view layer / CLI
- SessionCoordinator, SimulationSession: state and its mutation entry points
- PlaybackController, PlaybackState: the playback clock
- RouteLoader: provider-backed route loading with stale-result protection
- SimulationPolicy: tunable constants
"""
from .app import ControlsViewState, MapViewState, VehicleSimulation
from .clock import AsyncioScheduler, PlaybackController, PlaybackState, playback_state
from .loader import RouteLoader
from .policy import SimulationPolicy, default_simulation_policy
from .session import SessionCoordinator, SimulationSession

__all__ = [
    "ControlsViewState",
    "MapViewState",
    "VehicleSimulation",
    "AsyncioScheduler",
    "PlaybackController",
    "PlaybackState",
    "playback_state",
    "RouteLoader",
    "SimulationPolicy",
    "default_simulation_policy",
    "SessionCoordinator",
    "SimulationSession",
]
