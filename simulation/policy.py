"""
Purpose: Central configuration for route playback and route loading.
What it does:

Stores all tunable constants of the simulation:

TICK_INTERVAL_MS = 1000

DIRECT_FALLBACK_SEGMENTS = 20

MULTI_POINT_FALLBACK_SEGMENTS = 10

FALLBACK_INTERVAL_SECONDS = 3

plus the default demo route (Nagpur) used when nothing else is given.

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from routing.models import TravelProfile
from routing.route_service import (
    DIRECT_FALLBACK_SEGMENTS,
    FALLBACK_INTERVAL_SECONDS,
    MULTI_POINT_FALLBACK_SEGMENTS,
    SIMPLE_ROUTE_STEP_DEGREES,
)

LatLon = Tuple[float, float]


@dataclass(frozen=True)
class SimulationPolicy:
    """
    Central configuration for the vehicle simulation.
    """

    # --- Playback clock ---
    # Wall-clock delay between two index advances while playing.
    tick_interval_ms: int = 1000

    # --- Fallback route generation ---
    direct_fallback_segments: int = DIRECT_FALLBACK_SEGMENTS
    multi_point_fallback_segments: int = MULTI_POINT_FALLBACK_SEGMENTS
    fallback_interval_seconds: float = FALLBACK_INTERVAL_SECONDS
    simple_route_step_degrees: float = SIMPLE_ROUTE_STEP_DEGREES

    # --- Default demo route (lat, lon) ---
    default_profile: TravelProfile = TravelProfile.DRIVING
    default_start: LatLon = (21.1458, 79.0882)
    default_end: LatLon = (21.1558, 79.0982)
    default_waypoints: List[LatLon] = field(default_factory=lambda: [
        (21.1458, 79.0882),  # start, Nagpur center
        (21.1498, 79.0922),
        (21.1538, 79.0962),
        (21.1558, 79.0982),  # end
    ])

    @property
    def tick_interval_seconds(self) -> float:
        return self.tick_interval_ms / 1000

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be > 0")

        if self.direct_fallback_segments < 1 or self.multi_point_fallback_segments < 1:
            raise ValueError("fallback segment counts must be >= 1")

        if self.fallback_interval_seconds < 0:
            raise ValueError("fallback_interval_seconds must be >= 0")

        if len(self.default_waypoints) < 2:
            raise ValueError("Must provide at least 2 default waypoints.")


def default_simulation_policy() -> SimulationPolicy:
    """
    Convenience factory for the default policy.
    """
    p = SimulationPolicy()
    p.validate()
    return p
