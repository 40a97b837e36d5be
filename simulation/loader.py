"""
Purpose: Route loading flow between the acquisition service and the session.
What it does:
- runs the blocking provider call off the event loop (asyncio.to_thread)
- writes loading / route / error into the session through the coordinator
- tags every load with a generation number so that a result arriving after
  a newer load, or after cancel(), is dropped instead of applied

Failure policy:
- direct route: the acquisition service already falls back silently. Any
  other failure records ROUTE_LOAD_ERROR and installs the simple route,
  which clears the error again
- multi-point route: any failure is reported as a session error, the
  current route is kept
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from routing.models import TravelProfile
from routing.route_service import (
    RouteAcquisitionError,
    generate_simple_route,
    load_direct_route,
    load_multi_point_route,
)
from vehicles.models import LatLon, RoutePoint
from .policy import SimulationPolicy, default_simulation_policy
from .session import SessionCoordinator

logger = logging.getLogger(__name__)

ROUTE_LOAD_ERROR = "Failed to load route from API"
MULTI_POINT_LOAD_ERROR = "Failed to load multi-point route from API"


class RouteLoader:
    def __init__(
        self,
        client,
        coordinator: SessionCoordinator,
        policy: Optional[SimulationPolicy] = None,
    ):
        self.client = client
        self.coordinator = coordinator
        self.policy = policy or default_simulation_policy()
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def _begin(self) -> int:
        self._generation += 1
        # set_error clears loading, so it has to come first
        self.coordinator.set_error(None)
        self.coordinator.set_loading(True)
        return self._generation

    def _is_stale(self, token: int) -> bool:
        if token != self._generation:
            logger.debug("Discarding route result for load #%d, current is #%d", token, self._generation)
            return True
        return False

    def cancel(self) -> None:
        """Orphan any in-flight load. Its result will be ignored."""
        self._generation += 1

    def generate_simple_route(self) -> List[RoutePoint]:
        return generate_simple_route(
            self.policy.default_start,
            segments=self.policy.direct_fallback_segments,
            step_degrees=self.policy.simple_route_step_degrees,
            interval_seconds=self.policy.fallback_interval_seconds,
        )

    def load_simple_route(self) -> None:
        """Install the offline diagonal route without touching the provider."""
        self._generation += 1
        self.coordinator.set_route(self.generate_simple_route())

    async def load_route(
        self,
        start: Optional[LatLon] = None,
        end: Optional[LatLon] = None,
        profile: Optional[TravelProfile] = None,
    ) -> None:
        token = self._begin()
        # provider failures come back as a fallback route, anything else lands here
        try:
            route = await asyncio.to_thread(
                load_direct_route,
                self.client,
                start or self.policy.default_start,
                end or self.policy.default_end,
                profile or self.policy.default_profile,
                fallback_segments=self.policy.direct_fallback_segments,
                fallback_interval_seconds=self.policy.fallback_interval_seconds,
            )
        except Exception:
            if self._is_stale(token):
                return
            logger.exception("Failed to load route, installing the simple route")
            self.coordinator.set_error(ROUTE_LOAD_ERROR)
            self.coordinator.set_route(self.generate_simple_route())
            return

        if self._is_stale(token):
            return
        logger.info("Loaded route with %d points", len(route))
        self.coordinator.set_route(route)

    async def load_multi_point_route(
        self,
        waypoints: Optional[List[LatLon]] = None,
        profile: Optional[TravelProfile] = None,
    ) -> None:
        token = self._begin()
        try:
            route = await asyncio.to_thread(
                load_multi_point_route,
                self.client,
                waypoints or self.policy.default_waypoints,
                profile or self.policy.default_profile,
            )
        except RouteAcquisitionError as exc:
            if self._is_stale(token):
                return
            logger.error("Failed to load multi-point route: %s", exc)
            self.coordinator.set_error(MULTI_POINT_LOAD_ERROR)
            return
        except Exception:
            if self._is_stale(token):
                return
            logger.exception("Unexpected failure while loading multi-point route")
            self.coordinator.set_error(MULTI_POINT_LOAD_ERROR)
            return

        if self._is_stale(token):
            return
        logger.info("Loaded multi-point route with %d points", len(route))
        self.coordinator.set_route(route)
