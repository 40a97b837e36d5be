"""
Purpose: Owns the simulation state and its only mutation entry points.
What it does:
- SimulationSession: immutable snapshot (route, current index, playing,
  loading, error)
- SessionCoordinator: applies mutations by swapping in a new snapshot and
  notifies listeners afterwards, so readers only ever see whole states

Rule: State transitions live here. Timing lives in clock.py, fetching in loader.py.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence, Tuple

from vehicles.models import RoutePoint

logger = logging.getLogger(__name__)

SessionListener = Callable[["SimulationSession", "SimulationSession"], None]


@dataclass(frozen=True)
class SimulationSession:
    """
    Invariants:
    - 0 <= current_index < max(1, len(route))
    - playing implies not loading and a non-empty route
    - error set implies not loading
    """
    route: Tuple[RoutePoint, ...] = ()
    current_index: int = 0
    playing: bool = False
    loading: bool = True
    error: Optional[str] = None

    @property
    def current_point(self) -> Optional[RoutePoint]:
        if not self.route:
            return None
        return self.route[self.current_index]

    @property
    def last_index(self) -> int:
        return max(0, len(self.route) - 1)


def _clamp_index(index: int, route_length: int) -> int:
    return min(max(index, 0), max(0, route_length - 1))


class SessionCoordinator:
    """
    Single writer of the SimulationSession.

    Listeners are called with (previous, current) after each mutation that
    actually changed the state.
    """
    def __init__(self, session: Optional[SimulationSession] = None):
        self._session = session or SimulationSession()
        self._listeners: List[SessionListener] = []

    @property
    def session(self) -> SimulationSession:
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, new_session: SimulationSession) -> None:
        previous = self._session
        if new_session == previous:
            return
        self._session = new_session
        for listener in list(self._listeners):
            listener(previous, new_session)

    # --- Mutation entry points ---

    def set_route(self, route: Sequence[RoutePoint]) -> None:
        """Replace the route wholesale. Always clears loading and error."""
        route = tuple(route)
        session = self._session
        self._commit(
            replace(
                session,
                route=route,
                current_index=_clamp_index(session.current_index, len(route)),
                playing=session.playing and bool(route),
                loading=False,
                error=None,
            )
        )

    def set_loading(self, loading: bool) -> None:
        session = self._session
        # nothing plays while a route is being fetched
        playing = session.playing and not loading
        self._commit(replace(session, loading=loading, playing=playing))

    def set_error(self, error: Optional[str]) -> None:
        """Record (or clear) an error. Always clears loading."""
        self._commit(replace(self._session, error=error, loading=False))

    def reset(self) -> None:
        """Back to the first point, stopped, whatever the current state."""
        self._commit(replace(self._session, current_index=0, playing=False))

    def set_playing(self, playing: bool) -> None:
        session = self._session
        if playing and (session.loading or not session.route):
            logger.debug("Ignoring play request: loading=%s, route has %d points",
                         session.loading, len(session.route))
            return
        self._commit(replace(session, playing=playing))

    def set_current_index(self, index: int) -> None:
        """Move the vehicle. Out-of-range indices are clamped to the route."""
        session = self._session
        self._commit(replace(session, current_index=_clamp_index(index, len(session.route))))
