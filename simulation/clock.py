"""
Purpose: Playback clock for the simulation.
What it does:
Advances the current index by one every tick while playing, until the last
point is reached. Holds at most one pending tick: every change of
(playing, current index, route length) cancels the pending tick before a new
one is scheduled.

States:
- STOPPED: not playing
- RUNNING: playing and not yet on the last point
- AT_END: on the last point. playing may still be true, nothing is scheduled
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class PlaybackState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    AT_END = "at_end"


def playback_state(playing: bool, current_index: int, route_length: int) -> PlaybackState:
    if route_length > 0 and current_index >= route_length - 1:
        return PlaybackState.AT_END
    if not playing or route_length == 0:
        return PlaybackState.STOPPED
    return PlaybackState.RUNNING


class TimerHandle(Protocol):
    def cancel(self) -> Any: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Schedules callbacks on the running asyncio event loop."""
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class PlaybackController:
    """
    Owns the single pending tick handle.

    on_advance is called with the next index when a tick fires. The owner is
    expected to write that index back and call sync() again, which schedules
    the following tick.
    """
    def __init__(
        self,
        scheduler: Scheduler,
        on_advance: Callable[[int], None],
        interval_seconds: float = 1.0,
    ):
        self.scheduler = scheduler
        self.on_advance = on_advance
        self.interval_seconds = interval_seconds
        self._handle: Optional[TimerHandle] = None
        self._observed: Optional[Tuple[bool, int, int]] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def sync(self, playing: bool, current_index: int, route_length: int) -> PlaybackState:
        """
        Re-evaluate the state after a change. Unchanged inputs keep the
        pending tick as it is.
        """
        observed = (playing, current_index, route_length)
        state = playback_state(playing, current_index, route_length)
        if observed == self._observed:
            return state

        self._observed = observed
        self.cancel()
        if state is PlaybackState.RUNNING:
            self._handle = self.scheduler.call_later(
                self.interval_seconds, lambda: self._tick(current_index)
            )
        return state

    def _tick(self, from_index: int) -> None:
        self._handle = None
        logger.debug("Tick: advancing from index %d", from_index)
        self.on_advance(from_index + 1)

    def close(self) -> None:
        self.cancel()
        self._observed = None
