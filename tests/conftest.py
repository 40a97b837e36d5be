from datetime import datetime, timedelta, timezone
from typing import Callable, List, Tuple

import pytest
import requests

from routing.models import DirectionsResult, SummaryDuration
from routing.ors_client import DirectionsError
from vehicles.models import RoutePoint


class ManualHandle:
    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Simulated time: callbacks only run when advance() moves past their due time."""
    def __init__(self):
        self.now = 0.0
        self.handles: List[ManualHandle] = []

    def call_later(self, delay, callback):
        handle = ManualHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> List[ManualHandle]:
        return [handle for handle in self.handles if not handle.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [handle for handle in self.pending if handle.due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.due)
            self.now = handle.due
            handle.cancelled = True  # fired
            handle.callback()
        self.now = target


class FakeDirectionsClient:
    """Stands in for ORSClient. Returns a canned result or raises the given error."""
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls: List[Tuple[list, object]] = []

    def compute_directions(self, coordinates, profile=None):
        self.calls.append((list(coordinates), profile))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def t0():
    return datetime(2024, 5, 1, 8, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def make_route(t0):
    def _make(coordinates, interval_seconds=5.0):
        return [
            RoutePoint(latitude=lat, longitude=lon, timestamp=t0 + timedelta(seconds=index * interval_seconds))
            for index, (lat, lon) in enumerate(coordinates)
        ]
    return _make


@pytest.fixture
def three_point_route(make_route):
    return make_route([(21.1458, 79.0882), (21.1468, 79.0892), (21.1478, 79.0902)])


@pytest.fixture
def directions_result():
    return DirectionsResult(
        geometry=[(21.1458, 79.0882), (21.1470, 79.0900), (21.1500, 79.0950), (21.1558, 79.0982)],
        duration=SummaryDuration(seconds=90.0),
    )


@pytest.fixture
def ok_client(directions_result):
    return FakeDirectionsClient(result=directions_result)


@pytest.fixture
def failing_client():
    return FakeDirectionsClient(error=DirectionsError("HTTP 503"))


@pytest.fixture
def offline_client():
    return FakeDirectionsClient(error=requests.ConnectionError("network unreachable"))
