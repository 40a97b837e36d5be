import asyncio
import threading

import pytest

from routing.models import DirectionsResult, UnknownDuration
from routing.ors_client import ORSClient
from simulation.loader import MULTI_POINT_LOAD_ERROR, ROUTE_LOAD_ERROR, RouteLoader
from simulation.policy import default_simulation_policy
from simulation.session import SessionCoordinator


class GatedClient:
    """Blocks each call until the gate for its start coordinate opens."""
    def __init__(self, results):
        self.results = {result.geometry[0]: result for result in results}
        self.gates = {start: threading.Event() for start in self.results}

    def compute_directions(self, coordinates, profile=None):
        start = coordinates[0]
        self.gates[start].wait(timeout=5)
        return self.results[start]


def result_with(points):
    return DirectionsResult(geometry=points, duration=UnknownDuration())


@pytest.fixture
def coordinator():
    return SessionCoordinator()


def test_direct_route_is_loaded(ok_client, coordinator, directions_result):
    loader = RouteLoader(ok_client, coordinator)

    asyncio.run(loader.load_route())

    session = coordinator.session
    assert [point.position for point in session.route] == directions_result.geometry
    assert session.loading is False
    assert session.error is None


def test_direct_route_failure_is_silent(failing_client, coordinator):
    loader = RouteLoader(failing_client, coordinator)

    asyncio.run(loader.load_route())

    session = coordinator.session
    assert session.error is None
    assert len(session.route) == 21
    policy = default_simulation_policy()
    assert session.route[0].position == pytest.approx(policy.default_start)
    assert session.route[-1].position == pytest.approx(policy.default_end)


def test_multi_point_failure_reports_error_and_keeps_route(ok_client, failing_client, coordinator, directions_result):
    asyncio.run(RouteLoader(ok_client, coordinator).load_route())
    previous_route = coordinator.session.route

    asyncio.run(RouteLoader(failing_client, coordinator).load_multi_point_route())

    session = coordinator.session
    assert session.error == MULTI_POINT_LOAD_ERROR
    assert session.loading is False
    assert session.route == previous_route


def test_multi_point_uses_default_waypoints(ok_client, coordinator):
    loader = RouteLoader(ok_client, coordinator)

    asyncio.run(loader.load_multi_point_route())

    coordinates, _ = ok_client.calls[0]
    assert coordinates == default_simulation_policy().default_waypoints
    assert coordinator.session.error is None


def test_new_load_clears_previous_error(ok_client, failing_client, coordinator):
    asyncio.run(RouteLoader(failing_client, coordinator).load_multi_point_route())
    assert coordinator.session.error is not None

    asyncio.run(RouteLoader(ok_client, coordinator).load_route())

    assert coordinator.session.error is None


def test_cancelled_load_is_discarded(coordinator):
    client = GatedClient([result_with([(21.0, 79.0), (21.1, 79.1)])])
    loader = RouteLoader(client, coordinator)

    async def scenario():
        task = asyncio.create_task(loader.load_route((21.0, 79.0), (21.1, 79.1)))
        await asyncio.sleep(0)
        assert coordinator.session.loading is True
        loader.cancel()
        client.gates[(21.0, 79.0)].set()
        await task

    asyncio.run(scenario())

    assert coordinator.session.route == ()


def test_newer_load_wins_over_slower_older_one(coordinator):
    older = result_with([(21.0, 79.0), (21.1, 79.1)])
    newer = result_with([(22.0, 80.0), (22.1, 80.1), (22.2, 80.2)])
    client = GatedClient([older, newer])
    loader = RouteLoader(client, coordinator)

    async def scenario():
        first = asyncio.create_task(loader.load_route((21.0, 79.0), (21.1, 79.1)))
        await asyncio.sleep(0)
        second = asyncio.create_task(loader.load_route((22.0, 80.0), (22.2, 80.2)))
        await asyncio.sleep(0)
        client.gates[(22.0, 80.0)].set()
        await second
        client.gates[(21.0, 79.0)].set()
        await first

    asyncio.run(scenario())

    assert [point.position for point in coordinator.session.route] == newer.geometry


def test_simple_route_needs_no_provider(coordinator):
    loader = RouteLoader(client=None, coordinator=coordinator)

    loader.load_simple_route()

    session = coordinator.session
    assert len(session.route) == 21
    assert session.loading is False


class BrokenClient:
    """Fails with something no acquisition layer knows how to handle."""
    def compute_directions(self, coordinates, profile=None):
        raise RuntimeError("client exploded")


class MalformedBodySession:
    """requests.Session stand-in whose body has unusable route properties."""
    class Response:
        ok = True
        status_code = 200
        text = ""

        def json(self):
            return {
                "features": [
                    {"geometry": {"coordinates": [[79.0, 21.0], [79.1, 21.1]]}, "properties": ["oops"]}
                ]
            }

    def post(self, url, json=None, headers=None, timeout=None):
        return self.Response()


def test_unexpected_direct_failure_installs_simple_route(coordinator):
    errors_seen = []
    coordinator.subscribe(lambda previous, current: errors_seen.append(current.error))
    loader = RouteLoader(BrokenClient(), coordinator)

    asyncio.run(loader.load_route())

    session = coordinator.session
    assert ROUTE_LOAD_ERROR in errors_seen
    assert session.loading is False
    assert len(session.route) == 21
    assert session.route[0].position == pytest.approx(default_simulation_policy().default_start)


def test_unexpected_multi_point_failure_reports_error(ok_client, coordinator):
    asyncio.run(RouteLoader(ok_client, coordinator).load_route())
    previous_route = coordinator.session.route

    asyncio.run(RouteLoader(BrokenClient(), coordinator).load_multi_point_route())

    session = coordinator.session
    assert session.error == MULTI_POINT_LOAD_ERROR
    assert session.loading is False
    assert session.route == previous_route


def test_malformed_body_multi_point_reports_error(coordinator):
    client = ORSClient(api_key="key", session=MalformedBodySession())

    asyncio.run(RouteLoader(client, coordinator).load_multi_point_route())

    assert coordinator.session.error == MULTI_POINT_LOAD_ERROR
    assert coordinator.session.loading is False


def test_malformed_body_direct_route_falls_back(coordinator):
    client = ORSClient(api_key="key", session=MalformedBodySession())

    asyncio.run(RouteLoader(client, coordinator).load_route())

    session = coordinator.session
    assert session.error is None
    assert len(session.route) == 21
    assert session.route[-1].position == pytest.approx(default_simulation_policy().default_end)
