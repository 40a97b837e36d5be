#Purpose: Route acquisition for the vehicle simulation.
#Returns timestamped RoutePoint lists built from the directions provider,
#or deterministic synthetic routes when the provider is unavailable.
#Direct (two point) routes always recover silently with a fallback.
#Multi-point routes raise RouteAcquisitionError and leave the fallback
#decision to the caller.

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Union

import requests

from vehicles.models import LatLon, RoutePoint
from .models import DirectionsResult, TravelProfile
from .ors_client import DirectionsError

logger = logging.getLogger(__name__)

DIRECT_FALLBACK_SEGMENTS = 20
MULTI_POINT_FALLBACK_SEGMENTS = 10
FALLBACK_INTERVAL_SECONDS = 3.0
SIMPLE_ROUTE_STEP_DEGREES = 0.0001


class RouteAcquisitionError(Exception):
    """Raised when a multi-point route cannot be fetched from the provider."""
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_geometry(
    geometry: Sequence[LatLon],
    total_duration_seconds: float,
    start: datetime,
) -> List[RoutePoint]:
    """
    Spread total_duration_seconds evenly over the geometry points.
    Spatial spacing is ignored, every gap gets the same time slice.
    """
    interval = total_duration_seconds / (len(geometry) - 1) if len(geometry) > 1 else 0.0
    return [
        RoutePoint(
            latitude=lat,
            longitude=lon,
            timestamp=start + timedelta(seconds=index * interval),
        )
        for index, (lat, lon) in enumerate(geometry)
    ]


def route_from_directions(result: DirectionsResult, start: datetime) -> List[RoutePoint]:
    return timestamp_geometry(result.geometry, result.total_duration_seconds(), start)


def _interpolate(start: LatLon, end: LatLon, progress: float) -> LatLon:
    return (
        start[0] + (end[0] - start[0]) * progress,
        start[1] + (end[1] - start[1]) * progress,
    )


def generate_fallback_route(
    start: LatLon,
    end: LatLon,
    *,
    segments: int = DIRECT_FALLBACK_SEGMENTS,
    interval_seconds: float = FALLBACK_INTERVAL_SECONDS,
    now: Optional[datetime] = None,
) -> List[RoutePoint]:
    """
    Straight line from start to end cut into `segments` equal pieces,
    so segments + 1 points spaced interval_seconds apart.
    """
    now = now or _utcnow()
    points: List[RoutePoint] = []
    for index in range(segments + 1):
        lat, lon = _interpolate(start, end, index / segments)
        points.append(
            RoutePoint(
                latitude=lat,
                longitude=lon,
                timestamp=now + timedelta(seconds=index * interval_seconds),
            )
        )
    return points


def generate_fallback_multi_point_route(
    waypoints: Sequence[LatLon],
    *,
    segments_per_leg: int = MULTI_POINT_FALLBACK_SEGMENTS,
    interval_seconds: float = FALLBACK_INTERVAL_SECONDS,
    now: Optional[datetime] = None,
) -> List[RoutePoint]:
    """
    Interpolate every consecutive waypoint pair with segments_per_leg + 1
    points. Each leg repeats the waypoint it starts from, and a single
    running clock advances interval_seconds per emitted point across all legs.
    """
    now = now or _utcnow()
    points: List[RoutePoint] = []
    elapsed = 0.0

    for leg_start, leg_end in zip(waypoints, waypoints[1:]):
        for index in range(segments_per_leg + 1):
            lat, lon = _interpolate(leg_start, leg_end, index / segments_per_leg)
            points.append(
                RoutePoint(latitude=lat, longitude=lon, timestamp=now + timedelta(seconds=elapsed))
            )
            elapsed += interval_seconds

    return points


def generate_simple_route(
    start: LatLon,
    *,
    segments: int = DIRECT_FALLBACK_SEGMENTS,
    step_degrees: float = SIMPLE_ROUTE_STEP_DEGREES,
    interval_seconds: float = FALLBACK_INTERVAL_SECONDS,
    now: Optional[datetime] = None,
) -> List[RoutePoint]:
    """Offline diagonal route stepping north-east from start. Needs no provider."""
    now = now or _utcnow()
    base_lat, base_lon = start
    return [
        RoutePoint(
            latitude=base_lat + index * step_degrees,
            longitude=base_lon + index * step_degrees,
            timestamp=now + timedelta(seconds=index * interval_seconds),
        )
        for index in range(segments + 1)
    ]


def load_direct_route(
    client,
    start: LatLon,
    end: LatLon,
    profile: Union[str, TravelProfile] = TravelProfile.DRIVING,
    *,
    fallback_segments: int = DIRECT_FALLBACK_SEGMENTS,
    fallback_interval_seconds: float = FALLBACK_INTERVAL_SECONDS,
    now: Optional[datetime] = None,
) -> List[RoutePoint]:
    """
    Fetch a route between two coordinates. Never raises for provider or
    transport problems: those are logged and a straight-line fallback is
    returned instead.

    Args:
        client: anything with compute_directions(coordinates, profile) -> DirectionsResult
        start, end: (lat, lon)
        profile: travel profile (driving, walking, cycling)
        now: request start instant, defaults to the current UTC time
    """
    profile = TravelProfile(profile)
    now = now or _utcnow()
    try:
        result = client.compute_directions([start, end], profile)
    except (DirectionsError, requests.RequestException) as exc:
        logger.warning("Direct route request failed, using generated fallback route: %s", exc)
        return generate_fallback_route(
            start,
            end,
            segments=fallback_segments,
            interval_seconds=fallback_interval_seconds,
            now=now,
        )
    return route_from_directions(result, now)


def load_multi_point_route(
    client,
    waypoints: Sequence[LatLon],
    profile: Union[str, TravelProfile] = TravelProfile.DRIVING,
    *,
    now: Optional[datetime] = None,
) -> List[RoutePoint]:
    """
    Fetch a route visiting the waypoints in order.

    Raises:
        ValueError: fewer than two waypoints
        RouteAcquisitionError: provider or transport failure. The caller can
            still build generate_fallback_multi_point_route(waypoints) itself.
    """
    if len(waypoints) < 2:
        raise ValueError("At least two waypoints are required for a multi-point route.")

    profile = TravelProfile(profile)
    now = now or _utcnow()
    try:
        result = client.compute_directions(list(waypoints), profile)
    except (DirectionsError, requests.RequestException) as exc:
        raise RouteAcquisitionError(f"Multi-point route request failed: {exc}") from exc
    return route_from_directions(result, now)
