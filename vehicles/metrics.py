"""
Purpose: Per-tick motion metrics for a vehicle on a route.
What it does:
Turns (route, current index) into a VehicleMetadata value: speed between the
last two samples, elapsed time since the first sample, distance traveled,
total route distance and progress percentage.

Rule: pure functions, recomputed from scratch on every call. Routes are
tens of points long so the O(n) walk is fine.
"""

from typing import Sequence

from .geodesy import distance, route_length, traveled_length
from .models import RoutePoint, VehicleMetadata

SECONDS_PER_HOUR = 3600.0


def elapsed_seconds(start: RoutePoint, current: RoutePoint) -> float:
    return (current.timestamp - start.timestamp).total_seconds()


def speed_between(previous: RoutePoint, current: RoutePoint) -> float:
    """
    Average speed in km/h between two consecutive samples.
    Returns 0 when no time passed between them.
    """
    meters = distance(previous.position, current.position)
    hours = elapsed_seconds(previous, current) / SECONDS_PER_HOUR
    if hours <= 0:
        return 0.0
    return meters / 1000 / hours


def compute_metrics(route: Sequence[RoutePoint], current_index: int) -> VehicleMetadata:
    """
    Derive the vehicle metadata for the given position on the route.

    Empty routes and negative indices yield the all-zero metadata instead of
    raising, so callers can render before a route is loaded.
    """
    if not route or current_index < 0:
        return VehicleMetadata.zero()

    current_index = min(current_index, len(route) - 1)

    total_distance = route_length(route)
    distance_traveled = traveled_length(route, current_index)
    elapsed_time = elapsed_seconds(route[0], route[current_index])

    current_speed = 0.0
    if current_index > 0:
        current_speed = speed_between(route[current_index - 1], route[current_index])

    progress = (distance_traveled / total_distance) * 100 if total_distance > 0 else 0.0

    return VehicleMetadata(
        current_speed=current_speed,
        elapsed_time=elapsed_time,
        distance_traveled=distance_traveled,
        total_distance=total_distance,
        progress=progress,
    )
