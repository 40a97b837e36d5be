"""
Purpose: Great-circle distance math for routes.
What it does:
- distance between two (lat, lon) pairs via the haversine formula
- total length of a route
- length of a route prefix up to an index
"""

import math
from typing import Sequence

from .models import LatLon, RoutePoint

EARTH_RADIUS_M = 6_371_000.0


def distance(point_a: LatLon, point_b: LatLon) -> float:
    """
    Haversine distance in meters between two (lat, lon) degree pairs.
    No range validation is done on the inputs.
    """
    lat1, lon1 = point_a
    lat2, lon2 = point_b

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    # rounding can push a a hair past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def route_length(route: Sequence[RoutePoint]) -> float:
    """Sum of the distances between consecutive points, 0 for fewer than 2 points."""
    if len(route) < 2:
        return 0.0
    return traveled_length(route, len(route) - 1)


def traveled_length(route: Sequence[RoutePoint], upto_index: int) -> float:
    """
    Distance covered from route[0] to route[upto_index] (inclusive),
    following every intermediate point. 0 when upto_index < 1.
    """
    if upto_index < 1:
        return 0.0

    last = min(upto_index, len(route) - 1)
    total = 0.0
    for index in range(1, last + 1):
        total += distance(route[index - 1].position, route[index].position)
    return total
