"""Display helpers for the controls panel."""

import math
from typing import Optional

from .models import RoutePoint


def format_time(seconds: float) -> str:
    """Format a duration in seconds as MM:SS."""
    minutes = math.floor(seconds / 60)
    remaining_seconds = math.floor(seconds % 60)
    return f"{minutes:02d}:{remaining_seconds:02d}"


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{round(meters)}m"
    return f"{meters / 1000:.2f}km"


def format_coordinates(point: Optional[RoutePoint]) -> str:
    if point is None:
        return "--"
    return f"{point.latitude:.6f}, {point.longitude:.6f}"
