"""
Purpose: Core data models for the vehicles domain.
What it does:
Defines a timestamped route position and the derived motion metrics of the
vehicle travelling along a route. Models only, no distance math here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Tuple

LatLon = Tuple[float, float]


@dataclass(frozen=True)
class RoutePoint:
    """
    A single sample of the route. Routes are ordered sequences of these,
    insertion order is traversal order and timestamps never decrease.
    """
    latitude: float
    longitude: float
    timestamp: datetime

    @property
    def position(self) -> LatLon:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class VehicleMetadata:
    """
    Motion metrics derived from (route, current index). Never stored,
    recomputed whenever the route or the index changes.
    """
    current_speed: float = 0.0  # km/h
    elapsed_time: float = 0.0  # seconds
    distance_traveled: float = 0.0  # meters
    total_distance: float = 0.0  # meters
    progress: float = 0.0  # percent 0-100

    @classmethod
    def zero(cls) -> VehicleMetadata:
        return cls()
