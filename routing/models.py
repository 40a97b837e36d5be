"""
Purpose: Normalized shapes returned by the directions adapter.
What it does:
- TravelProfile enum and its provider-side names
- DirectionsResult: route geometry plus how its duration was reported
- the duration outcome is resolved once at parse time into exactly one of
  SummaryDuration | SegmentDurations | UnknownDuration

Rule: No HTTP here. Models only.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

LatLon = Tuple[float, float]

# seconds assumed per geometry point when the provider gives no duration
SECONDS_PER_POINT_HEURISTIC = 3.0


class TravelProfile(str, Enum):
    DRIVING = "driving"
    WALKING = "walking"
    CYCLING = "cycling"

    @property
    def provider_name(self) -> str:
        return _PROVIDER_PROFILES[self]


_PROVIDER_PROFILES = {
    TravelProfile.DRIVING: "driving-car",
    TravelProfile.WALKING: "foot-walking",
    TravelProfile.CYCLING: "cycling-regular",
}


@dataclass(frozen=True)
class SummaryDuration:
    """The provider reported a total duration for the whole route."""
    seconds: float

    def total_seconds(self, point_count: int) -> float:
        return self.seconds


@dataclass(frozen=True)
class SegmentDurations:
    """No usable summary, but per-segment durations were present."""
    seconds: Tuple[float, ...]

    def total_seconds(self, point_count: int) -> float:
        return float(sum(self.seconds))


@dataclass(frozen=True)
class UnknownDuration:
    """Neither a summary nor segments: fall back to a per-point heuristic."""

    def total_seconds(self, point_count: int) -> float:
        return point_count * SECONDS_PER_POINT_HEURISTIC


DurationInfo = Union[SummaryDuration, SegmentDurations, UnknownDuration]


@dataclass(frozen=True)
class DirectionsResult:
    geometry: List[LatLon]  # (lat, lon) in traversal order
    duration: DurationInfo

    def total_duration_seconds(self) -> float:
        return self.duration.total_seconds(len(self.geometry))
