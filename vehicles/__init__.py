"""
Vehicles domain package.

Public API:
- Domain models: RoutePoint, VehicleMetadata
- Geodesy: distance, route_length, traveled_length
- Metrics: compute_metrics
"""
from .models import RoutePoint, VehicleMetadata, LatLon
from .geodesy import distance, route_length, traveled_length
from .metrics import compute_metrics

__all__ = [
    "RoutePoint",
    "VehicleMetadata",
    "LatLon",
    "distance",
    "route_length",
    "traveled_length",
    "compute_metrics",
]
