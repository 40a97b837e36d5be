#Marks routing as a package.
#Re-exports the public APIs (ORSClient, route loaders, fallback generators)
#so other modules import from routing without knowing internal file names.
#No business logic.

from .models import DirectionsResult, TravelProfile
from .ors_client import ORSClient, DirectionsError
from .route_service import (
    RouteAcquisitionError,
    generate_fallback_multi_point_route,
    generate_fallback_route,
    generate_simple_route,
    load_direct_route,
    load_multi_point_route,
)

__all__ = [
    "DirectionsResult",
    "TravelProfile",
    "ORSClient",
    "DirectionsError",
    "RouteAcquisitionError",
    "generate_fallback_multi_point_route",
    "generate_fallback_route",
    "generate_simple_route",
    "load_direct_route",
    "load_multi_point_route",
]
