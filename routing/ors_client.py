#Purpose: The directions provider "adapter/client" (OpenRouteService).
#Sole responsibility: talk to the provider via HTTP and return normalized outputs.
#Encapsulates provider-specific details:
#coordinate formatting ([lon, lat] pairs)
#URL construction (/{profile}/geojson)
#bearer authentication, timeouts and error handling
#parsing the GeoJSON response into DirectionsResult
#It should not contain fallback or simulation rules.

import logging
import os
from typing import Any, Dict, List, Optional, Union

import requests
from dotenv import load_dotenv

from .models import (
    DirectionsResult,
    DurationInfo,
    LatLon,
    SegmentDurations,
    SummaryDuration,
    TravelProfile,
    UnknownDuration,
)

# Read provider settings from environment
# Example in .env:
# ORS_BASE_URL=https://api.openrouteservice.org/v2/directions
# ORS_API_KEY=your-key
load_dotenv()
DEFAULT_BASE_URL = "https://api.openrouteservice.org/v2/directions"
BASE_URL = os.getenv("ORS_BASE_URL", DEFAULT_BASE_URL)
API_KEY = os.getenv("ORS_API_KEY")

logger = logging.getLogger(__name__)


class DirectionsError(Exception):
    """Raised when the directions provider answers with an error or an unusable body."""
    pass


class ORSClient:
    """
    Directions Adapter / Client

    Sole responsibility:
    - Talk to the directions provider via HTTP
    - Convert internal (lat, lon) -> provider [lon, lat]
    - Return normalized DirectionsResult values

    Transport failures (timeouts, connection errors) surface as
    requests.RequestException, everything else as DirectionsError.
    """
    def __init__(
        self,
        profile: Union[str, TravelProfile] = TravelProfile.DRIVING,
        timeout: int = 10,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or BASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else API_KEY
        self.timeout = timeout #the time to wait for a response before giving up
        self.profile = TravelProfile(profile) #driving, walking, cycling
        self.session = session or requests.Session()

        if not self.api_key:
            logger.warning("ORS_API_KEY is not set, directions requests will be rejected and fall back.")

    #----------------
    # Internal helpers for coordinate formatting, headers, parsing
    #----------------
    def format_coordinates(self, coordinates: List[LatLon]) -> List[List[float]]:
        """Convert list of (lat, lon) to the provider's [[lon, lat], ...] format."""
        return [[lon, lat] for lat, lon in coordinates]

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    @staticmethod
    def _parse_duration(properties: Dict[str, Any]) -> DurationInfo:
        summary = properties.get("summary") or {}
        if summary.get("duration"):
            return SummaryDuration(seconds=float(summary["duration"]))

        segments = properties.get("segments") or []
        if segments:
            return SegmentDurations(
                seconds=tuple(float(segment.get("duration", 0.0)) for segment in segments)
            )

        return UnknownDuration()

    def parse_response(self, data: Dict[str, Any]) -> DirectionsResult:
        """Turn a GeoJSON directions body into a DirectionsResult."""
        try:
            feature = data["features"][0]
            raw_coordinates = feature["geometry"]["coordinates"]
            geometry = [(float(lat), float(lon)) for lon, lat, *_ in raw_coordinates]
            duration = self._parse_duration(feature.get("properties") or {})
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
            raise DirectionsError(f"Malformed directions response: {exc!r}") from exc

        if not geometry:
            raise DirectionsError("Directions response contains an empty geometry")

        return DirectionsResult(geometry=geometry, duration=duration)

    #----------------
    # Public methods
    #----------------
    def compute_directions(
        self,
        coordinates: List[LatLon],
        profile: Union[str, TravelProfile, None] = None,
    ) -> DirectionsResult:
        """
        POSTs the ordered coordinates to /{profile}/geojson and returns the
        route geometry with its reported duration.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required to compute a route.")

        profile = TravelProfile(profile) if profile is not None else self.profile
        url = f"{self.base_url}/{profile.provider_name}/geojson"

        response = self.session.post(
            url,
            json={"coordinates": self.format_coordinates(coordinates)},
            headers=self._headers(),
            timeout=self.timeout,
        )

        if not response.ok:
            raise DirectionsError(
                f"Directions provider returned HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise DirectionsError("Directions provider returned a non-JSON body") from exc

        return self.parse_response(data)
