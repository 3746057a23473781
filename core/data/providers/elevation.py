"""
Elevation sources.

Each source is a callable taking a GeoPoint and returning meters or
None. TerrainMetricsProvider turns None into the 0 m sentinel.
"""

import logging
from typing import Optional

import requests

from core.data.providers.base import fetch_json
from core.exceptions import DataUnavailableError
from core.models import GeoPoint

logger = logging.getLogger(__name__)

OPEN_ELEVATION_URL = "https://api.open-elevation.com/api/v1/lookup"


class ConstantElevationSource:
    """Flat terrain at a fixed elevation, for offline runs."""

    def __init__(self, elevation_m: float = 0.0):
        self.elevation_m = elevation_m

    def __call__(self, point: GeoPoint) -> float:
        return self.elevation_m


class OpenElevationSource:
    """
    Point elevation from the Open-Elevation lookup API (SRTM 30 m).
    """

    def __init__(
        self,
        url: str = OPEN_ELEVATION_URL,
        timeout: float = 8.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session

    def __call__(self, point: GeoPoint) -> Optional[float]:
        try:
            return self._lookup(point)
        except DataUnavailableError as e:
            logger.warning(f"Elevation unavailable at ({point.lat}, {point.lng}): {e}")
            return None

    def _lookup(self, point: GeoPoint) -> float:
        payload = fetch_json(
            self.url,
            "open-elevation",
            params={"locations": f"{point.lat},{point.lng}"},
            timeout=self.timeout,
            session=self.session,
        )
        try:
            return float(payload["results"][0]["elevation"])
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise DataUnavailableError("open-elevation", f"unexpected payload: {e}") from e
