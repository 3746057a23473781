"""
Current rainfall from the Open-Meteo hourly forecast.
"""

import logging
from typing import Optional, Tuple

import requests

from core.data.providers.base import fetch_json
from core.exceptions import DataUnavailableError
from core.models import GeoPoint

logger = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"


class OpenMeteoRainfallClient:
    """
    Returns (rain_mm, precipitation_probability_pct) for the first
    forecast hour; (0.0, 0.0) when the lookup fails.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        url: str = OPEN_METEO_URL,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.url = url
        self.session = session

    def __call__(self, point: GeoPoint) -> Tuple[float, float]:
        try:
            payload = fetch_json(
                self.url,
                "open-meteo",
                params={
                    "latitude": point.lat,
                    "longitude": point.lng,
                    "hourly": "rain,precipitation_probability",
                    "forecast_days": 1,
                },
                timeout=self.timeout,
                session=self.session,
            )
        except DataUnavailableError as e:
            logger.warning(f"Rainfall fetch failed: {e}")
            return (0.0, 0.0)

        hourly = (payload.get("hourly") if isinstance(payload, dict) else None) or {}
        return (_first(hourly.get("rain")), _first(hourly.get("precipitation_probability")))


def _first(values) -> float:
    if not values or values[0] is None:
        return 0.0
    return float(values[0])
