"""
Live air-quality readings (OpenWeather Air Pollution API).

Fails soft: any failure, a missing key or an invalid coordinate yields
None, and the caller falls back to the projected AQI.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from core.air_quality.aqi import aqi_category, pm25_to_aqi
from core.config import AirQualityConfig
from core.data.providers.base import fetch_json
from core.exceptions import DataUnavailableError
from core.models import AQIReading, GeoPoint

logger = logging.getLogger(__name__)

OPENWEATHER_AIR_URL = "https://api.openweathermap.org/data/2.5/air_pollution"


def reading_from_components(components: Dict[str, Any], timestamp: datetime) -> AQIReading:
    """Build an AQIReading from raw component concentrations."""

    def component(name: str) -> float:
        value = components.get(name)
        return round(float(value), 1) if value is not None else 0.0

    pm25 = component("pm2_5")
    aqi = pm25_to_aqi(pm25)
    return AQIReading(
        pm25=pm25,
        pm10=component("pm10"),
        no2=component("no2"),
        o3=component("o3"),
        co=component("co"),
        aqi=aqi,
        category=aqi_category(aqi),
        timestamp=timestamp,
    )


class OpenWeatherAirQualityClient:
    """
    Fetch current pollutant concentrations and convert PM2.5 to AQI.

    Args:
        api_key: OpenWeather API key
        timeout: Request timeout in seconds
        session: Optional requests session
    """

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = 5.0,
        url: str = OPENWEATHER_AIR_URL,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.url = url
        self.session = session

    @classmethod
    def from_config(
        cls, config: AirQualityConfig, session: Optional[requests.Session] = None
    ) -> "OpenWeatherAirQualityClient":
        return cls(api_key=config.api_key, timeout=config.timeout_s, session=session)

    def __call__(self, point: GeoPoint) -> Optional[AQIReading]:
        if not self.api_key or point is None:
            return None
        if not (math.isfinite(point.lat) and math.isfinite(point.lng)):
            return None
        try:
            return self._fetch(point)
        except DataUnavailableError as e:
            logger.warning(f"AQI fetch failed: {e}")
            return None

    def _fetch(self, point: GeoPoint) -> AQIReading:
        payload = fetch_json(
            self.url,
            "openweather-air",
            params={"lat": point.lat, "lon": point.lng, "appid": self.api_key},
            timeout=self.timeout,
            session=self.session,
        )
        entries = payload.get("list") if isinstance(payload, dict) else None
        if not entries:
            raise DataUnavailableError("openweather-air", "no AQI data")

        entry = entries[0]
        dt = entry.get("dt")
        timestamp = (
            datetime.fromtimestamp(dt, tz=timezone.utc)
            if isinstance(dt, (int, float))
            else datetime.now(timezone.utc)
        )
        return reading_from_components(entry.get("components") or {}, timestamp)
