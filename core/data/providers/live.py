"""
Gather current observations for a location into LiveReadings.
"""

import logging
from typing import Callable, Optional, Tuple

from core.models import AQIReading, GeoPoint, LiveReadings

logger = logging.getLogger(__name__)


def collect_live_readings(
    point: GeoPoint,
    air_quality: Optional[Callable[[GeoPoint], Optional[AQIReading]]] = None,
    rainfall: Optional[Callable[[GeoPoint], Tuple[float, float]]] = None,
    traffic: Optional[Callable[[GeoPoint], Optional[float]]] = None,
) -> LiveReadings:
    """
    Query each configured provider once. Providers that are absent or
    return nothing leave their fields empty.
    """
    aqi = None
    if air_quality is not None:
        reading = air_quality(point)
        if reading is not None:
            aqi = float(reading.aqi)

    rain_mm = rain_probability = None
    if rainfall is not None:
        rain_mm, rain_probability = rainfall(point)

    congestion = traffic(point) if traffic is not None else None

    readings = LiveReadings(
        aqi=aqi,
        rainfall_mm=rain_mm,
        rain_probability_pct=rain_probability,
        traffic_congestion=congestion,
    )
    logger.debug(f"Live readings at ({point.lat}, {point.lng}): {readings.to_dict()}")
    return readings
