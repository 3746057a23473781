"""
Air quality index conversion.
"""

from core.air_quality.aqi import AQI_MAX, PM25_BREAKPOINTS, aqi_category, pm25_to_aqi

__all__ = [
    "AQI_MAX",
    "PM25_BREAKPOINTS",
    "aqi_category",
    "pm25_to_aqi",
]
