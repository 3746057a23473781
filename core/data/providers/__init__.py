"""
Fail-soft clients for external data sources.

Modules:
    - elevation: Elevation sources (Open-Elevation, constant)
    - air_quality: OpenWeather air pollution readings
    - rainfall: Open-Meteo hourly rainfall
    - traffic: TomTom flow-segment congestion
    - macro: World Bank macro-economic baseline
    - live: Collect current observations into LiveReadings
"""

from core.data.providers.air_quality import OpenWeatherAirQualityClient
from core.data.providers.elevation import ConstantElevationSource, OpenElevationSource
from core.data.providers.live import collect_live_readings
from core.data.providers.macro import WorldBankClient
from core.data.providers.rainfall import OpenMeteoRainfallClient
from core.data.providers.traffic import TomTomTrafficClient

__all__ = [
    "ConstantElevationSource",
    "OpenElevationSource",
    "OpenMeteoRainfallClient",
    "OpenWeatherAirQualityClient",
    "TomTomTrafficClient",
    "WorldBankClient",
    "collect_live_readings",
]
