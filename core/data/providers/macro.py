"""
Macro-economic baseline from the World Bank indicators API.

Fetches population, urbanization, GDP per capita and poverty series for
a country, keeps the latest non-null value of each, and can extrapolate
a series linearly to a future year. Results are memoized per country
for 24 hours. Every field is independently optional; a failed series
leaves its field as None.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import requests

from core.data.providers.base import fetch_json
from core.exceptions import DataUnavailableError
from core.models import GeoPoint, MacroEconomicBaseline

logger = logging.getLogger(__name__)

WORLD_BANK_URL = "https://api.worldbank.org/v2/country"
CACHE_TTL_SECONDS = 24 * 60 * 60

INDICATORS = {
    "population": "SP.POP.TOTL",
    "urban_pct": "SP.URB.TOTL.IN.ZS",
    "gdp_per_capita": "NY.GDP.PCAP.CD",
    "poverty_nahc": "SI.POV.NAHC",
    "poverty_dday": "SI.POV.DDAY",
}

# (year, value) pairs as returned, newest first
Series = List[Tuple[int, Optional[float]]]


def latest_from_series(series: Series) -> Optional[Tuple[int, float]]:
    """First non-null (year, value) in a newest-first series."""
    for year, value in series or []:
        if value is not None:
            return (year, value)
    return None


def linear_extrapolate(series: Series, target_year: int) -> Optional[float]:
    """
    Value of a series at target_year.

    Exact matches are returned as-is; years before the first known point
    take the first value; later years extend the slope of the last two
    known points.
    """
    points = sorted((y, v) for y, v in series or [] if v is not None)
    if not points:
        return None

    for year, value in points:
        if year == target_year:
            return value

    first_year, first_value = points[0]
    if target_year <= first_year:
        return first_value

    last_year, last_value = points[-1]
    prev_year, prev_value = points[-2] if len(points) > 1 else points[-1]
    slope = (last_value - prev_value) / ((last_year - prev_year) or 1)
    return last_value + slope * (target_year - last_year)


@dataclass
class MacroSnapshot:
    """Raw series and the derived baseline for one country."""

    country: str
    series: Dict[str, Series] = field(default_factory=dict)
    fetched_at: float = 0.0

    def baseline(self) -> MacroEconomicBaseline:
        def latest(name: str) -> Optional[float]:
            found = latest_from_series(self.series.get(name, []))
            return float(found[1]) if found else None

        poverty = latest("poverty_nahc")
        if poverty is None:
            poverty = latest("poverty_dday")
        return MacroEconomicBaseline(
            gdp_per_capita=latest("gdp_per_capita"),
            population=latest("population"),
            urban_pct=latest("urban_pct"),
            poverty_rate=poverty,
        )

    def interpolated(self, name: str, start_year: int, end_year: int) -> Dict[int, Optional[float]]:
        """Year-by-year values of a series over [start_year, end_year]."""
        series = self.series.get(name, [])
        return {y: linear_extrapolate(series, y) for y in range(start_year, end_year + 1)}


class WorldBankClient:
    """
    World Bank macro baseline provider.

    Args:
        country: ISO3 country code
        timeout: Per-request timeout in seconds
        ttl_seconds: Snapshot reuse window
    """

    def __init__(
        self,
        country: str = "IND",
        timeout: float = 10.0,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        url: str = WORLD_BANK_URL,
        session: Optional[requests.Session] = None,
    ):
        self.country = country
        self.timeout = timeout
        self.ttl_seconds = ttl_seconds
        self.url = url
        self.session = session
        self._snapshots: Dict[str, MacroSnapshot] = {}
        self._lock = threading.Lock()

    def __call__(self, location: Optional[GeoPoint] = None) -> MacroEconomicBaseline:
        return self.snapshot().baseline()

    def snapshot(self, country: Optional[str] = None) -> MacroSnapshot:
        country = country or self.country
        with self._lock:
            cached = self._snapshots.get(country)
            if cached is not None and time.monotonic() - cached.fetched_at < self.ttl_seconds:
                return cached

        snapshot = MacroSnapshot(country=country, fetched_at=time.monotonic())
        for name, indicator in INDICATORS.items():
            try:
                snapshot.series[name] = self._fetch_series(country, indicator)
            except DataUnavailableError as e:
                logger.warning(f"World Bank indicator {indicator} unavailable: {e}")
                snapshot.series[name] = []

        if any(snapshot.series.values()):
            with self._lock:
                self._snapshots[country] = snapshot
        return snapshot

    def _fetch_series(self, country: str, indicator: str) -> Series:
        payload = fetch_json(
            f"{self.url}/{country}/indicator/{indicator}",
            "world-bank",
            params={"format": "json", "per_page": 100},
            timeout=self.timeout,
            session=self.session,
        )
        if not isinstance(payload, list) or len(payload) < 2 or not payload[1]:
            raise DataUnavailableError("world-bank", f"no data for {indicator}")

        series: Series = []
        for entry in payload[1]:
            try:
                year = int(entry["date"])
            except (KeyError, TypeError, ValueError):
                continue
            value = entry.get("value")
            series.append((year, float(value) if value is not None else None))
        return series
