"""
Terrain Metrics Provider

Derives slope, drainage and heat for a point from elevation samples. The
elevation source is any callable returning meters (or None); lookups are
fail-soft and report 0 m when the source cannot answer.

Heat uses a constant built-density proxy; it does not yet vary spatially.
"""

import logging
import math
from typing import Callable, Optional, Tuple

from core.config import TerrainConfig
from core.models import GeoPoint, TerrainSample
from core.terrain.cache import ElevationCache

logger = logging.getLogger(__name__)

ElevationQuery = Callable[[GeoPoint], Optional[float]]


class TerrainMetricsProvider:
    """
    Elevation-derived hydrological approximations.

    The elevation cache is the only mutable state and is safe to share
    between concurrent callers.
    """

    def __init__(
        self,
        elevation_source: Optional[ElevationQuery] = None,
        config: Optional[TerrainConfig] = None,
        cache: Optional[ElevationCache] = None,
    ):
        """
        Args:
            elevation_source: Callable returning elevation in meters
            config: Terrain settings. Uses defaults if None.
            cache: Elevation cache. Built from config if None.
        """
        self.elevation_source = elevation_source
        self.config = config or TerrainConfig()
        self.cache = cache or ElevationCache(
            capacity=self.config.cache_capacity,
            eviction_policy=self.config.eviction_policy,
        )

    def get_elevation(self, point: GeoPoint) -> float:
        """Query the elevation source; 0.0 when unavailable."""
        if self.elevation_source is None or point is None:
            return 0.0
        try:
            value = self.elevation_source(point)
        except Exception as e:
            logger.debug(f"Elevation query failed at {point}: {e}")
            return 0.0
        if value is None:
            return 0.0
        try:
            value = float(value)
        except (TypeError, ValueError):
            logger.debug(f"Non-numeric elevation {value!r} at {point}")
            return 0.0
        if not math.isfinite(value):
            return 0.0
        return value

    def get_cached_elevation(self, point: GeoPoint) -> float:
        if point is None:
            return 0.0
        return self.cache.get_or_load(point, self.get_elevation)

    def get_terrain_metrics(self, point: GeoPoint) -> TerrainSample:
        """
        Sample elevation at the point and one delta east of it.

        slope = |e2 - e1| / delta
        drainage = clamp(1 - 4 * slope, 0, 1)
        heat = max(0, 1 + 2 * built_density - 0.002 * elevation - 0.4 * slope)
        """
        if point is None:
            return TerrainSample()

        lookup = self.get_cached_elevation if self.config.cache_metrics else self.get_elevation
        delta = self.config.sample_delta

        elevation = lookup(point)
        neighbour = lookup(point.offset(dlng=delta))
        slope = abs(neighbour - elevation) / delta

        drainage = min(1.0, max(0.0, 1.0 - slope * 4))
        heat = max(
            0.0,
            1.0 + self.config.built_density * 2 - elevation * 0.002 - slope * 0.4,
        )
        return TerrainSample(elevation=elevation, slope=slope, drainage=drainage, heat=heat)

    def get_flow_direction(self, point: GeoPoint) -> Tuple[float, float]:
        """Downhill vector (dx east, dy north) from cached elevations."""
        if point is None:
            return (0.0, 0.0)
        d = self.config.flow_delta
        center = self.get_cached_elevation(point)
        east = self.get_cached_elevation(point.offset(dlng=d))
        north = self.get_cached_elevation(point.offset(dlat=d))
        return (center - east, center - north)

    def calculate_risk(self, point: GeoPoint, population: float = 1) -> float:
        """Terrain-weighted exposure: (0.6 * drainage + 0.4 * heat) * population."""
        if point is None:
            return 0.0
        sample = self.get_terrain_metrics(point)
        return (sample.drainage * 0.6 + sample.heat * 0.4) * population

    def emergency_response_time(self, point: GeoPoint) -> int:
        """Heuristic response time in minutes; not empirically calibrated."""
        if point is None:
            return 5
        sample = self.get_terrain_metrics(point)
        return int(round(5 + sample.slope * 12 + sample.drainage * 8))

    def clear_cache(self) -> None:
        self.cache.clear()
