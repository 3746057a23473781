"""
Elevation cache.

Memoizes elevation lookups by coordinate rounded to 5 decimal places
(about 1.1 m). The default policy clears the whole cache when an insert
would exceed capacity; LRU is available but must be opted into.
"""

import logging
import threading
from collections import OrderedDict
from enum import Enum
from typing import Callable, Optional

from core.models import GeoPoint

logger = logging.getLogger(__name__)


class EvictionPolicy(Enum):
    """Elevation cache eviction policies."""

    CLEAR_ALL = "clear_all"  # Drop every entry, then insert
    LRU = "lru"  # Least Recently Used


def cache_key(point: GeoPoint) -> str:
    """Rounded-coordinate key for a point."""
    return f"{point.lng:.5f},{point.lat:.5f}"


class ElevationCache:
    """
    Thread-safe elevation store with a fixed capacity.

    Entries are only added or wholesale cleared under CLEAR_ALL, so
    concurrent readers never observe a partially evicted cache.
    """

    def __init__(
        self,
        capacity: int = 5000,
        eviction_policy: EvictionPolicy = EvictionPolicy.CLEAR_ALL,
    ):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.eviction_policy = eviction_policy
        self._entries: "OrderedDict[str, float]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, point: GeoPoint) -> bool:
        with self._lock:
            return cache_key(point) in self._entries

    def get(self, point: GeoPoint) -> Optional[float]:
        key = cache_key(point)
        with self._lock:
            value = self._entries.get(key)
            if value is None:
                self.misses += 1
                return None
            self.hits += 1
            if self.eviction_policy == EvictionPolicy.LRU:
                self._entries.move_to_end(key)
            return value

    def put(self, point: GeoPoint, elevation: float) -> None:
        key = cache_key(point)
        with self._lock:
            if key in self._entries:
                self._entries[key] = elevation
                if self.eviction_policy == EvictionPolicy.LRU:
                    self._entries.move_to_end(key)
                return
            if len(self._entries) >= self.capacity:
                self._evict()
            self._entries[key] = elevation

    def get_or_load(self, point: GeoPoint, loader: Callable[[GeoPoint], float]) -> float:
        """Return the cached elevation, calling loader on a miss."""
        value = self.get(point)
        if value is not None:
            return value
        value = loader(point)
        self.put(point, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _evict(self) -> None:
        # Caller holds the lock
        if self.eviction_policy == EvictionPolicy.LRU:
            self._entries.popitem(last=False)
            self.evictions += 1
            return
        logger.debug(f"Elevation cache full ({len(self._entries)} entries), clearing")
        self.evictions += len(self._entries)
        self._entries.clear()
