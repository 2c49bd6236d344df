# config/cache.py
"""
Caching system for the Startup Ecosystem Graph.

This module provides an in-process TTL cache that fronts the whole fetch
pipeline. Expiry is checked lazily on access; there is no background sweeper.
"""
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from startup_graph.config.logs import get_logger
from startup_graph.schemas import CanonicalDataset

# Initialize logger
logger = get_logger(__name__)

# Cache keys used by the application
CACHE_KEYS = {
    "graph": "graph-data",
}


@dataclass(frozen=True)
class CacheEntry:
    """A stored dataset with its write time (seconds) and TTL (milliseconds)."""
    data: CanonicalDataset
    timestamp: float
    ttl: int


class DataCache:
    """Thread-safe TTL cache of validated canonical datasets."""

    def __init__(self, clock: Callable[[], float] = time.time):
        """
        Initialize the cache.

        Args:
            clock: Returns the current time in seconds; injectable for tests
        """
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def _expired(self, entry: CacheEntry) -> bool:
        age_ms = (self._clock() - entry.timestamp) * 1000
        return age_ms > entry.ttl

    def get(self, key: str) -> Optional[CanonicalDataset]:
        """
        Get cached data if not expired.

        An expired entry is removed as a side effect.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            if self._expired(entry):
                del self._entries[key]
                logger.debug(f"Cache entry expired: {key}")
                return None

            return entry.data

    def set(self, key: str, data: CanonicalDataset, ttl: int) -> None:
        """Store data under a key, replacing any existing entry."""
        with self._lock:
            self._entries[key] = CacheEntry(data=data, timestamp=self._clock(), ttl=ttl)
        logger.info(f"Cached '{key}' with TTL {ttl}ms")

    def is_expired(self, key: str) -> bool:
        """Check whether a key is missing or expired without evicting it."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return True
            return self._expired(entry)

    def invalidate(self, key: str) -> None:
        """Invalidate a specific cache key."""
        with self._lock:
            removed = self._entries.pop(key, None)
        if removed is not None:
            logger.info(f"Invalidated cache key '{key}'")

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            self._entries.clear()
        logger.info("Cache cleared")

    def get_stats(self) -> Dict[str, object]:
        """Get cache statistics."""
        with self._lock:
            keys: List[str] = list(self._entries.keys())
        return {"size": len(keys), "keys": keys}

    def get_timestamp(self, key: str) -> Optional[float]:
        """Get the write timestamp (seconds since epoch) for a key."""
        with self._lock:
            entry = self._entries.get(key)
            return entry.timestamp if entry else None
