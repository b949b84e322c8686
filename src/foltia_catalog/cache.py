"""Named cache regions for read-through lookups.

The repository receives a CacheRegions implementation instead of reaching
for a global cache registry. Entries live in per-region cachetools
TTLCache instances; eviction is explicit after every mutation.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Hashable
from typing import Protocol, TypeVar

from cachetools import TTLCache

logger = logging.getLogger(__name__)

T = TypeVar("T")

SUBTITLE_CACHE_REGION = "subtitle"

DEFAULT_TTL_SECONDS = 300
DEFAULT_MAX_ENTRIES = 4096


def subtitle_cache_key(pid: int) -> str:
    """Return the cache key of a subtitle, used for both fill and evict."""
    return f"pid={pid}"


class CacheRegions(Protocol):
    """Protocol for a key-based cache partitioned into named regions."""

    def get_or_compute(self, region: str, key: Hashable, compute: Callable[[], T]) -> T:
        """Return the cached value, computing and storing it on a miss."""
        ...

    def evict(self, region: str, key: Hashable) -> bool:
        """Drop an entry. Returns True if something was evicted."""
        ...


class TTLCacheRegions:
    """In-process cache regions with time-based expiry.

    None results are cached like any other value, so repeated lookups of
    a missing identifier do not reach the database until the entry
    expires or is evicted.

    Access to the underlying caches is guarded by a lock; compute() runs
    outside the lock. Each region carries a generation number that evict()
    and clear() advance, and a computed value is stored only if its region
    generation is unchanged since the miss. A lookup that overlaps an
    eviction returns its value without caching it.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._timer = timer
        self._regions: dict[str, TTLCache] = {}
        self._generations: dict[str, int] = {}
        self._lock = threading.Lock()

    def _region(self, name: str) -> TTLCache:
        cache = self._regions.get(name)
        if cache is None:
            cache = TTLCache(
                maxsize=self.max_entries, ttl=self.ttl_seconds, timer=self._timer
            )
            self._regions[name] = cache
        return cache

    def get_or_compute(self, region: str, key: Hashable, compute: Callable[[], T]) -> T:
        with self._lock:
            cache = self._region(region)
            if key in cache:
                logger.debug("Cache HIT: %s/%s", region, key)
                return cache[key]
            generation = self._generations.setdefault(region, 0)
        logger.debug("Cache MISS: %s/%s", region, key)

        value = compute()
        with self._lock:
            if self._generations.get(region) != generation:
                logger.debug("Cache SKIP (evicted during lookup): %s/%s", region, key)
                return value
            self._region(region)[key] = value
        return value

    def evict(self, region: str, key: Hashable) -> bool:
        with self._lock:
            self._generations[region] = self._generations.get(region, 0) + 1
            cache = self._regions.get(region)
            if cache is None or key not in cache:
                return False
            del cache[key]
        logger.debug("Cache EVICT: %s/%s", region, key)
        return True

    def clear(self) -> None:
        """Drop every entry in every region."""
        with self._lock:
            self._regions.clear()
            for region in self._generations:
                self._generations[region] += 1


class NullCacheRegions:
    """Cache regions that never store anything (caching disabled)."""

    def get_or_compute(self, region: str, key: Hashable, compute: Callable[[], T]) -> T:
        return compute()

    def evict(self, region: str, key: Hashable) -> bool:
        return False
