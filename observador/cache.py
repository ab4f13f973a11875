"""In-memory, single-slot cache for the latest aggregation result."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .config import DEFAULT_CACHE_TTL
from .models import AggregationResult

LOGGER = logging.getLogger(__name__)

CACHE_KEY = "all-news"


@dataclass(frozen=True)
class CacheEntry:
    value: AggregationResult
    expires_at: float


@dataclass(frozen=True)
class CacheStats:
    hits: int
    misses: int
    keys: int

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class NewsCache:
    """Holds one aggregation result until its TTL runs out.

    Writes swap in a new frozen :class:`CacheEntry`, so readers see either the
    previous entry or the new one.
    """

    def __init__(self, ttl: float = DEFAULT_CACHE_TTL, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entry: Optional[CacheEntry] = None
        self._hits = 0
        self._misses = 0
        self._stats_lock = threading.Lock()

    def _fresh_entry(self) -> Optional[CacheEntry]:
        entry = self._entry
        if entry is None or self._clock() >= entry.expires_at:
            return None
        return entry

    def get(self) -> Optional[AggregationResult]:
        entry = self._fresh_entry()
        if entry is None:
            with self._stats_lock:
                self._misses += 1
            LOGGER.debug("Cache miss for %s", CACHE_KEY)
            return None
        with self._stats_lock:
            self._hits += 1
        LOGGER.debug("Cache hit for %s", CACHE_KEY)
        return entry.value

    def peek(self) -> Optional[AggregationResult]:
        """Return the fresh value without counting a hit or miss."""

        entry = self._fresh_entry()
        return entry.value if entry else None

    def set(self, result: AggregationResult) -> None:
        self._entry = CacheEntry(value=result, expires_at=self._clock() + self.ttl)

    def clear(self) -> None:
        self._entry = None
        LOGGER.info("Cache cleared")

    def stats(self) -> CacheStats:
        with self._stats_lock:
            hits, misses = self._hits, self._misses
        return CacheStats(hits=hits, misses=misses, keys=1 if self._fresh_entry() else 0)


__all__ = ["CACHE_KEY", "CacheEntry", "CacheStats", "NewsCache"]
