"""
Query Result Cache
==================

Process-local TTL cache for complete query responses, with a bounded size
and hit/miss accounting. Statistics live in a CacheStats object handed to
the cache by whoever builds it (see dependencies.py), never in a global.

Concurrent identical queries are not coalesced: both may miss and compute.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Hit/miss accumulator owned by whoever constructs the cache."""
    hits: int = 0
    misses: int = 0
    sets: int = 0
    evictions: int = 0

    @property
    def total_requests(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Hit rate as a percentage, 0 when nothing was requested yet."""
        if self.total_requests == 0:
            return 0.0
        return round(self.hits / self.total_requests * 100, 2)

    def reset(self) -> None:
        self.hits = 0
        self.misses = 0
        self.sets = 0
        self.evictions = 0


@dataclass
class CacheEntry:
    value: Any
    expires_at: float
    created_at: float = field(default_factory=time.time)

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class CacheManager:
    """
    Bounded in-memory TTL cache.

    When a new key arrives and the cache is full, the entry created first is
    dropped. Expired entries are removed lazily on read, or in bulk through
    cleanup_expired().
    """

    def __init__(
        self,
        default_ttl: int = 3600,
        max_size: int = 1000,
        stats: Optional[CacheStats] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Args:
            default_ttl: Lifetime of an entry in seconds when set() gets no ttl
            max_size: Entry limit
            stats: Statistics accumulator (a fresh one is created if omitted)
            clock: Time source in seconds
        """
        self._entries: Dict[str, CacheEntry] = {}
        self.default_ttl = default_ttl
        self.max_size = max_size
        self.stats = stats if stats is not None else CacheStats()
        self._clock = clock

    @staticmethod
    def generate_key(
        lat: float,
        lon: float,
        variable: str,
        day_of_year: int,
        window: int,
        start_year: int,
        end_year: int,
        threshold: Optional[float] = None
    ) -> str:
        """
        Build the cache key of a climate query.

        The threshold is part of the key: the cached response embeds the
        exceedance block, which differs per threshold.
        """
        return (
            f"query:{lat}:{lon}:{variable}:{day_of_year}:{window}:"
            f"{start_year}:{end_year}:{threshold}"
        )

    def get(self, key: str) -> Optional[Any]:
        """Cached value of key, or None when absent or expired."""
        entry = self._entries.get(key)

        if entry is not None and entry.is_expired(self._clock()):
            del self._entries[key]
            self.stats.evictions += 1
            logger.debug(f"⌛ Expired: {key}")
            entry = None

        if entry is None:
            self.stats.misses += 1
            logger.debug(f"Miss: {key}")
            return None

        self.stats.hits += 1
        logger.debug(f"🎯 Hit: {key}")
        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store value under key for ttl seconds (default_ttl when None)."""
        if key not in self._entries and len(self._entries) >= self.max_size:
            self._evict_oldest()

        now = self._clock()
        lifetime = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(value=value, expires_at=now + lifetime, created_at=now)
        self.stats.sets += 1
        logger.debug(f"💾 Stored: {key} (ttl={lifetime}s)")

    def _evict_oldest(self) -> None:
        oldest_key = min(self._entries, key=lambda k: self._entries[k].created_at)
        del self._entries[oldest_key]
        self.stats.evictions += 1
        logger.debug(f"Evicted oldest entry: {oldest_key}")

    def delete(self, key: str) -> bool:
        """Remove key; False when it was not cached."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Drop every entry (each one counts as an eviction)."""
        count = len(self._entries)
        self._entries.clear()
        self.stats.evictions += count
        logger.info(f"🧹 Cleared {count} cache entries")

    def cleanup_expired(self) -> int:
        """
        Remove every expired entry.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        return self._drop(expired, "expired")

    def invalidate_pattern(self, pattern: str) -> int:
        """
        Remove every entry whose key contains pattern (plain substring).

        Returns:
            Number of entries removed
        """
        matching = [key for key in self._entries if pattern in key]
        return self._drop(matching, f"matching '{pattern}'")

    def _drop(self, keys, reason: str) -> int:
        for key in keys:
            del self._entries[key]
        self.stats.evictions += len(keys)
        if keys:
            logger.debug(f"Removed {len(keys)} cache entries {reason}")
        return len(keys)

    def get_stats(self) -> Dict[str, Any]:
        """Entry count, limit and hit/miss counters as a plain dict."""
        return {
            "entries": len(self._entries),
            "max_size": self.max_size,
            "hits": self.stats.hits,
            "misses": self.stats.misses,
            "sets": self.stats.sets,
            "evictions": self.stats.evictions,
            "hit_rate": self.stats.hit_rate,
            "total_requests": self.stats.total_requests,
        }

    def __len__(self) -> int:
        return len(self._entries)


class CacheMiddleware:
    """
    HTTP middleware that purges expired entries at most once per interval
    and reports the hit rate on the cache statistics endpoint.

    Usage:
        app.middleware("http")(CacheMiddleware(cache, cleanup_interval=600))
    """

    def __init__(self, cache: CacheManager, cleanup_interval: int = 600):
        self.cache = cache
        self.cleanup_interval = cleanup_interval
        self.last_cleanup = time.time()

    async def __call__(self, request, call_next):
        now = time.time()
        if now - self.last_cleanup > self.cleanup_interval:
            self.cache.cleanup_expired()
            self.last_cleanup = now

        response = await call_next(request)

        if request.url.path.endswith("/cache-stats"):
            response.headers["X-Cache-Hit-Rate"] = str(self.cache.stats.hit_rate)

        return response
