"""
Unit Tests for the Query Cache
===============================

Coverage:
- ✅ Get/set with hit and miss accounting
- ✅ TTL expiry and cleanup
- ✅ Oldest-entry eviction at max size
- ✅ Pattern invalidation
- ✅ Cache key includes the threshold
- ✅ Periodic cleanup middleware
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from climate_odds.core.cache import CacheManager, CacheMiddleware, CacheStats


@pytest.mark.unit
class TestCacheManager:

    def test_set_and_get(self, cache_manager):
        cache_manager.set("a", {"value": 1})

        assert cache_manager.get("a") == {"value": 1}
        assert cache_manager.stats.hits == 1
        assert cache_manager.stats.sets == 1

    def test_miss(self, cache_manager):
        assert cache_manager.get("missing") is None
        assert cache_manager.stats.misses == 1

    def test_expired_entry_is_a_miss(self, cache_manager):
        cache_manager.set("a", 1, ttl=-1)

        assert cache_manager.get("a") is None
        assert cache_manager.stats.misses == 1
        assert len(cache_manager) == 0

    def test_cleanup_expired(self, cache_manager):
        cache_manager.set("old", 1, ttl=-1)
        cache_manager.set("fresh", 2)

        removed = cache_manager.cleanup_expired()

        assert removed == 1
        assert cache_manager.get("fresh") == 2

    def test_evicts_oldest_when_full(self):
        cache = CacheManager(max_size=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)

        assert len(cache) == 2
        assert cache.get("a") is None
        assert cache.get("c") == 3
        assert cache.stats.evictions == 1

    def test_overwrite_does_not_evict(self):
        cache = CacheManager(max_size=1)
        cache.set("a", 1)
        cache.set("a", 2)

        assert cache.get("a") == 2
        assert cache.stats.evictions == 0

    def test_delete_and_clear(self, cache_manager):
        cache_manager.set("a", 1)
        cache_manager.set("b", 2)

        assert cache_manager.delete("a") is True
        assert cache_manager.delete("a") is False

        cache_manager.clear()
        assert len(cache_manager) == 0

    def test_invalidate_pattern(self, cache_manager):
        cache_manager.set(CacheManager.generate_key(1.0, 2.0, "temperature", 185, 7, 1980, 2023), 1)
        cache_manager.set(CacheManager.generate_key(1.0, 2.0, "humidity", 185, 7, 1980, 2023), 2)

        removed = cache_manager.invalidate_pattern(":temperature:")

        assert removed == 1
        assert len(cache_manager) == 1

    def test_key_includes_threshold(self):
        key_a = CacheManager.generate_key(40.7, -74.0, "temperature", 185, 7, 1980, 2023, 25.0)
        key_b = CacheManager.generate_key(40.7, -74.0, "temperature", 185, 7, 1980, 2023, 30.0)
        key_none = CacheManager.generate_key(40.7, -74.0, "temperature", 185, 7, 1980, 2023)

        assert len({key_a, key_b, key_none}) == 3
        assert key_a.startswith("query:40.7:-74.0:temperature:185:7:1980:2023:")

    def test_get_stats(self, cache_manager):
        cache_manager.set("a", 1)
        cache_manager.get("a")
        cache_manager.get("b")

        stats = cache_manager.get_stats()

        assert stats["entries"] == 1
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 50.0
        assert stats["total_requests"] == 2


@pytest.mark.unit
class TestCacheStats:

    def test_injected_stats_are_shared(self):
        stats = CacheStats()
        cache = CacheManager(stats=stats)

        cache.get("nothing")

        assert stats.misses == 1

    def test_hit_rate_without_requests(self):
        assert CacheStats().hit_rate == 0.0

    def test_reset(self):
        stats = CacheStats(hits=3, misses=1, sets=2, evictions=1)

        stats.reset()

        assert stats.total_requests == 0
        assert stats.sets == 0


@pytest.mark.unit
@pytest.mark.asyncio
class TestCacheMiddleware:

    @staticmethod
    def _request(path: str):
        request = MagicMock()
        request.url.path = path
        return request

    async def test_cleanup_runs_after_interval(self, cache_manager):
        cache_manager.set("old", 1, ttl=-1)
        middleware = CacheMiddleware(cache_manager, cleanup_interval=0)
        middleware.last_cleanup -= 1
        call_next = AsyncMock(return_value=MagicMock(headers={}))

        await middleware(self._request("/health"), call_next)

        assert len(cache_manager) == 0
        call_next.assert_awaited_once()

    async def test_hit_rate_header_on_stats_endpoint(self, cache_manager):
        middleware = CacheMiddleware(cache_manager)
        response = MagicMock(headers={})
        call_next = AsyncMock(return_value=response)

        result = await middleware(self._request("/api/v1/weather/cache-stats"), call_next)

        assert result.headers["X-Cache-Hit-Rate"] == "0.0"
