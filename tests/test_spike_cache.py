"""Tests for the bounded TTL spike cache."""

import pytest

from spike_studio.spikes.cache import SpikeCache
from spike_studio.spikes.models import SpikeSpec


def _spec(spike_id: str) -> SpikeSpec:
    return SpikeSpec(id=spike_id)


class TestSpikeCacheTTL:
    def test_hit_within_ttl(self, clock):
        cache = SpikeCache(max_size=5, ttl=300, time_fn=clock.now)
        cache.put("a", _spec("a"))
        clock.advance(299.9)
        assert cache.get("a").id == "a"

    def test_entry_at_exact_ttl_is_still_fresh(self, clock):
        cache = SpikeCache(max_size=5, ttl=300, time_fn=clock.now)
        cache.put("a", _spec("a"))
        clock.advance(300)
        assert cache.get("a") is not None

    def test_entry_past_ttl_is_dropped(self, clock):
        cache = SpikeCache(max_size=5, ttl=300, time_fn=clock.now)
        cache.put("a", _spec("a"))
        clock.advance(300.001)
        assert cache.get("a") is None
        assert "a" not in cache

    def test_reads_do_not_extend_lifetime(self, clock):
        cache = SpikeCache(max_size=5, ttl=10, time_fn=clock.now)
        cache.put("a", _spec("a"))
        clock.advance(6)
        assert cache.get("a") is not None
        clock.advance(6)
        assert cache.get("a") is None


class TestSpikeCacheCapacity:
    def test_evicts_earliest_insertion(self, clock):
        cache = SpikeCache(max_size=2, ttl=300, time_fn=clock.now)
        cache.put("a", _spec("a"))
        clock.advance(1)
        cache.put("b", _spec("b"))
        clock.advance(1)
        # A read does not protect "a"
        assert cache.get("a") is not None
        cache.put("c", _spec("c"))
        assert "a" not in cache
        assert "b" in cache and "c" in cache
        assert len(cache) == 2

    def test_reinsert_restamps(self, clock):
        cache = SpikeCache(max_size=2, ttl=300, time_fn=clock.now)
        cache.put("a", _spec("a"))
        clock.advance(1)
        cache.put("b", _spec("b"))
        clock.advance(1)
        cache.put("a", _spec("a"))
        clock.advance(1)
        cache.put("c", _spec("c"))
        assert "b" not in cache
        assert "a" in cache and "c" in cache

    def test_expired_entries_purged_before_eviction(self, clock):
        cache = SpikeCache(max_size=2, ttl=10, time_fn=clock.now)
        cache.put("old", _spec("old"))
        clock.advance(5)
        cache.put("fresh", _spec("fresh"))
        clock.advance(6)
        cache.put("new", _spec("new"))
        assert "old" not in cache
        assert "fresh" in cache and "new" in cache

    def test_capacity_plus_one_keeps_capacity(self, clock):
        cache = SpikeCache(max_size=50, ttl=300, time_fn=clock.now)
        for i in range(51):
            cache.put(f"id-{i}", _spec(f"id-{i}"))
            clock.advance(0.01)
        assert len(cache) == 50
        assert cache.get("id-0") is None
        assert all(cache.get(f"id-{i}") is not None for i in range(1, 51))

    def test_never_exceeds_max_size(self, clock):
        cache = SpikeCache(max_size=3, ttl=300, time_fn=clock.now)
        for i in range(10):
            cache.put(str(i), _spec(str(i)))
            clock.advance(0.1)
            assert len(cache) <= 3

    def test_invalid_max_size(self):
        with pytest.raises(ValueError):
            SpikeCache(max_size=0)


class TestSpikeCacheStats:
    def test_hits_and_misses(self, clock):
        cache = SpikeCache(max_size=2, ttl=300, time_fn=clock.now)
        cache.get("missing")
        cache.put("a", _spec("a"))
        cache.get("a")
        stats = cache.get_stats()
        assert stats == {"entry_count": 1, "max_size": 2, "hits": 1, "misses": 1}

    def test_peek_does_not_count(self, clock):
        cache = SpikeCache(max_size=2, ttl=10, time_fn=clock.now)
        cache.put("a", _spec("a"))
        assert cache.peek("a").id == "a"
        assert cache.peek("missing") is None
        clock.advance(11)
        assert cache.peek("a") is None
        assert cache.get_stats()["hits"] == 0
        assert cache.get_stats()["misses"] == 0

    def test_invalidate_and_clear(self, clock):
        cache = SpikeCache(time_fn=clock.now)
        cache.put("a", _spec("a"))
        assert cache.invalidate("a") is True
        assert cache.invalidate("a") is False
        cache.put("b", _spec("b"))
        cache.clear()
        assert len(cache) == 0
