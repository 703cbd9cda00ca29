"""Tests for the in-process TTL cache."""

import pytest

from vc_intel.cache import CacheEntry, CacheStats, TTLCache
from vc_intel.config.settings import Settings


class TestTTLCache:
    """Tests for TTLCache get/set/expiry."""

    def test_miss_returns_none(self, cache):
        """Should return None for a key never written."""
        assert cache.get("hackernews:trends") is None

    def test_set_then_get(self, cache):
        """Should return the stored value before expiry."""
        cache.set("hackernews:trends", ("a", "b"))
        assert cache.get("hackernews:trends") == ("a", "b")

    def test_entry_survives_until_just_before_ttl(self, cache, clock):
        """Should still hit one second before the TTL elapses."""
        cache.set("k", "v")
        clock.advance(4 * 3600 - 1)
        assert cache.get("k") == "v"

    def test_entry_expires_at_ttl(self, cache, clock):
        """Should treat an entry as absent once the TTL has elapsed."""
        cache.set("k", "v")
        clock.advance(4 * 3600)

        assert cache.get("k") is None
        assert cache.size == 0  # Evicted lazily on read

    def test_overwrite_resets_expiry(self, cache, clock):
        """Should give a rewritten key a fresh TTL."""
        cache.set("k", "old")
        clock.advance(3 * 3600)
        cache.set("k", "new")
        clock.advance(2 * 3600)

        assert cache.get("k") == "new"

    def test_keys_are_independent(self, cache):
        """Should keep different keys isolated."""
        cache.set("hackernews:trends", 1)
        cache.set("hackernews:deals", 2)

        assert cache.get("hackernews:trends") == 1
        assert cache.get("hackernews:deals") == 2

    def test_contains_respects_expiry(self, cache, clock):
        """Should report membership only for live entries."""
        cache.set("k", "v")
        assert "k" in cache

        clock.advance(5 * 3600)
        assert "k" not in cache

    def test_delete(self, cache):
        """Should remove a key and report whether it existed."""
        cache.set("k", "v")

        assert cache.delete("k") is True
        assert cache.delete("k") is False
        assert cache.get("k") is None

    def test_flush_all(self, cache):
        """Should drop every entry."""
        cache.set("a", 1)
        cache.set("b", 2)

        cache.flush_all()

        assert cache.size == 0
        assert cache.get("a") is None

    def test_purge_expired(self, clock):
        """Should evict only entries past their TTL."""
        cache = TTLCache(ttl_hours=1, clock=clock)
        cache.set("old", 1)
        clock.advance(1800)
        cache.set("new", 2)
        clock.advance(1800)

        removed = cache.purge_expired()

        assert removed == 1
        assert cache.size == 1
        assert cache.get("new") == 2

    def test_stats_track_hits_and_misses(self, cache):
        """Should count hits and misses for hit-rate reporting."""
        cache.set("k", "v")
        cache.get("k")
        cache.get("k")
        cache.get("missing")

        assert cache.stats.hits == 2
        assert cache.stats.misses == 1
        assert cache.stats.hit_rate == pytest.approx(2 / 3)

    def test_rejects_non_positive_ttl(self):
        """Should refuse a TTL that would expire entries immediately."""
        with pytest.raises(ValueError):
            TTLCache(ttl_hours=0)

    def test_from_settings(self):
        """Should take its TTL from CACHE_TTL_HOURS."""
        cache = TTLCache.from_settings(Settings(cache_ttl_hours=0.5))
        assert cache.ttl_seconds == 1800


class TestCacheEntry:
    """Tests for CacheEntry and CacheStats."""

    def test_is_expired_boundary(self):
        """Should expire exactly at expires_at."""
        entry = CacheEntry(key="k", value=1, expires_at=100.0)

        assert not entry.is_expired(99.9)
        assert entry.is_expired(100.0)

    def test_entry_is_immutable(self):
        """Should not allow mutation after creation."""
        entry = CacheEntry(key="k", value=1, expires_at=100.0)
        with pytest.raises(AttributeError):
            entry.value = 2  # type: ignore[misc]

    def test_empty_stats_hit_rate(self):
        """Should report zero hit rate with no lookups."""
        assert CacheStats().hit_rate == 0.0

    def test_default_clock_is_monotonic(self):
        """Should work with the real clock."""
        cache = TTLCache()
        cache.set("k", "v")
        assert cache.get("k") == "v"
