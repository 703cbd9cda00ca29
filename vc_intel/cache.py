"""
In-process TTL cache for per-source results.

Entries are immutable once written; an expired entry reads as a miss and
is evicted lazily (or by purge_expired()). There is no global lock:
different keys never contend, and writers to the same key race
last-write-wins.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_TTL_HOURS = 4.0


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the monotonic time after which it is stale."""

    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total


class TTLCache:
    """
    String-keyed store with a single configurable TTL.

    Usage:
        cache = TTLCache(ttl_hours=4)
        cache.set("hackernews:trends", records)
        records = cache.get("hackernews:trends")  # None on miss

    Args:
        ttl_hours: Lifetime of each entry in hours
        clock: Monotonic time source in seconds, injectable for tests
    """

    def __init__(
        self,
        ttl_hours: float = DEFAULT_TTL_HOURS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_hours <= 0:
            raise ValueError("ttl_hours must be positive")
        self._ttl_seconds = ttl_hours * 3600
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._stats = CacheStats()

    @classmethod
    def from_settings(cls, settings) -> "TTLCache":
        return cls(ttl_hours=settings.cache_ttl_hours)

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    @property
    def size(self) -> int:
        """Number of stored entries, expired ones included until purged."""
        return len(self._entries)

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._stats.misses += 1
            return None

        if entry.is_expired(self._clock()):
            # Only evict the entry we read; a concurrent set may have replaced it
            if self._entries.get(key) is entry:
                self._entries.pop(key, None)
            self._stats.misses += 1
            return None

        self._stats.hits += 1
        return entry.value

    def set(self, key: str, value: Any) -> None:
        """Store value with expiry = now + TTL."""
        self._entries[key] = CacheEntry(
            key=key,
            value=value,
            expires_at=self._clock() + self._ttl_seconds,
        )

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it was present."""
        return self._entries.pop(key, None) is not None

    def flush_all(self) -> None:
        """Drop every entry."""
        count = len(self._entries)
        self._entries.clear()
        logger.info("Cache flushed", entries=count)

    def purge_expired(self) -> int:
        """Evict all expired entries. Returns the number removed."""
        now = self._clock()
        expired = [k for k, e in list(self._entries.items()) if e.is_expired(now)]
        for key in expired:
            self._entries.pop(key, None)
        if expired:
            logger.debug("Purged expired cache entries", count=len(expired))
        return len(expired)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not entry.is_expired(self._clock())
