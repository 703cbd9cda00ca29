"""Pytest fixtures for vc-intel tests."""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from vc_intel.cache import TTLCache
from vc_intel.config.settings import Settings
from vc_intel.scoring.momentum import TrendScoringService
from vc_intel.sources.base import BaseSource
from vc_intel.sources.http_client import RetryConfig
from vc_intel.sources.schemas import RECORD_TYPES, BaseRecord, Capability, TrendRecord

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubSource(BaseSource):
    """
    Source returning canned records, optionally slow or failing.

    Counts _fetch calls so tests can tell cache hits from upstream calls.
    Only records matching the requested capability are returned.
    """

    source_id = "stub"
    capabilities = frozenset({Capability.TRENDS})

    def __init__(
        self,
        cache: TTLCache,
        records: list[BaseRecord] | None = None,
        delay: float = 0.0,
        error: Exception | None = None,
        capabilities: frozenset[Capability] | None = None,
        **kwargs: Any,
    ):
        super().__init__(cache, **kwargs)
        self.records = records or []
        self.delay = delay
        self.error = error
        self.calls = 0
        self.last_params: dict[str, Any] | None = None
        if capabilities is not None:
            self.capabilities = capabilities

    async def _fetch(self, capability: Capability, params: dict[str, Any]) -> list[BaseRecord]:
        self.calls += 1
        self.last_params = params
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return [r for r in self.records if isinstance(r, RECORD_TYPES[capability])]


def make_trend(
    name: str,
    source: str = "hackernews",
    mention_count: float = 0,
    sources: list[str] | None = None,
    data: dict[str, Any] | None = None,
    created_at: datetime | None = None,
    id: str | None = None,
) -> TrendRecord:
    """Build a trend record with sensible defaults."""
    return TrendRecord(
        id=id or f"{source}-{name}",
        source=source,
        sources=sources if sources is not None else [source],
        name=name,
        mention_count=mention_count,
        data=data or {},
        created_at=created_at,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache:
    """Four-hour cache driven by a fake clock."""
    return TTLCache(ttl_hours=4, clock=clock)


@pytest.fixture
def no_retry() -> RetryConfig:
    """Retry config that fails fast."""
    return RetryConfig(max_retries=0, base_delay=0.0)


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing (no credentials)."""
    return Settings(
        environment="development",
        log_level="DEBUG",
        newsapi_key=None,
        github_token=None,
        hacker_news_enabled=False,
        mock_sources=False,
    )


@pytest.fixture
def scorer() -> TrendScoringService:
    """Scoring service pinned to a fixed 'now'."""
    return TrendScoringService(clock=lambda: NOW)


@pytest.fixture
def fresh() -> datetime:
    """A timestamp one hour before the scorer's 'now'."""
    return NOW - timedelta(hours=1)
