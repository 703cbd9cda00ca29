"""
Intelligence service - collection plus scoring per capability.

Builds the source registry from configuration and exposes one call per
capability: trends are deduplicated, scored and ranked; deals and
founders are deduplicated only.

Usage:
    service = IntelligenceService.from_settings()
    report = await service.get_trends(limit=10)
"""

from dataclasses import dataclass, field
from typing import Any

import structlog

from vc_intel.cache import TTLCache
from vc_intel.config.settings import Settings, get_settings
from vc_intel.scoring.momentum import TrendScoringService
from vc_intel.scoring.schemas import ScoredTrend
from vc_intel.services.collection_service import CollectionResult, CollectionService
from vc_intel.sources.github import GitHubSource
from vc_intel.sources.hackernews import HackerNewsSource
from vc_intel.sources.http_client import RetryConfig
from vc_intel.sources.manager import AggregationManager
from vc_intel.sources.mock import create_mock_sources
from vc_intel.sources.newsapi import NewsAPISource
from vc_intel.sources.schemas import BaseRecord, Capability, SourceFailure

logger = structlog.get_logger(__name__)


def build_default_manager(
    settings: Settings,
    cache: TTLCache,
    use_mock: bool = False,
) -> AggregationManager:
    """
    Register the built-in sources, enabled according to configuration.

    Disabled sources are still registered so they show up in status
    reports. With use_mock (or MOCK_SOURCES=true) only mock sources are
    registered.
    """
    manager = AggregationManager.from_settings(settings)

    if use_mock or settings.mock_sources:
        for source_id, source in create_mock_sources(cache).items():
            manager.register(source_id, source)
        logger.info("Using mock sources")
        return manager

    common: dict[str, Any] = {
        "retry_config": RetryConfig.from_settings(settings),
        "http_timeout": settings.http_timeout_seconds,
    }

    manager.register(
        "github",
        GitHubSource(
            cache,
            token=settings.github_token,
            enabled=settings.github_configured,
            **common,
        ),
    )
    manager.register(
        "newsapi",
        NewsAPISource(cache, api_key=settings.newsapi_key, **common),
    )
    manager.register(
        "hackernews",
        HackerNewsSource(
            cache,
            enabled=settings.hacker_news_enabled,
            story_limit=settings.hacker_news_story_limit,
            **common,
        ),
    )

    if not manager.get_active_sources():
        logger.warning("No sources enabled; set HACKER_NEWS_ENABLED, NEWSAPI_KEY or GITHUB_TOKEN")

    return manager


@dataclass
class TrendReport:
    """Ranked trends plus the collection side-channel."""

    trends: list[ScoredTrend] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    failures: list[SourceFailure] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "trends": [t.model_dump(mode="json") for t in self.trends],
            "sources": list(self.sources),
            "failures": [f.to_dict() for f in self.failures] if self.failures else None,
        }


class IntelligenceService:
    """Facade over collection and scoring."""

    def __init__(
        self,
        manager: AggregationManager,
        scorer: TrendScoringService | None = None,
        cache: TTLCache | None = None,
    ):
        self._manager = manager
        self._collector = CollectionService(manager)
        self._scorer = scorer or TrendScoringService()
        self._cache = cache

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        use_mock: bool = False,
    ) -> "IntelligenceService":
        settings = settings or get_settings()
        cache = TTLCache.from_settings(settings)
        manager = build_default_manager(settings, cache, use_mock=use_mock)
        return cls(manager, cache=cache)

    @property
    def manager(self) -> AggregationManager:
        return self._manager

    @property
    def cache(self) -> TTLCache | None:
        return self._cache

    async def get_trends(
        self,
        params: dict[str, Any] | None = None,
        limit: int | None = None,
    ) -> TrendReport:
        collected = await self._collector.collect(Capability.TRENDS, params)
        ranked = self._scorer.score_all(collected.records)
        if limit is not None:
            ranked = ranked[:limit]
        return TrendReport(trends=ranked, sources=collected.sources, failures=collected.failures)

    async def get_deals(self, params: dict[str, Any] | None = None) -> CollectionResult:
        return await self._collect_deduplicated(Capability.DEALS, params)

    async def get_founders(self, params: dict[str, Any] | None = None) -> CollectionResult:
        return await self._collect_deduplicated(Capability.FOUNDERS, params)

    async def _collect_deduplicated(
        self,
        capability: Capability,
        params: dict[str, Any] | None,
    ) -> CollectionResult:
        collected = await self._collector.collect(capability, params)
        records: list[BaseRecord] = self._scorer.deduplicate(collected.records)
        return CollectionResult(
            records=records,
            sources=collected.sources,
            failures=collected.failures,
        )

    def source_status(self) -> dict[str, dict[str, Any]]:
        return self._manager.get_source_status()

    def flush_cache(self) -> None:
        """Drop all cached source results (administrative)."""
        if self._cache is not None:
            self._cache.flush_all()
