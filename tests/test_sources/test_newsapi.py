"""Tests for the NewsAPI source."""

import httpx
import pytest
import respx

from vc_intel.sources.newsapi import NEWSAPI_EVERYTHING_URL, TREND_QUERIES, NewsAPISource
from vc_intel.sources.schemas import Capability


def _article(title: str, url: str, published: str = "2025-06-01T10:00:00Z") -> dict:
    return {
        "title": title,
        "description": f"{title} - details",
        "url": url,
        "source": {"name": "TechCrunch"},
        "publishedAt": published,
    }


@pytest.fixture
def source(cache, no_retry) -> NewsAPISource:
    return NewsAPISource(cache, api_key="test-key", retry_config=no_retry)


class TestNewsAPISource:
    """Tests for NewsAPISource."""

    def test_disabled_without_key(self, cache):
        """Should construct disabled when no API key is configured."""
        assert NewsAPISource(cache).enabled is False
        assert NewsAPISource(cache, api_key="k").enabled is True

    @pytest.mark.asyncio
    async def test_disabled_returns_empty(self, cache):
        """Should not call the API without a key."""
        source = NewsAPISource(cache)

        with respx.mock(assert_all_called=False) as mock:
            route = mock.get(NEWSAPI_EVERYTHING_URL)
            assert await source.fetch(Capability.TRENDS) == []

        assert route.call_count == 0

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_trends(self, source):
        """Should query each sector and emit one trend per derived name."""
        route = respx.get(NEWSAPI_EVERYTHING_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "status": "ok",
                    "articles": [
                        _article("Autonomous agents reshape customer support", "https://a.example/1"),
                        _article("Quantum networking startups multiply", "https://a.example/2"),
                    ],
                },
            )
        )

        records = await source.fetch(Capability.TRENDS)

        assert route.call_count == len(TREND_QUERIES)
        # Every query returns the same articles, so names collapse
        assert sorted(r.name for r in records) == [
            "Autonomous agents reshape",
            "Quantum networking startups",
        ]
        record = records[0]
        assert record.source == "newsapi"
        assert record.sources == ["newsapi"]
        assert record.mention_count == 1
        assert record.created_at is not None
        assert record.data["source"] == "TechCrunch"

        request = route.calls.last.request
        assert request.headers["X-Api-Key"] == "test-key"
        assert request.url.params["language"] == "en"

    @pytest.mark.asyncio
    @respx.mock
    async def test_failed_query_is_skipped(self, source):
        """Should keep results from queries that succeeded."""
        respx.get(NEWSAPI_EVERYTHING_URL, params={"q": "AI startup"}).mock(
            return_value=httpx.Response(
                200, json={"articles": [_article("Autonomous agents reshape support", "https://a.example/1")]}
            )
        )
        respx.get(NEWSAPI_EVERYTHING_URL).mock(return_value=httpx.Response(500))

        records = await source.fetch(Capability.TRENDS)

        assert [r.name for r in records] == ["Autonomous agents reshape"]
        assert records[0].category == "ai-ml"

    @pytest.mark.asyncio
    @respx.mock
    async def test_all_queries_failing_fails_the_fetch(self, source, cache):
        """Should report nothing and cache nothing when every query fails."""
        respx.get(NEWSAPI_EVERYTHING_URL).mock(return_value=httpx.Response(401))

        assert await source.fetch(Capability.TRENDS) == []
        assert cache.size == 0

    @pytest.mark.asyncio
    @respx.mock
    async def test_articles_without_title_are_skipped(self, source):
        """Should skip removed articles that come back without a title."""
        respx.get(NEWSAPI_EVERYTHING_URL).mock(
            return_value=httpx.Response(
                200,
                json={"articles": [{"title": None, "url": "x"}, _article("Fusion energy breakthrough", "https://a.example/3")]},
            )
        )

        records = await source.fetch(Capability.TRENDS, {"queries": ["climate tech"]})

        assert [r.name for r in records] == ["Fusion energy breakthrough"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_deals(self, source):
        """Should map funding headlines to deal records."""
        respx.get(NEWSAPI_EVERYTHING_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "articles": [
                        _article("Helio Grid lands $40M Series B", "https://a.example/4"),
                        _article("Orbital acquires drone maker", "https://a.example/5"),
                    ]
                },
            )
        )

        records = await source.fetch(Capability.DEALS)

        assert [(r.company_name, r.funding_type) for r in records] == [
            ("Helio", "Series B"),
            ("Orbital", "Acquisition"),
        ]

    @pytest.mark.asyncio
    async def test_founders_not_declared(self, source):
        """Should return empty for founders."""
        assert await source.fetch(Capability.FOUNDERS) == []
