"""
NewsAPI source (https://newsapi.org).

Requires NEWSAPI_KEY; without it the source is constructed disabled and
contributes nothing. Trends come from a fixed set of sector queries, one
request per query. A failing query is skipped; if every query fails the
fetch fails as a whole so that nothing is cached.
"""

from typing import Any

import structlog

from vc_intel.errors import SourceFetchError
from vc_intel.sources.base import BaseSource
from vc_intel.sources.http_client import HTTPClient, HTTPClientError
from vc_intel.sources.schemas import BaseRecord, Capability
from vc_intel.sources.text import (
    categorize,
    extract_company_name,
    extract_funding_type,
    extract_trend_name,
    parse_timestamp,
    stable_hash,
)

logger = structlog.get_logger(__name__)

NEWSAPI_EVERYTHING_URL = "https://newsapi.org/v2/everything"

TREND_QUERIES = (
    "AI startup",
    "fintech funding",
    "blockchain venture",
    "biotech innovation",
    "climate tech",
)

DEAL_QUERY = '(funding OR "Series A" OR "Series B" OR acquisition OR IPO) startup'

MAX_TRENDS = 50


class NewsAPISource(BaseSource):
    """Trends and deals from NewsAPI's /everything endpoint."""

    source_id = "newsapi"
    capabilities = frozenset({Capability.TRENDS, Capability.DEALS})

    def __init__(self, *args: Any, api_key: str | None = None, **kwargs: Any):
        kwargs.setdefault("enabled", bool(api_key))
        super().__init__(*args, **kwargs)
        self._api_key = api_key

    @property
    def _headers(self) -> dict[str, str]:
        return {"X-Api-Key": self._api_key or ""}

    async def _fetch(self, capability: Capability, params: dict[str, Any]) -> list[BaseRecord]:
        async with self._http() as client:
            if capability is Capability.TRENDS:
                return await self._fetch_trends(client, params)
            return await self._fetch_deals(client, params)

    async def _fetch_trends(self, client: HTTPClient, params: dict[str, Any]) -> list[BaseRecord]:
        queries = params.get("queries") or TREND_QUERIES
        trends: dict[str, BaseRecord] = {}
        failed = 0

        for query in queries:
            try:
                payload = await client.get_json(
                    NEWSAPI_EVERYTHING_URL,
                    params={"q": query, "sortBy": "popularity", "language": "en", "pageSize": 15},
                    headers=self._headers,
                )
            except HTTPClientError as e:
                failed += 1
                logger.warning("Query failed", source=self.source_id, query=query, error=str(e))
                continue

            category = categorize(query)
            records = self._transform_all(
                payload.get("articles") or [],
                lambda article: self._to_trend(article, category),
            )
            # Later articles with the same derived name replace earlier ones
            for record in records:
                trends[record.display_name] = record

        if queries and failed == len(queries):
            raise SourceFetchError(
                f"All {failed} NewsAPI queries failed",
                source_id=self.source_id,
                capability=Capability.TRENDS.value,
            )

        return list(trends.values())[:MAX_TRENDS]

    async def _fetch_deals(self, client: HTTPClient, params: dict[str, Any]) -> list[BaseRecord]:
        payload = await client.get_json(
            NEWSAPI_EVERYTHING_URL,
            params={
                "q": params.get("query", DEAL_QUERY),
                "sortBy": "publishedAt",
                "language": "en",
                "pageSize": 50,
            },
            headers=self._headers,
        )
        return self._transform_all(payload.get("articles") or [], self._to_deal)

    @staticmethod
    def _payload(article: dict[str, Any]) -> dict[str, Any]:
        return {
            "title": article["title"],
            "description": article.get("description"),
            "url": article.get("url"),
            "source": (article.get("source") or {}).get("name"),
            "publishedAt": article.get("publishedAt"),
        }

    def _to_trend(self, article: dict[str, Any], category: str) -> BaseRecord | None:
        if not article.get("title"):
            return None
        return self._make_record(
            Capability.TRENDS,
            id=stable_hash(article.get("url") or article["title"]),
            name=extract_trend_name(article["title"]),
            category=category,
            mention_count=1,
            data=self._payload(article),
            created_at=parse_timestamp(article.get("publishedAt")),
        )

    def _to_deal(self, article: dict[str, Any]) -> BaseRecord | None:
        if not article.get("title"):
            return None
        return self._make_record(
            Capability.DEALS,
            id=stable_hash(article.get("url") or article["title"]),
            company_name=extract_company_name(article["title"], default="Unknown Company"),
            funding_type=extract_funding_type(article["title"]),
            data=self._payload(article),
            created_at=parse_timestamp(article.get("publishedAt")),
        )
