"""
Hacker News source.

Reads the public Firebase API (no credentials). Top stories become
trend records; stories whose titles mention a funding event become
deal records. Story lookups run concurrently, and a failed story is
skipped without failing the whole fetch.
"""

import asyncio
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
    is_deal_headline,
    parse_timestamp,
)

logger = structlog.get_logger(__name__)

HN_BASE_URL = "https://hacker-news.firebaseio.com/v0"
HN_ITEM_URL = "https://news.ycombinator.com/item?id={id}"


class HackerNewsSource(BaseSource):
    """Trends and deals from Hacker News top stories."""

    source_id = "hackernews"
    capabilities = frozenset({Capability.TRENDS, Capability.DEALS})

    def __init__(self, *args: Any, story_limit: int = 20, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._story_limit = story_limit

    async def _fetch(self, capability: Capability, params: dict[str, Any]) -> list[BaseRecord]:
        limit = int(params.get("limit", self._story_limit))
        # Deals are sparse, so scan a wider window
        window = limit if capability is Capability.TRENDS else limit * 2

        async with self._http() as client:
            stories = await self._top_stories(client, window)

        if capability is Capability.TRENDS:
            return self._transform_all(stories, self._to_trend)
        return self._transform_all(stories, self._to_deal)

    async def _top_stories(self, client: HTTPClient, count: int) -> list[dict[str, Any]]:
        story_ids = await client.get_json(f"{HN_BASE_URL}/topstories.json")
        if not isinstance(story_ids, list):
            raise SourceFetchError(
                "Malformed topstories payload",
                source_id=self.source_id,
            )

        stories = await asyncio.gather(
            *(self._story(client, story_id) for story_id in story_ids[:count])
        )
        return [s for s in stories if s and isinstance(s.get("title"), str) and s["title"]]

    async def _story(self, client: HTTPClient, story_id: int) -> dict[str, Any] | None:
        try:
            story = await client.get_json(f"{HN_BASE_URL}/item/{story_id}.json")
        except HTTPClientError as e:
            logger.warning("Skipping story", source=self.source_id, story_id=story_id, error=str(e))
            return None
        return story if isinstance(story, dict) else None

    def _payload(self, story: dict[str, Any]) -> dict[str, Any]:
        created_at = parse_timestamp(story.get("time"))
        return {
            "title": story["title"],
            "url": story.get("url") or HN_ITEM_URL.format(id=story["id"]),
            "score": story.get("score", 0),
            "comments": story.get("descendants", 0),
            "created_at": created_at.isoformat() if created_at else None,
        }

    def _to_trend(self, story: dict[str, Any]) -> BaseRecord:
        return self._make_record(
            Capability.TRENDS,
            id=story["id"],
            name=extract_trend_name(story["title"], max_words=1),
            category=categorize(story["title"]),
            mention_count=story.get("score") or 0,
            data=self._payload(story),
            created_at=parse_timestamp(story.get("time")),
        )

    def _to_deal(self, story: dict[str, Any]) -> BaseRecord | None:
        if not is_deal_headline(story["title"]):
            return None
        return self._make_record(
            Capability.DEALS,
            id=story["id"],
            company_name=extract_company_name(story["title"]),
            funding_type=extract_funding_type(story["title"]),
            data=self._payload(story),
            created_at=parse_timestamp(story.get("time")),
        )
