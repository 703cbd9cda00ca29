"""GitHub source: recently created repositories with fast star growth."""

from datetime import datetime, timedelta, timezone
from typing import Any

from vc_intel.sources.base import BaseSource
from vc_intel.sources.schemas import BaseRecord, Capability
from vc_intel.sources.text import categorize, parse_timestamp

GITHUB_SEARCH_URL = "https://api.github.com/search/repositories"

LOOKBACK_DAYS = 7
MIN_STARS = 100


class GitHubSource(BaseSource):
    """Trending repositories from the GitHub search API. Requires GITHUB_TOKEN."""

    source_id = "github"
    capabilities = frozenset({Capability.TRENDS})

    def __init__(self, *args: Any, token: str | None = None, **kwargs: Any):
        kwargs.setdefault("enabled", bool(token))
        super().__init__(*args, **kwargs)
        self._token = token

    def _query(self, now: datetime | None = None) -> str:
        since = (now or datetime.now(timezone.utc)) - timedelta(days=LOOKBACK_DAYS)
        return f"created:>{since.date().isoformat()} stars:>{MIN_STARS}"

    async def _fetch(self, capability: Capability, params: dict[str, Any]) -> list[BaseRecord]:
        async with self._http() as client:
            payload = await client.get_json(
                GITHUB_SEARCH_URL,
                params={
                    "q": params.get("query", self._query()),
                    "sort": "stars",
                    "order": "desc",
                    "per_page": int(params.get("limit", 30)),
                },
                headers={
                    "Authorization": f"token {self._token}",
                    "Accept": "application/vnd.github.v3+json",
                },
            )
        return self._transform_all(payload["items"], self._to_trend)

    def _to_trend(self, repo: dict[str, Any]) -> BaseRecord:
        description = repo.get("description") or ""
        return self._make_record(
            Capability.TRENDS,
            id=f"github-{repo['id']}",
            name=repo["name"],
            category=categorize(f"{repo['name']} {description}"),
            mention_count=repo.get("stargazers_count", 0),
            data={
                "url": repo.get("html_url"),
                "description": description,
                "language": repo.get("language"),
                "stars": repo.get("stargazers_count", 0),
                "forks": repo.get("forks_count", 0),
                "updated_at": repo.get("updated_at"),
                "created_at": repo.get("created_at"),
                "owner": (repo.get("owner") or {}).get("login"),
            },
            created_at=parse_timestamp(repo.get("created_at")),
        )
