"""Tests for the GitHub trending-repositories source."""

from datetime import datetime, timezone

import httpx
import pytest
import respx

from vc_intel.sources.github import GITHUB_SEARCH_URL, GitHubSource
from vc_intel.sources.schemas import Capability

REPOS = {
    "total_count": 2,
    "items": [
        {
            "id": 101,
            "name": "agentkit",
            "description": "LLM agent toolkit",
            "html_url": "https://github.com/acme/agentkit",
            "language": "Python",
            "stargazers_count": 2400,
            "forks_count": 120,
            "created_at": "2025-05-30T08:00:00Z",
            "updated_at": "2025-06-01T08:00:00Z",
            "owner": {"login": "acme"},
        },
        {"id": 102},  # Missing name
    ],
}


@pytest.fixture
def source(cache, no_retry) -> GitHubSource:
    return GitHubSource(cache, token="ghp_test", retry_config=no_retry)


class TestGitHubSource:
    """Tests for GitHubSource."""

    def test_declares_trends_only(self, source):
        """Should not claim deal or founder support."""
        assert source.capabilities == {Capability.TRENDS}

    def test_disabled_without_token(self, cache):
        """Should construct disabled when no token is configured."""
        assert GitHubSource(cache).enabled is False

    def test_query_uses_seven_day_window(self, source):
        """Should search repositories created in the last week."""
        now = datetime(2025, 6, 8, tzinfo=timezone.utc)
        assert source._query(now) == "created:>2025-06-01 stars:>100"

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_trends(self, source):
        """Should map repositories to trend records, skipping malformed ones."""
        route = respx.get(GITHUB_SEARCH_URL).mock(return_value=httpx.Response(200, json=REPOS))

        records = await source.fetch(Capability.TRENDS)

        assert len(records) == 1
        repo = records[0]
        assert repo.id == "github-101"
        assert repo.name == "agentkit"
        assert repo.category == "ai-ml"
        assert repo.mention_count == 2400
        assert repo.sources == ["github"]
        assert repo.created_at == datetime(2025, 5, 30, 8, tzinfo=timezone.utc)
        assert repo.data["owner"] == "acme"

        request = route.calls.last.request
        assert request.headers["Authorization"] == "token ghp_test"
        assert request.url.params["sort"] == "stars"

    @pytest.mark.asyncio
    @respx.mock
    async def test_rate_limited_yields_empty(self, source):
        """Should absorb a 403 from the search API."""
        respx.get(GITHUB_SEARCH_URL).mock(return_value=httpx.Response(403))
        assert await source.fetch(Capability.TRENDS) == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_items_yields_empty(self, source, cache):
        """Should treat a payload without items as a failed fetch."""
        respx.get(GITHUB_SEARCH_URL).mock(return_value=httpx.Response(200, json={"message": "oops"}))

        assert await source.fetch(Capability.TRENDS) == []
        assert cache.size == 0

    @pytest.mark.asyncio
    async def test_deals_return_empty(self, source):
        """Should return empty for capabilities it does not declare."""
        assert await source.fetch(Capability.DEALS) == []
