"""Tests for the source HTTP client."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
import respx

from vc_intel.errors import SourceFetchError
from vc_intel.sources.http_client import (
    HTTPClient,
    HTTPClientError,
    RateLimitError,
    RetryConfig,
)

URL = "https://api.example.com/items"


class TestRetryConfig:
    """Tests for RetryConfig."""

    def test_backoff_grows_exponentially(self):
        """Should double the delay per attempt (without jitter)."""
        config = RetryConfig(base_delay=1.0, jitter_factor=0.0)

        assert config.calculate_backoff(0) == 1.0
        assert config.calculate_backoff(1) == 2.0
        assert config.calculate_backoff(2) == 4.0

    def test_backoff_is_capped(self):
        """Should never exceed max_backoff_seconds before jitter."""
        config = RetryConfig(base_delay=1.0, max_backoff_seconds=5.0, jitter_factor=0.0)
        assert config.calculate_backoff(10) == 5.0

    def test_jitter_bounds(self):
        """Should add at most jitter_factor of the delay."""
        config = RetryConfig(base_delay=1.0, jitter_factor=0.1)
        for _ in range(20):
            assert 1.0 <= config.calculate_backoff(0) <= 1.1


class TestHTTPClient:
    """Tests for HTTPClient retry and error mapping."""

    @pytest.mark.asyncio
    async def test_requires_context_manager(self):
        """Should refuse requests outside the async context."""
        client = HTTPClient()
        with pytest.raises(RuntimeError):
            await client.get(URL)

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_json_success(self):
        """Should decode the JSON body."""
        route = respx.get(URL).mock(return_value=httpx.Response(200, json={"items": [1, 2]}))

        async with HTTPClient() as client:
            payload = await client.get_json(URL, params={"q": "ai"}, headers={"X-Api-Key": "k"})

        assert payload == {"items": [1, 2]}
        request = route.calls.last.request
        assert request.url.params["q"] == "ai"
        assert request.headers["X-Api-Key"] == "k"

    @pytest.mark.asyncio
    @respx.mock
    async def test_retries_on_503_then_succeeds(self):
        """Should retry a transient server error."""
        route = respx.get(URL).mock(
            side_effect=[
                httpx.Response(503),
                httpx.Response(200, json={"ok": True}),
            ]
        )

        with patch("vc_intel.sources.http_client.asyncio.sleep", new_callable=AsyncMock) as sleep:
            async with HTTPClient(RetryConfig(max_retries=2)) as client:
                payload = await client.get_json(URL)

        assert payload == {"ok": True}
        assert route.call_count == 2
        sleep.assert_awaited_once()

    @pytest.mark.asyncio
    @respx.mock
    async def test_retries_on_connect_error(self):
        """Should retry connection failures."""
        route = respx.get(URL).mock(
            side_effect=[
                httpx.ConnectError("refused"),
                httpx.Response(200, json=[]),
            ]
        )

        async with HTTPClient(RetryConfig(max_retries=1, base_delay=0.0)) as client:
            assert await client.get_json(URL) == []

        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_connect_error_exhausted(self):
        """Should raise HTTPClientError once retries run out."""
        respx.get(URL).mock(side_effect=httpx.ConnectError("refused"))

        async with HTTPClient(RetryConfig(max_retries=1, base_delay=0.0)) as client:
            with pytest.raises(HTTPClientError, match="after 2 attempts"):
                await client.get(URL)

    @pytest.mark.asyncio
    @respx.mock
    async def test_404_is_not_retried(self):
        """Should fail immediately on a non-retryable status."""
        route = respx.get(URL).mock(return_value=httpx.Response(404, text="not found"))

        async with HTTPClient(RetryConfig(max_retries=3, base_delay=0.0)) as client:
            with pytest.raises(HTTPClientError) as exc_info:
                await client.get(URL)

        assert exc_info.value.status_code == 404
        assert exc_info.value.response_body == "not found"
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_persistent_429_raises_rate_limit(self):
        """Should raise RateLimitError when 429 outlasts the retries."""
        route = respx.get(URL).mock(return_value=httpx.Response(429))

        async with HTTPClient(RetryConfig(max_retries=2, base_delay=0.0)) as client:
            with pytest.raises(RateLimitError) as exc_info:
                await client.get(URL)

        assert exc_info.value.status_code == 429
        assert route.call_count == 3

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_json(self):
        """Should surface an undecodable body as HTTPClientError."""
        respx.get(URL).mock(return_value=httpx.Response(200, text="<html>"))

        async with HTTPClient() as client:
            with pytest.raises(HTTPClientError, match="Invalid JSON"):
                await client.get_json(URL)

    def test_errors_are_source_fetch_errors(self):
        """Should let the source boundary treat HTTP errors as domain errors."""
        assert issubclass(HTTPClientError, SourceFetchError)
        assert issubclass(RateLimitError, HTTPClientError)

    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self):
        """Should leave an injected AsyncClient open on exit."""
        inner = httpx.AsyncClient()
        async with HTTPClient(client=inner):
            pass

        assert not inner.is_closed
        await inner.aclose()
