"""
Async HTTP client with retry and exponential backoff for sources.

Separates transport concerns (retries, backoff, status handling) from
record construction in the individual sources. Errors surface as
SourceFetchError subclasses so the source boundary can log and absorb
them uniformly.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any

import httpx

from vc_intel.errors import SourceFetchError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
RETRYABLE_EXCEPTIONS = (httpx.TimeoutException, httpx.ConnectError, httpx.ReadError)


@dataclass
class RetryConfig:
    """
    Exponential backoff with jitter.

    Formula: min(max_backoff, base_delay * 2^attempt) * (1 + random(0, jitter_factor))
    """

    max_retries: int = 2
    max_backoff_seconds: float = 10.0
    base_delay: float = 0.5
    jitter_factor: float = 0.1

    def calculate_backoff(self, attempt: int) -> float:
        delay = min(self.base_delay * (2**attempt), self.max_backoff_seconds)
        return delay + delay * self.jitter_factor * random.random()

    @classmethod
    def from_settings(cls, settings) -> "RetryConfig":
        return cls(
            max_retries=settings.max_http_retries,
            max_backoff_seconds=settings.max_backoff_seconds,
        )


class HTTPClientError(SourceFetchError):
    """Non-retryable HTTP failure, or retries exhausted."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(HTTPClientError):
    """Raised when the upstream keeps answering 429 after all retries."""


class HTTPClient:
    """
    Thin wrapper over httpx.AsyncClient that retries transient failures.

    Example:
        async with HTTPClient(RetryConfig(max_retries=3), timeout=5.0) as client:
            payload = await client.get_json(url, params={"q": "series a"})

    A pre-built httpx.AsyncClient may be injected (tests, shared pools);
    it is then not closed on exit.
    """

    def __init__(
        self,
        retry_config: RetryConfig | None = None,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.retry_config = retry_config or RetryConfig()
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "HTTPClient":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET and decode a JSON body."""
        response = await self.get(url, params=params, headers=headers)
        try:
            return response.json()
        except ValueError as e:
            raise HTTPClientError(
                f"Invalid JSON from {url}: {e}",
                status_code=response.status_code,
            ) from e

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        GET with retry on 429/5xx and on timeout/connection errors.

        Raises:
            RateLimitError: 429 persisted through every retry
            HTTPClientError: any other failure
        """
        if self._client is None:
            raise RuntimeError("HTTPClient must be used as async context manager")

        attempts = self.retry_config.max_retries + 1

        for attempt in range(attempts):
            last_attempt = attempt == attempts - 1
            try:
                response = await self._client.get(url, params=params, headers=headers)
            except RETRYABLE_EXCEPTIONS as e:
                if last_attempt:
                    raise HTTPClientError(
                        f"Request to {url} failed after {attempts} attempts: {e}"
                    ) from e
                await self._backoff(url, attempt, type(e).__name__)
                continue

            status = response.status_code
            if status in RETRYABLE_STATUS_CODES:
                if last_attempt:
                    error_cls = RateLimitError if status == 429 else HTTPClientError
                    raise error_cls(
                        f"Request to {url} failed with status {status} after {attempts} attempts",
                        status_code=status,
                        response_body=response.text,
                    )
                await self._backoff(url, attempt, f"status {status}")
                continue

            if status >= 400:
                raise HTTPClientError(
                    f"Request to {url} failed with status {status}",
                    status_code=status,
                    response_body=response.text,
                )

            return response

        # range(attempts) is never empty
        raise HTTPClientError(f"Request to {url} was not attempted")

    async def _backoff(self, url: str, attempt: int, reason: str) -> None:
        delay = self.retry_config.calculate_backoff(attempt)
        logger.warning(
            f"Retryable {reason} from {url}, "
            f"attempt {attempt + 1}/{self.retry_config.max_retries + 1}, "
            f"backing off {delay:.2f}s"
        )
        await asyncio.sleep(delay)
