"""
Base source interface and the per-source isolation boundary.

Each source declares the capabilities it implements and provides
_fetch(), which performs the external retrieval for one capability.
The base class handles:
- Enablement (disabled sources do no work and report no failure)
- Cache lookup and population, keyed by (source id, capability)
- Error isolation: any failure is logged and becomes an empty result,
  with the error text available to the manager via fetch_with_status()
- Metrics
"""

import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import Any

import structlog
from pydantic import ValidationError

from vc_intel.cache import TTLCache
from vc_intel.errors import SourceFetchError
from vc_intel.observability.metrics import get_metrics
from vc_intel.sources.http_client import HTTPClient, RetryConfig
from vc_intel.sources.schemas import RECORD_TYPES, BaseRecord, Capability

logger = structlog.get_logger(__name__)


class BaseSource(ABC):
    """
    Abstract base class for record sources.

    Subclasses must set:
        - source_id: default registry id (e.g. "hackernews")
        - capabilities: frozenset of Capability values implemented
    and implement:
        - _fetch(capability, params): external retrieval for one capability

    _fetch() may raise freely; fetch() is the boundary that never does.
    """

    source_id: str = ""
    capabilities: frozenset[Capability] = frozenset()

    def __init__(
        self,
        cache: TTLCache,
        enabled: bool = True,
        source_id: str | None = None,
        retry_config: RetryConfig | None = None,
        http_timeout: float = 5.0,
    ):
        """
        Initialize source.

        Args:
            cache: Shared result cache
            enabled: Resolved once from configuration (e.g. credential present)
            source_id: Override the class default id
            retry_config: HTTP retry behaviour for _fetch()
            http_timeout: Per-request HTTP timeout in seconds
        """
        self._cache = cache
        self._enabled = enabled
        if source_id:
            self.source_id = source_id
        self._retry_config = retry_config or RetryConfig()
        self._http_timeout = http_timeout
        self._metrics = get_metrics()
        self._metrics.set_source_enabled(self.source_id, enabled)

    @property
    def enabled(self) -> bool:
        return self._enabled

    def cache_key(self, capability: Capability) -> str:
        return f"{self.source_id}:{capability.value}"

    @abstractmethod
    async def _fetch(
        self,
        capability: Capability,
        params: dict[str, Any],
    ) -> list[BaseRecord]:
        """
        Retrieve records for a declared capability.

        Only called for capabilities in self.capabilities, on cache miss,
        when the source is enabled.
        """
        ...

    async def fetch(
        self,
        capability: Capability | str,
        params: dict[str, Any] | None = None,
    ) -> list[BaseRecord]:
        """
        Return records for a capability, from cache when possible.

        Never raises (except on cancellation). Failures are logged with
        source and capability and yield an empty list.
        """
        records, _ = await self.fetch_with_status(capability, params)
        return records

    async def fetch_with_status(
        self,
        capability: Capability | str,
        params: dict[str, Any] | None = None,
    ) -> tuple[list[BaseRecord], str | None]:
        """
        Like fetch(), but also return the error text of a failed retrieval.

        The error is None for successes, cache hits, disabled sources and
        undeclared capabilities. Failed retrievals are never cached.
        """
        capability = Capability(capability)

        if not self._enabled:
            logger.debug("Source disabled, skipping", source=self.source_id, capability=capability.value)
            return [], None

        if capability not in self.capabilities:
            logger.debug("Capability not declared", source=self.source_id, capability=capability.value)
            return [], None

        key = self.cache_key(capability)
        cached = self._cache.get(key)
        self._metrics.record_cache_lookup(self.source_id, hit=cached is not None)
        if cached is not None:
            logger.info("Using cached records", source=self.source_id, capability=capability.value, count=len(cached))
            self._metrics.record_source_fetch(self.source_id, capability, "cached", count=len(cached))
            return list(cached), None

        logger.info("Fetching records", source=self.source_id, capability=capability.value, params=params or {})
        start = time.monotonic()

        try:
            records = await self._fetch(capability, dict(params or {}))
        except Exception as e:
            self._metrics.record_source_fetch(
                self.source_id, capability, "error", latency=time.monotonic() - start
            )
            logger.error(
                "Source fetch failed",
                source=self.source_id,
                capability=capability.value,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=not isinstance(e, SourceFetchError),
            )
            return [], f"{type(e).__name__}: {e}"

        elapsed = time.monotonic() - start
        self._cache.set(key, tuple(records))
        self._metrics.record_source_fetch(
            self.source_id, capability, "success", count=len(records), latency=elapsed
        )
        logger.info(
            "Fetch successful",
            source=self.source_id,
            capability=capability.value,
            count=len(records),
            elapsed_seconds=round(elapsed, 2),
        )
        return list(records), None

    async def fetch_trends(self, params: dict[str, Any] | None = None) -> list[BaseRecord]:
        return await self.fetch(Capability.TRENDS, params)

    async def fetch_deals(self, params: dict[str, Any] | None = None) -> list[BaseRecord]:
        return await self.fetch(Capability.DEALS, params)

    async def fetch_founders(self, params: dict[str, Any] | None = None) -> list[BaseRecord]:
        return await self.fetch(Capability.FOUNDERS, params)

    async def health_check(self) -> bool:
        """
        Check if the source can reach its upstream.

        Override in subclasses for source-specific health checks.
        """
        return self._enabled

    def status(self) -> dict[str, Any]:
        """Describe this source for status reports."""
        return {
            "enabled": self._enabled,
            "name": type(self).__name__,
            "capabilities": sorted(c.value for c in self.capabilities),
        }

    # Helpers for subclasses

    def _http(self) -> HTTPClient:
        return HTTPClient(self._retry_config, timeout=self._http_timeout)

    def _make_record(self, capability: Capability, **fields: Any) -> BaseRecord:
        """Build a record of the capability's type attributed to this source."""
        fields.setdefault("source", self.source_id)
        fields.setdefault("sources", [self.source_id])
        return RECORD_TYPES[capability](**fields)

    def _transform_all(
        self,
        items: Iterable[Any],
        transform: Callable[[Any], BaseRecord | None],
    ) -> list[BaseRecord]:
        """
        Apply transform to each upstream item, skipping malformed ones.

        One bad item never discards the rest of the payload.
        """
        records: list[BaseRecord] = []
        skipped = 0
        for item in items:
            try:
                record = transform(item)
            except (ValidationError, KeyError, TypeError, ValueError, AttributeError) as e:
                skipped += 1
                logger.warning("Skipping malformed item", source=self.source_id, error=str(e))
                continue
            if record is not None:
                records.append(record)
        if skipped:
            logger.info("Items skipped during transform", source=self.source_id, skipped=skipped)
        return records
