"""
Aggregation manager - source registry and concurrent fan-out.

Every enabled source that declares the requested capability is invoked
concurrently, each under its own deadline. A source that times out or
fails is recorded as a failure and contributes nothing; siblings are
never cancelled. Results are assembled in registration order.
"""

import asyncio
from typing import Any

import structlog

from vc_intel.errors import ConfigurationError
from vc_intel.observability.metrics import get_metrics
from vc_intel.sources.base import BaseSource
from vc_intel.sources.schemas import (
    BaseRecord,
    Capability,
    FetchResult,
    SourceFailure,
    SourceResult,
)

logger = structlog.get_logger(__name__)

DEFAULT_SOURCE_TIMEOUT_SECONDS = 15.0


class AggregationManager:
    """
    Registry of sources plus the fan-out protocol.

    Usage:
        manager = AggregationManager(timeout_seconds=10)
        manager.register("hackernews", HackerNewsSource(cache, enabled=True))
        result = await manager.fetch_from_all(Capability.TRENDS)
    """

    def __init__(self, timeout_seconds: float = DEFAULT_SOURCE_TIMEOUT_SECONDS):
        self._sources: dict[str, BaseSource] = {}
        self._timeout = timeout_seconds
        self._metrics = get_metrics()

    @classmethod
    def from_settings(cls, settings) -> "AggregationManager":
        return cls(timeout_seconds=settings.source_timeout_seconds)

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def register(self, source_id: str, source: BaseSource) -> None:
        """
        Add a source under source_id.

        Re-registering an id replaces the previous source (it keeps the
        original registry position). A source registered under an id other
        than its own is renamed, so its cache keys and metrics use source_id.

        Raises:
            ConfigurationError: If the source declares no capability
        """
        capabilities = getattr(source, "capabilities", None)
        if not capabilities:
            raise ConfigurationError(
                f"Source {source_id!r} ({type(source).__name__}) declares no capabilities"
            )

        if source_id in self._sources:
            logger.warning("Replacing registered source", source=source_id)

        if isinstance(source, BaseSource) and source.source_id != source_id:
            source.source_id = source_id
            self._metrics.set_source_enabled(source_id, source.enabled)

        self._sources[source_id] = source
        logger.info(
            "Source registered",
            source=source_id,
            enabled=source.enabled,
            capabilities=sorted(c.value for c in capabilities),
        )

    def get(self, source_id: str) -> BaseSource | None:
        return self._sources.get(source_id)

    def __len__(self) -> int:
        return len(self._sources)

    async def fetch_from_all(
        self,
        capability: Capability | str,
        params: dict[str, Any] | None = None,
    ) -> FetchResult:
        """
        Fan a capability request out to every eligible source.

        Never raises because of a source; check FetchResult.failures
        for what went wrong.
        """
        capability = Capability(capability)
        targets = [
            (source_id, source)
            for source_id, source in self._sources.items()
            if source.enabled and capability in source.capabilities
        ]

        if not targets:
            logger.warning("No enabled sources for capability", capability=capability.value)
            return FetchResult()

        outcomes = await asyncio.gather(
            *(
                self._invoke(source_id, source, capability, params)
                for source_id, source in targets
            )
        )

        result = FetchResult()
        for (source_id, _), outcome in zip(targets, outcomes):
            if isinstance(outcome, SourceFailure):
                result.failures.append(outcome)
            else:
                result.results.append(SourceResult(source_id=source_id, records=outcome))

        logger.info(
            "Fan-out complete",
            capability=capability.value,
            sources=len(targets),
            succeeded=len(result.results),
            failed=len(result.failures),
        )
        return result

    async def _invoke(
        self,
        source_id: str,
        source: BaseSource,
        capability: Capability,
        params: dict[str, Any] | None,
    ) -> list[BaseRecord] | SourceFailure:
        """Run one source call under the deadline, converting failures."""
        try:
            records, error = await asyncio.wait_for(
                source.fetch_with_status(capability, params),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            self._metrics.record_source_fetch(source_id, capability, "timeout")
            logger.warning(
                "Source timed out",
                source=source_id,
                capability=capability.value,
                timeout_seconds=self._timeout,
            )
            return SourceFailure(source_id=source_id, error=f"Timed out after {self._timeout}s")
        except Exception as e:
            self._metrics.record_source_fetch(source_id, capability, "error")
            logger.warning(
                "Source failed",
                source=source_id,
                capability=capability.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            return SourceFailure(source_id=source_id, error=f"{type(e).__name__}: {e}")

        if error is not None:
            return SourceFailure(source_id=source_id, error=error)
        return list(records or [])

    def get_active_sources(self) -> list[str]:
        """Ids of enabled sources, in registration order."""
        return [source_id for source_id, source in self._sources.items() if source.enabled]

    def get_source_status(self) -> dict[str, dict[str, Any]]:
        """Enablement, implementation class and capabilities per source."""
        return {source_id: source.status() for source_id, source in self._sources.items()}

    async def health_check(self) -> dict[str, bool]:
        """Run each source's health check; a raising check reports False."""
        health: dict[str, bool] = {}
        for source_id, source in self._sources.items():
            try:
                health[source_id] = await source.health_check()
            except Exception as e:
                logger.warning("Health check failed", source=source_id, error=str(e))
                health[source_id] = False
        return health
