"""
Collection service - one capability request in, one attributed record list out.

Wraps the aggregation manager's fan-out and flattens per-source results
in registration order. Records already carry their origin in `source`.
"""

from dataclasses import dataclass, field
from typing import Any

import structlog

from vc_intel.sources.manager import AggregationManager
from vc_intel.sources.schemas import BaseRecord, Capability, SourceFailure

logger = structlog.get_logger(__name__)


@dataclass
class CollectionResult:
    """
    Flattened output of a fan-out.

    Attributes:
        records: All records, source by source in registration order
        sources: Ids of sources that returned, including empty returns
        failures: Failed sources, or None when every source returned
    """

    records: list[BaseRecord] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    failures: list[SourceFailure] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "records": [r.model_dump(mode="json") for r in self.records],
            "sources": list(self.sources),
            "failures": [f.to_dict() for f in self.failures] if self.failures else None,
        }


class CollectionService:
    """
    Translates capability requests into flattened record lists.

    Usage:
        service = CollectionService(manager)
        result = await service.collect(Capability.TRENDS)
    """

    def __init__(self, manager: AggregationManager):
        self._manager = manager

    async def collect(
        self,
        capability: Capability | str,
        params: dict[str, Any] | None = None,
    ) -> CollectionResult:
        capability = Capability(capability)
        logger.info("Collecting from all sources", capability=capability.value)

        fetched = await self._manager.fetch_from_all(capability, params)

        records = [record for result in fetched.results for record in result.records]
        result = CollectionResult(
            records=records,
            sources=[r.source_id for r in fetched.results],
            failures=list(fetched.failures) or None,
        )

        logger.info(
            "Collection complete",
            capability=capability.value,
            records=len(records),
            sources=len(result.sources),
            failures=len(fetched.failures),
        )
        return result

    async def collect_trends(self, params: dict[str, Any] | None = None) -> CollectionResult:
        return await self.collect(Capability.TRENDS, params)

    async def collect_deals(self, params: dict[str, Any] | None = None) -> CollectionResult:
        return await self.collect(Capability.DEALS, params)

    async def collect_founders(self, params: dict[str, Any] | None = None) -> CollectionResult:
        return await self.collect(Capability.FOUNDERS, params)
