"""Record sources - schemas, base class, concrete sources and the aggregation manager."""

from vc_intel.sources.schemas import (
    BaseRecord,
    Capability,
    DealRecord,
    FetchResult,
    FounderRecord,
    Record,
    SourceFailure,
    SourceResult,
    TrendRecord,
)

__all__ = [
    "Capability",
    "BaseRecord",
    "TrendRecord",
    "DealRecord",
    "FounderRecord",
    "Record",
    "SourceResult",
    "SourceFailure",
    "FetchResult",
]
