"""Application services - collection and intelligence facades."""

from vc_intel.services.collection_service import CollectionResult, CollectionService
from vc_intel.services.intelligence_service import (
    IntelligenceService,
    TrendReport,
    build_default_manager,
)

__all__ = [
    "CollectionService",
    "CollectionResult",
    "IntelligenceService",
    "TrendReport",
    "build_default_manager",
]
