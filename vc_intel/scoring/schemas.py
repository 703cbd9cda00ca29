"""Scored output types."""

from dataclasses import dataclass
from enum import Enum

from vc_intel.sources.schemas import TrendRecord


class Lifecycle(str, Enum):
    PEAK = "peak"
    EMERGING = "emerging"
    ESTABLISHED = "established"
    DECLINING = "declining"


class Confidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"


class ScoredTrend(TrendRecord):
    """A trend with its momentum score, lifecycle band and confidence label."""

    lifecycle: Lifecycle
    confidence: Confidence


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-factor contributions to a momentum score, for explainability."""

    velocity: float
    diversity: float
    funding: float
    founder: float
    recency: float

    @property
    def raw_total(self) -> float:
        return self.velocity + self.diversity + self.funding + self.founder + self.recency

    def as_dict(self) -> dict[str, float]:
        return {
            "velocity": round(self.velocity, 4),
            "diversity": round(self.diversity, 4),
            "funding": round(self.funding, 4),
            "founder": round(self.founder, 4),
            "recency": round(self.recency, 4),
        }
