"""Momentum scoring - deduplication, scoring, lifecycle banding and ranking."""

from vc_intel.scoring.config import ScoringConfig
from vc_intel.scoring.momentum import TrendScoringService
from vc_intel.scoring.schemas import Confidence, Lifecycle, ScoreBreakdown, ScoredTrend

__all__ = [
    "ScoringConfig",
    "TrendScoringService",
    "Lifecycle",
    "Confidence",
    "ScoredTrend",
    "ScoreBreakdown",
]
