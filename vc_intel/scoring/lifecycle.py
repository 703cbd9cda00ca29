"""Lifecycle and confidence banding.

Both are pure functions of a single number. No record carries lifecycle
history, so there are no transitions to track.
"""

from vc_intel.scoring.schemas import Confidence, Lifecycle

# ── Lifecycle thresholds (inclusive lower bounds) ─────────────

PEAK_MIN_SCORE = 70
EMERGING_MIN_SCORE = 50
ESTABLISHED_MIN_SCORE = 40

# ── Confidence by number of corroborating sources ─────────────

CONFIDENCE_BY_SOURCES: dict[int, Confidence] = {
    1: Confidence.LOW,
    2: Confidence.MEDIUM,
    3: Confidence.HIGH,
    4: Confidence.HIGH,
    5: Confidence.VERY_HIGH,
}


def classify_lifecycle(score: float) -> Lifecycle:
    if score >= PEAK_MIN_SCORE:
        return Lifecycle.PEAK
    if score >= EMERGING_MIN_SCORE:
        return Lifecycle.EMERGING
    if score >= ESTABLISHED_MIN_SCORE:
        return Lifecycle.ESTABLISHED
    return Lifecycle.DECLINING


def classify_confidence(source_count: int) -> Confidence:
    """Map a source count to a label. Counts below 1 are treated as 1, above 5 as 5."""
    clamped = min(max(source_count, 1), max(CONFIDENCE_BY_SOURCES))
    return CONFIDENCE_BY_SOURCES[clamped]
