"""Momentum scoring engine for aggregated trend records.

Deduplicates records across sources, scores each surviving trend with an
additive five-factor model, bands the score into a lifecycle stage and
ranks the result:

  score = velocity + diversity + funding + founder + recency   (capped at 100)

  velocity   0-30  mention_count / 100
  diversity  0-20  4 points per distinct source
  funding    0-25  funding-stage phrases in the payload (additive, capped)
  founder    0-15  3 points per founder keyword in the payload
  recency    0-10  full under 24h, then 0.5/day decay to a floor of 2;
                   0 for records without a timestamp

All methods are synchronous and side-effect free apart from logging and
metrics; inputs are never mutated.
"""

import json
import math
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

import structlog
from pydantic import ValidationError

from vc_intel.errors import RecordValidationError
from vc_intel.observability.metrics import get_metrics
from vc_intel.scoring.config import ScoringConfig
from vc_intel.scoring.lifecycle import classify_confidence, classify_lifecycle
from vc_intel.scoring.schemas import ScoreBreakdown, ScoredTrend
from vc_intel.sources.schemas import BaseRecord, TrendRecord
from vc_intel.sources.text import parse_timestamp

logger = structlog.get_logger(__name__)

# ── Keyword tables ───────────────────────────────────────

# Each group scores once, however many of its phrases appear
FUNDING_SIGNALS: tuple[tuple[tuple[str, ...], float], ...] = (
    (("series a", "seed"), 8.0),
    (("series b",), 12.0),
    (("series c",), 15.0),
    (("acquisition",), 20.0),
    (("ipo",), 25.0),
)

FOUNDER_KEYWORDS: tuple[str, ...] = (
    "founder",
    "ceo",
    "serial entrepreneur",
    "exit",
    "previous startup",
)

MAX_SCORE = 100


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class TrendScoringService:
    """Deduplicates, scores, classifies and ranks trend records.

    Pure computation methods:
      - ``deduplicate``: merge records sharing a case-insensitive name
      - ``score`` / ``score_breakdown``: momentum score for one record
      - ``score_all``: full pipeline, sorted by score descending

    Args:
        config: Factor weights and merge policy.
        clock: Returns the current aware UTC time; injectable for tests.
    """

    def __init__(
        self,
        config: ScoringConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config or ScoringConfig()
        self._clock = clock or _utc_now

    @property
    def config(self) -> ScoringConfig:
        return self._config

    # ── Validation ───────────────────────────────────────

    def validate(self, records: Iterable[BaseRecord | Mapping[str, Any]]) -> list[BaseRecord]:
        """Coerce inputs to records, dropping the malformed ones.

        Mappings are validated as TrendRecord. Records without a usable
        display name are dropped.
        """
        valid: list[BaseRecord] = []
        for index, item in enumerate(records):
            try:
                valid.append(self._coerce(item))
            except RecordValidationError as e:
                logger.warning("Dropping malformed record", index=index, error=str(e))
        return valid

    @staticmethod
    def _coerce(item: BaseRecord | Mapping[str, Any]) -> BaseRecord:
        if isinstance(item, BaseRecord):
            record = item
        elif isinstance(item, Mapping):
            try:
                record = TrendRecord.model_validate(item)
            except ValidationError as e:
                raise RecordValidationError(
                    f"Invalid trend record: {e.error_count()} validation error(s)"
                ) from e
        else:
            raise RecordValidationError(f"Unsupported record type: {type(item).__name__}")

        if not record.display_name or not record.display_name.strip():
            raise RecordValidationError(f"Record {record.id!r} from {record.source!r} has no name")
        return record

    # ── Deduplication ────────────────────────────────────

    def deduplicate(self, records: Iterable[BaseRecord | Mapping[str, Any]]) -> list[BaseRecord]:
        """Merge records that share a case-insensitive display name.

        The first occurrence of a name is kept (as a copy) and later
        occurrences fold into it: sources are unioned in first-seen order
        and trend mention counts are combined per ``mention_merge``.
        Output preserves the first-seen order of names.
        """
        kept: dict[tuple[type, str], BaseRecord] = {}
        # (sum of mention counts, occurrences) per key, for the "mean" policy
        totals: dict[tuple[type, str], tuple[float, int]] = {}
        merged = 0

        for record in self.validate(records):
            key = (type(record), record.display_name.lower())
            existing = kept.get(key)

            if existing is None:
                kept[key] = record.model_copy(deep=True)
                totals[key] = (getattr(record, "mention_count", 0.0), 1)
                continue

            merged += 1
            if existing.sources is not None or record.sources is not None:
                existing.sources = list(
                    dict.fromkeys([*(existing.sources or []), *(record.sources or [])])
                )

            if isinstance(existing, TrendRecord) and isinstance(record, TrendRecord):
                total, count = totals[key]
                total, count = total + record.mention_count, count + 1
                totals[key] = (total, count)
                if self._config.mention_merge == "mean":
                    existing.mention_count = total / count
                else:
                    existing.mention_count = (existing.mention_count + record.mention_count) / 2

        if merged:
            logger.debug("Deduplicated records", unique=len(kept), merged=merged)
        return list(kept.values())

    # ── Scoring ──────────────────────────────────────────

    def score(self, record: TrendRecord) -> int:
        """Momentum score in [0, 100]."""
        breakdown = self.score_breakdown(record)
        return min(_round_half_up(breakdown.raw_total), MAX_SCORE)

    def score_breakdown(self, record: TrendRecord) -> ScoreBreakdown:
        """Per-factor contributions before rounding and the overall cap."""
        cfg = self._config
        text = self._payload_text(record.data)

        return ScoreBreakdown(
            velocity=min(record.mention_count / cfg.velocity_divisor, cfg.velocity_cap),
            diversity=(
                min(len(record.sources) * cfg.diversity_per_source, cfg.diversity_cap)
                if record.sources
                else 0.0
            ),
            funding=self._funding_score(text),
            founder=self._founder_score(text),
            recency=self._recency_score(record),
        )

    @staticmethod
    def _payload_text(data: Mapping[str, Any] | None) -> str:
        if not data:
            return ""
        return json.dumps(data, default=str, ensure_ascii=False).lower()

    def _funding_score(self, text: str) -> float:
        if not text:
            return 0.0
        points = sum(
            weight
            for phrases, weight in FUNDING_SIGNALS
            if any(phrase in text for phrase in phrases)
        )
        return min(points, self._config.funding_cap)

    def _founder_score(self, text: str) -> float:
        if not text:
            return 0.0
        hits = sum(1 for keyword in FOUNDER_KEYWORDS if keyword in text)
        return min(hits * self._config.founder_keyword_points, self._config.founder_cap)

    def _recency_score(self, record: BaseRecord) -> float:
        created_at = self._timestamp(record)
        if created_at is None:
            return 0.0

        cfg = self._config
        age_hours = (self._clock() - created_at).total_seconds() / 3600
        if age_hours < cfg.recency_full_hours:
            return cfg.recency_max
        return max(cfg.recency_max - (age_hours / 24) * cfg.recency_decay_per_day, cfg.recency_floor)

    @staticmethod
    def _timestamp(record: BaseRecord) -> datetime | None:
        """Record creation time, falling back to an ISO string at data['created_at']."""
        created_at = record.created_at
        if created_at is None:
            raw = record.data.get("created_at") if record.data else None
            if not isinstance(raw, (str, int, float)):
                return None
            try:
                created_at = parse_timestamp(raw)
            except (ValueError, OverflowError, OSError):
                return None
            if created_at is None:
                return None

        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return created_at

    # ── Pipeline ─────────────────────────────────────────

    def score_all(self, records: Iterable[BaseRecord | Mapping[str, Any]]) -> list[ScoredTrend]:
        """Deduplicate, score, classify and rank trend records.

        Non-trend records are ignored. The sort is stable, so equal
        scores keep their first-seen order.
        """
        scored: list[ScoredTrend] = []
        skipped = 0

        for record in self.deduplicate(records):
            if not isinstance(record, TrendRecord):
                skipped += 1
                continue

            score = self.score(record)
            scored.append(
                ScoredTrend.model_validate(
                    {
                        **record.model_dump(),
                        "momentum_score": score,
                        "lifecycle": classify_lifecycle(score),
                        "confidence": classify_confidence(len(record.sources or ())),
                    }
                )
            )

        if skipped:
            logger.debug("Skipped non-trend records", count=skipped)

        scored.sort(key=lambda t: t.momentum_score, reverse=True)

        metrics = get_metrics()
        for trend in scored:
            metrics.record_scored(trend.lifecycle.value)

        logger.info(
            "Scoring complete",
            count=len(scored),
            top_trend=scored[0].name if scored else None,
            top_score=scored[0].momentum_score if scored else None,
        )
        return scored
