"""Configuration for the momentum scoring engine.

Factor weights and caps, recency decay, and the duplicate-merge policy.
All settings can be overridden via SCORING_* environment variables.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MentionMergePolicy = Literal["pairwise", "mean"]


class ScoringConfig(BaseSettings):
    """Configuration for momentum scoring and deduplication.

    Example:
        SCORING_VELOCITY_CAP=30
        SCORING_MENTION_MERGE=mean
    """

    model_config = SettingsConfigDict(
        env_prefix="SCORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Velocity: mention_count / divisor, capped
    velocity_divisor: float = Field(default=100.0, gt=0.0)
    velocity_cap: float = Field(default=30.0, ge=0.0)

    # Source diversity: points per distinct source, capped
    diversity_per_source: float = Field(default=4.0, ge=0.0)
    diversity_cap: float = Field(default=20.0, ge=0.0)

    # Keyword scans over the serialized payload
    funding_cap: float = Field(default=25.0, ge=0.0)
    founder_keyword_points: float = Field(default=3.0, ge=0.0)
    founder_cap: float = Field(default=15.0, ge=0.0)

    # Recency
    recency_max: float = Field(default=10.0, ge=0.0)
    recency_full_hours: float = Field(
        default=24.0,
        ge=0.0,
        description="Records younger than this get the full recency score",
    )
    recency_decay_per_day: float = Field(default=0.5, ge=0.0)
    recency_floor: float = Field(
        default=2.0,
        ge=0.0,
        description="Minimum recency score for a timestamped record",
    )

    mention_merge: MentionMergePolicy = Field(
        default="pairwise",
        description=(
            "How duplicate mention counts combine: 'pairwise' folds each duplicate "
            "into a running average of two (order dependent), 'mean' is the true mean"
        ),
    )
