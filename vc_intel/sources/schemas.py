"""
Record schemas shared by every source and the scoring engine.

All sources MUST emit one of TrendRecord, DealRecord or FounderRecord.
`id` is only unique within the emitting source; cross-source identity
is the lower-cased `display_name`.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field, field_validator


class Capability(str, Enum):
    """Kinds of record a source can produce."""

    TRENDS = "trends"
    DEALS = "deals"
    FOUNDERS = "founders"


class BaseRecord(BaseModel):
    """Fields common to every record variant."""

    id: str = Field(..., description="Identifier, unique within the emitting source")
    source: str = Field(..., description="Id of the originating source")
    sources: list[str] | None = Field(
        default=None,
        description="All origin ids; populated by sources and grown by deduplication",
    )
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Opaque source-specific payload, scanned by the scorer",
    )
    created_at: datetime | None = Field(
        default=None,
        description="Creation time of the underlying item, if known",
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Upstream APIs often use integer ids."""
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("sources")
    @classmethod
    def unique_sources(cls, v: list[str] | None) -> list[str] | None:
        """Keep set semantics while preserving first-seen order."""
        if v is None:
            return None
        return list(dict.fromkeys(v))

    @property
    def display_name(self) -> str:
        """Name used for cross-source identity."""
        raise NotImplementedError


class TrendRecord(BaseRecord):
    """A topic gaining attention."""

    name: str
    category: str = "other"
    mention_count: float = Field(default=0, ge=0)
    momentum_score: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Assigned by the scoring engine, never by a source",
    )

    @property
    def display_name(self) -> str:
        return self.name


class DealRecord(BaseRecord):
    """A funding event or acquisition."""

    company_name: str
    funding_type: str = "Funding"

    @property
    def display_name(self) -> str:
        return self.company_name


class FounderRecord(BaseRecord):
    """A founder or executive mention."""

    name: str
    title: str = ""

    @property
    def display_name(self) -> str:
        return self.name


Record = Union[TrendRecord, DealRecord, FounderRecord]

RECORD_TYPES: dict[Capability, type[BaseRecord]] = {
    Capability.TRENDS: TrendRecord,
    Capability.DEALS: DealRecord,
    Capability.FOUNDERS: FounderRecord,
}


@dataclass
class SourceResult:
    """Records returned by one source for one capability call."""

    source_id: str
    records: list[BaseRecord] = field(default_factory=list)


@dataclass
class SourceFailure:
    """A source call that timed out or raised past its own isolation."""

    source_id: str
    error: str

    def to_dict(self) -> dict[str, str]:
        return {"source": self.source_id, "error": self.error}


@dataclass
class FetchResult:
    """Outcome of a fan-out: per-source results in registration order plus failures."""

    results: list[SourceResult] = field(default_factory=list)
    failures: list[SourceFailure] = field(default_factory=list)
