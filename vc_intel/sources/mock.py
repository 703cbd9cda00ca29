"""
Mock source for testing and development.

Generates synthetic trend, deal and founder records that mimic what the
real sources emit. Useful for:
- Running the pipeline without API credentials
- Exercising cross-source deduplication (mock sources share topic names)
- Development and debugging
"""

import random
from datetime import datetime, timedelta, timezone
from typing import Any

from vc_intel.cache import TTLCache
from vc_intel.sources.base import BaseSource
from vc_intel.sources.schemas import BaseRecord, Capability
from vc_intel.sources.text import categorize

SAMPLE_TOPICS = [
    "AI Agents",
    "Vector Databases",
    "Climate Fintech",
    "Stablecoin Payments",
    "Robotics Foundation Models",
    "Carbon Accounting",
    "Biotech Copilots",
    "Edge Inference",
    "Passkey Security",
    "Vertical SaaS",
]

SAMPLE_COMPANIES = [
    "Lumen Labs",
    "Northwind AI",
    "Helio Grid",
    "Quanta Health",
    "Paystack Cloud",
    "Orbital Robotics",
]

SAMPLE_FOUNDERS = [
    ("Ada Chen", "Founder & CEO"),
    ("Marcus Bell", "Co-founder, CTO"),
    ("Priya Raman", "Serial Entrepreneur"),
    ("Tom Okafor", "CEO"),
    ("Lena Fischer", "Founder, previous startup acquired"),
]

FUNDING_STAGES = ["Seed", "Series A", "Series B", "Series C", "Acquisition", "IPO"]

TREND_TEMPLATES = [
    "{topic} adoption accelerating across enterprise buyers",
    "Founder of {company} says {topic} demand doubled this quarter",
    "{company} closes {stage} to scale {topic}",
    "Why {topic} is the next platform shift",
]


class MockSource(BaseSource):
    """
    Source that generates synthetic records for every capability.

    A seed makes output reproducible; mock sources built with different
    ids but the same topics produce overlapping names on purpose.
    """

    capabilities = frozenset({Capability.TRENDS, Capability.DEALS, Capability.FOUNDERS})

    def __init__(
        self,
        cache: TTLCache,
        source_id: str = "mock",
        records_per_fetch: int = 8,
        seed: int | None = None,
        enabled: bool = True,
    ):
        """
        Initialize mock source.

        Args:
            cache: Shared result cache
            source_id: Registry id to emit records under
            records_per_fetch: Number of records generated per capability call
            seed: Random seed for reproducible output
            enabled: Whether the source participates in fan-out
        """
        super().__init__(cache, enabled=enabled, source_id=source_id)
        self._records_per_fetch = records_per_fetch
        self._random = random.Random(seed)
        self._counter = 0

    async def _fetch(self, capability: Capability, params: dict[str, Any]) -> list[BaseRecord]:
        count = int(params.get("limit", self._records_per_fetch))
        generate = {
            Capability.TRENDS: self._trend,
            Capability.DEALS: self._deal,
            Capability.FOUNDERS: self._founder,
        }[capability]
        return [generate() for _ in range(count)]

    def _next_id(self) -> str:
        self._counter += 1
        return f"{self.source_id}_{self._counter}"

    def _timestamp(self) -> datetime:
        return datetime.now(timezone.utc) - timedelta(
            hours=self._random.randint(0, 96),
            minutes=self._random.randint(0, 59),
        )

    def _trend(self) -> BaseRecord:
        topic = self._random.choice(SAMPLE_TOPICS)
        headline = self._random.choice(TREND_TEMPLATES).format(
            topic=topic,
            company=self._random.choice(SAMPLE_COMPANIES),
            stage=self._random.choice(FUNDING_STAGES),
        )
        created_at = self._timestamp()
        return self._make_record(
            Capability.TRENDS,
            id=self._next_id(),
            name=topic,
            category=categorize(topic),
            mention_count=self._random.randint(10, 4000),
            data={"title": headline, "created_at": created_at.isoformat()},
            created_at=created_at,
        )

    def _deal(self) -> BaseRecord:
        company = self._random.choice(SAMPLE_COMPANIES)
        stage = self._random.choice(FUNDING_STAGES)
        amount = self._random.choice([2, 5, 12, 30, 75, 150])
        return self._make_record(
            Capability.DEALS,
            id=self._next_id(),
            company_name=company,
            funding_type=stage,
            data={"title": f"{company} raises ${amount}M {stage}", "amount_usd_m": amount},
            created_at=self._timestamp(),
        )

    def _founder(self) -> BaseRecord:
        name, title = self._random.choice(SAMPLE_FOUNDERS)
        company = self._random.choice(SAMPLE_COMPANIES)
        return self._make_record(
            Capability.FOUNDERS,
            id=self._next_id(),
            name=name,
            title=title,
            data={"company": company},
            created_at=self._timestamp(),
        )


def create_mock_sources(
    cache: TTLCache,
    records_per_fetch: int = 8,
    seed: int | None = None,
) -> dict[str, MockSource]:
    """
    Create a set of mock sources that overlap on topic names.

    Returns:
        Dictionary mapping source id to MockSource
    """
    source_ids = ("mock_news", "mock_social", "mock_filings")
    return {
        source_id: MockSource(
            cache,
            source_id=source_id,
            records_per_fetch=records_per_fetch,
            seed=None if seed is None else seed + offset,
        )
        for offset, source_id in enumerate(source_ids)
    }
