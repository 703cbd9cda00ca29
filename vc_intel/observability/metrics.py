"""
Prometheus metrics for source aggregation and scoring.

Defines and exposes metrics for:
- Source fetch outcomes and latency
- Cache hit rate
- Source enablement
- Scored trend volume

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

from vc_intel.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for source latency histograms (in seconds)
LATENCY_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)


def _capability_label(capability) -> str:
    # Accepts Capability members or plain strings
    return getattr(capability, "value", capability)


class MetricsCollector:
    """
    Prometheus metrics collector for the aggregation pipeline.

    Usage:
        metrics = get_metrics()
        metrics.record_source_fetch("hackernews", Capability.TRENDS, "success", latency=0.4)
        metrics.record_cache_lookup("hackernews", hit=True)
    """

    def __init__(self):
        self.source_fetches = Counter(
            "vc_intel_source_fetches_total",
            "Total source capability calls",
            ["source", "capability", "status"],  # status: success, cached, error, timeout
        )

        self.source_records = Counter(
            "vc_intel_source_records_total",
            "Total records returned by sources",
            ["source", "capability"],
        )

        self.source_latency = Histogram(
            "vc_intel_source_fetch_seconds",
            "External fetch latency per source",
            ["source", "capability"],
            buckets=LATENCY_BUCKETS,
        )

        self.cache_lookups = Counter(
            "vc_intel_cache_lookups_total",
            "Source cache lookups",
            ["source", "result"],  # result: hit, miss
        )

        self.source_enabled = Gauge(
            "vc_intel_source_enabled",
            "Source enablement (1 = enabled, 0 = disabled)",
            ["source"],
        )

        self.trends_scored = Counter(
            "vc_intel_trends_scored_total",
            "Total trends scored, by lifecycle",
            ["lifecycle"],
        )

        logger.info("Prometheus metrics initialized")

    def start_server(self, port: int | None = None) -> None:
        """Start Prometheus metrics HTTP server (port defaults from settings)."""
        port = port or get_settings().metrics_port
        start_http_server(port, registry=REGISTRY)
        logger.info(f"Prometheus metrics server started on port {port}")

    # Convenience methods

    def record_source_fetch(
        self,
        source: str,
        capability,
        status: str,
        count: int = 0,
        latency: float | None = None,
    ) -> None:
        """Record the outcome of one source capability call."""
        cap = _capability_label(capability)
        self.source_fetches.labels(source=source, capability=cap, status=status).inc()

        if count:
            self.source_records.labels(source=source, capability=cap).inc(count)

        if latency is not None:
            self.source_latency.labels(source=source, capability=cap).observe(latency)

    def record_cache_lookup(self, source: str, hit: bool) -> None:
        self.cache_lookups.labels(source=source, result="hit" if hit else "miss").inc()

    def set_source_enabled(self, source: str, enabled: bool) -> None:
        self.source_enabled.labels(source=source).set(1 if enabled else 0)

    def record_scored(self, lifecycle: str, count: int = 1) -> None:
        self.trends_scored.labels(lifecycle=lifecycle).inc(count)


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
