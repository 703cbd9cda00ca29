"""Observability layer - logging and metrics."""

from vc_intel.observability.logging import setup_logging
from vc_intel.observability.metrics import MetricsCollector, get_metrics

__all__ = ["setup_logging", "MetricsCollector", "get_metrics"]
