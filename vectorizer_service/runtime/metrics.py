"""Metrics collection facade for the vectorizer service.

Re-exports the shared metrics utilities so service modules import from a
stable local path (``vectorizer_service.runtime.metrics``).
"""

from vectorizer.common.metrics import MetricsCollector, get_metrics_collector

__all__ = ["MetricsCollector", "get_metrics_collector"]
