"""Metrics collection for the vectorizer service.

Provides a thin convenience wrapper around ``prometheus_client`` so the
service records HTTP, embedding, and model-load metrics consistently.

Design notes
- Metrics and labels are predeclared to keep label sets bounded
- Each collector owns its registry (inject one in tests if needed)
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest
import structlog

logger = structlog.get_logger("metrics")


class MetricsCollector:
    """Centralized metrics collection for the service.

    Parameters
    - service_name: Logical name of the service owning the metrics
    - registry: Optional custom ``CollectorRegistry`` (e.g. for testing)
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry or CollectorRegistry()

        self.request_count = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['method', 'endpoint', 'status'],
            registry=self.registry
        )

        self.request_duration = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration',
            ['method', 'endpoint'],
            registry=self.registry
        )

        self.embedding_requests = Counter(
            'ml_embedding_requests_total',
            'Total embedding generation requests',
            ['model_name', 'operation'],
            registry=self.registry
        )

        self.embedding_duration = Histogram(
            'ml_embedding_duration_seconds',
            'Embedding generation duration',
            ['model_name', 'operation'],
            registry=self.registry
        )

        self.model_loads = Counter(
            'ml_model_loads_total',
            'Embedding backend load attempts',
            ['model_name', 'status'],
            registry=self.registry
        )

        self.model_load_duration = Histogram(
            'ml_model_load_duration_seconds',
            'Embedding backend load duration',
            ['model_name'],
            registry=self.registry
        )

        self.models_loaded = Gauge(
            'ml_models_loaded',
            'Number of embedding backends currently loaded',
            registry=self.registry
        )

    def record_http_request(
        self,
        method: str,
        endpoint: str,
        status: int,
        duration: float
    ) -> None:
        """Record HTTP request metrics.

        duration is expected in seconds to match Prometheus histogram units.
        """
        self.request_count.labels(method=method, endpoint=endpoint, status=status).inc()
        self.request_duration.labels(method=method, endpoint=endpoint).observe(duration)

    def record_embedding(
        self,
        model_name: str,
        operation: str,
        duration: float
    ) -> None:
        """Record embedding generation metrics."""
        self.embedding_requests.labels(model_name=model_name, operation=operation).inc()
        self.embedding_duration.labels(model_name=model_name, operation=operation).observe(duration)

    def record_model_load(self, model_name: str, status: str, duration: float) -> None:
        """Record one backend load attempt (``status`` is success or failure)."""
        self.model_loads.labels(model_name=model_name, status=status).inc()
        if status == "success":
            self.model_load_duration.labels(model_name=model_name).observe(duration)

    def set_models_loaded(self, count: int) -> None:
        self.models_loaded.set(count)

    def get_metrics(self) -> str:
        """Get metrics in Prometheus exposition format for scraping."""
        return generate_latest(self.registry).decode('utf-8')


_metrics_collector: Optional[MetricsCollector] = None


def get_metrics_collector(service_name: str) -> MetricsCollector:
    """Get or create the metrics collector for a service.

    Returns a process-wide singleton to avoid duplicate collectors.
    """
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector(service_name)
    return _metrics_collector
