"""Prometheus metrics for the producer API and the consumer worker.

Each service owns an explicit ``CollectorRegistry`` rather than the
process-global default, so an API app and a worker app can coexist in a
single process (as they do in the test suite).
"""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


class ApiMetrics:
    """Request and task-creation metrics exported by the producer API."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.http_requests_total = Counter(
            "api_http_requests_total",
            "Total number of HTTP requests",
            ["method", "endpoint", "status"],
            registry=self.registry,
        )
        self.http_request_duration = Histogram(
            "api_http_request_duration_seconds",
            "HTTP request latency",
            ["method", "endpoint"],
            registry=self.registry,
        )
        self.tasks_created = Counter(
            "api_tasks_created_total",
            "Total number of tasks created",
            registry=self.registry,
        )


class WorkerMetrics:
    """Queue and processing metrics exported by the consumer worker."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.tasks_processed = Counter(
            "worker_tasks_processed_total",
            "Total number of tasks processed",
            registry=self.registry,
        )
        self.tasks_failed = Counter(
            "worker_tasks_failed_total",
            "Total number of tasks that failed",
            registry=self.registry,
        )
        self.processing_duration = Histogram(
            "worker_task_processing_duration_seconds",
            "Task processing duration",
            registry=self.registry,
        )
        self.queue_length = Gauge(
            "worker_queue_length",
            "Current length of task queue",
            registry=self.registry,
        )
        self.store_errors = Counter(
            "worker_store_errors_total",
            "Total number of ticks skipped because the store was unavailable",
            registry=self.registry,
        )


def render(registry: CollectorRegistry) -> tuple[bytes, str]:
    """Return the text exposition of ``registry`` and its content type."""
    return generate_latest(registry), CONTENT_TYPE_LATEST
