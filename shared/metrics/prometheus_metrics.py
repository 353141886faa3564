"""Prometheus metrics definitions and helpers.

Provides the metric definitions for the contact API service.
"""

from typing import Callable, Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


class ApiMetrics:
    """HTTP and database pool metrics for the API service."""

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        """Initialize API metrics.

        Each instance owns its registry unless one is passed in, so several
        applications can live in one process (tests) without clashing.

        Args:
            registry: Prometheus registry to use
        """
        self.registry = registry or CollectorRegistry()

        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status"],
            registry=self.registry,
        )

        self.http_request_duration_seconds = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
            registry=self.registry,
        )

        self.database_connections_active = Gauge(
            "database_connections_active",
            "Active database connections",
            registry=self.registry,
        )

        self.database_connections_idle = Gauge(
            "database_connections_idle",
            "Idle database connections in pool",
            registry=self.registry,
        )

    def observe_pool(self, pool) -> None:
        """Record asyncpg pool gauges; active counts connections currently checked out.

        Args:
            pool: asyncpg pool (ignored when None)
        """
        if pool is None:
            return
        idle = pool.get_idle_size()
        self.database_connections_active.set(pool.get_size() - idle)
        self.database_connections_idle.set(idle)


def get_metrics_handler(metrics: ApiMetrics) -> Callable[[], bytes]:
    """Get metrics handler for HTTP endpoint.

    Args:
        metrics: Metrics whose registry is exported

    Returns:
        Function that generates Prometheus metrics output
    """

    def metrics_handler() -> bytes:
        return generate_latest(metrics.registry)

    return metrics_handler
