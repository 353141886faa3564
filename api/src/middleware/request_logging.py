"""
Request logging and metrics middleware.

Binds a correlation ID to the structlog context for the lifetime of the
request, logs start/completion/failure and records Prometheus metrics
labelled by route template.
"""

import time
import uuid
from typing import Callable

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from shared.logging import bind_context, clear_context
from shared.metrics import ApiMetrics

logger = structlog.get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request logging and metrics."""

    def __init__(self, app, metrics: ApiMetrics):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        method = request.method
        path = request.url.path

        bind_context(correlation_id=correlation_id)
        start_time = time.perf_counter()

        logger.info(
            "request_started",
            method=method,
            path=path,
            client_ip=request.client.host if request.client else "unknown"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            self._record(method, self._endpoint_label(request), 500, duration)
            logger.error(
                "request_failed",
                method=method,
                path=path,
                error=str(e),
                duration=f"{duration:.3f}s",
                exc_info=True
            )
            raise
        finally:
            clear_context()

        duration = time.perf_counter() - start_time
        self._record(method, self._endpoint_label(request), response.status_code, duration)

        logger.info(
            "request_completed",
            method=method,
            path=path,
            status_code=response.status_code,
            duration=f"{duration:.3f}s",
            correlation_id=correlation_id
        )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response

    def _record(self, method: str, endpoint: str, status: int, duration: float) -> None:
        self.metrics.http_requests_total.labels(
            method=method,
            endpoint=endpoint,
            status=status
        ).inc()
        self.metrics.http_request_duration_seconds.labels(
            method=method,
            endpoint=endpoint
        ).observe(duration)

    @staticmethod
    def _endpoint_label(request: Request) -> str:
        """Route template (``/api/contacts/{contact_id}``) to bound label cardinality.

        Routes of an included router may carry a path relative to the mount
        point; the mount prefix is then in ``root_path``.
        """
        route = request.scope.get("route")
        route_path = getattr(route, "path", None)
        if not route_path:
            return "unmatched"
        root_path = request.scope.get("root_path", "")
        if root_path and not route_path.startswith(root_path):
            return root_path + route_path
        return route_path
