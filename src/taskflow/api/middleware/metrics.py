"""HTTP request metrics middleware.

Counts requests and observes latency per method and route template
(``/tasks/{task_id}``, not the concrete path) so label cardinality stays
bounded.
"""

from __future__ import annotations

import time
from http import HTTPStatus

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from taskflow.core.metrics import ApiMetrics

UNMATCHED_ROUTE = "unmatched"


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ROUTE)


def _status_text(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return str(status_code)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record ``api_http_requests_total`` and ``api_http_request_duration_seconds``."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        metrics: ApiMetrics = request.app.state.metrics
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            endpoint = _route_template(request)
            metrics.http_request_duration.labels(request.method, endpoint).observe(
                time.perf_counter() - start
            )
            metrics.http_requests_total.labels(
                request.method, endpoint, _status_text(status_code)
            ).inc()
