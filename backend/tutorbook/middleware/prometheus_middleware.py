"""
Prometheus metrics middleware for HTTP request tracking.

Records duration, status codes and in-progress requests per endpoint.
"""

import time
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.constants import METRICS_PATH
from ..core.ulid_helper import is_valid_ulid
from ..monitoring.prometheus_metrics import prometheus_metrics


def normalize_path(raw_path: str) -> str:
    """Replace ids in a path with :id to keep label cardinality low."""
    return "/".join(
        ":id" if segment.isdigit() or (len(segment) == 26 and is_valid_ulid(segment)) else segment
        for segment in raw_path.split("/")
    )


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for HTTP requests."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.url.path == METRICS_PATH:
            return await call_next(request)

        method = request.method
        path = normalize_path(request.url.path)

        prometheus_metrics.track_http_request_start(method, path)
        start_time = time.time()

        try:
            response = await call_next(request)
            prometheus_metrics.record_http_request(
                method=method,
                endpoint=path,
                duration=time.time() - start_time,
                status_code=response.status_code,
            )
            return response
        finally:
            prometheus_metrics.track_http_request_end(method, path)
