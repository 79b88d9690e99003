"""
Prometheus metrics for the upload gateway.

Tracks HTTP request latency and counts per route template, and upload
outcomes and sizes. Metric names are fixed for scraping compatibility.
"""

import time
from collections.abc import Sequence

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.routing import BaseRoute, Match
from starlette.types import ASGIApp

UNMATCHED_ROUTE = "unmatched"

# Process-wide registry, owned by this module
registry = CollectorRegistry()
ProcessCollector(registry=registry)
PlatformCollector(registry=registry)
GCCollector(registry=registry)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "Duration of HTTP requests in seconds",
    ["method", "route", "status_code"],
    buckets=[0.1, 0.5, 1, 2, 5],
    registry=registry,
)

http_requests_total = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "route", "status_code"],
    registry=registry,
)

file_uploads_total = Counter(
    "file_uploads_total",
    "Total number of file uploads",
    ["status"],
    registry=registry,
)

file_upload_size_bytes = Histogram(
    "file_upload_size_bytes",
    "Size of uploaded files in bytes",
    buckets=[1024, 10240, 102400, 1048576, 10485760, 104857600],
    registry=registry,
)

# Export both outcomes from the first scrape on
for _status in ("success", "error"):
    file_uploads_total.labels(status=_status)


def observe_request(method: str, route: str, status_code: int, duration: float) -> None:
    """Record one finished HTTP request."""
    labels = {"method": method, "route": route, "status_code": str(status_code)}
    http_request_duration_seconds.labels(**labels).observe(duration)
    http_requests_total.labels(**labels).inc()


def record_upload_success(size: int) -> None:
    file_uploads_total.labels(status="success").inc()
    file_upload_size_bytes.observe(size)


def record_upload_error() -> None:
    file_uploads_total.labels(status="error").inc()


def render_metrics() -> tuple[bytes, str]:
    """Prometheus text exposition of the registry and its content type."""
    return generate_latest(registry), CONTENT_TYPE_LATEST


def get_route_label(request: Request, routes: Sequence[BaseRoute] | None = None) -> str:
    """
    Registered path template for a request, e.g. ``/api/files/{key}``.

    Uses the route the router resolved when available; otherwise matches
    against ``routes`` (default: the application's routes). Requests no
    route accepts are grouped under ``unmatched`` to keep label
    cardinality bounded.
    """
    route = request.scope.get("route")
    if route is not None and getattr(route, "path", None):
        return route.path

    if routes is None:
        routes = request.app.router.routes

    partial = None
    for candidate in routes:
        # Included routers carry no template of their own
        if not getattr(candidate, "path", None):
            continue
        match, _ = candidate.matches(request.scope)
        if match == Match.FULL:
            return candidate.path
        if match == Match.PARTIAL and partial is None:
            partial = candidate.path
    return partial or UNMATCHED_ROUTE


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    ASGI middleware that records request metrics.

    Every response is counted, including error responses and requests
    where an exception escapes the application (recorded as 500).
    """

    def __init__(self, app: ASGIApp, routes: Sequence[BaseRoute] | None = None):
        super().__init__(app)
        self.routes = routes

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            observe_request(
                method=request.method,
                route=get_route_label(request, self.routes),
                status_code=status_code,
                duration=time.perf_counter() - start,
            )
