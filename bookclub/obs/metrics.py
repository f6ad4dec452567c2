"""Prometheus metrics for the HTTP surface and poll activity."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_LATENCY_SECONDS = Histogram(
    "http_request_latency_seconds",
    "Latency of HTTP requests in seconds.",
    labelnames=("method", "path"),
)
REQUEST_COUNTER = Counter(
    "http_requests_total",
    "Total number of HTTP requests processed.",
    labelnames=("method", "path", "status"),
)
REQUEST_ERROR_COUNTER = Counter(
    "http_request_errors_total",
    "Total number of HTTP requests that resulted in server errors.",
    labelnames=("method", "path", "status"),
)
NOMINATIONS_COUNTER = Counter(
    "bookclub_nominations_submitted_total",
    "Number of book nominations submitted.",
)
QUESTIONS_COUNTER = Counter(
    "bookclub_questions_submitted_total",
    "Number of discussion questions submitted.",
)
VOTE_TOGGLE_COUNTER = Counter(
    "bookclub_vote_toggles_total",
    "Vote toggles grouped by poll phase and resulting action.",
    labelnames=("phase", "action"),
)
POLLS_STARTED_COUNTER = Counter(
    "bookclub_polls_started_total",
    "Polls started, by phase.",
    labelnames=("phase",),
)
POLLS_CLOSED_COUNTER = Counter(
    "bookclub_polls_closed_total",
    "Polls closed, by phase.",
    labelnames=("phase",),
)
WINNERS_COUNTER = Counter(
    "bookclub_winners_recorded_total",
    "Monthly winners written to the archive.",
)
REJECTED_OPERATIONS_COUNTER = Counter(
    "bookclub_rejected_operations_total",
    "Operations rejected with a caller-facing error.",
    labelnames=("operation", "error"),
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware that records request metrics for Prometheus scraping."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:  # type: ignore[override]
        method = request.method
        route = request.scope.get("route")
        path = getattr(route, "path", request.url.path)
        start_time = time.perf_counter()
        status = "500"

        try:
            response = await call_next(request)
            route = request.scope.get("route")
            path = getattr(route, "path", path)
            status = str(response.status_code)
            if response.status_code >= 500:
                REQUEST_ERROR_COUNTER.labels(method=method, path=path, status=status).inc()
            return response
        except Exception:
            REQUEST_ERROR_COUNTER.labels(method=method, path=path, status="500").inc()
            raise
        finally:
            latency = time.perf_counter() - start_time
            REQUEST_LATENCY_SECONDS.labels(method=method, path=path).observe(latency)
            REQUEST_COUNTER.labels(method=method, path=path, status=status).inc()


metrics_router = APIRouter(tags=["observability"])


@metrics_router.get("/metrics", include_in_schema=False)
def metrics_endpoint() -> Response:
    """Expose Prometheus metrics for scraping."""
    payload = generate_latest()
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


def record_vote_toggle(phase: int, action: str) -> None:
    VOTE_TOGGLE_COUNTER.labels(phase=str(phase), action=action).inc()


def record_rejection(operation: str, error: Exception) -> None:
    REJECTED_OPERATIONS_COUNTER.labels(operation=operation, error=type(error).__name__).inc()


__all__ = [
    "NOMINATIONS_COUNTER",
    "POLLS_CLOSED_COUNTER",
    "POLLS_STARTED_COUNTER",
    "PrometheusMiddleware",
    "QUESTIONS_COUNTER",
    "REJECTED_OPERATIONS_COUNTER",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_LATENCY_SECONDS",
    "VOTE_TOGGLE_COUNTER",
    "WINNERS_COUNTER",
    "metrics_endpoint",
    "metrics_router",
    "record_rejection",
    "record_vote_toggle",
]
