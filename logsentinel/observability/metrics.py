"""Prometheus metrics for the detection service.

Provides metrics instrumentation for:
- HTTP request latency and counts
- Embedding request latency
- Vector store operation latency
- Verdict outcomes and nearest-neighbor scores
- Baseline size
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

# HTTP Request Metrics
HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

HTTP_REQUEST_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

# Embedding Metrics
EMBEDDING_REQUEST_DURATION = Histogram(
    "embedding_request_duration_seconds",
    "Embedding request duration in seconds",
    ["model", "status"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

EMBEDDING_REQUEST_TOTAL = Counter(
    "embedding_requests_total",
    "Total embedding requests",
    ["model", "status"],
)

# Vector Store Metrics
VECTORSTORE_OPERATION_DURATION = Histogram(
    "vectorstore_operation_duration_seconds",
    "Vector store operation duration",
    ["operation", "status"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0],
)

# Detection Metrics
VERDICT_TOTAL = Counter(
    "log_verdicts_total",
    "Total log verdicts",
    ["outcome"],  # "outcome" label values: normal, anomalous
)

NEAREST_NEIGHBOR_SCORE = Histogram(
    "log_nearest_neighbor_score",
    "Similarity of each checked log to its nearest baseline entry",
    buckets=[-0.5, 0.0, 0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0],
)

BASELINE_POINTS = Gauge(
    "baseline_points",
    "Number of baseline log entries indexed at startup",
)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics."""

    def __init__(self, app: ASGIApp) -> None:
        """Initialize the middleware."""
        super().__init__(app)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and collect metrics."""
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()

        response = await call_next(request)

        duration = time.perf_counter() - start_time
        endpoint = self._normalize_endpoint(request.url.path)

        HTTP_REQUEST_DURATION.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).observe(duration)

        HTTP_REQUEST_TOTAL.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        return response

    def _normalize_endpoint(self, path: str) -> str:
        """Normalize endpoint path to reduce cardinality."""
        if path.startswith("/health"):
            return "/health"
        if path == "/check_log":
            return path
        return "other"


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST


def track_embedding_request(
    model: str,
    duration: float,
    success: bool = True,
) -> None:
    """Track embedding request metrics.

    Args:
        model: Embedding model name.
        duration: Request duration in seconds.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    EMBEDDING_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    EMBEDDING_REQUEST_TOTAL.labels(model=model, status=status).inc()


def track_vectorstore_operation(
    operation: str,
    duration: float,
    success: bool = True,
) -> None:
    """Track a vector store call.

    Args:
        operation: Operation name (search, upsert, ...).
        duration: Call duration in seconds.
        success: Whether the call succeeded.
    """
    status = "success" if success else "error"
    VECTORSTORE_OPERATION_DURATION.labels(operation=operation, status=status).observe(
        duration
    )


def track_verdict(is_anomalous: bool, score: float, has_neighbor: bool = True) -> None:
    """Track a detection verdict.

    Args:
        is_anomalous: Verdict outcome.
        score: Nearest-neighbor similarity.
        has_neighbor: False when the baseline returned no neighbor.
    """
    VERDICT_TOTAL.labels(outcome="anomalous" if is_anomalous else "normal").inc()
    if has_neighbor:
        NEAREST_NEIGHBOR_SCORE.observe(score)


def set_baseline_size(count: int) -> None:
    """Record how many baseline entries were indexed."""
    BASELINE_POINTS.set(count)
