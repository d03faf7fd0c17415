"""Observability module for metrics and monitoring."""

from logsentinel.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
    set_baseline_size,
    track_embedding_request,
    track_vectorstore_operation,
    track_verdict,
)

__all__ = [
    "MetricsMiddleware",
    "get_metrics",
    "get_metrics_content_type",
    "set_baseline_size",
    "track_embedding_request",
    "track_vectorstore_operation",
    "track_verdict",
]
