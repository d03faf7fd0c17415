"""Tests for observability module."""

from httpx import AsyncClient

from logsentinel.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    set_baseline_size,
    track_embedding_request,
    track_vectorstore_operation,
    track_verdict,
)


class TestMetricsEndpoint:
    """Tests for /metrics endpoint."""

    async def test_metrics_endpoint_returns_prometheus_format(self, client: AsyncClient) -> None:
        """Metrics endpoint returns Prometheus format."""
        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert b"# HELP" in response.content

    async def test_metrics_include_baseline_size(self, client: AsyncClient) -> None:
        """Startup publishes the number of indexed seeds."""
        response = await client.get("/metrics")

        assert "baseline_points 5.0" in response.text


class TestMetricsFunctions:
    """Tests for metrics tracking functions."""

    def test_get_metrics_returns_bytes(self) -> None:
        """get_metrics returns bytes."""
        metrics = get_metrics()
        assert isinstance(metrics, bytes)

    def test_track_embedding_request(self) -> None:
        """track_embedding_request records request."""
        track_embedding_request(model="bge-m3", duration=0.1, success=True)
        track_embedding_request(model="bge-m3", duration=0.2, success=False)

        metrics = get_metrics().decode()
        assert "embedding_request_duration_seconds" in metrics
        assert 'embedding_requests_total{model="bge-m3",status="error"}' in metrics

    def test_track_vectorstore_operation(self) -> None:
        """track_vectorstore_operation records the call."""
        track_vectorstore_operation(operation="search", duration=0.01)

        metrics = get_metrics().decode()
        assert 'vectorstore_operation_duration_seconds_count{operation="search",status="success"}' in metrics

    def test_track_verdict(self) -> None:
        """track_verdict counts outcomes and observes scores."""
        track_verdict(is_anomalous=True, score=0.3)
        track_verdict(is_anomalous=False, score=0.9)

        metrics = get_metrics().decode()
        assert 'log_verdicts_total{outcome="anomalous"}' in metrics
        assert 'log_verdicts_total{outcome="normal"}' in metrics
        assert "log_nearest_neighbor_score_bucket" in metrics

    def test_track_verdict_without_neighbor_skips_score(self) -> None:
        """An empty baseline counts the verdict but observes no score."""
        before = get_metrics().decode()
        before_count = _sample(before, "log_nearest_neighbor_score_count")

        track_verdict(is_anomalous=True, score=0.0, has_neighbor=False)

        after_count = _sample(get_metrics().decode(), "log_nearest_neighbor_score_count")
        assert after_count == before_count

    def test_set_baseline_size(self) -> None:
        """set_baseline_size sets the gauge."""
        set_baseline_size(3)
        assert "baseline_points 3.0" in get_metrics().decode()


class TestMetricsMiddleware:
    """Tests for MetricsMiddleware."""

    async def test_middleware_records_request_metrics(self, client: AsyncClient) -> None:
        """Middleware records HTTP request metrics."""
        await client.post("/check_log", json={"log_entry": "INFO: hello"})

        metrics = get_metrics().decode()
        assert "http_request_duration_seconds" in metrics
        assert 'endpoint="/check_log"' in metrics

    def test_normalize_endpoint(self) -> None:
        """Paths collapse to a small label set."""
        middleware = MetricsMiddleware(app=None)  # type: ignore[arg-type]

        assert middleware._normalize_endpoint("/health/ready") == "/health"
        assert middleware._normalize_endpoint("/health/live") == "/health"
        assert middleware._normalize_endpoint("/check_log") == "/check_log"
        assert middleware._normalize_endpoint("/admin/secret") == "other"


def _sample(metrics: str, name: str) -> float:
    """Value of an unlabelled sample in exposition text (0 if absent)."""
    for line in metrics.splitlines():
        if line.startswith(f"{name} "):
            return float(line.split()[1])
    return 0.0
