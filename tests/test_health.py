"""Integration tests for health check endpoints and the startup lifecycle."""

from collections.abc import Awaitable, Callable

import pytest
from httpx import ASGITransport, AsyncClient

from logsentinel import __version__
from logsentinel.api.app import create_app, lifespan
from logsentinel.config import Settings
from logsentinel.embeddings.models import EmbeddingResult
from logsentinel.exceptions import EmbeddingError, ErrorCode, VectorStoreError
from tests.fakes import HashEmbeddingService, InMemoryVectorStore


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    async def test_health_returns_200(self, client: AsyncClient) -> None:
        """Health endpoint returns 200 OK."""
        response = await client.get("/health")
        assert response.status_code == 200

    async def test_health_returns_status(self, client: AsyncClient) -> None:
        """Health endpoint returns healthy status."""
        response = await client.get("/health")
        data = response.json()
        assert data["status"] == "healthy"

    async def test_health_returns_version(self, client: AsyncClient) -> None:
        """Health endpoint returns application version."""
        response = await client.get("/health")
        data = response.json()
        assert data["version"] == __version__

    async def test_health_returns_timestamp(self, client: AsyncClient) -> None:
        """Health endpoint returns ISO timestamp."""
        response = await client.get("/health")
        data = response.json()
        assert "timestamp" in data
        # Verify ISO format (contains T separator)
        assert "T" in data["timestamp"]


class TestReadinessEndpoint:
    """Tests for /health/ready endpoint."""

    async def test_readiness_returns_200(self, client: AsyncClient) -> None:
        """Readiness endpoint returns 200 once the baseline is indexed."""
        response = await client.get("/health/ready")
        assert response.status_code == 200

    async def test_readiness_returns_checks(self, client: AsyncClient) -> None:
        """Readiness endpoint returns component checks."""
        response = await client.get("/health/ready")
        data = response.json()
        assert data["status"] == "ready"
        assert data["checks"] == {"baseline": "ok", "vector_store": "ok"}
        assert "timestamp" in data

    async def test_not_ready_before_startup(
        self,
        settings: Settings,
        embedding_service: HashEmbeddingService,
        vector_store: InMemoryVectorStore,
    ) -> None:
        """Without a baseline the service reports 503."""
        app = create_app(settings, embedding_service=embedding_service, vector_store=vector_store)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["checks"] == {"baseline": "not_initialized"}

    async def test_collection_missing(
        self,
        client: AsyncClient,
        settings: Settings,
        vector_store: InMemoryVectorStore,
    ) -> None:
        """A dropped baseline collection makes the service unready."""
        await vector_store.delete_collection(settings.qdrant.collection_name)

        response = await client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["checks"]["vector_store"] == "collection_missing"

    async def test_baseline_points_lost(
        self,
        client: AsyncClient,
        settings: Settings,
        vector_store: InMemoryVectorStore,
    ) -> None:
        """A collection missing indexed points makes the service unready."""
        _, points = vector_store.collections[settings.qdrant.collection_name]
        del points[0]

        response = await client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["checks"]["vector_store"] == "baseline_incomplete"

    async def test_vector_store_unreachable(
        self,
        client: AsyncClient,
        vector_store: InMemoryVectorStore,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """An unreachable vector store makes the service unready."""

        async def unreachable(name: str) -> bool:
            raise VectorStoreError("down", code=ErrorCode.VECTOR_STORE_UNREACHABLE)

        monkeypatch.setattr(vector_store, "collection_exists", unreachable)

        response = await client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["checks"]["vector_store"] == "unreachable"


class TestLivenessEndpoint:
    """Tests for /health/live endpoint."""

    async def test_liveness_returns_alive(self, client: AsyncClient) -> None:
        """Liveness endpoint returns alive status."""
        response = await client.get("/health/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestLifespan:
    """Tests for baseline indexing during startup."""

    async def test_startup_indexes_seeds(
        self,
        settings: Settings,
        embedding_service: HashEmbeddingService,
        vector_store: InMemoryVectorStore,
    ) -> None:
        """Startup indexes the five seed logs."""
        app = create_app(settings, embedding_service=embedding_service, vector_store=vector_store)

        async with lifespan(app):
            assert app.state.baseline_count == 5
            assert app.state.detector is not None
            assert await vector_store.count(settings.qdrant.collection_name) == 5

        assert app.state.detector is None

    async def test_embedding_failure_aborts_startup(
        self,
        settings: Settings,
        embedding_service: HashEmbeddingService,
        vector_store: InMemoryVectorStore,
    ) -> None:
        """A failing embedder prevents the service from starting."""
        embedding_service.error = EmbeddingError(
            "Connection refused", code=ErrorCode.EMBEDDING_UNREACHABLE
        )
        app = create_app(settings, embedding_service=embedding_service, vector_store=vector_store)

        with pytest.raises(EmbeddingError):
            async with lifespan(app):
                pytest.fail("service started without a baseline")

        assert app.state.detector is None

    async def test_shape_mismatch_aborts_startup(
        self,
        settings: Settings,
        vector_store: InMemoryVectorStore,
    ) -> None:
        """Seed vectors that do not fit the collection abort startup."""
        embedder = HashEmbeddingService()
        embedder.embed_batch = _fixed_batch([1.0, 0.0])  # type: ignore[method-assign]
        app = create_app(settings, embedding_service=embedder, vector_store=vector_store)

        with pytest.raises(VectorStoreError):
            async with lifespan(app):
                pytest.fail("service started with a malformed baseline")


def _fixed_batch(vector: list[float]) -> Callable[[list[str]], Awaitable[list[EmbeddingResult]]]:
    """Batch embedder returning ``vector`` for every text."""

    async def embed_batch(texts: list[str]) -> list[EmbeddingResult]:
        return [
            EmbeddingResult(text=t, embedding=vector, model="fixed")
            for t in texts
        ]

    return embed_batch
