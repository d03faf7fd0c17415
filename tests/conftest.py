"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from logsentinel.api.app import create_app, lifespan
from logsentinel.config import DetectorSettings, EmbeddingSettings, QdrantSettings, Settings
from tests.fakes import TEST_DIMENSIONS, HashEmbeddingService, InMemoryVectorStore


@pytest.fixture
def settings() -> Settings:
    """Settings sized for the 4-dimensional test embedder."""
    return Settings(
        embedding=EmbeddingSettings(dimensions=TEST_DIMENSIONS),
        qdrant=QdrantSettings(collection_name="test_baseline"),
        detector=DetectorSettings(anomaly_threshold=0.70),
    )


@pytest.fixture
def embedding_service() -> HashEmbeddingService:
    """Hash embedder with orthogonal vectors for the seeds A, B, C."""
    return HashEmbeddingService(
        vectors={
            "A": [1.0, 0.0, 0.0, 0.0],
            "B": [0.0, 1.0, 0.0, 0.0],
            "C": [0.0, 0.0, 1.0, 0.0],
            "ZZZZZZZ": [0.0, 0.0, 0.0, 1.0],
        }
    )


@pytest.fixture
def vector_store() -> InMemoryVectorStore:
    """Empty in-memory vector store."""
    return InMemoryVectorStore()


@pytest.fixture
async def client(
    settings: Settings,
    embedding_service: HashEmbeddingService,
    vector_store: InMemoryVectorStore,
) -> AsyncGenerator[AsyncClient, None]:
    """Async test client for an app whose baseline has been indexed.

    Yields:
        AsyncClient configured for testing.
    """
    app = create_app(settings, embedding_service=embedding_service, vector_store=vector_store)
    async with lifespan(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
