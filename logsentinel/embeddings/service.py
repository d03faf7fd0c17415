"""Embedding service interface and implementations."""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from logsentinel.config import EmbeddingSettings, get_settings
from logsentinel.embeddings.models import EmbeddingResult
from logsentinel.exceptions import EmbeddingError, ErrorCode, ValidationError
from logsentinel.logging_config import get_logger
from logsentinel.observability.metrics import track_embedding_request

logger = get_logger(__name__)


class EmbeddingService(ABC):
    """Abstract base class for embedding services.

    Defines the interface for generating text embeddings.
    """

    @abstractmethod
    async def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text.

        Args:
            text: Text to embed.

        Returns:
            EmbeddingResult with vector.

        Raises:
            EmbeddingError: If embedding fails.
        """
        ...

    @abstractmethod
    async def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Generate embeddings for multiple texts.

        Args:
            texts: List of texts to embed.

        Returns:
            List of EmbeddingResult objects, in input order.

        Raises:
            EmbeddingError: If any embedding fails.
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the service."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name used for embeddings."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Get the embedding dimensions."""
        ...


class OllamaEmbeddingService(EmbeddingService):
    """Embedding service backed by Ollama's ``/api/embeddings`` endpoint.

    Sends ``{"model", "prompt"}`` and expects ``{"embedding": [...]}`` back.
    Every vector is checked against the configured dimensions, so callers
    can rely on a fixed length.
    """

    def __init__(
        self,
        settings: EmbeddingSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Ollama embedding service.

        Args:
            settings: Embedding configuration. Uses defaults if not provided.
            client: HTTP client. Creates new one if not provided.
        """
        self._settings = settings or get_settings().embedding
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.model

    @property
    def dimensions(self) -> int:
        """Get embedding dimensions."""
        return self._settings.dimensions

    async def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text.

        Args:
            text: Text to embed. Must not be blank.

        Returns:
            EmbeddingResult with exactly ``dimensions`` floats.

        Raises:
            ValidationError: If the text is blank.
            EmbeddingError: If the service is unreachable, answers with an
                error or malformed body, or returns a vector of the wrong
                length.
        """
        if not text.strip():
            raise ValidationError("Cannot embed empty text")

        client = await self._get_client()
        start_time = time.perf_counter()
        try:
            result = await self._embed_request(client, text)
        except EmbeddingError:
            track_embedding_request(
                self.model_name, time.perf_counter() - start_time, success=False
            )
            raise

        track_embedding_request(self.model_name, time.perf_counter() - start_time)
        return result

    async def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Generate embeddings for multiple texts.

        The endpoint takes one prompt per call, so requests are issued
        concurrently (bounded by ``max_concurrency``). Results keep the
        order of ``texts``.
        """
        if not texts:
            return []

        semaphore = asyncio.Semaphore(self._settings.max_concurrency)

        async def _bounded(text: str) -> EmbeddingResult:
            async with semaphore:
                return await self.embed(text)

        return list(await asyncio.gather(*(_bounded(text) for text in texts)))

    async def _embed_request(
        self,
        client: httpx.AsyncClient,
        text: str,
    ) -> EmbeddingResult:
        """Make a single embedding request.

        Args:
            client: HTTP client.
            text: Text to embed.

        Returns:
            Validated EmbeddingResult.

        Raises:
            EmbeddingError: If request fails.
        """
        url = self._settings.url
        payload = {
            "model": self._settings.model,
            "prompt": text,
        }

        try:
            response = await client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Embedding request failed: {e.response.status_code}",
                extra={"url": url, "status": e.response.status_code},
            )
            raise EmbeddingError(
                f"Embedding service returned {e.response.status_code}",
                code=ErrorCode.EMBEDDING_PROTOCOL,
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            logger.error(
                f"Embedding request error: {e!r}",
                extra={"url": url},
            )
            raise EmbeddingError(
                f"Failed to connect to embedding service: {e!r}",
                code=ErrorCode.EMBEDDING_UNREACHABLE,
                details={"url": url},
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            raise EmbeddingError(
                f"Invalid JSON from embedding service: {e}",
                code=ErrorCode.EMBEDDING_PROTOCOL,
                details={"error": str(e)},
            ) from e

        return EmbeddingResult.checked(
            text=text,
            embedding=self._parse_embedding(data),
            model=self.model_name,
            expected_dimensions=self.dimensions,
        )

    @staticmethod
    def _parse_embedding(data: Any) -> list[float]:
        """Extract the vector from a decoded response body."""
        embedding = data.get("embedding") if isinstance(data, dict) else None
        if not isinstance(embedding, list):
            raise EmbeddingError(
                "Embedding service response has no 'embedding' list",
                code=ErrorCode.EMBEDDING_PROTOCOL,
            )

        if not all(
            isinstance(value, int | float) and not isinstance(value, bool)
            for value in embedding
        ):
            raise EmbeddingError(
                "Embedding service returned non-numeric values",
                code=ErrorCode.EMBEDDING_PROTOCOL,
            )

        return [float(value) for value in embedding]
