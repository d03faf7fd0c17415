"""Embedding service module."""

from logsentinel.embeddings.models import EmbeddingResult
from logsentinel.embeddings.service import EmbeddingService, OllamaEmbeddingService

__all__ = [
    "EmbeddingResult",
    "EmbeddingService",
    "OllamaEmbeddingService",
]
