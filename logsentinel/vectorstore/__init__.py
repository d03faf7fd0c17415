"""Vector store module."""

from logsentinel.vectorstore.models import SearchResult, VectorRecord
from logsentinel.vectorstore.service import QdrantVectorStore, VectorStore, classify_error

__all__ = [
    "QdrantVectorStore",
    "SearchResult",
    "VectorRecord",
    "VectorStore",
    "classify_error",
]
