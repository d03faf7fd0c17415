"""Vector store data models."""

from typing import Any

from pydantic import BaseModel, Field


class VectorRecord(BaseModel):
    """A record to store in the vector database.

    Attributes:
        id: Unsigned integer point identifier.
        vector: The embedding vector.
        payload: Additional metadata to store with the vector.
    """

    id: int = Field(ge=0, description="Unsigned point identifier")
    vector: list[float] = Field(description="Embedding vector")
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Metadata payload",
    )


class SearchResult(BaseModel):
    """Result from a vector similarity search.

    Attributes:
        id: Point identifier.
        score: Similarity score (higher is more similar).
        payload: Stored metadata, empty when not requested.
    """

    id: int | str = Field(description="Point identifier")
    score: float = Field(description="Similarity score")
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Point metadata",
    )
