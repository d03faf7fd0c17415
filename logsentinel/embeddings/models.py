"""Embedding data models."""

from pydantic import BaseModel, Field

from logsentinel.exceptions import EmbeddingError, ErrorCode


class EmbeddingResult(BaseModel):
    """Vector produced for one log line.

    Attributes:
        text: The log line that was embedded.
        embedding: The embedding vector.
        model: The model that produced it.
    """

    text: str = Field(description="Embedded log line")
    embedding: list[float] = Field(description="Embedding vector")
    model: str = Field(description="Model used for embedding")

    @property
    def dimensions(self) -> int:
        """Length of the vector."""
        return len(self.embedding)

    @classmethod
    def checked(
        cls,
        text: str,
        embedding: list[float],
        model: str,
        expected_dimensions: int,
    ) -> "EmbeddingResult":
        """Build a result, insisting on the configured vector length.

        Raises:
            EmbeddingError: EMBEDDING_SHAPE when the length differs.
        """
        if len(embedding) != expected_dimensions:
            raise EmbeddingError(
                f"Embedding has {len(embedding)} dimensions, expected {expected_dimensions}",
                code=ErrorCode.EMBEDDING_SHAPE,
                details={
                    "model": model,
                    "expected": expected_dimensions,
                    "actual": len(embedding),
                },
            )
        return cls(text=text, embedding=embedding, model=model)
