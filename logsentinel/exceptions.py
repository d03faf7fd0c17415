"""Application exception hierarchy.

All custom exceptions inherit from LogSentinelError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "LS-1000"
    CONFIGURATION_ERROR = "LS-1001"
    VALIDATION_ERROR = "LS-1002"

    # Embedding errors (3xxx)
    EMBEDDING_UNREACHABLE = "LS-3000"
    EMBEDDING_PROTOCOL = "LS-3001"
    EMBEDDING_SHAPE = "LS-3002"

    # Vector store errors (4xxx)
    VECTOR_STORE_INTERNAL = "LS-4000"
    VECTOR_STORE_UNREACHABLE = "LS-4001"
    VECTOR_STORE_REJECTED = "LS-4002"
    COLLECTION_NOT_FOUND = "LS-4003"


class LogSentinelError(Exception):
    """Base exception for all service errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(LogSentinelError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ValidationError(LogSentinelError):
    """Input validation error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class EmbeddingError(LogSentinelError):
    """Embedding service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.EMBEDDING_PROTOCOL,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class VectorStoreError(LogSentinelError):
    """Vector store operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VECTOR_STORE_INTERNAL,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
