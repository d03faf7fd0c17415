"""Tests for application exceptions."""

from logsentinel.exceptions import (
    ConfigurationError,
    EmbeddingError,
    ErrorCode,
    LogSentinelError,
    ValidationError,
    VectorStoreError,
)


class TestErrorCode:
    """Tests for error codes."""

    def test_error_code_format(self) -> None:
        """Error codes follow LS-XXXX format."""
        for code in ErrorCode:
            assert code.value.startswith("LS-")
            assert len(code.value) == 7  # LS-XXXX

    def test_error_code_uniqueness(self) -> None:
        """All error codes are unique."""
        codes = [code.value for code in ErrorCode]
        assert len(codes) == len(set(codes))


class TestLogSentinelError:
    """Tests for base exception."""

    def test_basic_exception(self) -> None:
        """Base exception stores message and code."""
        error = LogSentinelError("Something went wrong")
        assert error.message == "Something went wrong"
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.details == {}

    def test_to_dict(self) -> None:
        """Exception converts to API response dict."""
        error = LogSentinelError(
            "Something went wrong",
            code=ErrorCode.INTERNAL_ERROR,
            details={"trace_id": "abc123"},
        )
        result = error.to_dict()

        assert result == {
            "error": {
                "code": "LS-1000",
                "message": "Something went wrong",
                "details": {"trace_id": "abc123"},
            }
        }

    def test_str_representation(self) -> None:
        """Exception string is the message."""
        error = LogSentinelError("Test error")
        assert str(error) == "Test error"


class TestConfigurationError:
    """Tests for configuration exception."""

    def test_default_code(self) -> None:
        """ConfigurationError has correct default code."""
        error = ConfigurationError("Missing env var")
        assert error.code == ErrorCode.CONFIGURATION_ERROR
        assert isinstance(error, LogSentinelError)


class TestValidationError:
    """Tests for validation exception."""

    def test_default_code(self) -> None:
        """ValidationError has correct default code."""
        error = ValidationError("Invalid input")
        assert error.code == ErrorCode.VALIDATION_ERROR


class TestEmbeddingError:
    """Tests for embedding exception."""

    def test_default_code(self) -> None:
        """EmbeddingError defaults to a protocol failure."""
        error = EmbeddingError("Bad response")
        assert error.code == ErrorCode.EMBEDDING_PROTOCOL

    def test_custom_code(self) -> None:
        """EmbeddingError can carry the transport and shape kinds."""
        assert EmbeddingError("down", code=ErrorCode.EMBEDDING_UNREACHABLE).code == (
            ErrorCode.EMBEDDING_UNREACHABLE
        )
        assert EmbeddingError("short", code=ErrorCode.EMBEDDING_SHAPE).code == (
            ErrorCode.EMBEDDING_SHAPE
        )


class TestVectorStoreError:
    """Tests for vector store exception."""

    def test_default_code(self) -> None:
        """VectorStoreError defaults to an internal failure."""
        error = VectorStoreError("Unexpected")
        assert error.code == ErrorCode.VECTOR_STORE_INTERNAL

    def test_custom_code(self) -> None:
        """VectorStoreError can have custom code."""
        error = VectorStoreError(
            "Collection not found",
            code=ErrorCode.COLLECTION_NOT_FOUND,
        )
        assert error.code == ErrorCode.COLLECTION_NOT_FOUND
