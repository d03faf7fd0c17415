"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from qdrant_client.models import Distance


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class EmbeddingSettings(BaseSettings):
    """Embedding service configuration.

    Defaults target a local Ollama server running bge-m3.
    """

    model_config = SettingsConfigDict(env_prefix="EMBEDDING_")

    url: str = Field(
        default="http://localhost:11434/api/embeddings",
        description="Embedding endpoint URL",
    )
    model: str = Field(
        default="bge-m3",
        description="Embedding model name",
    )
    dimensions: int = Field(
        default=1024,
        gt=0,
        description="Expected embedding length (must match the model)",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds",
    )
    max_concurrency: int = Field(
        default=4,
        ge=1,
        description="Parallel embedding requests during baseline ingestion",
    )


class QdrantSettings(BaseSettings):
    """Qdrant vector database configuration."""

    model_config = SettingsConfigDict(env_prefix="QDRANT_")

    url: str = Field(
        default="http://localhost:6334",
        description="Qdrant server URL",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Qdrant API key (optional for local)",
    )
    collection_name: str = Field(
        default="normal_server_logs_axum",
        description="Baseline collection name",
    )
    prefer_grpc: bool = Field(
        default=True,
        description="Use the gRPC interface (port 6334) instead of REST",
    )
    timeout: int = Field(
        default=10,
        gt=0,
        description="Request timeout in seconds",
    )
    distance: Distance = Field(
        default=Distance.COSINE,
        description="Distance metric of the baseline collection",
    )


class DetectorSettings(BaseSettings):
    """Anomaly decision configuration.

    The threshold is calibrated for the default embedding model and must be
    revisited whenever the model changes.
    """

    model_config = SettingsConfigDict(env_prefix="DETECTOR_")

    anomaly_threshold: float = Field(
        default=0.70,
        ge=-1.0,
        le=1.0,
        description="Minimum similarity for a log to count as normal",
    )
    top_k: int = Field(
        default=1,
        ge=1,
        description="Neighbors fetched per query (only the nearest decides)",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # API settings
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8080,
        description="API server port",
    )

    # Nested settings
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    qdrant: QdrantSettings = Field(default_factory=QdrantSettings)
    detector: DetectorSettings = Field(default_factory=DetectorSettings)

    @property
    def bind_address(self) -> str:
        """Socket address the API server listens on."""
        return f"{self.api_host}:{self.api_port}"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
