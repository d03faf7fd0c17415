"""FastAPI application entry point.

Configures the application with logging, exception handling, health checks,
metrics and the baseline lifecycle.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from logsentinel import __version__
from logsentinel.api.routes import router
from logsentinel.baseline.initializer import BaselineInitializer
from logsentinel.config import Settings, get_settings
from logsentinel.detection.detector import AnomalyDetector, SemanticAnomalyDetector
from logsentinel.embeddings.service import EmbeddingService, OllamaEmbeddingService
from logsentinel.exceptions import ErrorCode, LogSentinelError, ValidationError, VectorStoreError
from logsentinel.logging_config import get_logger, setup_logging
from logsentinel.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
)
from logsentinel.vectorstore.service import QdrantVectorStore, VectorStore

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds the shared clients, indexes the baseline and tears the clients
    down again on shutdown. A baseline failure aborts startup.
    """
    settings: Settings = app.state.settings
    setup_logging(level=settings.log_level)
    logger.info(
        "Starting log anomaly detector",
        extra={
            "version": __version__,
            "environment": settings.environment.value,
            "bind_address": settings.bind_address,
        },
    )

    owned: list[EmbeddingService | VectorStore] = []
    embedding_service: EmbeddingService | None = app.state.embedding_service
    if embedding_service is None:
        embedding_service = OllamaEmbeddingService(settings.embedding)
        owned.append(embedding_service)
    vector_store: VectorStore | None = app.state.vector_store
    if vector_store is None:
        vector_store = QdrantVectorStore(settings.qdrant)
        owned.append(vector_store)

    try:
        initializer = BaselineInitializer(
            embedding_service=embedding_service,
            vector_store=vector_store,
            collection=settings.qdrant.collection_name,
            distance=settings.qdrant.distance,
        )
        try:
            app.state.baseline_count = await initializer.initialize()
        except LogSentinelError as e:
            logger.error(
                f"Baseline initialization failed: {e.message}",
                extra={"error_code": e.code.value, "details": e.details},
            )
            raise

        app.state.baseline_store = vector_store
        app.state.detector = SemanticAnomalyDetector(
            embedding_service=embedding_service,
            vector_store=vector_store,
            collection=settings.qdrant.collection_name,
            detector=AnomalyDetector(settings.detector.anomaly_threshold),
            top_k=settings.detector.top_k,
        )

        yield

    finally:
        logger.info("Shutting down log anomaly detector")
        app.state.detector = None
        app.state.baseline_store = None
        for service in owned:
            await service.close()


def create_app(
    settings: Settings | None = None,
    embedding_service: EmbeddingService | None = None,
    vector_store: VectorStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings (default from environment).
        embedding_service: Embedding client to use instead of Ollama.
        vector_store: Vector store to use instead of Qdrant.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Log Sentinel",
        description="Semantic log anomaly detection against a known-normal baseline",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.state.settings = settings
    app.state.embedding_service = embedding_service
    app.state.vector_store = vector_store
    app.state.detector = None
    app.state.baseline_count = None
    app.state.baseline_store = None

    app.add_middleware(MetricsMiddleware)

    # Register exception handlers
    app.add_exception_handler(LogSentinelError, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Register routes
    app.include_router(router)
    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/ready", readiness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/live", liveness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], tags=["Metrics"])

    return app


async def app_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle LogSentinelError exceptions.

    Converts exceptions to structured JSON responses.
    """
    if not isinstance(exc, LogSentinelError):
        return JSONResponse(
            status_code=500,
            content={"error": {"code": "LS-1000", "message": str(exc), "details": {}}},
        )

    status_code = _get_status_code(exc.code)
    log = logger.debug if status_code < 500 else logger.error
    log(
        f"Request failed: {exc.message}",
        extra={
            "error_code": exc.code.value,
            "path": request.url.path,
            "details": exc.details,
        },
    )

    return JSONResponse(
        status_code=status_code,
        content=exc.to_dict(),
    )


async def request_validation_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Render malformed request bodies as 400 validation errors."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    simplified = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in errors
    ]
    message = simplified[0]["msg"] if simplified else "Invalid request"
    return await app_exception_handler(
        request,
        ValidationError(f"Invalid request: {message}", details={"errors": simplified}),
    )


def _get_status_code(error_code: ErrorCode) -> int:
    """Map error code to HTTP status code."""
    if error_code == ErrorCode.VALIDATION_ERROR:
        return 400

    # Upstream and internal failures -> 500
    return 500


async def health_check() -> dict[str, Any]:
    """Basic health check endpoint.

    Returns:
        Health status with version and timestamp.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe.

    Ready once the baseline is indexed and its collection still holds
    every indexed point.

    Returns:
        Readiness status with component checks (503 when not ready).
    """
    state = request.app.state
    baseline_count: int | None = getattr(state, "baseline_count", None)
    checks: dict[str, str] = {
        "baseline": "ok" if baseline_count is not None else "not_initialized",
    }

    vector_store: VectorStore | None = getattr(state, "baseline_store", None)
    if baseline_count is not None and vector_store is not None:
        collection = state.settings.qdrant.collection_name
        try:
            if not await vector_store.collection_exists(collection):
                checks["vector_store"] = "collection_missing"
            elif await vector_store.count(collection) != baseline_count:
                checks["vector_store"] = "baseline_incomplete"
            else:
                checks["vector_store"] = "ok"
        except VectorStoreError as e:
            logger.warning(f"Readiness check failed: {e.message}")
            checks["vector_store"] = "unreachable"

    all_ok = all(v == "ok" for v in checks.values())

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ready" if all_ok else "not_ready",
            "checks": checks,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )


async def liveness_check() -> dict[str, str]:
    """Liveness probe.

    Returns:
        Liveness status.
    """
    return {"status": "alive"}


async def metrics_endpoint() -> Response:
    """Expose Prometheus metrics."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


# Create the application instance
app = create_app()
