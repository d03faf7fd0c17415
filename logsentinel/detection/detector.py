"""Nearest-neighbor anomaly detection."""

from logsentinel.detection.models import AnomalyVerdict
from logsentinel.embeddings.service import EmbeddingService
from logsentinel.exceptions import EmbeddingError, VectorStoreError
from logsentinel.logging_config import get_logger
from logsentinel.observability.metrics import track_verdict
from logsentinel.vectorstore.models import SearchResult
from logsentinel.vectorstore.service import VectorStore

logger = get_logger(__name__)


class AnomalyDetector:
    """Threshold decision on the nearest baseline neighbor.

    A log is normal when its nearest neighbor's similarity is at least the
    threshold. Without a neighbor the log is anomalous with score 0.0.
    """

    def __init__(self, threshold: float = 0.70) -> None:
        """Initialize the decision.

        Args:
            threshold: Minimum similarity for a log to count as normal.
        """
        self._threshold = threshold

    @property
    def threshold(self) -> float:
        """Minimum similarity for a log to count as normal."""
        return self._threshold

    def decide(self, log_entry: str, neighbor: SearchResult | None) -> AnomalyVerdict:
        """Judge a log line by its nearest baseline neighbor.

        Args:
            log_entry: The checked log line, echoed in the verdict.
            neighbor: Nearest baseline entry, or None for an empty baseline.

        Returns:
            AnomalyVerdict; anomalous when the score is below the threshold.
        """
        if neighbor is None:
            return AnomalyVerdict(is_anomalous=True, score=0.0, log_entry=log_entry)

        return AnomalyVerdict(
            is_anomalous=neighbor.score < self._threshold,
            score=neighbor.score,
            log_entry=log_entry,
        )


class SemanticAnomalyDetector:
    """Checks log lines against the baseline collection.

    Embeds the log, fetches its nearest baseline neighbors and applies the
    threshold decision to the closest one.
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        vector_store: VectorStore,
        collection: str,
        detector: AnomalyDetector | None = None,
        top_k: int = 1,
    ) -> None:
        """Initialize the semantic detector.

        Args:
            embedding_service: Service for generating embeddings.
            vector_store: Vector database holding the baseline.
            collection: Name of the baseline collection.
            detector: Threshold decision (default threshold 0.70).
            top_k: Neighbors to fetch; only the nearest one decides.
        """
        self._embedding_service = embedding_service
        self._vector_store = vector_store
        self._collection = collection
        self._detector = detector or AnomalyDetector()
        self._top_k = top_k

    async def check(self, log_entry: str) -> AnomalyVerdict:
        """Check a single log line.

        Args:
            log_entry: The log line to check.

        Returns:
            AnomalyVerdict echoing ``log_entry``.

        Raises:
            EmbeddingError: "Failed to get embedding", wrapping the cause.
            VectorStoreError: "Vector store search failed", wrapping the cause.
        """
        try:
            embedding = await self._embedding_service.embed(log_entry)
        except EmbeddingError as e:
            logger.error(
                f"Failed to get embedding: {e.message}",
                extra={"error_code": e.code.value},
            )
            raise EmbeddingError(
                "Failed to get embedding",
                code=e.code,
                details={"cause": e.message, **e.details},
            ) from e

        try:
            neighbors = await self._vector_store.search(
                collection=self._collection,
                vector=embedding.embedding,
                limit=self._top_k,
                with_payload=True,
            )
        except VectorStoreError as e:
            logger.error(
                f"Vector store search failed: {e.message}",
                extra={"error_code": e.code.value},
            )
            raise VectorStoreError(
                "Vector store search failed",
                code=e.code,
                details={"cause": e.message, **e.details},
            ) from e

        nearest = neighbors[0] if neighbors else None
        verdict = self._detector.decide(log_entry, nearest)
        track_verdict(verdict.is_anomalous, verdict.score, has_neighbor=nearest is not None)

        logger.debug(
            "Checked log entry",
            extra={
                "log_length": len(log_entry),
                "score": verdict.score,
                "is_anomalous": verdict.is_anomalous,
                "nearest_id": nearest.id if nearest else None,
                "nearest_log": nearest.payload.get("log") if nearest else None,
            },
        )
        return verdict
