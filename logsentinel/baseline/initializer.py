"""Startup routine that (re)builds the baseline collection."""

from collections.abc import Sequence

from qdrant_client.models import Distance

from logsentinel.baseline.seeds import SEED_LOGS
from logsentinel.embeddings.service import EmbeddingService
from logsentinel.logging_config import get_logger
from logsentinel.observability.metrics import set_baseline_size
from logsentinel.vectorstore.models import VectorRecord
from logsentinel.vectorstore.service import VectorStore

logger = get_logger(__name__)


class BaselineInitializer:
    """Recreates the baseline collection and indexes the seed logs.

    Runs once per process, before the API accepts traffic. Any failure
    propagates so the process refuses to serve on a partial baseline.
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        vector_store: VectorStore,
        collection: str,
        distance: Distance = Distance.COSINE,
        seeds: Sequence[str] = SEED_LOGS,
    ) -> None:
        """Initialize the baseline initializer.

        Args:
            embedding_service: Service for generating embeddings.
            vector_store: Vector database holding the baseline.
            collection: Name of the baseline collection.
            distance: Distance metric of the collection.
            seeds: Known-normal log lines, in ID order.
        """
        self._embedding_service = embedding_service
        self._vector_store = vector_store
        self._collection = collection
        self._distance = distance
        self._seeds = list(seeds)

    async def build_records(self) -> list[VectorRecord]:
        """Embed every seed and wrap it as a point keyed by its index."""
        results = await self._embedding_service.embed_batch(self._seeds)
        return [
            VectorRecord(id=i, vector=result.embedding, payload={"log": seed})
            for i, (seed, result) in enumerate(zip(self._seeds, results, strict=True))
        ]

    async def initialize(self) -> int:
        """Replace the collection and upsert the seed points.

        Returns:
            Number of seed logs indexed.

        Raises:
            EmbeddingError: If any seed cannot be embedded.
            VectorStoreError: If the collection cannot be replaced or the
                upsert fails.
        """
        await self._vector_store.replace_collection(
            self._collection,
            self._embedding_service.dimensions,
            self._distance,
        )

        records = await self.build_records()
        count = await self._vector_store.upsert(self._collection, records, wait=True)

        set_baseline_size(count)
        logger.info(
            f"Successfully indexed {count} normal log entries",
            extra={"collection": self._collection, "count": count},
        )
        return count
