"""Vector store interface and Qdrant implementation."""

import time
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import grpc
import httpx
from qdrant_client import AsyncQdrantClient
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse
from qdrant_client.models import Distance, PointStruct, VectorParams

from logsentinel.config import QdrantSettings, get_settings
from logsentinel.exceptions import ErrorCode, VectorStoreError
from logsentinel.logging_config import get_logger
from logsentinel.observability.metrics import track_vectorstore_operation
from logsentinel.vectorstore.models import SearchResult, VectorRecord

logger = get_logger(__name__)

_GRPC_UNREACHABLE = frozenset(
    {grpc.StatusCode.UNAVAILABLE, grpc.StatusCode.DEADLINE_EXCEEDED}
)
_GRPC_REJECTED = frozenset(
    {
        grpc.StatusCode.INVALID_ARGUMENT,
        grpc.StatusCode.FAILED_PRECONDITION,
        grpc.StatusCode.ALREADY_EXISTS,
        grpc.StatusCode.OUT_OF_RANGE,
        grpc.StatusCode.PERMISSION_DENIED,
        grpc.StatusCode.UNAUTHENTICATED,
    }
)


class VectorStore(ABC):
    """Abstract base class for vector stores.

    Defines the interface for storing and searching vectors.
    """

    @abstractmethod
    async def create_collection(
        self,
        name: str,
        dimensions: int,
        distance: Distance = Distance.COSINE,
    ) -> None:
        """Create a new collection.

        Raises:
            VectorStoreError: If creation fails.
        """
        ...

    @abstractmethod
    async def delete_collection(self, name: str) -> None:
        """Delete a collection.

        Raises:
            VectorStoreError: With ``COLLECTION_NOT_FOUND`` if it does not
                exist, or another code if deletion fails.
        """
        ...

    @abstractmethod
    async def collection_exists(self, name: str) -> bool:
        """Check if a collection exists."""
        ...

    async def replace_collection(
        self,
        name: str,
        dimensions: int,
        distance: Distance = Distance.COSINE,
    ) -> None:
        """Drop any collection called ``name`` and create it afresh.

        A missing collection is not an error; any other deletion failure
        (store unreachable, rejected request) propagates.

        Args:
            name: Collection name.
            dimensions: Vector dimensions.
            distance: Distance metric.

        Raises:
            VectorStoreError: If deletion or creation fails.
        """
        try:
            await self.delete_collection(name)
        except VectorStoreError as e:
            if e.code != ErrorCode.COLLECTION_NOT_FOUND:
                raise
            logger.debug(f"No previous collection to delete: {name}")

        await self.create_collection(name, dimensions, distance)

    @abstractmethod
    async def upsert(
        self,
        collection: str,
        records: list[VectorRecord],
        wait: bool = True,
    ) -> int:
        """Insert or overwrite records by ID.

        Args:
            collection: Collection name.
            records: Records to upsert.
            wait: Return only once the store has applied the batch.

        Returns:
            Number of records upserted.

        Raises:
            VectorStoreError: If upsert fails.
        """
        ...

    @abstractmethod
    async def search(
        self,
        collection: str,
        vector: list[float],
        limit: int = 1,
        with_payload: bool = True,
    ) -> list[SearchResult]:
        """Search for the nearest vectors.

        Args:
            collection: Collection name.
            vector: Query vector.
            limit: Maximum results to return.
            with_payload: Include stored payloads in the results.

        Returns:
            Results ordered by descending similarity.

        Raises:
            VectorStoreError: If search fails.
        """
        ...

    @abstractmethod
    async def count(self, collection: str) -> int:
        """Return the exact number of points in a collection."""
        ...

    async def close(self) -> None:
        """Release any resources held by the store."""


def classify_error(exc: Exception, operation: str, collection: str) -> VectorStoreError:
    """Translate a Qdrant client exception into a VectorStoreError.

    Args:
        exc: Exception raised by the client.
        operation: Name of the failed operation.
        collection: Collection the operation targeted.

    Returns:
        VectorStoreError with an unreachable, rejected, not-found or
        internal code.
    """
    details: dict[str, object] = {
        "collection": collection,
        "operation": operation,
        "error": str(exc),
    }

    if isinstance(exc, UnexpectedResponse):
        status = exc.status_code
        details["status_code"] = status
        if status == 404:
            code = ErrorCode.COLLECTION_NOT_FOUND
        elif status is not None and 400 <= status < 500:
            code = ErrorCode.VECTOR_STORE_REJECTED
        else:
            code = ErrorCode.VECTOR_STORE_INTERNAL
    elif isinstance(exc, grpc.aio.AioRpcError):
        status_code = exc.code()
        details["grpc_status"] = status_code.name
        if status_code in _GRPC_UNREACHABLE:
            code = ErrorCode.VECTOR_STORE_UNREACHABLE
        elif status_code == grpc.StatusCode.NOT_FOUND:
            code = ErrorCode.COLLECTION_NOT_FOUND
        elif status_code in _GRPC_REJECTED:
            code = ErrorCode.VECTOR_STORE_REJECTED
        else:
            code = ErrorCode.VECTOR_STORE_INTERNAL
    elif isinstance(
        exc, ResponseHandlingException | httpx.TransportError | ConnectionError | TimeoutError
    ):
        code = ErrorCode.VECTOR_STORE_UNREACHABLE
    else:
        code = ErrorCode.VECTOR_STORE_INTERNAL

    return VectorStoreError(f"Failed to {operation}: {exc}", code=code, details=details)


class QdrantVectorStore(VectorStore):
    """Qdrant vector store implementation."""

    def __init__(
        self,
        settings: QdrantSettings | None = None,
        client: AsyncQdrantClient | None = None,
    ) -> None:
        """Initialize Qdrant vector store.

        Args:
            settings: Qdrant configuration.
            client: Existing client (for testing).
        """
        self._settings = settings or get_settings().qdrant
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> AsyncQdrantClient:
        """Get or create Qdrant client."""
        if self._client is None:
            api_key = None
            if self._settings.api_key:
                api_key = self._settings.api_key.get_secret_value()

            self._client = AsyncQdrantClient(
                url=self._settings.url,
                api_key=api_key,
                prefer_grpc=self._settings.prefer_grpc,
                timeout=self._settings.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the Qdrant client."""
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None

    @asynccontextmanager
    async def _operation(self, operation: str, collection: str) -> AsyncIterator[None]:
        """Time a client call and translate its failures."""
        start_time = time.perf_counter()
        try:
            yield
        except Exception as e:
            track_vectorstore_operation(
                operation, time.perf_counter() - start_time, success=False
            )
            if isinstance(e, VectorStoreError):
                raise
            raise classify_error(e, operation, collection) from e

        track_vectorstore_operation(operation, time.perf_counter() - start_time)

    async def create_collection(
        self,
        name: str,
        dimensions: int,
        distance: Distance = Distance.COSINE,
    ) -> None:
        """Create a new Qdrant collection."""
        client = await self._get_client()

        async with self._operation("create collection", name):
            await client.create_collection(
                collection_name=name,
                vectors_config=VectorParams(size=dimensions, distance=distance),
            )

        logger.info(
            f"Created collection: {name}",
            extra={"dimensions": dimensions, "distance": str(distance)},
        )

    async def delete_collection(self, name: str) -> None:
        """Delete a Qdrant collection."""
        client = await self._get_client()

        async with self._operation("delete collection", name):
            deleted = await client.delete_collection(name)

        # Recorded as a successful call; absence is reported to the caller
        if deleted is False:
            raise VectorStoreError(
                f"Collection not found: {name}",
                code=ErrorCode.COLLECTION_NOT_FOUND,
                details={"collection": name},
            )

        logger.info(f"Deleted collection: {name}")

    async def collection_exists(self, name: str) -> bool:
        """Check if collection exists."""
        client = await self._get_client()
        async with self._operation("check collection", name):
            return await client.collection_exists(name)

    async def upsert(
        self,
        collection: str,
        records: list[VectorRecord],
        wait: bool = True,
    ) -> int:
        """Upsert records into collection."""
        if not records:
            return 0

        client = await self._get_client()
        points = [
            PointStruct(id=record.id, vector=record.vector, payload=record.payload)
            for record in records
        ]

        async with self._operation("upsert", collection):
            await client.upsert(
                collection_name=collection,
                points=points,
                wait=wait,
            )

        logger.debug(
            f"Upserted {len(points)} records",
            extra={"collection": collection, "wait": wait},
        )
        return len(points)

    async def search(
        self,
        collection: str,
        vector: list[float],
        limit: int = 1,
        with_payload: bool = True,
    ) -> list[SearchResult]:
        """Search for the nearest vectors."""
        client = await self._get_client()

        async with self._operation("search", collection):
            results = await client.query_points(
                collection_name=collection,
                query=vector,
                limit=limit,
                with_payload=with_payload,
            )

        return [
            SearchResult(
                id=point.id,
                score=point.score if point.score is not None else 0.0,
                payload=dict(point.payload) if point.payload else {},
            )
            for point in results.points
        ]

    async def count(self, collection: str) -> int:
        """Return the exact number of points in a collection."""
        client = await self._get_client()
        async with self._operation("count", collection):
            result = await client.count(collection_name=collection, exact=True)
        return result.count
