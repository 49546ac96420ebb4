"""Pinecone vector store provider adapter.

Wraps the ``pinecone`` client to implement :class:`IVectorStoreProvider`
against managed serverless indexes.  Each docsearch index name is one
Pinecone index; chunk text is stored in the vector metadata under
``text`` since Pinecone has no separate document field.

The Pinecone SDK is synchronous, so every call runs in a worker thread to
keep the event loop free while a background bootstrap is writing.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from pinecone import Pinecone, ServerlessSpec

from docsearch.interfaces.vector_store_provider import IVectorStoreProvider
from docsearch.models.documents import QueryMatch, UpsertRecord
from docsearch.utils.errors import ConnectionTimeoutError, VectorStoreError

logger = structlog.get_logger(logger_name=__name__)

_TEXT_METADATA_KEY = "text"


def _is_timeout(exc: BaseException) -> bool:
    """Return ``True`` if *exc* or anything it wraps is a timeout.

    The SDK surfaces transport timeouts wrapped in retry errors, so the
    cause chain (and urllib3's ``reason``) is walked by class name.
    """
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, TimeoutError) or "Timeout" in type(current).__name__:
            return True
        reason = getattr(current, "reason", None)
        current = (
            reason
            if isinstance(reason, BaseException)
            else (current.__cause__ or current.__context__)
        )
    return False


class PineconeProvider(IVectorStoreProvider):
    """Vector store provider backed by Pinecone serverless indexes.

    Parameters
    ----------
    api_key:
        Pinecone API key.
    cloud, region:
        Serverless placement used when an index has to be created.
    metric:
        Similarity metric for new indexes.
    client:
        Pre-built ``Pinecone`` client; built from *api_key* when omitted.
    """

    def __init__(
        self,
        api_key: str,
        cloud: str = "aws",
        region: str = "us-east-1",
        metric: str = "cosine",
        client: Any | None = None,
    ) -> None:
        self._api_key = api_key
        self._cloud = cloud
        self._region = region
        self._metric = metric
        self._client = client or Pinecone(api_key=api_key)
        # Index handles by name.
        self._indexes: dict[str, Any] = {}

    # ------------------------------------------------------------------
    # IVectorStoreProvider implementation
    # ------------------------------------------------------------------

    async def create_index_if_absent(self, index_name: str, dimension: int) -> bool:
        """Create a serverless index named *index_name* unless one exists."""

        def _ensure() -> bool:
            existing_names = [idx.name for idx in self._client.list_indexes()]
            if index_name in existing_names:
                return False
            self._client.create_index(
                name=index_name,
                dimension=dimension,
                metric=self._metric,
                spec=ServerlessSpec(cloud=self._cloud, region=self._region),
            )
            return True

        created = await self._call("create_index", _ensure)
        if created:
            logger.info(
                "pinecone_index_created",
                index_name=index_name,
                dimension=dimension,
                cloud=self._cloud,
                region=self._region,
            )
        return created

    async def has_vectors(self, index_name: str) -> bool:
        stats = await self._call(
            "describe_index_stats", lambda: self._index(index_name).describe_index_stats()
        )
        count = int(getattr(stats, "total_vector_count", 0) or 0)
        logger.debug("pinecone_index_stats", index_name=index_name, count=count)
        return count > 0

    async def upsert(self, index_name: str, records: list[UpsertRecord]) -> int:
        """Upsert *records* in one request; chunk text goes to metadata ``text``."""
        if not records:
            return 0
        vectors = [
            {
                "id": record.id,
                "values": record.vector,
                "metadata": {**record.metadata, _TEXT_METADATA_KEY: record.content},
            }
            for record in records
        ]
        response = await self._call(
            "upsert", lambda: self._index(index_name).upsert(vectors=vectors)
        )
        written = getattr(response, "upserted_count", None)
        written = len(records) if written is None else int(written)
        logger.info("pinecone_upsert", index_name=index_name, count=written)
        return written

    async def query(
        self,
        index_name: str,
        vector: list[float],
        top_k: int = 10,
        filters: dict[str, Any] | None = None,
    ) -> list[QueryMatch]:
        kwargs: dict[str, Any] = {
            "vector": vector,
            "top_k": top_k,
            "include_metadata": True,
        }
        if filters:
            kwargs["filter"] = filters

        response = await self._call("query", lambda: self._index(index_name).query(**kwargs))

        matches: list[QueryMatch] = []
        for match in getattr(response, "matches", None) or []:
            metadata = dict(match.metadata or {})
            content = metadata.pop(_TEXT_METADATA_KEY, None)
            matches.append(
                QueryMatch(id=match.id, score=float(match.score), metadata=metadata, content=content)
            )
        logger.info("pinecone_query", index_name=index_name, results_count=len(matches))
        return matches

    def get_provider_name(self) -> str:
        return "pinecone"

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
        return bool(self._api_key)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _index(self, index_name: str) -> Any:
        if index_name not in self._indexes:
            self._indexes[index_name] = self._client.Index(index_name)
        return self._indexes[index_name]

    async def _call(self, operation: str, fn: Any) -> Any:
        """Run a blocking SDK call in a thread, translating its errors."""
        try:
            return await asyncio.to_thread(fn)
        except Exception as exc:
            if _is_timeout(exc):
                raise ConnectionTimeoutError(provider_name=self.get_provider_name()) from exc
            raise VectorStoreError(
                message=f"Pinecone {operation} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
