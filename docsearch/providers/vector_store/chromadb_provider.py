"""ChromaDB vector store provider adapter.

Wraps `chromadb.PersistentClient` to implement :class:`IVectorStoreProvider`.
Each index name maps to one collection using cosine distance.  Fully local,
free, and Python-native, so no external service is required; this is the
default backend for development and tests against real storage.
"""

from __future__ import annotations

import os
from typing import Any

# Disable ChromaDB telemetry before importing chromadb.  The env var is
# respected by some ChromaDB versions; Settings(anonymized_telemetry=False)
# passed to the client below is authoritative.
os.environ["ANONYMIZED_TELEMETRY"] = "False"

import chromadb
import structlog

from docsearch.interfaces.vector_store_provider import IVectorStoreProvider
from docsearch.models.documents import QueryMatch, UpsertRecord
from docsearch.utils.errors import VectorStoreError

logger = structlog.get_logger(logger_name=__name__)


class _NoopEmbeddingFunction(chromadb.EmbeddingFunction[list[str]]):
    """No-op embedding function that prevents ChromaDB from loading a model.

    docsearch always passes pre-computed embeddings, so ChromaDB's built-in
    embedding is never invoked.  Without this, ChromaDB downloads and loads
    its default ONNX model on collection creation.
    """

    def __call__(self, input: list[str]) -> list[list[float]]:
        raise NotImplementedError(
            "docsearch uses pre-computed embeddings; "
            "ChromaDB's built-in embedding should never be called."
        )

    def name(self) -> str:
        """Return function name (required by ChromaDB's EmbeddingFunction protocol)."""
        return "noop_precomputed"


class ChromaDBProvider(IVectorStoreProvider):
    """Vector store provider backed by ChromaDB with local persistence.

    Parameters
    ----------
    persist_directory:
        Directory where ChromaDB keeps its files.
    client:
        Pre-built ChromaDB client; when omitted a ``PersistentClient`` is
        opened at *persist_directory*.
    """

    def __init__(
        self,
        persist_directory: str = "./data/chromadb",
        client: Any | None = None,
    ) -> None:
        self._persist_directory = persist_directory
        self._client = client or chromadb.PersistentClient(
            path=persist_directory,
            settings=chromadb.config.Settings(anonymized_telemetry=False),
        )
        # Collection handles by index name.
        self._collections: dict[str, Any] = {}

    # ------------------------------------------------------------------
    # IVectorStoreProvider implementation
    # ------------------------------------------------------------------

    async def create_index_if_absent(self, index_name: str, dimension: int) -> bool:
        """Create the collection for *index_name* unless it already exists."""
        try:
            existing = {getattr(c, "name", c) for c in self._client.list_collections()}
            created = index_name not in existing
            self._collection(index_name, dimension=dimension)
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB collection setup failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if created:
            logger.info("chromadb_collection_created", index_name=index_name, dimension=dimension)
        return created

    async def has_vectors(self, index_name: str) -> bool:
        try:
            count = self._collection(index_name).count()
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB count failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.debug("chromadb_count", index_name=index_name, count=count)
        return count > 0

    async def upsert(self, index_name: str, records: list[UpsertRecord]) -> int:
        """Upsert *records*; chunk text is stored as the ChromaDB document."""
        if not records:
            return 0
        try:
            self._collection(index_name).upsert(
                ids=[record.id for record in records],
                embeddings=[record.vector for record in records],
                documents=[record.content for record in records],
                metadatas=[self._to_chroma_metadata(record.metadata) for record in records],
            )
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB upsert failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info("chromadb_upsert", index_name=index_name, count=len(records))
        return len(records)

    async def query(
        self,
        index_name: str,
        vector: list[float],
        top_k: int = 10,
        filters: dict[str, Any] | None = None,
    ) -> list[QueryMatch]:
        """Return the *top_k* nearest chunks; score is ``1 - cosine distance``."""
        kwargs: dict[str, Any] = {
            "query_embeddings": [vector],
            "n_results": top_k,
        }
        if filters:
            kwargs["where"] = filters

        try:
            results = self._collection(index_name).query(**kwargs)
        except Exception as exc:
            raise VectorStoreError(
                message=f"ChromaDB query failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not results["ids"] or not results["ids"][0]:
            return []

        ids = results["ids"][0]
        documents = results["documents"][0] if results.get("documents") else [None] * len(ids)
        metadatas = results["metadatas"][0] if results.get("metadatas") else [{}] * len(ids)
        distances = results["distances"][0] if results.get("distances") else [0.0] * len(ids)

        matches = [
            QueryMatch(
                id=chunk_id,
                score=max(0.0, min(1.0, 1.0 - distance)),
                metadata=dict(meta or {}),
                content=doc_text,
            )
            for chunk_id, doc_text, meta, distance in zip(
                ids, documents, metadatas, distances, strict=True
            )
        ]
        logger.info(
            "chromadb_query",
            index_name=index_name,
            results_count=len(matches),
            top_score=matches[0].score if matches else 0.0,
        )
        return matches

    def get_provider_name(self) -> str:
        return "chromadb"

    def is_available(self) -> bool:
        """Return ``True`` if the ChromaDB client responds."""
        try:
            self._client.heartbeat()
            return True
        except Exception:
            return False

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _collection(self, index_name: str, dimension: int | None = None) -> Any:
        """Return the collection for *index_name*, opening or creating it."""
        if index_name in self._collections:
            return self._collections[index_name]

        metadata: dict[str, Any] = {"hnsw:space": "cosine"}
        if dimension is not None:
            metadata["dimension"] = dimension

        # Newer ChromaDB versions reject an embedding function that differs
        # from the one persisted with the collection; fall back to opening
        # it with whatever was persisted.
        try:
            collection = self._client.get_or_create_collection(
                name=index_name,
                metadata=metadata,
                embedding_function=_NoopEmbeddingFunction(),
            )
        except ValueError:
            collection = self._client.get_or_create_collection(
                name=index_name,
                metadata=metadata,
            )
        self._collections[index_name] = collection
        return collection

    @staticmethod
    def _to_chroma_metadata(metadata: dict[str, Any]) -> dict[str, str | int | float | bool]:
        """Convert record metadata to ChromaDB-compatible values.

        ChromaDB metadata values must be str, int, float, or bool.
        Lists are serialized as comma-separated strings.
        """
        converted: dict[str, str | int | float | bool] = {}
        for key, value in metadata.items():
            if isinstance(value, (list, tuple)):
                converted[key] = ",".join(str(item) for item in value)
            else:
                converted[key] = value
        return converted
