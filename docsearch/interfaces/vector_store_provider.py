"""Abstract base class for vector-index service providers.

Defines the contract for creating indexes, writing embedded chunks, and
running similarity queries.  Implementations wrap ChromaDB (local, on-disk)
and Pinecone (managed, serverless).  The bootstrap pipeline addresses an
index by name so one provider instance can serve several indexes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from docsearch.models.documents import QueryMatch, UpsertRecord


# Concrete implementations (docsearch/providers/vector_store/):
#   ChromaDBProvider   one persistent collection per index name
#   PineconeProvider   one serverless index per index name
class IVectorStoreProvider(ABC):
    """Contract for vector-index services used by the bootstrap pipeline.

    All methods that touch the backend are async so network-backed stores
    do not block the event loop.

    **Filter syntax** (passed via *filters* in :meth:`query`) follows the
    Mongo-style operators both backends understand, e.g.
    ``{"category": {"$eq": "Legal"}}`` or ``{"totalPages": {"$gte": 10}}``.
    """

    @abstractmethod
    async def create_index_if_absent(self, index_name: str, dimension: int) -> bool:
        """Ensure the named index exists.

        Parameters
        ----------
        index_name:
            Name of the index to look up or create.
        dimension:
            Vector dimension to use when the index has to be created.

        Returns
        -------
        bool
            ``True`` if the index was created by this call, ``False`` if it
            already existed.

        Raises
        ------
        docsearch.utils.errors.VectorStoreError
            If the index cannot be listed or created.
        docsearch.utils.errors.ConnectionTimeoutError
            If the backend could not be reached in time.
        """

    @abstractmethod
    async def has_vectors(self, index_name: str) -> bool:
        """Return ``True`` if the named index holds at least one vector."""

    @abstractmethod
    async def upsert(self, index_name: str, records: list[UpsertRecord]) -> int:
        """Insert or overwrite *records* in the named index in one call.

        Parameters
        ----------
        index_name:
            Target index.
        records:
            Records to write.  Each record's ``id`` is the primary key; an
            existing entry with the same id is replaced.

        Returns
        -------
        int
            The number of records written.

        Raises
        ------
        docsearch.utils.errors.VectorStoreError
            If the write fails.
        """

    @abstractmethod
    async def query(
        self,
        index_name: str,
        vector: list[float],
        top_k: int = 10,
        filters: dict[str, Any] | None = None,
    ) -> list[QueryMatch]:
        """Return the *top_k* nearest stored chunks to *vector*.

        Results are ranked by similarity score, best first.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"chromadb"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured and reachable."""
