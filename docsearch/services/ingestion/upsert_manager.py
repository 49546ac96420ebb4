"""Sub-batched writes to the vector index."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from docsearch.utils.errors import DocSearchError, PartialUpsertError

if TYPE_CHECKING:
    from docsearch.interfaces.vector_store_provider import IVectorStoreProvider
    from docsearch.models.documents import UpsertRecord

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_UPSERT_BATCH_SIZE = 2


class IndexUpsertManager:
    """Writes records to an index in small, sequential sub-batches.

    Small requests keep each call well under backend payload limits, since
    every record carries the text of its neighbours in its metadata.

    Parameters
    ----------
    vector_store:
        The vector index provider (injected, swappable).
    batch_size:
        Records per provider call.
    """

    def __init__(
        self,
        vector_store: IVectorStoreProvider,
        batch_size: int = DEFAULT_UPSERT_BATCH_SIZE,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._vector_store = vector_store
        self._batch_size = batch_size

    async def upsert(self, index_name: str, records: list[UpsertRecord]) -> int:
        """Upsert *records* into *index_name*, ``batch_size`` at a time.

        Sub-batches are sent in order and one at a time.  A failing call
        stops the upsert; sub-batches already sent stay written.

        Raises
        ------
        PartialUpsertError
            When a provider call fails.  ``written`` counts the records
            stored by earlier sub-batches; the provider error is chained.

        Returns
        -------
        int
            Total number of records the provider reported as written.
        """
        written = 0
        for offset in range(0, len(records), self._batch_size):
            sub_batch = records[offset : offset + self._batch_size]
            try:
                written += await self._vector_store.upsert(index_name, sub_batch)
            except Exception as exc:
                if isinstance(exc, DocSearchError):
                    detail, provider = exc.message, exc.provider_name
                else:
                    detail, provider = str(exc), None
                raise PartialUpsertError(
                    message=f"Upsert failed at record {offset} of {len(records)}: {detail}",
                    provider_name=provider,
                    written=written,
                ) from exc

        logger.debug("records_upserted", index_name=index_name, count=written)
        return written
