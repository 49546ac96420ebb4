"""Sequential embed-then-upsert batching with per-batch fault isolation.

Chunks are embedded ``batch_size`` at a time and each batch is written to
the index before the next one starts.  A batch that fails (the provider
raises, or returns a different number of vectors than texts) is logged and
skipped; the remaining batches still run.  Records that a failed batch
wrote before its upsert broke still count as upserted.  A fixed pause
between successful batches keeps request rates under provider limits.

Partial success is the expected failure mode: a run that loses batch 2 of
5 still indexes batches 1, 3, 4 and 5.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

import structlog

from docsearch.interfaces.embedding_provider import EmbeddingInputType
from docsearch.models.bootstrap import BatchReport
from docsearch.models.documents import UpsertRecord
from docsearch.utils.errors import PartialUpsertError

if TYPE_CHECKING:
    from docsearch.interfaces.embedding_provider import IEmbeddingProvider
    from docsearch.models.documents import Chunk
    from docsearch.services.ingestion.upsert_manager import IndexUpsertManager

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_EMBED_BATCH_SIZE = 5
DEFAULT_BATCH_DELAY_SECONDS = 1.0


class EmbeddingBatcher:
    """Embeds chunks in batches and hands the vectors to the upsert manager.

    Parameters
    ----------
    embedding_provider:
        Provider used to embed chunk text (injected, swappable).
    upsert_manager:
        Writes each batch's records to the index.
    batch_size:
        Chunks per embedding request.
    delay_seconds:
        Pause after each successful batch except the last.
    sleep:
        Awaitable sleep function; tests pass a no-op to skip the delay.
    """

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        upsert_manager: IndexUpsertManager,
        batch_size: int = DEFAULT_EMBED_BATCH_SIZE,
        delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._embedding_provider = embedding_provider
        self._upsert_manager = upsert_manager
        self._batch_size = batch_size
        self._delay_seconds = delay_seconds
        self._sleep = sleep

    async def run(self, index_name: str, chunks: list[Chunk]) -> BatchReport:
        """Embed and upsert *chunks* into *index_name*, batch by batch.

        Never raises for a single failed batch; see :class:`BatchReport`
        for what was written and what was skipped.
        """
        batches = [
            chunks[offset : offset + self._batch_size]
            for offset in range(0, len(chunks), self._batch_size)
        ]
        total = len(batches)
        succeeded = 0
        failed: list[int] = []
        chunks_embedded = 0
        vectors_upserted = 0

        for number, batch in enumerate(batches, start=1):
            texts = [chunk.content for chunk in batch]
            try:
                vectors = await self._embedding_provider.embed(
                    texts, input_type=EmbeddingInputType.DOCUMENT
                )
                if len(vectors) != len(texts):
                    logger.error(
                        "embedding_count_mismatch",
                        batch=number,
                        total_batches=total,
                        expected=len(texts),
                        actual=len(vectors),
                    )
                    failed.append(number)
                    continue

                records = [
                    UpsertRecord.from_chunk(chunk, vector)
                    for chunk, vector in zip(batch, vectors)
                ]
                vectors_upserted += await self._upsert_manager.upsert(index_name, records)
            except PartialUpsertError as exc:
                vectors_upserted += exc.written
                logger.error(
                    "upsert_batch_failed",
                    batch=number,
                    total_batches=total,
                    written=exc.written,
                    error=str(exc),
                )
                failed.append(number)
                continue
            except Exception as exc:
                logger.error(
                    "embedding_batch_failed",
                    batch=number,
                    total_batches=total,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                failed.append(number)
                continue

            succeeded += 1
            chunks_embedded += len(batch)
            logger.info(
                "embedding_batch_complete",
                batch=number,
                total_batches=total,
                records=len(records),
            )

            if number < total and self._delay_seconds > 0:
                await self._sleep(self._delay_seconds)

        return BatchReport(
            batches_total=total,
            batches_succeeded=succeeded,
            failed_batches=failed,
            chunks_embedded=chunks_embedded,
            vectors_upserted=vectors_upserted,
        )
