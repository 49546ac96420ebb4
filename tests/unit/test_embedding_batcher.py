"""Unit tests for batched embedding with per-batch fault isolation."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from docsearch.interfaces.embedding_provider import EmbeddingInputType
from docsearch.services.ingestion.embedding_batcher import EmbeddingBatcher
from docsearch.services.ingestion.metadata_enricher import MetadataEnricher
from docsearch.services.ingestion.upsert_manager import IndexUpsertManager
from docsearch.utils.errors import EmbeddingError, VectorStoreError
from tests.conftest import MockEmbeddingProvider, MockVectorStore


class _FailingStore(MockVectorStore):
    """Raises on the Nth upsert call and stores everything else."""

    def __init__(self, fail_on_call: int) -> None:
        super().__init__()
        self._fail_on_call = fail_on_call

    async def upsert(self, index_name, records):  # noqa: ANN001, ANN201
        if len(self.upsert_calls) + 1 == self._fail_on_call:
            self.upsert_calls.append(len(records))
            raise VectorStoreError("write rejected", provider_name="mock")
        return await super().upsert(index_name, records)


def _chunks(count: int):  # noqa: ANN202
    return MetadataEnricher().enrich([f"chunk number {n}" for n in range(count)], {"title": "T"})


def _batcher(
    embedding: MockEmbeddingProvider,
    store: MockVectorStore,
    sleeps: list[float] | None = None,
    delay: float = 0.0,
) -> EmbeddingBatcher:
    async def _record_sleep(seconds: float) -> None:
        if sleeps is not None:
            sleeps.append(seconds)

    return EmbeddingBatcher(
        embedding_provider=embedding,
        upsert_manager=IndexUpsertManager(store),
        batch_size=5,
        delay_seconds=delay,
        sleep=_record_sleep,
    )


class TestEmbeddingBatcher:
    def test_batch_size_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            EmbeddingBatcher(MockEmbeddingProvider(), IndexUpsertManager(MockVectorStore()), 0)

    @pytest.mark.asyncio()
    async def test_all_batches_succeed(self) -> None:
        embedding, store = MockEmbeddingProvider(), MockVectorStore()
        report = await _batcher(embedding, store).run("idx", _chunks(12))

        assert [len(call) for call in embedding.calls] == [5, 5, 2]
        assert report.batches_total == 3
        assert report.batches_succeeded == 3
        assert report.failed_batches == []
        assert report.chunks_embedded == 12
        assert report.vectors_upserted == 12
        assert len(store.records("idx")) == 12

    @pytest.mark.asyncio()
    async def test_records_carry_chunk_metadata_and_text(self) -> None:
        embedding, store = MockEmbeddingProvider(), MockVectorStore()
        chunks = _chunks(2)
        await _batcher(embedding, store).run("idx", chunks)

        stored = {r.id: r for r in store.records("idx")}
        first = stored[chunks[0].id]
        assert first.content == "chunk number 0"
        assert first.metadata["title"] == "T"
        assert first.metadata["nextChunk"] == "chunk number 1"
        assert len(first.vector) == embedding.get_dimension()

    @pytest.mark.asyncio()
    async def test_failed_batch_is_skipped(self) -> None:
        embedding, store = MockEmbeddingProvider(), MockVectorStore()
        real_embed = embedding.embed
        calls = 0

        async def flaky(texts, input_type=EmbeddingInputType.DOCUMENT):  # noqa: ANN001, ANN202
            nonlocal calls
            calls += 1
            if calls == 2:
                raise EmbeddingError("rate limited", provider_name="mock")
            return await real_embed(texts, input_type)

        embedding.embed = flaky  # type: ignore[method-assign]
        chunks = _chunks(25)
        report = await _batcher(embedding, store).run("idx", chunks)

        assert report.batches_total == 5
        assert report.failed_batches == [2]
        assert report.batches_failed == 1
        assert report.vectors_upserted == 20
        stored_ids = {r.id for r in store.records("idx")}
        assert stored_ids == {c.id for c in chunks[:5] + chunks[10:]}

    @pytest.mark.asyncio()
    async def test_vector_count_mismatch_skips_batch(self) -> None:
        embedding, store = MockEmbeddingProvider(), MockVectorStore()
        embedding.embed = AsyncMock(return_value=[[0.1] * 4])  # type: ignore[method-assign]

        report = await _batcher(embedding, store).run("idx", _chunks(3))

        assert report.failed_batches == [1]
        assert report.vectors_upserted == 0
        assert store.records("idx") == []

    @pytest.mark.asyncio()
    async def test_documents_are_embedded_as_documents(self) -> None:
        embedding, store = MockEmbeddingProvider(), MockVectorStore()
        embedding.embed = AsyncMock(return_value=[[0.0, 1.0]])  # type: ignore[method-assign]

        await _batcher(embedding, store).run("idx", _chunks(1))

        embedding.embed.assert_awaited_once_with(
            ["chunk number 0"], input_type=EmbeddingInputType.DOCUMENT
        )

    @pytest.mark.asyncio()
    async def test_delay_between_successful_batches_only(self) -> None:
        embedding, store = MockEmbeddingProvider(), MockVectorStore()
        sleeps: list[float] = []

        await _batcher(embedding, store, sleeps=sleeps, delay=1.0).run("idx", _chunks(15))

        # Three batches: pause after the first and second, not after the last.
        assert sleeps == [1.0, 1.0]

    @pytest.mark.asyncio()
    async def test_no_chunks(self) -> None:
        report = await _batcher(MockEmbeddingProvider(), MockVectorStore()).run("idx", [])
        assert report.batches_total == 0
        assert report.vectors_upserted == 0

    @pytest.mark.asyncio()
    async def test_upsert_failure_skips_batch_and_keeps_partial_count(self) -> None:
        embedding, store = MockEmbeddingProvider(), _FailingStore(fail_on_call=2)
        chunks = _chunks(10)

        report = await _batcher(embedding, store).run("idx", chunks)

        # Batch 1 writes r0-r1, then its second sub-batch is rejected.
        assert store.upsert_calls == [2, 2, 2, 2, 1]
        assert report.failed_batches == [1]
        assert report.batches_succeeded == 1
        assert report.chunks_embedded == 5
        assert report.vectors_upserted == 7
        assert len(store.records("idx")) == report.vectors_upserted
        assert {c.id for c in chunks[5:]} <= {r.id for r in store.records("idx")}
