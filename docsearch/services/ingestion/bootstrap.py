"""Orchestrator for a one-shot index bootstrap.

Pipeline phases::

    CHECK_INDEX -> CHECK_POPULATED -> LOAD_DOCUMENTS -> MATCH_METADATA
                -> PROCESS -> EMBED_AND_UPSERT -> DONE

Two classes split the work:

* :class:`CorpusPreparer` turns the document directory into enriched
  chunks (load, match catalog metadata, validate, chunk, enrich).  It never
  touches an external provider, so it also powers the dry-run ``plan``.
* :class:`BootstrapOrchestrator` wraps the preparer with the index checks
  and the embed-and-upsert stage.

All dependencies are injected via the constructor so providers can be
swapped without touching these classes.

A run is idempotent at the index level: if the target index already holds
vectors the run stops at ``CHECK_POPULATED`` and reports ``SKIPPED``.  A run
never raises; every outcome is returned as a
:class:`~docsearch.models.bootstrap.BootstrapResult`.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from collections.abc import Callable
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from docsearch.models.bootstrap import (
    BatchReport,
    BootstrapPhase,
    BootstrapResult,
    BootstrapStatus,
)
from docsearch.utils.errors import ConnectionTimeoutError, is_connection_timeout
from docsearch.utils.logging import bind_run_context, clear_run_context

if TYPE_CHECKING:
    from docsearch.interfaces.embedding_provider import IEmbeddingProvider
    from docsearch.interfaces.vector_store_provider import IVectorStoreProvider
    from docsearch.models.documents import Chunk, DocumentMetadataRecord, RawDocument
    from docsearch.services.ingestion.chunker import TextChunker
    from docsearch.services.ingestion.content_validator import ContentValidator
    from docsearch.services.ingestion.document_loader import DirectoryLoader
    from docsearch.services.ingestion.embedding_batcher import EmbeddingBatcher
    from docsearch.services.ingestion.metadata_catalog import MetadataCatalog
    from docsearch.services.ingestion.metadata_enricher import MetadataEnricher

logger = structlog.get_logger(logger_name=__name__)

PhaseCallback = Callable[[BootstrapPhase], None]
MatchedDocument = tuple["RawDocument", "DocumentMetadataRecord"]

_NO_DOCUMENTS_MESSAGE = "No documents found"


@dataclass
class RunCounters:
    """Mutable tallies collected while a run progresses."""

    documents_loaded: int = 0
    documents_processed: int = 0
    skipped_unmatched: int = 0
    skipped_invalid: int = 0
    unmatched_records: int = 0
    chunks_created: int = 0
    batches_total: int = 0
    batches_failed: int = 0
    vectors_upserted: int = 0

    def absorb(self, report: BatchReport) -> None:
        self.batches_total = report.batches_total
        self.batches_failed = report.batches_failed
        self.vectors_upserted = report.vectors_upserted


# ---------------------------------------------------------------------------
# CorpusPreparer: documents in, enriched chunks out.
# ---------------------------------------------------------------------------
class CorpusPreparer:
    """Loads, matches, validates, splits, and enriches the document corpus.

    Parameters
    ----------
    loader:
        Discovers and parses source documents.
    catalog:
        Curated metadata joined to documents by filename.
    validator:
        Rejects empty or oversized documents before chunking.
    chunker:
        Splits each document's text into chunks.
    enricher:
        Builds enriched :class:`Chunk` objects.
    """

    def __init__(
        self,
        loader: DirectoryLoader,
        catalog: MetadataCatalog,
        validator: ContentValidator,
        chunker: TextChunker,
        enricher: MetadataEnricher,
    ) -> None:
        self._loader = loader
        self._catalog = catalog
        self._validator = validator
        self._chunker = chunker
        self._enricher = enricher

    async def load(self, counters: RunCounters) -> list[RawDocument]:
        """Parse every document in a worker thread (PDF parsing blocks)."""
        documents = await asyncio.to_thread(self._loader.load)
        counters.documents_loaded = len(documents)
        return documents

    async def match(
        self,
        documents: list[RawDocument],
        counters: RunCounters,
    ) -> list[MatchedDocument]:
        """Pair each document with its catalog record by file basename."""
        records = await asyncio.to_thread(self._catalog.by_filename)

        matched: list[MatchedDocument] = []
        seen: set[str] = set()
        for document in documents:
            filename = Path(document.source).name
            record = records.get(filename)
            if record is None:
                counters.skipped_unmatched += 1
                logger.info("document_unmatched", filename=filename)
                continue
            seen.add(filename)
            matched.append((document, record))

        counters.unmatched_records = len(set(records) - seen)
        if counters.unmatched_records:
            logger.info("catalog_records_without_document", count=counters.unmatched_records)
        return matched

    def process(self, matched: list[MatchedDocument], counters: RunCounters) -> list[Chunk]:
        """Validate, split, and enrich every matched document."""
        chunks: list[Chunk] = []
        for document, record in matched:
            reason = self._validator.rejection_reason(document.page_content)
            if reason is not None:
                counters.skipped_invalid += 1
                logger.info(
                    "document_invalid",
                    filename=record.filename,
                    reason=reason,
                    length=len(document.page_content.strip()),
                )
                continue

            text = document.page_content
            spans = self._chunker.split_spans(text)
            metadata = {**document.metadata, **record.as_metadata()}
            chunks.extend(
                self._enricher.enrich(
                    [text[start:end] for start, end in spans],
                    metadata,
                    start_indices=[start for start, _ in spans],
                )
            )
            counters.documents_processed += 1

        counters.chunks_created = len(chunks)
        logger.info(
            "documents_processed",
            processed=counters.documents_processed,
            skipped_invalid=counters.skipped_invalid,
            chunks=len(chunks),
        )
        return chunks

    async def plan(self, index_name: str) -> BootstrapResult:
        """Dry run: report what a bootstrap would index, writing nothing."""
        start = time.monotonic()
        counters = RunCounters()

        documents = await self.load(counters)
        if not documents:
            status, message = BootstrapStatus.FAILED_NO_DOCUMENTS, _NO_DOCUMENTS_MESSAGE
        else:
            self.process(await self.match(documents, counters), counters)
            status, message = BootstrapStatus.SUCCEEDED, "Dry run, nothing written"

        return BootstrapResult(
            index_name=index_name,
            status=status,
            message=message,
            elapsed_seconds=round(time.monotonic() - start, 3),
            **asdict(counters),
        )


# ---------------------------------------------------------------------------
# BootstrapOrchestrator: the full run.
# ---------------------------------------------------------------------------
class BootstrapOrchestrator:
    """Populates an empty vector index from the document directory.

    Parameters
    ----------
    embedding_provider:
        Supplies the vector dimension used when the index is created.
    vector_store:
        The vector index provider.
    preparer:
        Produces the enriched chunks to index.
    batcher:
        Embeds chunks and upserts them batch by batch.
    """

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        preparer: CorpusPreparer,
        batcher: EmbeddingBatcher,
    ) -> None:
        self._embedding_provider = embedding_provider
        self._vector_store = vector_store
        self._preparer = preparer
        self._batcher = batcher

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self, index_name: str, on_phase: PhaseCallback | None = None) -> BootstrapResult:
        """Execute one bootstrap run against *index_name*.

        Parameters
        ----------
        index_name:
            Target vector index; created if absent.
        on_phase:
            Optional callback invoked with each phase as it starts, and
            with ``DONE`` or ``FAILED`` at the end.

        Returns
        -------
        BootstrapResult
            Terminal status and counters.  Connection timeouts map to
            ``FAILED_TIMEOUT``; any other error maps to ``FAILED``.
        """
        run_id = uuid.uuid4().hex[:12]
        bind_run_context(index_name=index_name, run_id=run_id)
        start = time.monotonic()
        counters = RunCounters()

        def enter(phase: BootstrapPhase) -> None:
            logger.info("bootstrap_phase", phase=phase.value)
            if on_phase is not None:
                on_phase(phase)

        logger.info("bootstrap_started")
        try:
            status, message = await self._execute(index_name, counters, enter)
        except Exception as exc:
            if is_connection_timeout(exc):
                status = BootstrapStatus.FAILED_TIMEOUT
                message = ConnectionTimeoutError().message
            else:
                status = BootstrapStatus.FAILED
                message = str(exc) or type(exc).__name__
            logger.error(
                "bootstrap_failed",
                status=status.value,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            enter(BootstrapPhase.FAILED)

        result = BootstrapResult(
            index_name=index_name,
            status=status,
            message=message,
            elapsed_seconds=round(time.monotonic() - start, 3),
            **asdict(counters),
        )
        logger.info(
            "bootstrap_finished",
            status=result.status.value,
            chunks_created=result.chunks_created,
            vectors_upserted=result.vectors_upserted,
            batches_failed=result.batches_failed,
            elapsed_seconds=result.elapsed_seconds,
        )
        clear_run_context("index_name", "run_id")
        return result

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    async def _execute(
        self,
        index_name: str,
        counters: RunCounters,
        enter: PhaseCallback,
    ) -> tuple[BootstrapStatus, str]:
        enter(BootstrapPhase.CHECK_INDEX)
        dimension = self._embedding_provider.get_dimension()
        if await self._vector_store.create_index_if_absent(index_name, dimension):
            logger.info("index_created", dimension=dimension)

        enter(BootstrapPhase.CHECK_POPULATED)
        if await self._vector_store.has_vectors(index_name):
            logger.info("index_already_populated")
            enter(BootstrapPhase.DONE)
            return BootstrapStatus.SKIPPED, "Index already populated"

        enter(BootstrapPhase.LOAD_DOCUMENTS)
        documents = await self._preparer.load(counters)
        if not documents:
            enter(BootstrapPhase.FAILED)
            return BootstrapStatus.FAILED_NO_DOCUMENTS, _NO_DOCUMENTS_MESSAGE

        enter(BootstrapPhase.MATCH_METADATA)
        matched = await self._preparer.match(documents, counters)

        enter(BootstrapPhase.PROCESS)
        chunks = self._preparer.process(matched, counters)

        enter(BootstrapPhase.EMBED_AND_UPSERT)
        if chunks:
            counters.absorb(await self._batcher.run(index_name, chunks))

        enter(BootstrapPhase.DONE)
        return BootstrapStatus.SUCCEEDED, "Bootstrap complete"
