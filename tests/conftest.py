"""Shared pytest fixtures for the docsearch test suite."""

from __future__ import annotations

import hashlib
import json
import struct
from pathlib import Path
from typing import Any

import pytest

from docsearch.interfaces.embedding_provider import EmbeddingInputType, IEmbeddingProvider
from docsearch.interfaces.vector_store_provider import IVectorStoreProvider
from docsearch.models.documents import QueryMatch, UpsertRecord
from docsearch.services.ingestion.bootstrap import BootstrapOrchestrator, CorpusPreparer
from docsearch.services.ingestion.chunker import TextChunker
from docsearch.services.ingestion.content_validator import ContentValidator
from docsearch.services.ingestion.document_loader import DirectoryLoader
from docsearch.services.ingestion.embedding_batcher import EmbeddingBatcher
from docsearch.services.ingestion.metadata_catalog import MetadataCatalog
from docsearch.services.ingestion.metadata_enricher import MetadataEnricher
from docsearch.services.ingestion.upsert_manager import IndexUpsertManager

# ---------------------------------------------------------------------------
# Deterministic embedding
# ---------------------------------------------------------------------------

_EMBEDDING_DIM = 128


def _hash_to_vector(text: str, dim: int = _EMBEDDING_DIM) -> list[float]:
    """Generate a deterministic fixed-length unit vector by hashing *text*."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    raw = digest
    while len(raw) < dim * 4:
        raw += hashlib.sha256(raw).digest()
    # Unsigned ints avoid NaN/inf bit patterns that raw floats could produce.
    values = [float(v) - 2**31 for v in struct.unpack(f"<{dim}I", raw[: dim * 4])]
    magnitude = max(sum(v * v for v in values) ** 0.5, 1e-10)
    return [v / magnitude for v in values]


class MockEmbeddingProvider(IEmbeddingProvider):
    """In-memory deterministic embedding provider for tests.

    Records every ``embed`` call so tests can assert on batching.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    async def embed(
        self,
        texts: list[str],
        input_type: EmbeddingInputType = EmbeddingInputType.DOCUMENT,
    ) -> list[list[float]]:
        self.calls.append(list(texts))
        return [_hash_to_vector(t) for t in texts]

    async def embed_single(
        self,
        text: str,
        input_type: EmbeddingInputType = EmbeddingInputType.QUERY,
    ) -> list[float]:
        return _hash_to_vector(text)

    def get_dimension(self) -> int:
        return _EMBEDDING_DIM

    def get_provider_name(self) -> str:
        return "mock-embedding"

    def is_available(self) -> bool:
        return True


class MockVectorStore(IVectorStoreProvider):
    """In-memory vector store: one dict of records per index name.

    ``query`` ranks by dot product, which is cosine similarity for the
    unit vectors :class:`MockEmbeddingProvider` produces.
    """

    def __init__(self) -> None:
        self.indexes: dict[str, dict[str, UpsertRecord]] = {}
        self.dimensions: dict[str, int] = {}
        self.upsert_calls: list[int] = []

    async def create_index_if_absent(self, index_name: str, dimension: int) -> bool:
        if index_name in self.indexes:
            return False
        self.indexes[index_name] = {}
        self.dimensions[index_name] = dimension
        return True

    async def has_vectors(self, index_name: str) -> bool:
        return bool(self.indexes.get(index_name))

    async def upsert(self, index_name: str, records: list[UpsertRecord]) -> int:
        self.upsert_calls.append(len(records))
        store = self.indexes.setdefault(index_name, {})
        for record in records:
            store[record.id] = record
        return len(records)

    async def query(
        self,
        index_name: str,
        vector: list[float],
        top_k: int = 10,
        filters: dict[str, Any] | None = None,
    ) -> list[QueryMatch]:
        scored = [
            QueryMatch(
                id=record.id,
                score=sum(a * b for a, b in zip(vector, record.vector)),
                metadata=dict(record.metadata),
                content=record.content,
            )
            for record in self.indexes.get(index_name, {}).values()
            if not filters
            or all(record.metadata.get(key) == value for key, value in filters.items())
        ]
        scored.sort(key=lambda match: match.score, reverse=True)
        return scored[:top_k]

    def records(self, index_name: str) -> list[UpsertRecord]:
        return list(self.indexes.get(index_name, {}).values())

    def get_provider_name(self) -> str:
        return "mock-vector-store"

    def is_available(self) -> bool:
        return True


async def _no_sleep(_: float) -> None:
    return None


# ---------------------------------------------------------------------------
# Provider fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_embedding_provider() -> MockEmbeddingProvider:
    """Mock IEmbeddingProvider returning deterministic hash-based vectors."""
    return MockEmbeddingProvider()


@pytest.fixture
def mock_vector_store() -> MockVectorStore:
    """Mock IVectorStoreProvider backed by an in-memory dict."""
    return MockVectorStore()


# ---------------------------------------------------------------------------
# Corpus fixtures
# ---------------------------------------------------------------------------


def paragraph(topic: str, sentences: int = 6) -> str:
    """Build a readable paragraph of roughly ``sentences * 60`` characters."""
    return " ".join(
        f"The {topic} section covers point number {n} in plain words." for n in range(sentences)
    )


def write_catalog(path: Path, entries: list[dict[str, Any]]) -> Path:
    path.write_text(json.dumps({"documents": entries}), encoding="utf-8")
    return path


def catalog_entry(filename: str, **overrides: Any) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "filename": filename,
        "title": filename.rsplit(".", 1)[0].replace("_", " ").title(),
        "category": "Technology",
        "type": "article",
        "tags": ["search", "vectors"],
        "date": "2024-03-01",
    }
    entry.update(overrides)
    return entry


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """A document directory holding two text files and a matching catalog."""
    directory = tmp_path / "docs"
    directory.mkdir()
    (directory / "vector_search.md").write_text(
        "\n\n".join(paragraph(f"vector search {i}") for i in range(5)), encoding="utf-8"
    )
    (directory / "saas_metrics.txt").write_text(
        "\n\n".join(paragraph(f"saas metrics {i}") for i in range(3)), encoding="utf-8"
    )
    write_catalog(
        directory / "db.json",
        [
            catalog_entry("vector_search.md"),
            catalog_entry(
                "saas_metrics.txt",
                category="SaaS",
                type="case_study",
                metrics={"mrr": 12000, "growth_rate": 0.15},
            ),
        ],
    )
    return directory


def build_preparer(directory: Path, catalog_path: Path | None = None) -> CorpusPreparer:
    """CorpusPreparer with default tuning over *directory*."""
    return CorpusPreparer(
        loader=DirectoryLoader(directory),
        catalog=MetadataCatalog(catalog_path or directory / "db.json"),
        validator=ContentValidator(),
        chunker=TextChunker(),
        enricher=MetadataEnricher(),
    )


def build_orchestrator(
    embedding_provider: IEmbeddingProvider,
    vector_store: IVectorStoreProvider,
    preparer: CorpusPreparer,
    embed_batch_size: int = 5,
    upsert_batch_size: int = 2,
) -> BootstrapOrchestrator:
    """BootstrapOrchestrator wired with no inter-batch delay."""
    batcher = EmbeddingBatcher(
        embedding_provider=embedding_provider,
        upsert_manager=IndexUpsertManager(vector_store, batch_size=upsert_batch_size),
        batch_size=embed_batch_size,
        delay_seconds=0.0,
        sleep=_no_sleep,
    )
    return BootstrapOrchestrator(
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        preparer=preparer,
        batcher=batcher,
    )


@pytest.fixture
def orchestrator(
    docs_dir: Path,
    mock_embedding_provider: MockEmbeddingProvider,
    mock_vector_store: MockVectorStore,
) -> BootstrapOrchestrator:
    return build_orchestrator(mock_embedding_provider, mock_vector_store, build_preparer(docs_dir))
