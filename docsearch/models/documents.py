"""Document and chunk models for the docsearch ingestion pipeline.

Defines Pydantic v2 models for the objects that flow through a bootstrap
run: raw loaded documents, catalog metadata records, enriched chunks, and
the records written to (and read back from) the vector index.  Models that
represent pipeline output are frozen; a chunk never changes after the
enricher builds it, so ``previous_chunk`` / ``next_chunk`` are snapshots of
neighbour text rather than live references.

Vector index metadata must be flat: every value is a string, number,
boolean, or a list of strings.  :data:`MetadataValue` names that shape and
:meth:`Chunk.to_metadata` renders it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

# Flat value types accepted by every supported vector index.
MetadataValue = Union[str, int, float, bool, list[str]]


# ---------------------------------------------------------------------------
# Catalog enums
# ---------------------------------------------------------------------------
class DocumentCategory(str, Enum):  # noqa: UP042 (StrEnum requires Python 3.11+)
    """Subject area of a catalogued document."""

    AI = "AI"
    ML = "ML"
    STARTUP = "Startup"
    LEGAL = "Legal"
    TECHNOLOGY = "Technology"
    AGI = "AGI"
    SAAS = "SaaS"


class DocumentType(str, Enum):  # noqa: UP042
    """Editorial form of a catalogued document."""

    ARTICLE = "article"
    RESEARCH = "research"
    CASE_STUDY = "case_study"
    WHITEPAPER = "whitepaper"
    DOCUMENTATION = "documentation"


# ---------------------------------------------------------------------------
# RawDocument: one loaded source file.
# ---------------------------------------------------------------------------
class RawDocument(BaseModel):
    """Full extracted text of one source file plus loader metadata.

    Loader metadata is whatever the parser reports, at minimum ``source``
    (the file path).  The PDF processor adds a nested ``pdf`` object with
    ``page_count``; nested objects are flattened before anything reaches
    the vector index.
    """

    model_config = ConfigDict(frozen=True)

    page_content: str = Field(description="Full extracted text of the document.")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Loader-provided metadata (source path, pdf info, ...).",
    )

    @property
    def source(self) -> str:
        return str(self.metadata.get("source", ""))


# ---------------------------------------------------------------------------
# DocumentMetadataRecord: one entry of the persisted catalog (docs/db.json).
# ---------------------------------------------------------------------------
class DocumentMetrics(BaseModel):
    """Optional financial figures attached to a catalog record."""

    model_config = ConfigDict(frozen=True, extra="allow")

    mrr: float | None = None
    arr: float | None = None
    valuation: float | None = None
    growth_rate: float | None = None


class DocumentMetadataRecord(BaseModel):
    """Curated metadata for one document, joined to a RawDocument by filename.

    Unknown keys in the catalog are kept (``extra="allow"``) so new catalog
    fields reach the index without a code change, provided they are flat.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    filename: str = Field(min_length=1, description="Basename of the source file, e.g. 'a.pdf'.")
    title: str
    category: DocumentCategory
    type: DocumentType
    tags: list[str] = Field(default_factory=list)
    date: str | None = None
    metrics: DocumentMetrics | None = None
    author: str | None = None
    source_url: str | None = None
    confidence_score: float | None = None

    def as_metadata(self) -> dict[str, Any]:
        """Return the record as plain JSON-compatible values (enums as strings)."""
        return self.model_dump(mode="json", exclude_none=True)


# ---------------------------------------------------------------------------
# Chunk: the unit of embedding and indexing.
# ---------------------------------------------------------------------------
class Chunk(BaseModel):
    """An enriched, contiguous slice of a document's text.

    ``chunk_index`` runs ``0..total_chunks-1`` within one parent document.
    ``metadata`` holds the flattened parent metadata; structural fields live
    on the model itself and are merged in by :meth:`to_metadata`.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique identifier (UUID4) for this chunk.")
    content: str
    chunk_index: int = Field(ge=0)
    total_chunks: int = Field(ge=1)
    previous_chunk: str | None = None
    next_chunk: str | None = None
    content_length: int = Field(ge=0)
    start_index: int = Field(default=0, ge=0, description="Character offset in the parent text.")
    summary: str = ""
    keywords: list[str] = Field(default_factory=list)
    metadata: dict[str, MetadataValue] = Field(default_factory=dict)

    def to_metadata(self) -> dict[str, MetadataValue]:
        """Render the flat metadata dict stored alongside the vector.

        Keys use the camelCase names the search UI reads.  Structural
        fields take precedence over same-named document fields, and
        ``None`` values (the boundary neighbours) are omitted because
        vector indexes reject nulls.
        """
        rendered: dict[str, Any] = dict(self.metadata)
        rendered.update(
            {
                "id": self.id,
                "chunkIndex": self.chunk_index,
                "totalChunks": self.total_chunks,
                "previousChunk": self.previous_chunk,
                "nextChunk": self.next_chunk,
                "contentLength": self.content_length,
                "startIndex": self.start_index,
                "summary": self.summary,
                "keywords": list(self.keywords),
            }
        )
        return {key: value for key, value in rendered.items() if value is not None}


# ---------------------------------------------------------------------------
# UpsertRecord / QueryMatch: vector index wire objects.
# ---------------------------------------------------------------------------
class UpsertRecord(BaseModel):
    """An ``(id, vector, metadata)`` triple ready for one upsert call."""

    model_config = ConfigDict(frozen=True)

    id: str
    vector: list[float]
    metadata: dict[str, MetadataValue] = Field(default_factory=dict)
    content: str = Field(default="", description="Chunk text, stored where the backend allows.")

    @classmethod
    def from_chunk(cls, chunk: Chunk, vector: list[float]) -> UpsertRecord:
        return cls(id=chunk.id, vector=vector, metadata=chunk.to_metadata(), content=chunk.content)


class QueryMatch(BaseModel):
    """One ranked result returned by a vector index similarity query."""

    model_config = ConfigDict(frozen=True)

    id: str
    score: float
    metadata: dict[str, Any] = Field(default_factory=dict)
    content: str | None = None
