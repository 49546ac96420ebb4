"""docsearch domain models; re-exports all public model classes.

The models are organized by concern:
    - documents.py  : raw documents, catalog records, chunks, index records
    - bootstrap.py  : bootstrap run phases, outcomes, and statistics
"""

from __future__ import annotations

from docsearch.models.bootstrap import (
    BatchReport,
    BootstrapPhase,
    BootstrapResult,
    BootstrapStatus,
)
from docsearch.models.documents import (
    Chunk,
    DocumentCategory,
    DocumentMetadataRecord,
    DocumentMetrics,
    DocumentType,
    MetadataValue,
    QueryMatch,
    RawDocument,
    UpsertRecord,
)

__all__ = [
    # documents
    "Chunk",
    "DocumentCategory",
    "DocumentMetadataRecord",
    "DocumentMetrics",
    "DocumentType",
    "MetadataValue",
    "QueryMatch",
    "RawDocument",
    "UpsertRecord",
    # bootstrap
    "BatchReport",
    "BootstrapPhase",
    "BootstrapResult",
    "BootstrapStatus",
]
