"""Chunk metadata enrichment.

Turns the plain chunk strings of one document into :class:`Chunk` models
that carry everything the search UI shows without a second lookup:

* position: ``chunk_index`` / ``total_chunks`` and the character offset
* context: the literal text of the previous and next chunk
* a summary (the first ``summary_chars`` characters) and keywords
* the document's loader and catalog metadata, flattened

Vector indexes only accept flat metadata (strings, numbers, booleans, lists
of strings), so :func:`flatten_metadata` reduces nested loader output such
as the PDF info block before anything is attached to a chunk.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from docsearch.models.documents import Chunk, MetadataValue
from docsearch.services.ingestion.keyword_extractor import (
    DEFAULT_KEYWORD_LIMIT,
    extract_keywords,
)

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_SUMMARY_CHARS = 1000

# Loader keys that name the page count of the nested PDF info block.
_PAGE_COUNT_KEYS = ("page_count", "pageCount", "totalPages")

# Keys that hold the full document text; never copied onto a chunk.
_CONTENT_KEYS = frozenset({"pageContent", "page_content"})


def flatten_metadata(metadata: Mapping[str, Any]) -> dict[str, MetadataValue]:
    """Reduce document metadata to values a vector index accepts.

    * ``pdf``: the page count is hoisted to ``totalPages``; the rest of
      the block is dropped.
    * ``metrics``: each numeric entry becomes a top-level
      ``metrics_<name>`` field.
    * Any other nested mapping (for example the loader's ``loc``) is dropped.
    * ``None`` values are dropped.
    * Lists keep only primitive members, stringified.
    * Document text keys are never copied.
    """
    flat: dict[str, MetadataValue] = {}

    for key, value in metadata.items():
        if key in _CONTENT_KEYS or value is None:
            continue

        if key == "pdf" and isinstance(value, Mapping):
            page_count = _page_count(value)
            if page_count is not None:
                flat["totalPages"] = page_count
            continue

        if key == "metrics" and isinstance(value, Mapping):
            for name, figure in value.items():
                if isinstance(figure, (int, float)) and not isinstance(figure, bool):
                    flat[f"metrics_{name}"] = figure
            continue

        if isinstance(value, Mapping):
            continue

        if isinstance(value, (list, tuple, set, frozenset)):
            flat[key] = [str(item) for item in value if isinstance(item, (str, int, float, bool))]
        elif isinstance(value, (str, int, float, bool)):
            flat[key] = value
        else:
            flat[key] = str(value)

    return flat


def _page_count(pdf_info: Mapping[str, Any]) -> int | None:
    for key in _PAGE_COUNT_KEYS:
        count = pdf_info.get(key)
        if isinstance(count, int) and not isinstance(count, bool):
            return count
    return None


class MetadataEnricher:
    """Builds enriched :class:`Chunk` objects for one document.

    Parameters
    ----------
    summary_chars:
        Length of the per-chunk summary prefix.
    max_keywords:
        Maximum keywords attached to each chunk.
    """

    def __init__(
        self,
        summary_chars: int = DEFAULT_SUMMARY_CHARS,
        max_keywords: int = DEFAULT_KEYWORD_LIMIT,
    ) -> None:
        self._summary_chars = summary_chars
        self._max_keywords = max_keywords

    def enrich(
        self,
        chunks: Sequence[str],
        document_metadata: Mapping[str, Any],
        start_indices: Sequence[int] | None = None,
    ) -> list[Chunk]:
        """Wrap each chunk string of a document in an enriched :class:`Chunk`.

        Parameters
        ----------
        chunks:
            Chunk texts of ONE document, in order.
        document_metadata:
            Merged loader and catalog metadata for the document; flattened
            once and shared by every chunk.
        start_indices:
            Optional character offset of each chunk in the parent text,
            parallel to *chunks*.

        Returns
        -------
        list[Chunk]
            One chunk per input string; empty input returns ``[]``.
        """
        if start_indices is not None and len(start_indices) != len(chunks):
            raise ValueError(
                f"start_indices has {len(start_indices)} entries for {len(chunks)} chunks"
            )
        if not chunks:
            return []

        flat = flatten_metadata(document_metadata)
        total = len(chunks)
        enriched: list[Chunk] = []

        for index, content in enumerate(chunks):
            enriched.append(
                Chunk(
                    id=str(uuid.uuid4()),
                    content=content,
                    chunk_index=index,
                    total_chunks=total,
                    previous_chunk=chunks[index - 1] if index > 0 else None,
                    next_chunk=chunks[index + 1] if index < total - 1 else None,
                    content_length=len(content),
                    start_index=start_indices[index] if start_indices is not None else 0,
                    summary=content[: self._summary_chars],
                    keywords=extract_keywords(content, limit=self._max_keywords),
                    metadata=flat,
                )
            )

        logger.debug(
            "chunks_enriched",
            num_chunks=total,
            source=flat.get("source"),
        )
        return enriched
