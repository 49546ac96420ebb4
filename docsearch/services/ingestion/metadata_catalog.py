"""Read access to the curated document metadata catalog.

The catalog is a JSON file (``docs/db.json`` by default) of the form::

    {"documents": [{"filename": "a.pdf", "title": "...", "category": "Legal",
                    "type": "article", "tags": [...], "date": "2024-01-01"}]}

A missing or malformed catalog is not fatal: it is logged and treated as
empty, which makes every loaded document "unmatched".  Individual entries
that fail validation are skipped with a warning.
"""

from __future__ import annotations

import json
from pathlib import Path

import structlog
from pydantic import ValidationError

from docsearch.models.documents import DocumentMetadataRecord

logger = structlog.get_logger(logger_name=__name__)


class MetadataCatalog:
    """Loads :class:`DocumentMetadataRecord` entries from a JSON catalog file.

    The file is re-read on every call; nothing is cached between runs.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> list[DocumentMetadataRecord]:
        """Return every valid catalog record, in file order."""
        try:
            with open(self._path, encoding="utf-8") as fh:
                payload = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("metadata_catalog_unreadable", path=str(self._path), error=str(exc))
            return []

        entries = payload.get("documents") if isinstance(payload, dict) else None
        if not isinstance(entries, list):
            logger.warning("metadata_catalog_missing_documents", path=str(self._path))
            return []

        records: list[DocumentMetadataRecord] = []
        for position, entry in enumerate(entries):
            try:
                records.append(DocumentMetadataRecord.model_validate(entry))
            except ValidationError as exc:
                logger.warning(
                    "metadata_record_invalid",
                    position=position,
                    errors=exc.error_count(),
                )
        return records

    def by_filename(self) -> dict[str, DocumentMetadataRecord]:
        """Return records keyed by filename; the first entry wins on duplicates."""
        index: dict[str, DocumentMetadataRecord] = {}
        for record in self.read():
            if record.filename in index:
                logger.warning("metadata_record_duplicate", filename=record.filename)
                continue
            index[record.filename] = record
        return index

    def find(self, filename: str) -> DocumentMetadataRecord | None:
        """Return the record for *filename* (a basename), if any."""
        return self.by_filename().get(filename)
