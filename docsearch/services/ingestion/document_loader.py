"""Directory discovery of source documents.

Walks the document directory, dispatches each file to the processor
registered for its extension, and returns one
:class:`~docsearch.models.documents.RawDocument` per readable file.  Files
with no registered processor (including the metadata catalog itself) are
ignored; files that fail to parse are logged and skipped so one corrupt
PDF cannot block a bootstrap.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

import structlog

from docsearch.models.documents import RawDocument
from docsearch.services.ingestion.source_processors import PDFProcessor, TextProcessor
from docsearch.utils.errors import DocumentLoadError

logger = structlog.get_logger(logger_name=__name__)


class SourceProcessor(Protocol):
    def process(self, file_path: str) -> RawDocument: ...


def default_processors() -> dict[str, SourceProcessor]:
    """Extension-to-processor map used when none is supplied."""
    text = TextProcessor()
    return {".pdf": PDFProcessor(), ".txt": text, ".md": text}


class DirectoryLoader:
    """Loads every supported file under a directory, recursively.

    Parameters
    ----------
    directory:
        Root directory to scan.
    processors:
        Map of lowercase file extension (with dot) to processor.  Defaults
        to :func:`default_processors`.
    """

    def __init__(
        self,
        directory: str | Path,
        processors: Mapping[str, SourceProcessor] | None = None,
    ) -> None:
        self._directory = Path(directory)
        self._processors = dict(processors) if processors is not None else default_processors()

    @property
    def directory(self) -> Path:
        return self._directory

    def load(self) -> list[RawDocument]:
        """Return the documents found under the directory, ordered by path.

        A missing directory yields an empty list (with a warning); the
        orchestrator reports that as "no documents".
        """
        if not self._directory.is_dir():
            logger.warning("document_directory_missing", directory=str(self._directory))
            return []

        documents: list[RawDocument] = []
        skipped = 0
        for path in sorted(self._directory.rglob("*")):
            processor = self._processors.get(path.suffix.lower())
            if processor is None or not path.is_file():
                continue
            try:
                documents.append(processor.process(str(path)))
            except DocumentLoadError as exc:
                skipped += 1
                logger.warning("document_load_failed", file_path=str(path), error=str(exc))

        logger.info(
            "documents_loaded",
            directory=str(self._directory),
            loaded=len(documents),
            failed=skipped,
        )
        return documents
