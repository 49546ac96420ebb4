"""Source processor for plain-text and Markdown documents."""

from __future__ import annotations

import structlog

from docsearch.models.documents import RawDocument
from docsearch.utils.errors import DocumentLoadError

logger = structlog.get_logger(logger_name=__name__)


class TextProcessor:
    """Reads a UTF-8 text file into a :class:`RawDocument`."""

    def process(self, file_path: str) -> RawDocument:
        try:
            with open(file_path, encoding="utf-8") as fh:
                text = fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentLoadError(
                message=f"Cannot read text file {file_path}: {exc}"
            ) from exc

        logger.info("text_file_processed", file_path=file_path, chars=len(text))
        return RawDocument(page_content=text, metadata={"source": file_path})
