"""Source processor for PDF documents.

Reads PDF files using PyMuPDF (fitz) and returns the whole document as one
:class:`~docsearch.models.documents.RawDocument`.  Page texts are joined
with blank lines so paragraph-level splitting still sees page breaks.

The document info block (page count, producer, title, ...) is attached as a
nested ``pdf`` object; the metadata enricher later hoists the page count
to ``totalPages`` and drops the rest.
"""

from __future__ import annotations

import fitz  # PyMuPDF -- the "fitz" import name is a PyMuPDF convention
import structlog

from docsearch.models.documents import RawDocument
from docsearch.utils.errors import DocumentLoadError

logger = structlog.get_logger(logger_name=__name__)

_PAGE_SEPARATOR = "\n\n"


class PDFProcessor:
    """Extracts the full text of a PDF file into a :class:`RawDocument`."""

    def process(self, file_path: str) -> RawDocument:
        """Read a PDF file.

        Parameters
        ----------
        file_path:
            Path to the PDF file.

        Returns
        -------
        RawDocument
            ``page_content`` holds the text of every page with extractable
            text; ``metadata`` holds ``source`` and the ``pdf`` info block.
            A PDF with no text layer yields empty ``page_content``.

        Raises
        ------
        DocumentLoadError
            If the file cannot be opened or is not a readable PDF.
        """
        try:
            doc = fitz.open(file_path)
        except Exception as exc:
            raise DocumentLoadError(
                message=f"Cannot open PDF {file_path}: {exc}",
                provider_name="pymupdf",
            ) from exc

        try:
            page_texts = [
                text
                for text in (page.get_text("text").strip() for page in doc)
                if text
            ]
            pdf_info = {
                "page_count": doc.page_count,
                **{key: value for key, value in (doc.metadata or {}).items() if value},
            }
        finally:
            doc.close()

        if not page_texts:
            logger.warning("pdf_no_text_extracted", file_path=file_path)

        logger.info(
            "pdf_processed",
            file_path=file_path,
            pages=pdf_info["page_count"],
            pages_with_text=len(page_texts),
        )
        return RawDocument(
            page_content=_PAGE_SEPARATOR.join(page_texts),
            metadata={"source": file_path, "pdf": pdf_info},
        )
