"""Source processors for the docsearch ingestion pipeline.

Each processor converts one file format into a single whole-document
:class:`~docsearch.models.documents.RawDocument`.  Splitting into chunks
happens later, after validation, in the TextChunker.

Available processors and their input formats:

- **PDFProcessor**   -- PDF documents via PyMuPDF page extraction
- **TextProcessor**  -- UTF-8 plain-text (.txt) and Markdown (.md) files

Every processor exposes ``process(file_path) -> RawDocument`` and raises
:class:`~docsearch.utils.errors.DocumentLoadError` for unreadable files.
"""

from docsearch.services.ingestion.source_processors.pdf_processor import PDFProcessor
from docsearch.services.ingestion.source_processors.text_processor import TextProcessor

__all__ = [
    "PDFProcessor",
    "TextProcessor",
]
