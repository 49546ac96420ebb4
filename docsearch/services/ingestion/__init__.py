"""Document ingestion pipeline for the docsearch vector index.

Orchestrates a one-shot bootstrap: **load -> match -> validate -> chunk ->
enrich -> embed -> upsert**.

Pipeline stages overview:

1. **Load** (document_loader.py / DirectoryLoader) -- Walks the document
   directory and parses each file through a format-specific processor
   (source_processors/) into a whole-document RawDocument.

2. **Match** (metadata_catalog.py / MetadataCatalog) -- Joins each document
   to its curated catalog record by filename; unmatched documents are
   excluded.

3. **Validate** (content_validator.py / ContentValidator) -- Drops
   documents that are blank or exceed the embedding input ceiling.

4. **Chunk** (chunker.py / TextChunker) -- Splits text along paragraph,
   line, and word boundaries into overlapping chunks.

5. **Enrich** (metadata_enricher.py / MetadataEnricher) -- Adds position,
   neighbour text, summary, keywords (keyword_extractor.py), and flattened
   document metadata to each chunk.

6. **Embed + upsert** (embedding_batcher.py / EmbeddingBatcher and
   upsert_manager.py / IndexUpsertManager) -- Embeds chunks in small
   batches and writes them to the index, skipping failed batches.

CorpusPreparer (bootstrap.py) runs stages 1-5 and BootstrapOrchestrator
adds the index checks and stage 6.
"""

from docsearch.services.ingestion.bootstrap import BootstrapOrchestrator, CorpusPreparer
from docsearch.services.ingestion.chunker import TextChunker
from docsearch.services.ingestion.content_validator import ContentValidator
from docsearch.services.ingestion.document_loader import DirectoryLoader
from docsearch.services.ingestion.embedding_batcher import EmbeddingBatcher
from docsearch.services.ingestion.keyword_extractor import extract_keywords
from docsearch.services.ingestion.metadata_catalog import MetadataCatalog
from docsearch.services.ingestion.metadata_enricher import MetadataEnricher, flatten_metadata
from docsearch.services.ingestion.upsert_manager import IndexUpsertManager

__all__ = [
    "BootstrapOrchestrator",
    "ContentValidator",
    "CorpusPreparer",
    "DirectoryLoader",
    "EmbeddingBatcher",
    "IndexUpsertManager",
    "MetadataCatalog",
    "MetadataEnricher",
    "TextChunker",
    "extract_keywords",
    "flatten_metadata",
]
