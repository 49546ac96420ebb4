"""Public interface definitions for the external services docsearch uses.

The embedding model and the vector index are reached exclusively through
the abstract base classes defined here.  Concrete adapters implement these
interfaces and are injected at runtime (see ``docsearch/main.py``), so unit
tests can pass in-memory fakes and deployments can switch backends through
configuration alone.

CONCRETE PROVIDER MAP:
    Interface                  Concrete implementations (docsearch/providers/)
    ---------------------------------------------------------------------
    IEmbeddingProvider         FastEmbedEmbeddingProvider,
                               OpenAIEmbeddingProvider
    IVectorStoreProvider       ChromaDBProvider, PineconeProvider
"""

from docsearch.interfaces.embedding_provider import EmbeddingInputType, IEmbeddingProvider
from docsearch.interfaces.vector_store_provider import IVectorStoreProvider

__all__ = [
    "EmbeddingInputType",
    "IEmbeddingProvider",
    "IVectorStoreProvider",
]
