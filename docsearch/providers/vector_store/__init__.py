"""Vector store provider implementations.

Two implementations of IVectorStoreProvider:
    1. ChromaDBProvider  stores each index as a local persistent collection
       at CHROMADB_PERSIST_DIR (default: ./data/chromadb).  No service needed.
    2. PineconeProvider  stores each index as a Pinecone serverless index.
       Requires PINECONE_API_KEY.

To add another vector database, create a new class implementing
IVectorStoreProvider and register it in main.py.
"""

from docsearch.providers.vector_store.chromadb_provider import ChromaDBProvider
from docsearch.providers.vector_store.pinecone_provider import PineconeProvider

__all__ = ["ChromaDBProvider", "PineconeProvider"]
