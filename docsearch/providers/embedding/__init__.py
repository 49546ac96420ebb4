"""Embedding provider implementations.

Embeddings convert text into numeric vectors that capture semantic meaning.
These vectors are stored in the vector index and used for similarity search.

Two implementations of IEmbeddingProvider:
    1. FastEmbedEmbeddingProvider  ONNX-based, no PyTorch, no API key.
       Default for local development. Uses bge-small-en-v1.5 (384 dims).
    2. OpenAIEmbeddingProvider     text-embedding-3-small (1536 dims), or
       any model served by an OpenAI-compatible endpoint.
"""

from docsearch.providers.embedding.fastembed_embedding_provider import (
    FastEmbedEmbeddingProvider,
)
from docsearch.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["FastEmbedEmbeddingProvider", "OpenAIEmbeddingProvider"]
