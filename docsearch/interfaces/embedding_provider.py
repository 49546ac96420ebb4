"""Abstract base class for text-embedding service providers.

Defines the contract for generating embedding vectors from text.
Implementations may wrap an OpenAI-compatible embeddings endpoint, a local
FastEmbed ONNX model, or any other embedding backend.  Swapping providers
is a configuration change; the ingestion services only see this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class EmbeddingInputType(str, Enum):  # noqa: UP042 (StrEnum requires Python 3.11+)
    """Whether the text being embedded is a stored document or a search query.

    Asymmetric retrieval models embed the two sides differently; symmetric
    models ignore the hint.
    """

    DOCUMENT = "document"
    QUERY = "query"


# Concrete implementations:
#   FastEmbedEmbeddingProvider  (lightweight ONNX, no API key)
#   OpenAIEmbeddingProvider     (OpenAI or any compatible /v1/embeddings server)
# Located in: docsearch/providers/embedding/
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by the bootstrap pipeline.

    Embeddings are consumed by
    :class:`~docsearch.interfaces.vector_store_provider.IVectorStoreProvider`
    for indexing and query-time similarity search.
    """

    @abstractmethod
    async def embed(
        self,
        texts: list[str],
        input_type: EmbeddingInputType = EmbeddingInputType.DOCUMENT,
    ) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Parameters
        ----------
        texts:
            One or more text strings to embed.
        input_type:
            Whether *texts* are documents being indexed or queries.

        Returns
        -------
        list[list[float]]
            Embedding vectors corresponding positionally to *texts*.  Each
            inner list has length equal to :meth:`get_dimension`.  Callers
            must not assume the count matches; the batcher checks it.

        Raises
        ------
        docsearch.utils.errors.EmbeddingError
            If the embedding API call fails.
        docsearch.utils.errors.ConnectionTimeoutError
            If the backend could not be reached in time.
        """

    @abstractmethod
    async def embed_single(
        self,
        text: str,
        input_type: EmbeddingInputType = EmbeddingInputType.QUERY,
    ) -> list[float]:
        """Generate an embedding vector for a single text string.

        Convenience wrapper around :meth:`embed` for the common
        single-text case (e.g. embedding a search query).
        """

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the dimensionality of the embedding vectors.

        This value must remain constant for the lifetime of the provider
        instance and must match the dimension of the target index.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"openai-text-embedding-3-small"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured and usable."""
