"""Custom exception hierarchy for docsearch.

All application exceptions inherit from :class:`DocSearchError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "openai", "pinecone", "chromadb") caused the failure.

The hierarchy is organized by pipeline concern:

    DocSearchError  (base -- catch-all for any docsearch error)
    +-- ConfigurationError       (invalid settings / chunking parameters)
    +-- DocumentLoadError        (a source file could not be read or parsed)
    +-- EmbeddingError           (embedding provider call failed)
    +-- VectorStoreError         (vector index call failed)
    |   +-- PartialUpsertError   (upsert failed after earlier sub-batches were written)
    +-- ConnectionTimeoutError   (provider connection timed out)

The bootstrap orchestrator reports :class:`ConnectionTimeoutError` as a
distinct "timed out, retry" outcome; every other error is a generic failure.
"""

from __future__ import annotations

import asyncio

import httpx


class DocSearchError(Exception):
    """Base exception for all docsearch errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  ``__str__`` prefixes the provider name in brackets for
    structured log output, e.g. ``[pinecone] upsert failed``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Configuration / input errors
# ---------------------------------------------------------------------------

class ConfigurationError(DocSearchError):
    """Raised when configuration is invalid or missing (e.g. overlap >= chunk size)."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class DocumentLoadError(DocSearchError):
    """Raised when a source document cannot be opened or its text extracted."""

    def __init__(
        self,
        message: str = "Document could not be loaded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External provider errors
# ---------------------------------------------------------------------------

class EmbeddingError(DocSearchError):
    """Raised when an embedding provider call fails or returns garbage."""

    def __init__(
        self,
        message: str = "Embedding request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class VectorStoreError(DocSearchError):
    """Raised when a vector index operation (create, stats, upsert, query) fails."""

    def __init__(
        self,
        message: str = "Vector store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class PartialUpsertError(VectorStoreError):
    """Raised when an upsert fails after some of its sub-batches were written.

    ``written`` holds the number of records already stored, so callers can
    keep their counts in line with what the index actually contains.
    """

    def __init__(
        self,
        message: str = "Upsert stopped partway",
        provider_name: str | None = None,
        written: int = 0,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self.written = written


class ConnectionTimeoutError(DocSearchError):
    """Raised when a provider connection times out.

    Callers surface this as a retryable condition; nothing in the pipeline
    retries automatically.
    """

    def __init__(
        self,
        message: str = "Operation timed out - please try again",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


def is_connection_timeout(exc: BaseException) -> bool:
    """Return ``True`` if *exc* is one of the recognized connection-timeout classes."""
    return isinstance(
        exc,
        (ConnectionTimeoutError, httpx.ConnectTimeout, asyncio.TimeoutError, TimeoutError),
    )
