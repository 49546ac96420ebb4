"""Utility modules for docsearch.

- **errors** -- Domain exception hierarchy rooted at DocSearchError; each
  concern raises its own subclass so callers can handle failures precisely.
- **logging** -- structlog setup with a dual-renderer pattern (console in
  development, JSON in production) plus run-context binding helpers.
"""

from docsearch.utils.errors import (
    ConfigurationError,
    ConnectionTimeoutError,
    DocSearchError,
    DocumentLoadError,
    EmbeddingError,
    VectorStoreError,
    is_connection_timeout,
)
from docsearch.utils.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "ConfigurationError",
    "ConnectionTimeoutError",
    "DocSearchError",
    "DocumentLoadError",
    "EmbeddingError",
    "VectorStoreError",
    "bind_run_context",
    "clear_run_context",
    "configure_logging",
    "get_logger",
    "is_connection_timeout",
]
