"""docsearch API layer: routes, schemas, and middleware."""

from docsearch.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from docsearch.api.routes import router
from docsearch.api.schemas import (
    BootstrapAcceptedResponse,
    BootstrapRequest,
    BootstrapStatusResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "BootstrapAcceptedResponse",
    "BootstrapRequest",
    "BootstrapStatusResponse",
    "ErrorResponse",
    "HealthResponse",
]
