"""API middleware: CORS, request logging, and error handling.

Provides helper functions and middleware classes to configure cross-origin
resource sharing, structured request logging (via structlog), and automatic
conversion of ``DocSearchError`` subclasses into JSON ``ErrorResponse``
bodies.

# ─── MIDDLEWARE EXECUTION ORDER ───────────────────────────────────────
#
# Starlette middleware is a stack (last added, first executed):
#
#   In main.py:
#     app.add_middleware(ErrorHandlingMiddleware)   # added 1st, inner
#     app.add_middleware(RequestLoggingMiddleware)  # added 2nd, outermost
#
#   Request flow:
#     Client → RequestLogging → ErrorHandling → route handler
#
# So RequestLoggingMiddleware sees the *final* response status code,
# including the structured JSON error that ErrorHandling produced.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from docsearch.api.schemas import ErrorResponse
from docsearch.utils.errors import DocSearchError, is_connection_timeout
from docsearch.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------

# Routes only use GET and POST, and no cookies are issued.
_CORS_METHODS = ["GET", "POST"]
_CORS_HEADERS = ["Content-Type"]


def configure_cors(app: FastAPI) -> None:
    """Allow cross-origin ``GET``/``POST`` calls without credentials."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=_CORS_METHODS,
        allow_headers=_CORS_HEADERS,
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


def _is_poll(request: Request) -> bool:
    """Health checks and bootstrap status polls arrive every few seconds."""
    path = request.url.path
    return request.method == "GET" and (
        path.endswith("/health") or path.endswith("/status")
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with its status and duration.

    Polling requests are logged at debug level so a client waiting on a
    bootstrap does not flood the info log.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            log = _logger.debug if _is_poll(request) else _logger.info
            log(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catch ``DocSearchError`` subclasses and return structured JSON errors.

    Connection timeouts become ``504`` with the retry message; every other
    application error becomes ``500``.  Stack traces are logged server-side
    only and never returned to the client.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except DocSearchError as exc:
            status_code = 504 if is_connection_timeout(exc) else 500
            _logger.error(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                path=str(request.url.path),
                status=status_code,
            )
            body = ErrorResponse(
                error=type(exc).__name__,
                detail=exc.message,
            )
            return JSONResponse(
                status_code=status_code,
                content=body.model_dump(),
            )
