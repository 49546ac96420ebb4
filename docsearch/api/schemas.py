"""Pydantic request/response schemas for the docsearch API.

Defines the public contract for the REST endpoints: bootstrap launch,
bootstrap status polling, and health.

# ─── HOW SCHEMAS WORK ─────────────────────────────────────────────────
#
# FastAPI uses these models to validate incoming JSON, serialize
# outgoing objects (via response_model=...), and generate the OpenAPI
# docs at /docs.  Request schemas end with "Request", response schemas
# end with "Response".
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from docsearch.models.bootstrap import BootstrapPhase, BootstrapResult


class BootstrapRequest(BaseModel):
    """Optional body of ``POST /bootstrap``."""

    target_index: str | None = Field(
        default=None,
        min_length=1,
        description="Index to bootstrap; defaults to the configured index name.",
    )


class BootstrapAcceptedResponse(BaseModel):
    """Returned as soon as a bootstrap run has been scheduled.

    ``success`` only means the run was launched; the run's outcome is
    available from the status endpoint.
    """

    success: bool = True
    message: str = "Bootstrap process initiated"
    index: str


class BootstrapStatusResponse(BaseModel):
    """Current state of the latest bootstrap run for one index."""

    index: str
    phase: BootstrapPhase
    done: bool
    result: BootstrapResult | None = None
    status_code: int | None = Field(
        default=None,
        description="HTTP-style outcome code once the run has finished.",
    )


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
