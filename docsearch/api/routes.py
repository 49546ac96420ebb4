"""FastAPI API routes for docsearch.

Provides REST endpoints to launch an index bootstrap, poll its progress,
and check application health.  Service dependencies are resolved from
``app.state`` via FastAPI's ``Depends`` using the ``Annotated`` pattern.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint                              Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/v1/bootstrap                     POST    Launch a background bootstrap
# /api/v1/bootstrap/{index}/status      GET     Poll the latest run for an index
# /api/v1/health                        GET     Health check + provider status
#
# The bootstrap endpoint answers 202 as soon as the run is scheduled.
# The run's own outcome (skipped, succeeded, failed) is only visible
# through the status endpoint and the logs.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from docsearch.api.schemas import (
    BootstrapAcceptedResponse,
    BootstrapRequest,
    BootstrapStatusResponse,
    HealthResponse,
)
from docsearch.pipeline.bootstrap_runner import BootstrapRunner

logger = structlog.get_logger(logger_name=__name__)

_APP_VERSION = "0.1.0"

router = APIRouter(prefix="/api/v1")


# ---------------------------------------------------------------------------
# Dependency injection helpers: resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_runner(request: Request) -> BootstrapRunner:
    """Return the bootstrap runner from application state."""
    return request.app.state.bootstrap_runner


def _get_default_index(request: Request) -> str:
    """Return the configured default index name."""
    return request.app.state.index_name


RunnerDep = Annotated[BootstrapRunner, Depends(_get_runner)]
DefaultIndexDep = Annotated[str, Depends(_get_default_index)]


# ---------------------------------------------------------------------------
# Bootstrap endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/bootstrap",
    response_model=BootstrapAcceptedResponse,
    status_code=202,
    summary="Launch a background index bootstrap",
)
async def start_bootstrap(
    runner: RunnerDep,
    default_index: DefaultIndexDep,
    payload: BootstrapRequest | None = None,
) -> BootstrapAcceptedResponse:
    """Schedule a bootstrap of the target index and return immediately.

    A run already in flight for the same index is not duplicated.
    """
    index_name = (payload.target_index if payload else None) or default_index
    runner.launch(index_name)
    logger.info("bootstrap_requested", index_name=index_name)
    return BootstrapAcceptedResponse(index=index_name)


@router.get(
    "/bootstrap/{index_name}/status",
    response_model=BootstrapStatusResponse,
    summary="Status of the latest bootstrap run for an index",
)
async def bootstrap_status(index_name: str, runner: RunnerDep) -> BootstrapStatusResponse:
    handle = runner.get(index_name)
    if handle is None:
        raise HTTPException(status_code=404, detail=f"No bootstrap launched for '{index_name}'")

    result = handle.result()
    return BootstrapStatusResponse(
        index=index_name,
        phase=handle.phase,
        done=handle.done(),
        result=result,
        status_code=result.status_code if result else None,
    )


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and provider availability."""
    providers: dict[str, Any] = {}
    if hasattr(request.app.state, "provider_registry"):
        providers = dict(request.app.state.provider_registry)

    embedding_ok = bool(providers.get("embedding", False))
    vector_store_ok = bool(providers.get("vector_store", False))

    if embedding_ok and vector_store_ok:
        status = "healthy"
    elif vector_store_ok:
        status = "degraded"
    else:
        status = "unhealthy"

    return HealthResponse(
        status=status,
        version=_APP_VERSION,
        providers=providers,
    )
