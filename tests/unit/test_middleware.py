"""Unit tests for CORS, request logging, and error-handling middleware."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.requests import Request

from docsearch.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    _is_poll,
    configure_cors,
)
from docsearch.utils.errors import ConnectionTimeoutError, VectorStoreError


def _app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    configure_cors(app)

    @app.get("/ok")
    async def ok() -> dict:
        return {"ok": True}

    @app.get("/timeout")
    async def timeout() -> dict:
        raise ConnectionTimeoutError(provider_name="pinecone")

    @app.get("/broken")
    async def broken() -> dict:
        raise VectorStoreError("index unreachable", provider_name="chromadb")

    return app


@pytest.fixture()
def client() -> TestClient:
    return TestClient(_app())


def _request(method: str, path: str) -> Request:
    return Request({"type": "http", "method": method, "path": path, "headers": []})


class TestErrorHandling:
    def test_timeout_maps_to_504(self, client: TestClient) -> None:
        response = client.get("/timeout")

        assert response.status_code == 504
        assert response.json()["error"] == "ConnectionTimeoutError"
        assert response.json()["detail"] == "Operation timed out - please try again"

    def test_other_errors_map_to_500(self, client: TestClient) -> None:
        response = client.get("/broken")

        assert response.status_code == 500
        assert response.json()["detail"] == "index unreachable"

    def test_successful_requests_pass_through(self, client: TestClient) -> None:
        assert client.get("/ok").json() == {"ok": True}


class TestCors:
    def test_post_preflight_allowed_without_credentials(self, client: TestClient) -> None:
        response = client.options(
            "/ok",
            headers={
                "Origin": "https://docs.example.com",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "access-control-allow-credentials" not in response.headers

    def test_unused_methods_rejected(self, client: TestClient) -> None:
        response = client.options(
            "/ok",
            headers={
                "Origin": "https://docs.example.com",
                "Access-Control-Request-Method": "DELETE",
            },
        )
        assert response.status_code == 400


class TestPollDetection:
    def test_health_and_status_polls(self) -> None:
        assert _is_poll(_request("GET", "/api/v1/health"))
        assert _is_poll(_request("GET", "/api/v1/bootstrap/docs/status"))

    def test_bootstrap_launch_is_not_a_poll(self) -> None:
        assert not _is_poll(_request("POST", "/api/v1/bootstrap"))
        assert not _is_poll(_request("GET", "/api/v1/bootstrap"))
