"""Unit tests for factory functions in docsearch/main.py.

Covers provider selection, component assembly, and the create_app
factory with mocked external dependencies so no network calls or API
keys are required.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI

from docsearch.config.settings import Settings
from docsearch.utils.errors import ConfigurationError
from tests.conftest import MockEmbeddingProvider, MockVectorStore


# ======================================================================
# Shared helpers
# ======================================================================


def _settings(**overrides) -> Settings:  # noqa: ANN003
    """Build a Settings instance with safe defaults and optional overrides."""
    defaults = {
        "openai_api_key": "",
        "openai_base_url": "",
        "openai_embedding_model": "",
        "pinecone_api_key": "",
        "embedding_provider": "fastembed",
        "vector_store_provider": "chromadb",
        "app_env": "test",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


def _config(**sections) -> dict:  # noqa: ANN003
    config = {
        "embedding": {"openai_model": "text-embedding-3-small", "fastembed_model": "BAAI/bge-small-en-v1.5"},
        "vector_store": {"index_name": "test-index", "chromadb_persist_dir": "/tmp/chroma"},
        "corpus": {"docs_dir": "docs", "metadata_catalog_path": "docs/db.json"},
        "ingestion": {"batch_delay_seconds": 0},
    }
    config.update(sections)
    return config


# ======================================================================
# _build_embedding_provider
# ======================================================================


class TestBuildEmbeddingProvider:
    def test_fastembed(self) -> None:
        from docsearch.main import _build_embedding_provider

        provider = _build_embedding_provider(_settings(), _config())
        assert provider.get_provider_name() == "fastembed_bge-small-en-v1.5"

    def test_openai_uses_configured_model(self) -> None:
        from docsearch.main import _build_embedding_provider

        with patch(
            "docsearch.providers.embedding.openai_embedding_provider.openai.AsyncOpenAI",
            return_value=MagicMock(),
        ):
            provider = _build_embedding_provider(
                _settings(embedding_provider="OpenAI", openai_api_key="sk-test"),
                _config(embedding={"openai_model": "text-embedding-3-large"}),
            )
        assert provider.get_dimension() == 3072

    def test_unknown_provider(self) -> None:
        from docsearch.main import _build_embedding_provider

        with pytest.raises(ConfigurationError):
            _build_embedding_provider(_settings(embedding_provider="word2vec"), _config())


# ======================================================================
# _build_vector_store
# ======================================================================


class TestBuildVectorStore:
    def test_pinecone_requires_key(self) -> None:
        from docsearch.main import _build_vector_store

        with pytest.raises(ConfigurationError):
            _build_vector_store(_settings(vector_store_provider="pinecone"), _config())

    def test_pinecone_with_key(self) -> None:
        from docsearch.main import _build_vector_store

        with patch("docsearch.providers.vector_store.pinecone_provider.Pinecone") as client_cls:
            store = _build_vector_store(
                _settings(vector_store_provider="pinecone", pinecone_api_key="pc-test"),
                _config(),
            )
        assert store.get_provider_name() == "pinecone"
        client_cls.assert_called_once_with(api_key="pc-test")

    def test_chromadb_uses_persist_dir(self) -> None:
        from docsearch.main import _build_vector_store

        with patch(
            "docsearch.providers.vector_store.chromadb_provider.chromadb.PersistentClient"
        ) as client_cls:
            store = _build_vector_store(_settings(), _config())
        assert store.get_provider_name() == "chromadb"
        assert client_cls.call_args.kwargs["path"] == "/tmp/chroma"

    def test_config_provider_takes_precedence(self) -> None:
        from docsearch.main import _build_vector_store

        with pytest.raises(ConfigurationError):
            _build_vector_store(
                _settings(vector_store_provider="chromadb"),
                _config(vector_store={"provider": "pinecone"}),
            )

    def test_unknown_store(self) -> None:
        from docsearch.main import _build_vector_store

        with pytest.raises(ConfigurationError):
            _build_vector_store(_settings(vector_store_provider="faiss"), _config())


# ======================================================================
# build_components
# ======================================================================


class TestBuildComponents:
    def test_returns_expected_keys(self) -> None:
        from docsearch.main import build_components

        components = build_components(
            _settings(),
            _config(),
            embedding_provider=MockEmbeddingProvider(),
            vector_store=MockVectorStore(),
        )

        for key in (
            "orchestrator",
            "bootstrap_runner",
            "preparer",
            "index_name",
            "provider_registry",
            "ingestion_config",
        ):
            assert key in components
        assert components["index_name"] == "test-index"
        assert components["provider_registry"]["embedding"] is True
        assert components["provider_registry"]["vector_store_name"] == "mock-vector-store"

    def test_invalid_ingestion_config_fails_fast(self) -> None:
        from docsearch.main import build_components

        with pytest.raises(ConfigurationError):
            build_components(
                _settings(),
                _config(ingestion={"chunk_size": 100, "chunk_overlap": 500}),
                embedding_provider=MockEmbeddingProvider(),
                vector_store=MockVectorStore(),
            )


# ======================================================================
# create_app
# ======================================================================


class TestCreateApp:
    def test_returns_fastapi_instance(self) -> None:
        from docsearch.main import create_app

        app = create_app(_settings(), components={})
        assert isinstance(app, FastAPI)
        assert app.title == "docsearch API"
        assert app.version == "0.1.0"

    def test_app_has_api_routes(self) -> None:
        from docsearch.main import create_app

        app = create_app(_settings(), components={})
        paths = {route.path for route in app.routes}
        assert "/api/v1/bootstrap" in paths
        assert "/api/v1/bootstrap/{index_name}/status" in paths
        assert "/api/v1/health" in paths
