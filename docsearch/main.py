"""docsearch FastAPI application entry point.

Wires together providers, ingestion services, and routes via dependency
injection.  Loads configuration from ``.env`` and ``config/config.yaml``,
and configures structured logging.

Also exposes :func:`build_components` for the CLI, which runs the same
bootstrap in the foreground without starting a web server.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from docsearch.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from docsearch.api.routes import router as api_router
from docsearch.config.ingestion import IngestionConfig
from docsearch.config.loader import load_config
from docsearch.config.settings import Settings
from docsearch.interfaces.embedding_provider import IEmbeddingProvider
from docsearch.interfaces.vector_store_provider import IVectorStoreProvider
from docsearch.pipeline.bootstrap_runner import BootstrapRunner
from docsearch.services.ingestion.bootstrap import BootstrapOrchestrator, CorpusPreparer
from docsearch.services.ingestion.chunker import TextChunker
from docsearch.services.ingestion.content_validator import ContentValidator
from docsearch.services.ingestion.document_loader import DirectoryLoader
from docsearch.services.ingestion.embedding_batcher import EmbeddingBatcher
from docsearch.services.ingestion.metadata_catalog import MetadataCatalog
from docsearch.services.ingestion.metadata_enricher import MetadataEnricher
from docsearch.services.ingestion.upsert_manager import IndexUpsertManager
from docsearch.utils.errors import ConfigurationError
from docsearch.utils.logging import configure_logging, get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_APP_VERSION = "0.1.0"


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def _build_embedding_provider(app_settings: Settings, config: dict[str, Any]) -> IEmbeddingProvider:
    """Instantiate the embedding provider named by ``embedding.provider``."""
    embedding_config = config.get("embedding", {})
    name = str(embedding_config.get("provider", app_settings.embedding_provider)).lower()

    if name == "openai":
        from docsearch.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        return OpenAIEmbeddingProvider(
            settings=app_settings, model=embedding_config.get("openai_model")
        )
    if name == "fastembed":
        from docsearch.providers.embedding.fastembed_embedding_provider import (
            FastEmbedEmbeddingProvider,
        )

        return FastEmbedEmbeddingProvider(model_name=embedding_config.get("fastembed_model"))

    raise ConfigurationError(message=f"Unknown embedding provider '{name}'")


def _build_vector_store(app_settings: Settings, config: dict[str, Any]) -> IVectorStoreProvider:
    """Instantiate the vector store named by ``vector_store.provider``."""
    store_config = config.get("vector_store", {})
    name = str(store_config.get("provider", app_settings.vector_store_provider)).lower()

    if name == "pinecone":
        if not app_settings.pinecone_api_key:
            raise ConfigurationError(
                message="PINECONE_API_KEY is required for the pinecone vector store",
                provider_name="pinecone",
            )
        from docsearch.providers.vector_store.pinecone_provider import PineconeProvider

        return PineconeProvider(
            api_key=app_settings.pinecone_api_key,
            cloud=store_config.get("pinecone_cloud", app_settings.pinecone_cloud),
            region=store_config.get("pinecone_region", app_settings.pinecone_region),
            metric=store_config.get("pinecone_metric", app_settings.pinecone_metric),
        )
    if name == "chromadb":
        from docsearch.providers.vector_store.chromadb_provider import ChromaDBProvider

        return ChromaDBProvider(
            persist_directory=store_config.get(
                "chromadb_persist_dir", app_settings.chromadb_persist_dir
            )
        )

    raise ConfigurationError(message=f"Unknown vector store provider '{name}'")


# ---------------------------------------------------------------------------
# DI assembly
# ---------------------------------------------------------------------------


def build_preparer(config: dict[str, Any], ingestion: IngestionConfig) -> CorpusPreparer:
    """Construct the provider-free half of the pipeline."""
    corpus = config.get("corpus", {})
    return CorpusPreparer(
        loader=DirectoryLoader(corpus.get("docs_dir", "docs")),
        catalog=MetadataCatalog(corpus.get("metadata_catalog_path", "docs/db.json")),
        validator=ContentValidator(max_chars=ingestion.max_content_chars),
        chunker=TextChunker(
            chunk_size=ingestion.chunk_size,
            chunk_overlap=ingestion.chunk_overlap,
        ),
        enricher=MetadataEnricher(
            summary_chars=ingestion.summary_chars,
            max_keywords=ingestion.max_keywords,
        ),
    )


def build_components(
    app_settings: Settings | None = None,
    config: dict[str, Any] | None = None,
    *,
    embedding_provider: IEmbeddingProvider | None = None,
    vector_store: IVectorStoreProvider | None = None,
) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Providers can be passed in to override configuration-driven selection
    (tests inject in-memory fakes this way).

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    app_settings = app_settings or Settings()
    config = config if config is not None else load_config(settings=app_settings)
    ingestion = IngestionConfig.from_config(config)

    embedding_provider = embedding_provider or _build_embedding_provider(app_settings, config)
    vector_store = vector_store or _build_vector_store(app_settings, config)

    preparer = build_preparer(config, ingestion)
    batcher = EmbeddingBatcher(
        embedding_provider=embedding_provider,
        upsert_manager=IndexUpsertManager(vector_store, batch_size=ingestion.upsert_batch_size),
        batch_size=ingestion.embed_batch_size,
        delay_seconds=ingestion.batch_delay_seconds,
    )
    orchestrator = BootstrapOrchestrator(
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        preparer=preparer,
        batcher=batcher,
    )

    provider_registry = {
        "embedding": embedding_provider.is_available(),
        "embedding_name": embedding_provider.get_provider_name(),
        "vector_store": vector_store.is_available(),
        "vector_store_name": vector_store.get_provider_name(),
    }

    return {
        "settings": app_settings,
        "config": config,
        "ingestion_config": ingestion,
        "index_name": config.get("vector_store", {}).get(
            "index_name", app_settings.vector_index_name
        ),
        "embedding_provider": embedding_provider,
        "vector_store": vector_store,
        "preparer": preparer,
        "orchestrator": orchestrator,
        "bootstrap_runner": BootstrapRunner(orchestrator),
        "provider_registry": provider_registry,
    }


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    components: dict[str, Any] | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Parameters
    ----------
    app_settings:
        Settings to use; read from the environment when omitted.
    components:
        Pre-built components (see :func:`build_components`); built on
        startup when omitted.
    """
    app_settings = app_settings or Settings()
    configure_logging(
        log_level=app_settings.log_level,
        json_output=app_settings.app_env == "production",
    )

    @asynccontextmanager
    async def _lifespan(application: FastAPI):  # noqa: ANN202
        """Initialise providers and services on startup, drain runs on shutdown."""
        built = components if components is not None else build_components(app_settings)
        for key, value in built.items():
            setattr(application.state, key, value)

        _logger.info(
            "app_startup",
            version=_APP_VERSION,
            environment=app_settings.app_env,
            index_name=built["index_name"],
            providers=built["provider_registry"],
        )

        yield

        runner: BootstrapRunner = built["bootstrap_runner"]
        await runner.shutdown()
        _logger.info("app_shutdown")

    application = FastAPI(
        title="docsearch API",
        version=_APP_VERSION,
        description=(
            "Semantic document search back end: bootstraps a vector index from "
            "a directory of PDFs with curated metadata."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    # -- API routes --
    application.include_router(api_router)

    return application


def run() -> None:
    """Serve the application with uvicorn."""
    app_settings = Settings()
    uvicorn.run(
        "docsearch.main:create_app",
        factory=True,
        host=app_settings.app_host,
        port=app_settings.app_port,
        reload=(app_settings.app_env == "development"),
    )


if __name__ == "__main__":
    run()
