"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Settings are read from two sources, in priority order:
#
#   1. Environment variables, e.g. PINECONE_API_KEY=pc-abc123
#   2. The .env file in the project root (local development)
#
# Field ``pinecone_api_key`` maps to env var ``PINECONE_API_KEY``.
# Defaults apply when neither source sets a value.  An empty string means
# "not configured": provider selection in main.py skips such backends.
#
# Ingestion tuning (chunk size, batch sizes, delays) lives in
# config/config.yaml instead; see docsearch/config/loader.py.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """docsearch application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # === Embedding ===
    # "fastembed" runs locally with no key; "openai" needs OPENAI_API_KEY
    # (or an OpenAI-compatible server via OPENAI_BASE_URL).
    embedding_provider: str = "fastembed"
    openai_api_key: str = ""
    openai_base_url: str = ""
    openai_embedding_model: str = ""  # Empty = provider default
    fastembed_model: str = ""  # Empty = provider default

    # === Vector index ===
    vector_store_provider: str = "chromadb"  # "chromadb" or "pinecone"
    vector_index_name: str = "thundersearch"
    chromadb_persist_dir: str = "./data/chromadb"
    pinecone_api_key: str = ""
    pinecone_cloud: str = "aws"
    pinecone_region: str = "us-east-1"
    pinecone_metric: str = "cosine"

    # === Corpus ===
    docs_dir: str = "docs"
    metadata_catalog_path: str = "docs/db.json"

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_vector_stores(self) -> list[str]:
        """Return the vector store backends that have what they need configured."""
        stores = ["chromadb"]
        if self.pinecone_api_key:
            stores.append("pinecone")
        return stores
