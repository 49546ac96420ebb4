"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml  (static defaults checked into the repo)
#   2. .env file           (local developer overrides, not committed)
#   3. Environment vars    (set at deploy time)
#
# load_config() reads the YAML file first, then deep-merges the Settings
# fields that were actually set (env var, .env, or constructor argument).
# Unset fields and empty values are not merged, so an unset
# VECTOR_INDEX_NAME keeps the YAML index name.  Settings defaults only
# fill keys the YAML leaves out.
#
# The _deep_merge helper does recursive dict merging:
#   base = {"embedding": {"model": "BAAI/bge-small-en-v1.5"}}
#   overrides = {"embedding": {"provider": "openai"}}
#   result = {"embedding": {"model": "BAAI/bge-small-en-v1.5", "provider": "openai"}}
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml

from docsearch.config.settings import Settings

# (section, key) in the merged config -> Settings field that feeds it.
_ENV_FIELDS: dict[tuple[str, str], str] = {
    ("app", "host"): "app_host",
    ("app", "port"): "app_port",
    ("app", "env"): "app_env",
    ("embedding", "provider"): "embedding_provider",
    ("embedding", "openai_model"): "openai_embedding_model",
    ("embedding", "fastembed_model"): "fastembed_model",
    ("vector_store", "provider"): "vector_store_provider",
    ("vector_store", "index_name"): "vector_index_name",
    ("vector_store", "chromadb_persist_dir"): "chromadb_persist_dir",
    ("vector_store", "pinecone_cloud"): "pinecone_cloud",
    ("vector_store", "pinecone_region"): "pinecone_region",
    ("vector_store", "pinecone_metric"): "pinecone_metric",
    ("corpus", "docs_dir"): "docs_dir",
    ("corpus", "metadata_catalog_path"): "metadata_catalog_path",
    ("logging", "level"): "log_level",
}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Only Settings fields that were explicitly provided (env var, .env file
    or constructor argument) override the YAML; field defaults never do.

    Args:
        path: Path to the YAML configuration file.  A missing file yields
              an empty base config.
        settings: Pre-built Settings; a fresh instance is created when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    _deep_merge(yaml_config, _env_overrides(settings))
    _fill_defaults(yaml_config, settings)
    yaml_config.setdefault("vector_store", {})["available_providers"] = (
        settings.get_available_vector_stores()
    )
    return yaml_config


def _env_overrides(settings: Settings) -> dict:
    """Return the non-empty values the caller actually set on *settings*."""
    overrides: dict = {}
    for (section, key), field in _ENV_FIELDS.items():
        value = getattr(settings, field)
        if field in settings.model_fields_set and value != "":
            overrides.setdefault(section, {})[key] = value
    return overrides


def _fill_defaults(config: dict, settings: Settings) -> None:
    """Fall back to Settings defaults for keys neither YAML nor env provided."""
    for (section, key), field in _ENV_FIELDS.items():
        value = getattr(settings, field)
        if value == "":
            continue
        config.setdefault(section, {}).setdefault(key, value)


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
