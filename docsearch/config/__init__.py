"""Configuration module: exports Settings, IngestionConfig, load_config, and a module-level singleton."""

from docsearch.config.ingestion import IngestionConfig
from docsearch.config.loader import load_config
from docsearch.config.settings import Settings

settings = Settings()

__all__ = ["IngestionConfig", "Settings", "load_config", "settings"]
