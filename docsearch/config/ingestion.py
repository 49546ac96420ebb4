"""Validated ingestion tuning parameters.

The ``ingestion`` section of config/config.yaml is parsed into
:class:`IngestionConfig` so a bad value (for example an overlap larger than
the chunk size) fails at startup instead of halfway through a bootstrap.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from docsearch.utils.errors import ConfigurationError


class IngestionConfig(BaseModel):
    """Chunking, enrichment, and batching parameters for a bootstrap run."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    chunk_size: int = Field(default=1000, gt=0, description="Maximum characters per chunk.")
    chunk_overlap: int = Field(default=200, ge=0, description="Characters shared between neighbours.")
    max_content_chars: int = Field(
        default=8192,
        gt=0,
        description="Documents whose stripped text reaches this length are rejected.",
    )
    summary_chars: int = Field(default=1000, gt=0)
    max_keywords: int = Field(default=20, gt=0)
    embed_batch_size: int = Field(default=5, gt=0)
    upsert_batch_size: int = Field(default=2, gt=0)
    batch_delay_seconds: float = Field(default=1.0, ge=0.0)

    @model_validator(mode="after")
    def _overlap_below_size(self) -> IngestionConfig:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        return self

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> IngestionConfig:
        """Build from a full resolved config dict (see :func:`load_config`).

        Raises
        ------
        ConfigurationError
            If the ``ingestion`` section does not validate.
        """
        section = config.get("ingestion") or {}
        try:
            return cls.model_validate(section)
        except ValidationError as exc:
            raise ConfigurationError(
                message=f"Invalid ingestion configuration: {exc}"
            ) from exc
