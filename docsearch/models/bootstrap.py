"""Bootstrap run state models.

A bootstrap run walks a fixed sequence of phases and ends in exactly one
terminal :class:`BootstrapStatus`.  The orchestrator never raises out of a
run: every outcome, including failures, is returned as a
:class:`BootstrapResult` so a detached background task always has something
to report.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BootstrapPhase(str, Enum):  # noqa: UP042 (StrEnum requires Python 3.11+)
    """Phases of a bootstrap run, in execution order.

        CHECK_INDEX → CHECK_POPULATED → LOAD_DOCUMENTS → MATCH_METADATA →
        PROCESS → EMBED_AND_UPSERT → DONE

    ``CHECK_POPULATED`` may jump straight to ``DONE`` (index already has
    vectors).  Any phase may end in ``FAILED``.
    """

    PENDING = "PENDING"
    CHECK_INDEX = "CHECK_INDEX"
    CHECK_POPULATED = "CHECK_POPULATED"
    LOAD_DOCUMENTS = "LOAD_DOCUMENTS"
    MATCH_METADATA = "MATCH_METADATA"
    PROCESS = "PROCESS"
    EMBED_AND_UPSERT = "EMBED_AND_UPSERT"
    DONE = "DONE"
    FAILED = "FAILED"


class BootstrapStatus(str, Enum):  # noqa: UP042
    """Terminal outcome of a bootstrap run."""

    SKIPPED = "skipped"                          # index already populated
    SUCCEEDED = "succeeded"
    FAILED_NO_DOCUMENTS = "failed_no_documents"  # client error
    FAILED_TIMEOUT = "failed_timeout"            # retryable
    FAILED = "failed"


_STATUS_CODES: dict[BootstrapStatus, int] = {
    BootstrapStatus.SKIPPED: 200,
    BootstrapStatus.SUCCEEDED: 200,
    BootstrapStatus.FAILED_NO_DOCUMENTS: 400,
    BootstrapStatus.FAILED_TIMEOUT: 504,
    BootstrapStatus.FAILED: 500,
}


class BatchReport(BaseModel):
    """Statistics from the embed-and-upsert stage of one run."""

    model_config = ConfigDict(frozen=True)

    batches_total: int = Field(default=0, ge=0)
    batches_succeeded: int = Field(default=0, ge=0)
    failed_batches: list[int] = Field(
        default_factory=list,
        description="1-based numbers of batches that were skipped.",
    )
    chunks_embedded: int = Field(default=0, ge=0)
    vectors_upserted: int = Field(default=0, ge=0)

    @property
    def batches_failed(self) -> int:
        return len(self.failed_batches)


class BootstrapResult(BaseModel):
    """Summary of a single bootstrap run against one index.

    ``skipped_unmatched`` / ``skipped_invalid`` make silently excluded
    documents visible: a successful run with a low ``chunks_created`` can
    be explained from the result alone.
    """

    model_config = ConfigDict(frozen=True)

    index_name: str
    status: BootstrapStatus
    message: str = ""
    documents_loaded: int = Field(default=0, ge=0)
    documents_processed: int = Field(default=0, ge=0)
    skipped_unmatched: int = Field(default=0, ge=0)
    skipped_invalid: int = Field(default=0, ge=0)
    unmatched_records: int = Field(
        default=0,
        ge=0,
        description="Catalog records with no loaded document.",
    )
    chunks_created: int = Field(default=0, ge=0)
    batches_total: int = Field(default=0, ge=0)
    batches_failed: int = Field(default=0, ge=0)
    vectors_upserted: int = Field(default=0, ge=0)
    elapsed_seconds: float = Field(default=0.0, ge=0.0)

    @property
    def status_code(self) -> int:
        """HTTP-style code for the outcome (200, 400, 504 or 500)."""
        return _STATUS_CODES[self.status]

    @property
    def is_success(self) -> bool:
        return self.status in (BootstrapStatus.SKIPPED, BootstrapStatus.SUCCEEDED)
