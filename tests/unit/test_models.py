"""Unit tests for the document, chunk, and bootstrap Pydantic models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from docsearch.models.bootstrap import BatchReport, BootstrapResult, BootstrapStatus
from docsearch.models.documents import (
    Chunk,
    DocumentMetadataRecord,
    RawDocument,
    UpsertRecord,
)


# ======================================================================
# Documents
# ======================================================================


class TestRawDocument:
    def test_source_property(self) -> None:
        assert RawDocument(page_content="x", metadata={"source": "docs/a.pdf"}).source == "docs/a.pdf"
        assert RawDocument(page_content="x").source == ""

    def test_frozen(self) -> None:
        doc = RawDocument(page_content="x")
        with pytest.raises(ValidationError):
            doc.page_content = "y"  # type: ignore[misc]


class TestDocumentMetadataRecord:
    def test_valid_record(self) -> None:
        record = DocumentMetadataRecord(
            filename="a.pdf", title="A", category="ML", type="research", tags=["rl"]
        )
        assert record.category.value == "ML"
        assert record.as_metadata() == {
            "filename": "a.pdf",
            "title": "A",
            "category": "ML",
            "type": "research",
            "tags": ["rl"],
        }

    @pytest.mark.parametrize("field", ["category", "type"])
    def test_unknown_enum_value_rejected(self, field: str) -> None:
        data = {"filename": "a.pdf", "title": "A", "category": "AI", "type": "article"}
        data[field] = "poetry"
        with pytest.raises(ValidationError):
            DocumentMetadataRecord(**data)

    def test_metrics_keep_unknown_figures(self) -> None:
        record = DocumentMetadataRecord(
            filename="a.pdf",
            title="A",
            category="SaaS",
            type="case_study",
            metrics={"arr": 1.5e6, "churn": 0.02},
        )
        assert record.as_metadata()["metrics"] == {"arr": 1.5e6, "churn": 0.02}


# ======================================================================
# Chunk / UpsertRecord
# ======================================================================


def _chunk(**overrides) -> Chunk:  # noqa: ANN003
    data = {
        "id": "c1",
        "content": "text",
        "chunk_index": 0,
        "total_chunks": 1,
        "content_length": 4,
        "summary": "text",
        "keywords": ["text"],
        "metadata": {"title": "Doc", "chunkIndex": 99},
    }
    data.update(overrides)
    return Chunk(**data)


class TestChunk:
    def test_structural_fields_win(self) -> None:
        rendered = _chunk().to_metadata()
        assert rendered["chunkIndex"] == 0
        assert rendered["title"] == "Doc"

    def test_none_neighbours_omitted(self) -> None:
        rendered = _chunk().to_metadata()
        assert "previousChunk" not in rendered
        assert "nextChunk" not in rendered

    def test_upsert_record_from_chunk(self) -> None:
        chunk = _chunk(next_chunk="more", total_chunks=2)
        record = UpsertRecord.from_chunk(chunk, [0.5, 0.5])

        assert record.id == "c1"
        assert record.vector == [0.5, 0.5]
        assert record.content == "text"
        assert record.metadata["nextChunk"] == "more"


# ======================================================================
# Bootstrap results
# ======================================================================


class TestBootstrapResult:
    @pytest.mark.parametrize(
        ("status", "code", "success"),
        [
            (BootstrapStatus.SKIPPED, 200, True),
            (BootstrapStatus.SUCCEEDED, 200, True),
            (BootstrapStatus.FAILED_NO_DOCUMENTS, 400, False),
            (BootstrapStatus.FAILED_TIMEOUT, 504, False),
            (BootstrapStatus.FAILED, 500, False),
        ],
    )
    def test_status_codes(self, status: BootstrapStatus, code: int, success: bool) -> None:
        result = BootstrapResult(index_name="docs", status=status)
        assert result.status_code == code
        assert result.is_success is success

    def test_batch_report_counts_failures(self) -> None:
        report = BatchReport(batches_total=5, batches_succeeded=4, failed_batches=[2])
        assert report.batches_failed == 1
