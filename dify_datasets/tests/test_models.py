"""
Tests for Dify Pydantic models.
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from dify_datasets.models import (
    ChildChunkPage,
    CreateDatasetRequest,
    CreateDocumentByTextRequest,
    CreateSegmentsRequest,
    DatasetPage,
    DocumentSource,
    FileSource,
    IndexingStatus,
    MetadataList,
    ProcessRule,
    RetrievalModel,
    RetrieveResponse,
    Segment,
    TextSource,
    UpdateDocumentByTextRequest,
)


class TestPage:
    """Test the generic page model."""

    def test_dataset_page(self):
        page = DatasetPage.model_validate(
            {
                "data": [{"id": "ds1", "name": "D"}],
                "has_more": False,
                "total": 1,
                "page": 1,
                "limit": 20,
            }
        )
        assert page.data[0].id == "ds1"
        assert page.has_more is False
        assert page.total_pages == 1

    def test_has_more_derived_from_counts(self):
        page = DatasetPage.model_validate(
            {"data": [{"id": "a", "name": "A"}], "total": 3, "page": 1, "limit": 1}
        )
        assert page.has_more is True

    def test_has_more_derived_from_total_pages(self):
        page = ChildChunkPage.model_validate(
            {
                "data": [{"id": "c1", "content": "x"}],
                "total": 1,
                "total_pages": 1,
                "page": 1,
                "limit": 20,
            }
        )
        assert page.has_more is False


class TestDatasetModels:
    """Test dataset request models."""

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            CreateDatasetRequest(name="   ")

    def test_name_too_long_rejected(self):
        with pytest.raises(ValidationError):
            CreateDatasetRequest(name="x" * 41)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            CreateDatasetRequest(name="D", colour="blue")


class TestDocumentModels:
    """Test document models."""

    def test_process_rule_custom_requires_rules(self):
        with pytest.raises(ValidationError):
            ProcessRule(mode="custom")

    def test_process_rule_custom_with_rules(self):
        rule = ProcessRule(
            mode="custom",
            rules={
                "pre_processing_rules": [{"id": "remove_urls_emails", "enabled": True}],
                "segmentation": {"separator": "###", "max_tokens": 500},
            },
        )
        assert rule.rules.segmentation.max_tokens == 500

    def test_create_by_text_requires_settings(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateDocumentByTextRequest(name="doc", text="hello")

        missing = {err["loc"][0] for err in exc_info.value.errors()}
        assert missing == {"doc_language", "process_rule", "retrieval_model"}

    def test_create_by_text_payload(self):
        request = CreateDocumentByTextRequest(
            name="doc",
            text="hello",
            doc_language="English",
            process_rule={"mode": "automatic"},
            retrieval_model={"search_method": "hybrid_search", "top_k": 2},
        )
        payload = request.model_dump(mode="json", exclude_none=True)

        assert payload["doc_form"] == "text_model"
        assert payload["retrieval_model"] == {"search_method": "hybrid_search", "top_k": 2}
        assert payload["process_rule"] == {"mode": "automatic"}

    def test_update_by_text_needs_a_field(self):
        with pytest.raises(ValidationError):
            UpdateDocumentByTextRequest()

    def test_update_by_text_needs_name_with_text(self):
        with pytest.raises(ValidationError):
            UpdateDocumentByTextRequest(text="new content")

    def test_indexing_status_finished(self):
        assert IndexingStatus(id="d", indexing_status="completed").is_finished
        assert IndexingStatus(id="d", indexing_status="error").is_finished
        assert not IndexingStatus(id="d", indexing_status="splitting").is_finished


class TestDocumentSource:
    """Test the text/file source union."""

    def test_discriminated_by_kind(self):
        adapter = TypeAdapter(DocumentSource)

        text = adapter.validate_python({"kind": "text", "name": "n", "text": "t"})
        raw = adapter.validate_python(
            {"kind": "file", "file": b"data", "filename": "a.txt"}
        )

        assert isinstance(text, TextSource)
        assert isinstance(raw, FileSource)

    def test_file_path_must_exist(self, tmp_path):
        with pytest.raises(ValidationError):
            FileSource(file=str(tmp_path / "missing.pdf"))

    def test_filename_from_path(self, tmp_path):
        path = tmp_path / "report.pdf"
        path.write_bytes(b"%PDF")
        assert FileSource(file=str(path)).filename == "report.pdf"

    def test_filename_from_handle(self, tmp_path):
        path = tmp_path / "notes.md"
        path.write_text("# notes")
        with open(path, "rb") as f:
            assert FileSource(file=f).filename == "notes.md"

    def test_raw_bytes_need_filename(self):
        with pytest.raises(ValidationError):
            FileSource(file=b"data")


class TestSegmentModels:
    """Test segment models."""

    def test_empty_segments_rejected(self):
        with pytest.raises(ValidationError):
            CreateSegmentsRequest(segments=[])

    def test_blank_content_rejected(self):
        with pytest.raises(ValidationError):
            CreateSegmentsRequest(segments=[{"content": "  "}])

    def test_null_lists_become_empty(self):
        segment = Segment(id="s1", content="x", keywords=None, child_chunks=None)
        assert segment.keywords == []
        assert segment.child_chunks == []


class TestRetrievalModels:
    """Test retrieval models."""

    def test_score_threshold_range(self):
        with pytest.raises(ValidationError):
            RetrievalModel(score_threshold=1.5)

    def test_top_k_positive(self):
        with pytest.raises(ValidationError):
            RetrievalModel(top_k=0)

    def test_retrieve_response(self):
        response = RetrieveResponse.model_validate(
            {
                "query": {"content": "what"},
                "records": [
                    {
                        "segment": {
                            "id": "s1",
                            "content": "answer",
                            "document": {"id": "d1", "name": "doc"},
                        },
                        "score": 0.87,
                    }
                ],
            }
        )
        assert response.records[0].segment.document.name == "doc"
        assert response.records[0].score == 0.87


class TestMetadataModels:
    """Test metadata models."""

    def test_metadata_list_get(self):
        metadata = MetadataList.model_validate(
            {
                "doc_metadata": [
                    {"id": "m1", "name": "author", "type": "string", "use_count": 2}
                ],
                "built_in_field_enabled": True,
            }
        )
        assert metadata.get("m1").name == "author"
        assert metadata.get("m2") is None
