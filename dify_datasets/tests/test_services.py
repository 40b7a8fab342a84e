"""
Tests for Dify service layer.

These tests mock the HTTP client to test request building, response
parsing and error propagation of each resource service.
"""

import json
from unittest.mock import Mock, patch

import httpx
import pytest

from dify_datasets.client import DifyDatasetsClient
from dify_datasets.conf import DifyConfig
from dify_datasets.exceptions import (
    DifyAPIError,
    DifyConnectionError,
    DifyIndexingTimeoutError,
    DifySerializationError,
    DifyTransportError,
    DifyValidationError,
)
from dify_datasets.http_client import DifyHttpClient
from dify_datasets.models import Dataset, DatasetPage, IndexingStatus


@pytest.fixture
def mock_http_client():
    """Create a mocked HTTP client."""
    client = Mock(spec=DifyHttpClient)
    return client


@pytest.fixture
def service(mock_http_client):
    """Create a DifyDatasetsClient with mocked HTTP client."""
    return DifyDatasetsClient(http_client=mock_http_client)


def json_response(data):
    response = Mock(spec=httpx.Response)
    response.is_success = True
    response.status_code = 200
    response.json.return_value = data
    return response


class TestDatasetService:
    """Test dataset methods."""

    def test_create_dataset(self, service, mock_http_client):
        """Test creating a dataset sends only provided fields."""
        mock_http_client.post.return_value = json_response(
            {"id": "ds1", "name": "docs", "permission": "only_me"}
        )

        dataset = service.create_dataset(name="docs", permission="only_me")

        assert isinstance(dataset, Dataset)
        assert dataset.id == "ds1"
        mock_http_client.post.assert_called_once_with(
            "/datasets", json_data={"name": "docs", "permission": "only_me"}
        )

    def test_create_dataset_empty_name(self, service, mock_http_client):
        """Test that an empty name never reaches the server."""
        with pytest.raises(DifyValidationError) as exc_info:
            service.create_dataset(name="")

        assert exc_info.value.field == "name"
        mock_http_client.post.assert_not_called()

    def test_list_datasets(self, service, mock_http_client):
        """Test listing datasets passes page and limit through."""
        mock_http_client.get.return_value = json_response(
            {
                "data": [{"id": "ds1", "name": "A"}, {"id": "ds2", "name": "B"}],
                "has_more": True,
                "total": 5,
                "page": 2,
                "limit": 2,
            }
        )

        page = service.list_datasets(page=2, limit=2, tag_ids=["t1"])

        assert isinstance(page, DatasetPage)
        assert [d.id for d in page.data] == ["ds1", "ds2"]
        assert page.has_more is True
        params = mock_http_client.get.call_args.kwargs["params"]
        assert params["page"] == 2
        assert params["limit"] == 2
        assert params["tag_ids"] == ["t1"]

    def test_update_dataset_without_fields_fetches(self, service, mock_http_client):
        """Test that an empty update reads the dataset instead of patching."""
        mock_http_client.get.return_value = json_response({"id": "ds1", "name": "A"})

        dataset = service.update_dataset("ds1")

        assert dataset.name == "A"
        mock_http_client.patch.assert_not_called()
        mock_http_client.get.assert_called_once_with("/datasets/ds1")

    def test_delete_dataset(self, service, mock_http_client):
        """Test delete returns None and does not parse a body."""
        response = Mock(spec=httpx.Response)
        response.status_code = 204
        mock_http_client.delete.return_value = response

        assert service.delete_dataset("ds1") is None
        response.json.assert_not_called()

    def test_api_error_propagates(self, service, mock_http_client):
        """Test that API errors are re-raised unchanged."""
        error = DifyAPIError("GET /datasets/x: not found", status_code=404)
        mock_http_client.get.side_effect = error

        with pytest.raises(DifyAPIError) as exc_info:
            service.get_dataset("x")

        assert exc_info.value is error

    def test_unexpected_schema(self, service, mock_http_client):
        """Test that a body missing required fields raises DifySerializationError."""
        mock_http_client.get.return_value = json_response({"name": "no id"})

        with pytest.raises(DifySerializationError) as exc_info:
            service.get_dataset("ds1")

        assert exc_info.value.operation == "get dataset"

    def test_non_json_body(self, service, mock_http_client):
        """Test that a non-JSON success body raises DifySerializationError."""
        response = Mock(spec=httpx.Response)
        response.is_success = True
        response.text = "<html>"
        response.json.side_effect = ValueError("Expecting value")
        mock_http_client.get.return_value = response

        with pytest.raises(DifySerializationError):
            service.get_dataset("ds1")


class TestDocumentService:
    """Test document methods."""

    SETTINGS = {
        "doc_language": "English",
        "process_rule": {"mode": "automatic"},
        "retrieval_model": {"search_method": "semantic_search", "top_k": 3},
    }

    def test_create_document_by_text(self, service, mock_http_client):
        mock_http_client.post.return_value = json_response(
            {"document": {"id": "doc1", "name": "intro"}, "batch": "b1"}
        )

        result = service.create_document_by_text(
            "ds1", name="intro", text="hello", **self.SETTINGS
        )

        assert result.document.id == "doc1"
        assert result.batch == "b1"
        path = mock_http_client.post.call_args.args[0]
        body = mock_http_client.post.call_args.kwargs["json_data"]
        assert path == "/datasets/ds1/document/create-by-text"
        assert body["name"] == "intro"
        assert body["doc_form"] == "text_model"

    def test_create_document_without_retrieval_model(self, service, mock_http_client):
        settings = dict(self.SETTINGS, retrieval_model=None)

        with pytest.raises(DifyValidationError) as exc_info:
            service.create_document_by_text("ds1", name="intro", text="hello", **settings)

        assert exc_info.value.field == "retrieval_model"
        mock_http_client.post.assert_not_called()

    def test_create_document_by_file_bytes(self, service, mock_http_client):
        """Test uploads carry a JSON data part and a file part."""
        mock_http_client.upload.return_value = json_response(
            {"document": {"id": "doc1", "name": "a.txt"}, "batch": "b1"}
        )

        service.create_document_by_file(
            "ds1", b"content", filename="a.txt", **self.SETTINGS
        )

        call = mock_http_client.upload.call_args
        assert call.args[0] == "/datasets/ds1/document/create-by-file"
        assert call.kwargs["files"] == {"file": ("a.txt", b"content")}
        data = json.loads(call.kwargs["data"]["data"])
        assert data["process_rule"] == {"mode": "automatic"}
        assert data["doc_language"] == "English"

    def test_create_document_rejects_unknown_source(self, service, mock_http_client):
        with pytest.raises(DifyValidationError) as exc_info:
            service.create_document("ds1", {"text": "hello"}, **self.SETTINGS)

        assert exc_info.value.field == "source"
        mock_http_client.post.assert_not_called()

    def test_update_document_status_rejects_unknown_action(
        self, service, mock_http_client
    ):
        with pytest.raises(DifyValidationError):
            service.update_document_status("ds1", "explode", ["doc1"])
        mock_http_client.patch.assert_not_called()

    def test_update_document_status(self, service, mock_http_client):
        mock_http_client.patch.return_value = json_response({"result": "success"})

        service.update_document_status("ds1", "un_archive", ["doc1", "doc2"])

        mock_http_client.patch.assert_called_once_with(
            "/datasets/ds1/documents/status/un_archive",
            json_data={"document_ids": ["doc1", "doc2"]},
        )

    def test_get_indexing_status(self, service, mock_http_client):
        mock_http_client.get.return_value = json_response(
            {
                "data": [
                    {"id": "doc1", "indexing_status": "completed"},
                    {"id": "doc2", "indexing_status": "splitting"},
                ]
            }
        )

        statuses = service.get_indexing_status("ds1", "b1")

        assert [s.indexing_status for s in statuses] == ["completed", "splitting"]
        mock_http_client.get.assert_called_once_with(
            "/datasets/ds1/documents/b1/indexing-status"
        )


class TestWaitForIndexing:
    """Test the indexing poll loop."""

    def test_returns_when_all_finished(self, service):
        running = [IndexingStatus(id="doc1", indexing_status="indexing")]
        done = [IndexingStatus(id="doc1", indexing_status="error", error="bad pdf")]

        with patch.object(
            service.document, "get_indexing_status", side_effect=[running, running, done]
        ), patch("dify_datasets.services.document.time.sleep") as mock_sleep:
            statuses = service.wait_for_indexing("ds1", "b1", poll_interval=1.0)

        assert statuses == done
        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(1.0)

    def test_times_out(self, service):
        running = [IndexingStatus(id="doc1", indexing_status="parsing")]

        with patch.object(
            service.document, "get_indexing_status", return_value=running
        ), patch(
            "dify_datasets.services.document.time.monotonic",
            side_effect=[0.0, 4.0, 11.0],
        ), patch("dify_datasets.services.document.time.sleep") as mock_sleep:
            with pytest.raises(DifyIndexingTimeoutError) as exc_info:
                service.wait_for_indexing("ds1", "b1", poll_interval=5.0, timeout=10.0)

        assert not isinstance(exc_info.value, DifyTransportError)
        assert exc_info.value.timeout == 10.0
        assert exc_info.value.batch == "b1"
        assert exc_info.value.statuses == running
        mock_sleep.assert_called_once_with(5.0)

    def test_invalid_interval(self, service):
        with pytest.raises(DifyValidationError):
            service.wait_for_indexing("ds1", "b1", poll_interval=0)


class TestSegmentService:
    """Test segment methods."""

    def test_create_segments_empty(self, service, mock_http_client):
        with pytest.raises(DifyValidationError):
            service.create_segments("ds1", "doc1", [])
        mock_http_client.post.assert_not_called()

    def test_update_segment_body(self, service, mock_http_client):
        mock_http_client.post.return_value = json_response(
            {"data": {"id": "s1", "content": "X", "enabled": False}, "doc_form": "text_model"}
        )

        segment = service.update_segment("ds1", "doc1", "s1", content="X", enabled=False)

        assert segment.content == "X"
        mock_http_client.post.assert_called_once_with(
            "/datasets/ds1/documents/doc1/segments/s1",
            json_data={"segment": {"content": "X", "enabled": False}},
        )

    def test_list_segments_drops_unset_filters(self, service, mock_http_client):
        mock_http_client.get.return_value = json_response(
            {"data": [], "has_more": False, "total": 0, "page": 1, "limit": 20}
        )

        service.list_segments("ds1", "doc1", status="completed")

        params = mock_http_client.get.call_args.kwargs["params"]
        assert params["status"] == "completed"
        assert params["keyword"] is None


class TestChildChunkService:
    """Test child chunk methods."""

    def test_create_child_chunk_unwraps_data(self, service, mock_http_client):
        mock_http_client.post.return_value = json_response(
            {"data": {"id": "c1", "segment_id": "s1", "content": "child"}}
        )

        chunk = service.create_child_chunk("ds1", "doc1", "s1", "child")

        assert chunk.id == "c1"
        assert mock_http_client.post.call_args.args[0] == (
            "/datasets/ds1/documents/doc1/segments/s1/child_chunks"
        )

    def test_update_child_chunk_uses_patch(self, service, mock_http_client):
        mock_http_client.patch.return_value = json_response(
            {"id": "c1", "content": "child v2"}
        )

        chunk = service.update_child_chunk("ds1", "doc1", "s1", "c1", "child v2")

        assert chunk.content == "child v2"
        mock_http_client.patch.assert_called_once_with(
            "/datasets/ds1/documents/doc1/segments/s1/child_chunks/c1",
            json_data={"content": "child v2"},
        )

    def test_blank_content_rejected(self, service, mock_http_client):
        with pytest.raises(DifyValidationError):
            service.create_child_chunk("ds1", "doc1", "s1", "")
        mock_http_client.post.assert_not_called()


class TestMetadataService:
    """Test metadata methods."""

    def test_create_metadata_invalid_type(self, service, mock_http_client):
        with pytest.raises(DifyValidationError) as exc_info:
            service.create_metadata("ds1", "author", "colour")

        assert exc_info.value.field == "type"
        mock_http_client.post.assert_not_called()

    def test_toggle_built_in_metadata(self, service, mock_http_client):
        service.toggle_built_in_metadata("ds1", False)
        mock_http_client.post.assert_called_once_with(
            "/datasets/ds1/metadata/built-in/disable"
        )

    def test_update_document_metadata_keeps_null_values(
        self, service, mock_http_client
    ):
        """Test that a null value is sent so the server clears it."""
        service.update_document_metadata(
            "ds1",
            [
                {
                    "document_id": "doc1",
                    "metadata_list": [{"id": "m1", "name": "author", "value": None}],
                }
            ],
        )

        body = mock_http_client.post.call_args.kwargs["json_data"]
        assert body == {
            "operation_data": [
                {
                    "document_id": "doc1",
                    "metadata_list": [{"id": "m1", "name": "author", "value": None}],
                }
            ]
        }


class TestRetrievalService:
    """Test retrieval."""

    def test_retrieve_forwards_score_threshold(self, service, mock_http_client):
        mock_http_client.post.return_value = json_response(
            {"query": {"content": "q"}, "records": []}
        )

        result = service.retrieve(
            "ds1",
            "q",
            retrieval_model={
                "search_method": "keyword_search",
                "score_threshold_enabled": False,
                "score_threshold": 0.5,
            },
        )

        assert result.records == []
        body = mock_http_client.post.call_args.kwargs["json_data"]
        assert body == {
            "query": "q",
            "retrieval_model": {
                "search_method": "keyword_search",
                "score_threshold_enabled": False,
                "score_threshold": 0.5,
            },
        }


class TestHealthCheck:
    """Test health check."""

    def test_health_check_success(self, service, mock_http_client):
        mock_http_client.get.return_value = json_response({"data": []})
        assert service.health_check() is True

    def test_health_check_failure(self, service, mock_http_client):
        mock_http_client.get.side_effect = DifyConnectionError("Connection refused")
        assert service.health_check() is False


class TestClientConstruction:
    """Test facade construction."""

    def test_services_share_http_client(self, service, mock_http_client):
        assert service.dataset.http_client is mock_http_client
        assert service.retrieval.http_client is mock_http_client

    def test_from_config(self):
        client = DifyDatasetsClient.from_config(
            DifyConfig(base_url="http://other/v1", api_key="k", read_timeout_ms=1000)
        )

        assert client.http_client.base_url == "http://other/v1"
        assert client.http_client.read_timeout == 1.0
        client.close()

    def test_from_config_ignores_malformed_settings(self, monkeypatch):
        monkeypatch.setenv("DIFY_READ_TIMEOUT_MS", "soon")

        client = DifyDatasetsClient.from_config(
            DifyConfig(base_url="http://other/v1", api_key="k", read_timeout_ms=1000)
        )

        assert client.http_client.read_timeout == 1.0
        assert client.http_client.connect_timeout == 5.0
        client.close()
