"""
Dify datasets client.

One facade over every dataset endpoint. Each method issues exactly one
HTTP request and returns a validated pydantic model.
"""

import httpx

from .conf import DifyConfig
from .http_client import DifyHttpClient
from .models import (
    ChildChunk,
    ChildChunkPage,
    Dataset,
    DatasetPage,
    Document,
    DocumentPage,
    DocumentResponse,
    FileSource,
    IndexingStatus,
    MetadataDefinition,
    MetadataList,
    RetrieveResponse,
    Segment,
    SegmentPage,
    SegmentsCreateResponse,
    TextSource,
)
from .services import (
    DifyChildChunkService,
    DifyDatasetService,
    DifyDocumentService,
    DifyMetadataService,
    DifyRetrievalService,
    DifySegmentService,
    DifyServiceBase,
)


class DifyDatasetsClient(DifyServiceBase):
    """
    Client for the Dify knowledge base (datasets) API.

    Resource services are available as attributes:
    - client.dataset
    - client.document
    - client.segment
    - client.child_chunk
    - client.metadata
    - client.retrieval

    Every operation is also exposed directly on the client.

    Example:
        >>> with DifyDatasetsClient("https://api.dify.ai/v1", "dataset-...") as client:
        ...     dataset = client.create_dataset(name="docs")
        ...     page = client.list_datasets(page=1, limit=10)
    """

    def __init__(
        self,
        base_url: str = None,
        api_key: str = None,
        http_client: DifyHttpClient = None,
        transport: httpx.BaseTransport = None,
    ):
        if http_client is None and (base_url or api_key or transport):
            http_client = DifyHttpClient(
                base_url=base_url, api_key=api_key, transport=transport
            )
        super().__init__(http_client)
        self.dataset = DifyDatasetService(self.http_client)
        self.document = DifyDocumentService(self.http_client)
        self.segment = DifySegmentService(self.http_client)
        self.child_chunk = DifyChildChunkService(self.http_client)
        self.metadata = DifyMetadataService(self.http_client)
        self.retrieval = DifyRetrievalService(self.http_client)

    @classmethod
    def from_config(
        cls, config: DifyConfig, transport: httpx.BaseTransport = None
    ) -> "DifyDatasetsClient":
        """Build a client from a DifyConfig (base URL, API key, timeouts in ms)."""
        return cls(http_client=DifyHttpClient.from_config(config, transport=transport))

    # --- Datasets ---

    def create_dataset(self, name: str, **kwargs) -> Dataset:
        return self.dataset.create_dataset(name, **kwargs)

    def list_datasets(self, page: int = 1, limit: int = 20, **kwargs) -> DatasetPage:
        return self.dataset.list_datasets(page=page, limit=limit, **kwargs)

    def get_dataset(self, dataset_id: str) -> Dataset:
        return self.dataset.get_dataset(dataset_id)

    def update_dataset(self, dataset_id: str, **fields) -> Dataset:
        return self.dataset.update_dataset(dataset_id, **fields)

    def delete_dataset(self, dataset_id: str) -> None:
        self.dataset.delete_dataset(dataset_id)

    # --- Documents ---

    def create_document_by_text(
        self, dataset_id: str, name: str, text: str, **settings
    ) -> DocumentResponse:
        return self.document.create_document_by_text(dataset_id, name, text, **settings)

    def create_document_by_file(
        self, dataset_id: str, file, **settings
    ) -> DocumentResponse:
        return self.document.create_document_by_file(dataset_id, file, **settings)

    def create_document(
        self, dataset_id: str, source: TextSource | FileSource, **settings
    ) -> DocumentResponse:
        return self.document.create_document(dataset_id, source, **settings)

    def update_document_by_text(
        self, dataset_id: str, document_id: str, **fields
    ) -> DocumentResponse:
        return self.document.update_document_by_text(dataset_id, document_id, **fields)

    def update_document_by_file(
        self, dataset_id: str, document_id: str, file, **fields
    ) -> DocumentResponse:
        return self.document.update_document_by_file(
            dataset_id, document_id, file, **fields
        )

    def update_document_status(
        self, dataset_id: str, action: str, document_ids: list[str]
    ) -> None:
        self.document.update_document_status(dataset_id, action, document_ids)

    def get_document(self, dataset_id: str, document_id: str, **kwargs) -> Document:
        return self.document.get_document(dataset_id, document_id, **kwargs)

    def list_documents(
        self,
        dataset_id: str,
        keyword: str = None,
        page: int = 1,
        limit: int = 20,
    ) -> DocumentPage:
        return self.document.list_documents(dataset_id, keyword, page, limit)

    def delete_document(self, dataset_id: str, document_id: str) -> None:
        self.document.delete_document(dataset_id, document_id)

    def get_indexing_status(self, dataset_id: str, batch: str) -> list[IndexingStatus]:
        return self.document.get_indexing_status(dataset_id, batch)

    def wait_for_indexing(
        self, dataset_id: str, batch: str, **kwargs
    ) -> list[IndexingStatus]:
        return self.document.wait_for_indexing(dataset_id, batch, **kwargs)

    # --- Segments ---

    def create_segments(
        self, dataset_id: str, document_id: str, segments: list
    ) -> SegmentsCreateResponse:
        return self.segment.create_segments(dataset_id, document_id, segments)

    def list_segments(
        self,
        dataset_id: str,
        document_id: str,
        keyword: str = None,
        status: str = None,
        page: int = 1,
        limit: int = 20,
    ) -> SegmentPage:
        return self.segment.list_segments(
            dataset_id, document_id, keyword, status, page, limit
        )

    def get_segment(self, dataset_id: str, document_id: str, segment_id: str) -> Segment:
        return self.segment.get_segment(dataset_id, document_id, segment_id)

    def update_segment(
        self, dataset_id: str, document_id: str, segment_id: str, content: str, **kwargs
    ) -> Segment:
        return self.segment.update_segment(
            dataset_id, document_id, segment_id, content, **kwargs
        )

    def delete_segment(self, dataset_id: str, document_id: str, segment_id: str) -> None:
        self.segment.delete_segment(dataset_id, document_id, segment_id)

    # --- Child chunks ---

    def create_child_chunk(
        self, dataset_id: str, document_id: str, segment_id: str, content: str
    ) -> ChildChunk:
        return self.child_chunk.create_child_chunk(
            dataset_id, document_id, segment_id, content
        )

    def list_child_chunks(
        self, dataset_id: str, document_id: str, segment_id: str, **kwargs
    ) -> ChildChunkPage:
        return self.child_chunk.list_child_chunks(
            dataset_id, document_id, segment_id, **kwargs
        )

    def update_child_chunk(
        self,
        dataset_id: str,
        document_id: str,
        segment_id: str,
        child_chunk_id: str,
        content: str,
    ) -> ChildChunk:
        return self.child_chunk.update_child_chunk(
            dataset_id, document_id, segment_id, child_chunk_id, content
        )

    def delete_child_chunk(
        self,
        dataset_id: str,
        document_id: str,
        segment_id: str,
        child_chunk_id: str,
    ) -> None:
        self.child_chunk.delete_child_chunk(
            dataset_id, document_id, segment_id, child_chunk_id
        )

    # --- Metadata ---

    def create_metadata(self, dataset_id: str, name: str, type: str) -> MetadataDefinition:
        return self.metadata.create_metadata(dataset_id, name, type)

    def list_metadata(self, dataset_id: str) -> MetadataList:
        return self.metadata.list_metadata(dataset_id)

    def get_metadata(self, dataset_id: str, metadata_id: str) -> MetadataDefinition | None:
        return self.metadata.get_metadata(dataset_id, metadata_id)

    def update_metadata(
        self, dataset_id: str, metadata_id: str, name: str
    ) -> MetadataDefinition:
        return self.metadata.update_metadata(dataset_id, metadata_id, name)

    def delete_metadata(self, dataset_id: str, metadata_id: str) -> None:
        self.metadata.delete_metadata(dataset_id, metadata_id)

    def toggle_built_in_metadata(self, dataset_id: str, enabled: bool) -> None:
        self.metadata.toggle_built_in_metadata(dataset_id, enabled)

    def update_document_metadata(self, dataset_id: str, operation_data: list) -> None:
        self.metadata.update_document_metadata(dataset_id, operation_data)

    # --- Retrieval ---

    def retrieve(
        self, dataset_id: str, query: str, retrieval_model=None
    ) -> RetrieveResponse:
        return self.retrieval.retrieve(dataset_id, query, retrieval_model)
