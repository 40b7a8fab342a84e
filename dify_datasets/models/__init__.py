from .base import Page
from .child_chunk import ChildChunk, ChildChunkPage, SaveChildChunkRequest
from .dataset import (
    CreateDatasetRequest,
    Dataset,
    DatasetPage,
    UpdateDatasetRequest,
)
from .document import (
    TERMINAL_INDEXING_STATUSES,
    CreateDocumentByFileRequest,
    CreateDocumentByTextRequest,
    Document,
    DocumentPage,
    DocumentResponse,
    DocumentSettings,
    DocumentSource,
    FileSource,
    IndexingStatus,
    PreProcessingRule,
    ProcessRule,
    ProcessRules,
    Segmentation,
    TextSource,
    UpdateDocumentByFileRequest,
    UpdateDocumentByTextRequest,
    UpdateDocumentStatusRequest,
)
from .metadata import (
    CreateMetadataRequest,
    DocumentMetadataOperation,
    MetadataDefinition,
    MetadataList,
    MetadataValue,
    UpdateDocumentMetadataRequest,
    UpdateMetadataRequest,
)
from .retrieval import (
    RerankingModel,
    RetrievalModel,
    RetrievedDocument,
    RetrievedSegment,
    RetrieveQuery,
    RetrieveRecord,
    RetrieveRequest,
    RetrieveResponse,
    SearchMethod,
)
from .segment import (
    CreateSegmentsRequest,
    Segment,
    SegmentInput,
    SegmentPage,
    SegmentResponse,
    SegmentsCreateResponse,
    SegmentUpdate,
    UpdateSegmentRequest,
)

__all__ = [
    "Page",
    "ChildChunk",
    "ChildChunkPage",
    "SaveChildChunkRequest",
    "CreateDatasetRequest",
    "Dataset",
    "DatasetPage",
    "UpdateDatasetRequest",
    "TERMINAL_INDEXING_STATUSES",
    "CreateDocumentByFileRequest",
    "CreateDocumentByTextRequest",
    "Document",
    "DocumentPage",
    "DocumentResponse",
    "DocumentSettings",
    "DocumentSource",
    "FileSource",
    "IndexingStatus",
    "PreProcessingRule",
    "ProcessRule",
    "ProcessRules",
    "Segmentation",
    "TextSource",
    "UpdateDocumentByFileRequest",
    "UpdateDocumentByTextRequest",
    "UpdateDocumentStatusRequest",
    "CreateMetadataRequest",
    "DocumentMetadataOperation",
    "MetadataDefinition",
    "MetadataList",
    "MetadataValue",
    "UpdateDocumentMetadataRequest",
    "UpdateMetadataRequest",
    "RerankingModel",
    "RetrievalModel",
    "RetrievedDocument",
    "RetrievedSegment",
    "RetrieveQuery",
    "RetrieveRecord",
    "RetrieveRequest",
    "RetrieveResponse",
    "SearchMethod",
    "CreateSegmentsRequest",
    "Segment",
    "SegmentInput",
    "SegmentPage",
    "SegmentResponse",
    "SegmentsCreateResponse",
    "SegmentUpdate",
    "UpdateSegmentRequest",
]
