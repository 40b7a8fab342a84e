from .base import DifyServiceBase, ResourceService
from .child_chunk import DifyChildChunkService
from .dataset import DifyDatasetService
from .document import DifyDocumentService
from .metadata import DifyMetadataService
from .retrieval import DifyRetrievalService
from .segment import DifySegmentService

__all__ = [
    "DifyServiceBase",
    "ResourceService",
    "DifyChildChunkService",
    "DifyDatasetService",
    "DifyDocumentService",
    "DifyMetadataService",
    "DifyRetrievalService",
    "DifySegmentService",
]
