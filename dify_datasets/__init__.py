"""
Python client for the Dify knowledge base (datasets) API.

Usage:
    from dify_datasets import DifyDatasetsClient

    client = DifyDatasetsClient("https://api.dify.ai/v1", "dataset-...")
    dataset = client.create_dataset(name="handbook")
    created = client.create_document_by_text(
        dataset.id,
        name="intro",
        text="hello",
        doc_language="English",
        process_rule={"mode": "automatic"},
        retrieval_model={"search_method": "hybrid_search", "top_k": 2},
    )
    client.wait_for_indexing(dataset.id, created.batch)
"""

from .client import DifyDatasetsClient
from .conf import DifyConfig
from .exceptions import (
    DifyAPIError,
    DifyConfigurationError,
    DifyConnectionError,
    DifyError,
    DifyIndexingTimeoutError,
    DifyRateLimitError,
    DifySerializationError,
    DifyTimeoutError,
    DifyTransportError,
    DifyValidationError,
)
from .http_client import DifyHttpClient

__version__ = "0.1.0"

__all__ = [
    "DifyDatasetsClient",
    "DifyConfig",
    "DifyHttpClient",
    "DifyError",
    "DifyAPIError",
    "DifyConfigurationError",
    "DifyConnectionError",
    "DifyIndexingTimeoutError",
    "DifyRateLimitError",
    "DifySerializationError",
    "DifyTimeoutError",
    "DifyTransportError",
    "DifyValidationError",
]
