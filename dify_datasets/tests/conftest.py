"""
Pytest configuration for Dify datasets tests.

This file configures Django settings for pytest so tests can run
without a full Django project.
"""

import django
import pytest
from django.conf import settings

from dify_datasets.client import DifyDatasetsClient
from dify_datasets.tests.fake_server import FakeDifyServer

TEST_BASE_URL = "http://dify.test/v1"
TEST_API_KEY = "test-api-key"


def pytest_configure(config):
    """
    Configure Django settings before running tests.

    This allows tests to run without a full Django setup.
    """
    if not settings.configured:
        settings.configure(
            DEBUG=True,
            INSTALLED_APPS=[],
            SECRET_KEY="test-secret-key-for-dify-tests",
            # Dify settings
            DIFY_BASE_URL=TEST_BASE_URL,
            DIFY_DATASET_API_KEY=TEST_API_KEY,
        )
        django.setup()


@pytest.fixture
def fake_server():
    """In-memory Dify datasets API."""
    return FakeDifyServer(api_key=TEST_API_KEY)


@pytest.fixture
def client(fake_server):
    """DifyDatasetsClient wired to the fake server through httpx.MockTransport."""
    client = DifyDatasetsClient(
        base_url=TEST_BASE_URL,
        api_key=TEST_API_KEY,
        transport=fake_server.transport,
    )
    yield client
    client.close()


@pytest.fixture
def document_settings():
    """Minimal indexing settings accepted by document creation calls."""
    return {
        "indexing_technique": "high_quality",
        "doc_language": "English",
        "process_rule": {"mode": "automatic"},
        "retrieval_model": {
            "search_method": "hybrid_search",
            "reranking_enable": False,
            "top_k": 2,
            "score_threshold_enabled": False,
        },
    }
