"""
Shared unit-test fixtures.
Search clients are mocks; nothing connects to a cluster.
"""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from auditsearch.core.config import Settings
from auditsearch.services.storage.internal import (
    ElasticSearchBackend,
    LazyClient,
    MemoryBackend,
    OpenSearchBackend,
)
from fixtures.events import search_response


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        storage_driver="opensearch",
        query_timeout=None,
        opensearch_url="http://localhost:9200",
        opensearch_index="audit",
        opensearch_max_result_window=10000,
        elasticsearch_url="http://localhost:9201",
        elasticsearch_index_prefix="audit",
        elasticsearch_max_result_window=0,
    )


@pytest.fixture
def mock_search_client():
    """Async search client returning an empty result."""
    client = MagicMock()
    client.search = AsyncMock(return_value=search_response([]))
    client.close = AsyncMock()
    return client


@pytest.fixture
def opensearch_backend(test_settings, mock_search_client):
    return OpenSearchBackend(test_settings, LazyClient("opensearch", lambda: mock_search_client))


@pytest.fixture
def elasticsearch_backend(test_settings, mock_search_client):
    return ElasticSearchBackend(test_settings, LazyClient("elasticsearch", lambda: mock_search_client))


@pytest.fixture
def memory_backend(cadf_documents):
    return MemoryBackend(cadf_documents)
