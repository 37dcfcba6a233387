"""
Integration fixtures.

API tests run the FastAPI app in-process against the in-memory backend;
tests marked requires_opensearch talk to a real cluster.
"""
from __future__ import annotations

import os

import pytest
from httpx import ASGITransport, AsyncClient


def _set_default_env(name: str, value: str) -> None:
    if os.getenv(name, "").strip():
        return
    os.environ[name] = value


_set_default_env("OPENSEARCH_NODE", "http://localhost:9200")
_set_default_env("OPENSEARCH_INDEX", "audit-it")


@pytest.fixture
def api_backend(cadf_documents):
    from auditsearch.services.storage.internal import MemoryBackend

    return MemoryBackend(cadf_documents, max_result_window=100)


@pytest.fixture
async def async_client(api_backend):
    """FastAPI client bound to the in-memory backend."""
    from auditsearch.main import app
    from auditsearch.services.storage import get_backend

    app.dependency_overrides[get_backend] = lambda: api_backend
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
