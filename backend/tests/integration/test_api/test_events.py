"""
Event listing, lookup and attribute API tests.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from auditsearch.services.storage import (
    BackendError,
    SearchCancelledError,
    StorageBackend,
    TransportFailure,
)
from fixtures.events import TENANT_A, TENANT_B

pytestmark = pytest.mark.integration

FIRST = "7be6c4ff-b761-5f1f-b234-f5d41616c2cd"
THIRD = "d5eed458-6666-58ec-ad06-8d3cf6bafca1"


class TestListEvents:
    @pytest.mark.asyncio
    async def test_filter_and_limit(self, async_client):
        response = await async_client.get("/v1/events", params={"outcome": "success", "limit": 2})
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["total"] == 2
        assert [item["id"] for item in data["items"]] == [FIRST, THIRD]
        assert data["items"][0]["initiator"]["name"] == "test_admin"
        assert data["items"][0]["target"]["typeURI"] == "identity/role_assignment"

    @pytest.mark.asyncio
    async def test_tenant_scoping(self, async_client):
        response = await async_client.get("/v1/events", params={"project_id": TENANT_B})
        assert response.status_code == 200
        assert response.json()["total"] == 1

    @pytest.mark.asyncio
    async def test_time_and_sort(self, async_client):
        params = [
            ("project_id", TENANT_A),
            ("time", "gte:2017-11-06T00:00:00Z"),
            ("time", "lt:2017-11-08T00:00:00Z"),
            ("sort", "time:asc"),
        ]
        response = await async_client.get("/v1/events", params=params)
        assert response.status_code == 200
        assert [item["id"] for item in response.json()["items"]] == [
            THIRD,
            "f6f0ebf3-bf59-553a-9e38-788f714ccc46",
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "params, code",
        [
            ({"project_id": "unavailable"}, "INVALID_TENANT"),
            ({"project_id": ""}, "INVALID_TENANT"),
            ({"project_id": "*"}, "INVALID_TENANT"),
            ({"time": "eq:2017-11-06T00:00:00Z"}, "INVALID_FILTER"),
            ({"sort": "time:sideways"}, "INVALID_FILTER"),
            ({"offset": 95, "limit": 10}, "LIMIT_EXCEEDED"),
        ],
    )
    async def test_invalid_requests(self, async_client, params, code):
        response = await async_client.get("/v1/events", params=params)
        assert response.status_code == 400
        data = response.json()
        assert data["status"] == "error"
        assert data["error"]["code"] == code


class TestShowEvent:
    @pytest.mark.asyncio
    async def test_found(self, async_client):
        response = await async_client.get(f"/v1/events/{FIRST}", params={"project_id": TENANT_A})
        assert response.status_code == 200
        event = response.json()["event"]
        assert event["id"] == FIRST
        assert event["reason"] == {"reasonType": "HTTP", "reasonCode": "409"}
        assert "tenant_ids" not in event
        assert event["attachments"][0]["name"] == "role_id"

    @pytest.mark.asyncio
    async def test_other_tenant_is_not_found(self, async_client):
        response = await async_client.get(f"/v1/events/{FIRST}", params={"project_id": TENANT_B})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"


class TestAttributes:
    @pytest.mark.asyncio
    async def test_truncated_values(self, async_client):
        response = await async_client.get("/v1/attributes/target_type", params={"max_depth": 1})
        assert response.status_code == 200
        assert response.json()["items"] == ["compute", "identity", "network"]

    @pytest.mark.asyncio
    async def test_tenant_scoped_values(self, async_client):
        response = await async_client.get("/v1/attributes/outcome", params={"project_id": TENANT_B})
        assert response.json()["items"] == ["failure"]


class TestBackendFailures:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error, status_code, code",
        [
            (BackendError("opensearch", 500, {"error": "shard failure"}), 502, "BACKEND_ERROR"),
            (TransportFailure("connection refused"), 503, "BACKEND_UNREACHABLE"),
            (SearchCancelledError("opensearch", 1.0), 504, "QUERY_TIMEOUT"),
        ],
    )
    async def test_error_mapping(self, async_client, api_backend, error, status_code, code):
        from auditsearch.main import app
        from auditsearch.services.storage import get_backend

        failing = MagicMock(spec=StorageBackend)
        failing.max_limit.return_value = 0
        failing.get_events = AsyncMock(side_effect=error)
        app.dependency_overrides[get_backend] = lambda: failing

        response = await async_client.get("/v1/events")
        assert response.status_code == status_code
        assert response.json()["error"]["code"] == code
