"""
CADF event fixtures.

Documents are returned as raw dicts, the way they sit in the search index,
including the ``tenant_ids`` scoping field.
"""
from __future__ import annotations

import copy
from typing import Any

TENANT_A = "b3b70c8271a845709f9a03030e705da7"
TENANT_B = "a759dcc2a2384a76b0386bb985952373"

_EVENTS: list[dict[str, Any]] = [
    {
        "typeURI": "http://schemas.dmtf.org/cloud/audit/1.0/event",
        "id": "7be6c4ff-b761-5f1f-b234-f5d41616c2cd",
        "eventTime": "2017-11-17T08:53:32.667973+00:00",
        "eventType": "activity",
        "action": "create/role_assignment",
        "outcome": "success",
        "requestPath": "/v3/projects/p1/users/u1/roles/r1",
        "reason": {"reasonType": "HTTP", "reasonCode": "409"},
        "initiator": {
            "typeURI": "service/security/account/user",
            "id": "21ff350bc75824262c60adfc58b7fd4a7349120b43a990c2888e6b0b88af6398",
            "name": "test_admin",
            "domain": "cc3test",
            "project_id": TENANT_A,
            "host": {"address": "127.0.0.1", "agent": "python-keystoneclient"},
        },
        "target": {
            "typeURI": "identity/role_assignment",
            "id": "d5eed458-6666-58ec-ad06-8d3cf6bafca1",
            "addresses": [
                {
                    "url": "https://network-3.example.com/v2.0/security-group-rules/uuid",
                    "name": "neutron-server",
                }
            ],
        },
        "observer": {"typeURI": "service/security", "id": "0e8a00bf-e36c-5a51-9418-2d56d59c8887", "name": "keystone"},
        "attachments": [
            {"name": "role_id", "typeURI": "mime:text/plain", "content": "3a3ea9d2e5a24d44a4aca8ee95b3d51b"}
        ],
        "tenant_ids": [TENANT_A],
    },
    {
        "typeURI": "http://schemas.dmtf.org/cloud/audit/1.0/event",
        "id": "f6f0ebf3-bf59-553a-9e38-788f714ccc46",
        "eventTime": "2017-11-07T11:46:19.448565+00:00",
        "eventType": "activity",
        "action": "update",
        "outcome": "failure",
        "initiator": {
            "typeURI": "service/security/account/user",
            "id": "eb5cd8f904b06e8b2a6eb86c8b04c08e6efb89b92da77905cc8c475f30b0b812",
            "name": "network_admin",
            "project_id": TENANT_A,
        },
        "target": {"typeURI": "network/floatingip", "id": "c2a5d4b0-1e2f-4d3c-9a8b-7f6e5d4c3b2a"},
        "observer": {"typeURI": "service/network", "id": "0e8a00bf-e36c-5a51-9418-2d56d59c8888", "name": "neutron"},
        "tenant_ids": [TENANT_A],
    },
    {
        "typeURI": "http://schemas.dmtf.org/cloud/audit/1.0/event",
        "id": "d5eed458-6666-58ec-ad06-8d3cf6bafca1",
        "eventTime": "2017-11-06T10:15:56.984390+00:00",
        "eventType": "activity",
        "action": "create",
        "outcome": "success",
        "initiator": {
            "typeURI": "service/security/account/user",
            "id": "21ff350bc75824262c60adfc58b7fd4a7349120b43a990c2888e6b0b88af6398",
            "name": "test_admin",
            "project_id": TENANT_A,
        },
        "target": {"typeURI": "compute/server", "id": "63c1b6a8-cf5e-4a59-a3c1-53d1c9c6b3e0"},
        "observer": {"typeURI": "service/compute", "id": "0e8a00bf-e36c-5a51-9418-2d56d59c8889", "name": "nova"},
        "tenant_ids": [TENANT_A],
    },
    {
        "typeURI": "http://schemas.dmtf.org/cloud/audit/1.0/event",
        "id": "2bc9a2ab-8a2c-4d5e-a1b2-3c4d5e6f7a8b",
        "eventTime": "2017-11-05T09:02:11.000000+00:00",
        "eventType": "activity",
        "action": "delete",
        "outcome": "failure",
        "initiator": {
            "typeURI": "service/security/account/user",
            "id": "5f2c0e1ad1f1a9e61c8b7d9c2e5a3b4d6f7e8a9b0c1d2e3f4a5b6c7d8e9f0a1b",
            "name": "compute_admin",
            "project_id": TENANT_B,
        },
        "target": {"typeURI": "compute/server/volume-attachment", "id": "9d8c7b6a-5f4e-3d2c-1b0a-9f8e7d6c5b4a"},
        "observer": {"typeURI": "service/compute", "id": "0e8a00bf-e36c-5a51-9418-2d56d59c8889", "name": "nova"},
        "tenant_ids": [TENANT_B],
    },
]


def cadf_events() -> list[dict[str, Any]]:
    return copy.deepcopy(_EVENTS)


def search_response(documents: list[dict[str, Any]], total: int | None = None) -> dict[str, Any]:
    """Wrap documents into a search engine response body."""
    return {
        "took": 3,
        "timed_out": False,
        "hits": {
            "total": {"value": len(documents) if total is None else total, "relation": "eq"},
            "hits": [
                {"_index": "audit", "_id": doc.get("id"), "_score": None, "_source": doc}
                for doc in documents
            ],
        },
    }


def aggregation_response(keys: list[Any], name: str = "attributes") -> dict[str, Any]:
    return {
        "took": 1,
        "timed_out": False,
        "hits": {"total": {"value": len(keys), "relation": "eq"}, "hits": []},
        "aggregations": {
            name: {
                "doc_count_error_upper_bound": 0,
                "sum_other_doc_count": 0,
                "buckets": [{"key": key, "doc_count": 1} for key in keys],
            }
        },
    }
