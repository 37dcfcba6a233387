"""
OpenSearch storage backend.

All tenants share one consolidated index (or data stream); tenant isolation is
a ``term`` filter on the per-document ``tenant_ids`` field. Requests go out as
JSON search bodies.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from opensearchpy.exceptions import ConnectionError as OSConnectionError
from opensearchpy.exceptions import SerializationError, TransportError

from auditsearch.core.config import Settings
from auditsearch.schemas.cadf import Event

from . import query as q
from . import results
from .base import TENANT_FIELD, StorageBackend, configured_max_limit
from .client import LazyClient, build_opensearch_client
from .errors import BackendError, StorageError, TransportFailure
from .executor import SearchExecutor
from .filters import AttributeFilter, EventFilter

_LOGGER = logging.getLogger(__name__)


def classify_error(backend: str, exc: Exception) -> StorageError | None:
    # ConnectionError subclasses TransportError with status "N/A".
    if isinstance(exc, OSConnectionError):
        return TransportFailure(f"{backend} connection failed: {exc}")
    if isinstance(exc, TransportError):
        if isinstance(exc.status_code, int):
            # args are (status_code, error, info); info holds the parsed error body.
            status, error, info = (list(exc.args) + [None, None])[:3]
            return BackendError(backend, status, info or error)
        return TransportFailure(f"{backend} transport error: {exc}")
    if isinstance(exc, SerializationError):
        return TransportFailure(f"{backend} serialization error: {exc}")
    return None


def tenant_filters(tenant_id: str | None) -> list[dict[str, Any]]:
    if tenant_id is None:
        return []
    return [{"term": {TENANT_FIELD: tenant_id}}]


def build_search_body(plan: q.EventQuery, tenant_id: str | None) -> dict[str, Any]:
    return {
        "query": q.render_bool_query(plan, tenant_filters(tenant_id)),
        "sort": q.render_sort(plan),
        "from": plan.offset,
        "size": plan.limit,
        "track_total_hits": True,
    }


def build_aggregation_body(plan: q.AttributeQuery, tenant_id: str | None) -> dict[str, Any]:
    body: dict[str, Any] = {
        # Only the buckets are needed, not the documents.
        "size": 0,
        "aggs": q.render_terms_aggregation(plan),
    }
    filters = tenant_filters(tenant_id)
    if filters:
        body["query"] = {"bool": {"filter": filters}}
    return body


class OpenSearchBackend(StorageBackend):
    name = "opensearch"

    def __init__(self, settings: Settings, client: LazyClient[Any] | None = None) -> None:
        self._settings = settings
        self._client = client or LazyClient(self.name, lambda: build_opensearch_client(settings))
        self._executor = SearchExecutor(
            self.name, self._client, classify_error, default_timeout=settings.query_timeout
        )

    @property
    def index(self) -> str:
        return self._settings.opensearch_index

    async def _get_events(
        self, event_filter: EventFilter, tenant_id: str | None, *, timeout: float | None
    ) -> tuple[list[Event], int]:
        body = build_search_body(q.build_event_query(event_filter), tenant_id)
        _LOGGER.debug("looking for events in index %s: %s", self.index, json.dumps(body))

        response = await self._executor.search(index=self.index, body=body, timeout=timeout)
        total = results.hits_total(response)
        _LOGGER.debug("got %d hits", total)
        return results.parse_events(response), total

    async def _get_event(
        self, event_id: str, tenant_id: str | None, *, timeout: float | None
    ) -> Event | None:
        body = {"query": q.render_id_lookup(event_id, tenant_filters(tenant_id)), "size": 1}
        _LOGGER.debug("looking for event %s in index %s", event_id, self.index)

        response = await self._executor.search(index=self.index, body=body, timeout=timeout)
        return results.first_event(response)

    async def _get_attributes(
        self, attribute_filter: AttributeFilter, tenant_id: str | None, *, timeout: float | None
    ) -> list[str]:
        plan = q.build_attribute_query(attribute_filter)
        _LOGGER.debug("mapped query name %s --> %s", attribute_filter.query_name, plan.field)
        body = build_aggregation_body(plan, tenant_id)
        _LOGGER.debug("aggregation query on %s: %s", self.index, json.dumps(body))

        response = await self._executor.search(index=self.index, body=body, timeout=timeout)
        return results.parse_attribute_buckets(response, plan.max_depth)

    def max_limit(self) -> int:
        return configured_max_limit(self._settings.opensearch_max_result_window)

    async def close(self) -> None:
        await self._client.close()
