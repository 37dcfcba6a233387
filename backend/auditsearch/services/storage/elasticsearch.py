"""
Elasticsearch storage backend.

Events live in one index per tenant (``<prefix>-<tenant>``); a query without
tenant restriction reads ``<prefix>-*``. Requests use the client's keyword
API instead of a raw body.
"""
from __future__ import annotations

import logging
from typing import Any

from elasticsearch import ApiError, SerializationError, TransportError

from auditsearch.core.config import Settings
from auditsearch.schemas.cadf import Event

from . import query as q
from . import results
from .base import StorageBackend, configured_max_limit
from .client import LazyClient, build_elasticsearch_client
from .errors import BackendError, StorageError, TransportFailure
from .executor import SearchExecutor
from .filters import AttributeFilter, EventFilter

_LOGGER = logging.getLogger(__name__)


def classify_error(backend: str, exc: Exception) -> StorageError | None:
    if isinstance(exc, ApiError):
        return BackendError(backend, exc.meta.status, exc.body)
    if isinstance(exc, TransportError):
        return TransportFailure(f"{backend} transport error: {exc}")
    if isinstance(exc, SerializationError):
        return TransportFailure(f"{backend} serialization error: {exc}")
    return None


def index_name(prefix: str, tenant_id: str | None) -> str:
    if tenant_id is None:
        return f"{prefix}-*"
    return f"{prefix}-{tenant_id}"


def build_search_request(plan: q.EventQuery) -> dict[str, Any]:
    return {
        "query": q.render_bool_query(plan),
        "sort": q.render_sort(plan),
        "from_": plan.offset,
        "size": plan.limit,
        "track_total_hits": True,
    }


class ElasticSearchBackend(StorageBackend):
    name = "elasticsearch"

    def __init__(self, settings: Settings, client: LazyClient[Any] | None = None) -> None:
        self._settings = settings
        self._client = client or LazyClient(self.name, lambda: build_elasticsearch_client(settings))
        self._executor = SearchExecutor(
            self.name, self._client, classify_error, default_timeout=settings.query_timeout
        )

    def _index(self, tenant_id: str | None) -> str:
        return index_name(self._settings.elasticsearch_index_prefix, tenant_id)

    async def _search(self, index: str, timeout: float | None, **request: Any):
        # A tenant without an index yet has no events rather than an error.
        return await self._executor.search(
            index=index, ignore_unavailable=True, timeout=timeout, **request
        )

    async def _get_events(
        self, event_filter: EventFilter, tenant_id: str | None, *, timeout: float | None
    ) -> tuple[list[Event], int]:
        index = self._index(tenant_id)
        request = build_search_request(q.build_event_query(event_filter))
        _LOGGER.debug("looking for events in index %s: %s", index, request)

        response = await self._search(index, timeout, **request)
        total = results.hits_total(response)
        _LOGGER.debug("got %d hits", total)
        return results.parse_events(response), total

    async def _get_event(
        self, event_id: str, tenant_id: str | None, *, timeout: float | None
    ) -> Event | None:
        index = self._index(tenant_id)
        _LOGGER.debug("looking for event %s in index %s", event_id, index)

        response = await self._search(index, timeout, query=q.render_id_lookup(event_id), size=1)
        return results.first_event(response)

    async def _get_attributes(
        self, attribute_filter: AttributeFilter, tenant_id: str | None, *, timeout: float | None
    ) -> list[str]:
        index = self._index(tenant_id)
        plan = q.build_attribute_query(attribute_filter)
        _LOGGER.debug(
            "looking for unique %s (%s) in index %s", attribute_filter.query_name, plan.field, index
        )

        response = await self._search(index, timeout, size=0, aggs=q.render_terms_aggregation(plan))
        return results.parse_attribute_buckets(response, plan.max_depth)

    def max_limit(self) -> int:
        return configured_max_limit(self._settings.elasticsearch_max_result_window)

    async def close(self) -> None:
        await self._client.close()
