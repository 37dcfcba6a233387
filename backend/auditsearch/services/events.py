from __future__ import annotations

import logging

from auditsearch.schemas.cadf import Event, EventSummary
from auditsearch.services.storage import (
    AttributeFilter,
    EventFilter,
    LimitExceededError,
    StorageBackend,
)
from auditsearch.services.storage.filters import normalize_event_limit, normalize_offset

_LOGGER = logging.getLogger(__name__)


def check_result_window(event_filter: EventFilter, backend: StorageBackend) -> None:
    """Reject pages reaching past the backend's configured result window."""
    max_limit = backend.max_limit()
    if max_limit == 0:
        return
    requested = normalize_offset(event_filter.offset) + normalize_event_limit(event_filter.limit)
    if requested > max_limit:
        raise LimitExceededError(requested, max_limit)


async def get_events(
    event_filter: EventFilter,
    tenant_id: str | None,
    backend: StorageBackend,
    *,
    timeout: float | None = None,
) -> tuple[list[EventSummary], int]:
    check_result_window(event_filter, backend)
    events, total = await backend.get_events(event_filter, tenant_id, timeout=timeout)
    _LOGGER.debug("returning %d of %d events", len(events), total)
    return [EventSummary.from_event(event) for event in events], total


async def get_event(
    event_id: str,
    tenant_id: str | None,
    backend: StorageBackend,
    *,
    timeout: float | None = None,
) -> Event | None:
    return await backend.get_event(event_id, tenant_id, timeout=timeout)


async def get_attributes(
    attribute_filter: AttributeFilter,
    tenant_id: str | None,
    backend: StorageBackend,
    *,
    timeout: float | None = None,
) -> list[str]:
    return await backend.get_attributes(attribute_filter, tenant_id, timeout=timeout)
