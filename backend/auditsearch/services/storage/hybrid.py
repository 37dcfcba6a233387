"""
Migration-window backend reading from two backends at once.

While events move from an old store to a new one, the same event can exist in
both. Each call queries both backends concurrently and merges the answers:
primary results first, duplicates dropped by event ID, then the effective sort
and page window are applied to the merged list.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging

from auditsearch.schemas.cadf import Event

from . import query as q
from . import results
from .base import StorageBackend
from .filters import INT32_MAX, AttributeFilter, EventFilter

_LOGGER = logging.getLogger(__name__)


class HybridBackend(StorageBackend):
    name = "hybrid"

    def __init__(self, primary: StorageBackend, secondary: StorageBackend) -> None:
        self.primary = primary
        self.secondary = secondary

    async def _get_events(
        self, event_filter: EventFilter, tenant_id: str | None, *, timeout: float | None
    ) -> tuple[list[Event], int]:
        plan = q.build_event_query(event_filter)
        # Both backends must return everything up to the end of the page,
        # since either one may own any position of the merged window.
        window = dataclasses.replace(
            event_filter, offset=0, limit=min(plan.offset + plan.limit, INT32_MAX)
        )
        (primary_events, primary_total), (secondary_events, secondary_total) = await asyncio.gather(
            self.primary.get_events(window, tenant_id, timeout=timeout),
            self.secondary.get_events(window, tenant_id, timeout=timeout),
        )

        merged = results.deduplicate_events([*primary_events, *secondary_events])
        _LOGGER.debug(
            "merged %d + %d events into %d unique",
            len(primary_events),
            len(secondary_events),
            len(merged),
        )
        ordered = results.sort_events(merged, plan.logical_sort)
        if primary_total <= window.limit and secondary_total <= window.limit:
            # Both sides returned every match, so the merged count is exact.
            total = len(merged)
        else:
            # Overlap beyond the window is unknown; this is a lower bound.
            total = max(primary_total, secondary_total, len(merged))
        return ordered[plan.offset:plan.offset + plan.limit], total

    async def _get_event(
        self, event_id: str, tenant_id: str | None, *, timeout: float | None
    ) -> Event | None:
        event = await self.primary.get_event(event_id, tenant_id, timeout=timeout)
        if event is not None:
            return event
        return await self.secondary.get_event(event_id, tenant_id, timeout=timeout)

    async def _get_attributes(
        self, attribute_filter: AttributeFilter, tenant_id: str | None, *, timeout: float | None
    ) -> list[str]:
        primary, secondary = await asyncio.gather(
            self.primary.get_attributes(attribute_filter, tenant_id, timeout=timeout),
            self.secondary.get_attributes(attribute_filter, tenant_id, timeout=timeout),
        )
        return sorted(set(primary) | set(secondary))

    def max_limit(self) -> int:
        limits = [limit for limit in (self.primary.max_limit(), self.secondary.max_limit()) if limit > 0]
        return min(limits) if limits else 0

    async def close(self) -> None:
        await asyncio.gather(self.primary.close(), self.secondary.close())
