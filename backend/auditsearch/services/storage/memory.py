"""
In-process backend over a list of CADF documents.

It evaluates the same ``EventQuery`` plan the search engines receive, so tests
and local development observe the real filter semantics without a cluster.
Free-text search is a case-insensitive substring match over the document's
leaf values; key names do not match.
"""
from __future__ import annotations

from collections import Counter
from typing import Any, Iterable, Mapping

from auditsearch.core.time import parse_event_time
from auditsearch.schemas.cadf import Event

from . import fields
from . import query as q
from . import results
from .base import TENANT_FIELD, StorageBackend, configured_max_limit
from .filters import AttributeFilter, EventFilter

_RANGE_CHECKS = {
    "lt": lambda value, bound: value < bound,
    "lte": lambda value, bound: value <= bound,
    "gt": lambda value, bound: value > bound,
    "gte": lambda value, bound: value >= bound,
}


def _lookup(document: Mapping[str, Any], field: str) -> Any:
    if field.endswith(fields.KEYWORD_SUFFIX):
        field = field[: -len(fields.KEYWORD_SUFFIX)]
    current: Any = document
    for part in field.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def _term_matches(document: Mapping[str, Any], clause: q.TermClause) -> bool:
    value = _lookup(document, clause.field)
    if isinstance(value, list):
        return clause.value in [str(v) for v in value]
    return value is not None and str(value) == clause.value


def _in_range(document: Mapping[str, Any], field: str, bounds: Mapping[str, str]) -> bool:
    value = parse_event_time(_lookup(document, field))
    if value is None:
        return False
    for op, raw_bound in bounds.items():
        bound = parse_event_time(raw_bound)
        if bound is None or not _RANGE_CHECKS[op](value, bound):
            return False
    return True


def _leaf_strings(value: Any) -> Iterable[str]:
    if isinstance(value, Mapping):
        for item in value.values():
            yield from _leaf_strings(item)
    elif isinstance(value, list):
        for item in value:
            yield from _leaf_strings(item)
    elif value is not None:
        yield str(value)


def _search_matches(document: Mapping[str, Any], text: str) -> bool:
    needle = text.casefold()
    return any(needle in leaf.casefold() for leaf in _leaf_strings(document))


def _tenant_matches(document: Mapping[str, Any], tenant_id: str | None) -> bool:
    if tenant_id is None:
        return True
    tenants = document.get(TENANT_FIELD)
    if isinstance(tenants, str):
        return tenants == tenant_id
    return isinstance(tenants, list) and tenant_id in tenants


class MemoryBackend(StorageBackend):
    name = "memory"

    def __init__(self, documents: Iterable[Mapping[str, Any]] = (), max_result_window: int = 0) -> None:
        self._documents = [dict(doc) for doc in documents]
        self._max_result_window = max_result_window

    def _matching(self, plan: q.EventQuery, tenant_id: str | None) -> list[Mapping[str, Any]]:
        matched = []
        for doc in self._documents:
            if not _tenant_matches(doc, tenant_id):
                continue
            if not all(_term_matches(doc, clause) for clause in plan.filters):
                continue
            if any(_term_matches(doc, clause) for clause in plan.exclusions):
                continue
            if plan.time_range and not _in_range(doc, plan.time_field, plan.time_range):
                continue
            if plan.search and not _search_matches(doc, plan.search):
                continue
            matched.append(doc)
        return matched

    async def _get_events(
        self, event_filter: EventFilter, tenant_id: str | None, *, timeout: float | None
    ) -> tuple[list[Event], int]:
        plan = q.build_event_query(event_filter)
        matched = self._matching(plan, tenant_id)
        events = [results.parse_event(doc, doc.get("id")) for doc in matched]
        ordered = results.sort_events(events, plan.logical_sort)
        return ordered[plan.offset:plan.offset + plan.limit], len(ordered)

    async def _get_event(
        self, event_id: str, tenant_id: str | None, *, timeout: float | None
    ) -> Event | None:
        for doc in self._documents:
            if doc.get(fields.ID_FIELD) == event_id and _tenant_matches(doc, tenant_id):
                return results.parse_event(doc, event_id)
        return None

    async def _get_attributes(
        self, attribute_filter: AttributeFilter, tenant_id: str | None, *, timeout: float | None
    ) -> list[str]:
        plan = q.build_attribute_query(attribute_filter)
        counts: Counter[str] = Counter()
        for doc in self._documents:
            if not _tenant_matches(doc, tenant_id):
                continue
            value = _lookup(doc, plan.field)
            if value is None:
                continue
            for item in value if isinstance(value, list) else [value]:
                counts[str(item)] += 1

        # Terms aggregation order: doc count desc, then key asc.
        top = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[: plan.limit]
        return results.unique_attributes((key for key, _ in top), plan.max_depth)

    def max_limit(self) -> int:
        return configured_max_limit(self._max_result_window)
