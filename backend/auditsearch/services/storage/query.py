"""
Backend-agnostic query building.

``build_event_query`` turns an ``EventFilter`` into an ``EventQuery`` plan:
negation detection, field resolution, time range, default sort and clamped
pagination all happen here. The OpenSearch and Elasticsearch adapters only
decide how the rendered ``bool`` query travels over the wire and how the
index/tenant is addressed.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from . import fields
from .filters import (
    AttributeFilter,
    EventFilter,
    normalize_attribute_limit,
    normalize_event_limit,
    normalize_max_depth,
    normalize_offset,
)

NEGATION_PREFIX = "!"


@dataclass(frozen=True)
class TermClause:
    field: str
    value: str

    def render(self) -> dict[str, Any]:
        return {"term": {self.field: self.value}}


@dataclass(frozen=True)
class EventQuery:
    filters: tuple[TermClause, ...] = ()
    exclusions: tuple[TermClause, ...] = ()
    time_field: str = ""
    time_range: Mapping[str, str] = field(default_factory=dict)
    search: str = ""
    # (backend field, "asc" | "desc"), already including the time tie-break.
    sort: tuple[tuple[str, str], ...] = ()
    # Logical names, kept for backends that sort in-process.
    logical_sort: tuple[tuple[str, str], ...] = ()
    offset: int = 0
    limit: int = 0


@dataclass(frozen=True)
class AttributeQuery:
    field: str
    limit: int
    max_depth: int


def split_negation(value: str) -> tuple[str, bool]:
    """Strip a leading ``!``; the flag says the clause must exclude."""
    if value.startswith(NEGATION_PREFIX):
        return value[len(NEGATION_PREFIX):], True
    return value, False


def build_event_query(
    event_filter: EventFilter,
    mapping: Mapping[str, str] = fields.CADF_FIELD_MAPPING,
) -> EventQuery:
    positive: list[TermClause] = []
    negative: list[TermClause] = []
    for name, raw in event_filter.scalar_filters():
        value, negated = split_negation(raw)
        clause = TermClause(fields.resolve(name, mapping), value)
        (negative if negated else positive).append(clause)

    logical_sort = [(s.field, s.order) for s in event_filter.sort]
    # Deterministic order even without an explicit sort.
    logical_sort.append((fields.TIME_FIELD, "desc"))

    return EventQuery(
        filters=tuple(positive),
        exclusions=tuple(negative),
        time_field=fields.resolve(fields.TIME_FIELD, mapping),
        time_range=dict(event_filter.time),
        search=event_filter.search,
        sort=tuple((fields.resolve(name, mapping), order) for name, order in logical_sort),
        logical_sort=tuple(logical_sort),
        offset=normalize_offset(event_filter.offset),
        limit=normalize_event_limit(event_filter.limit),
    )


def build_attribute_query(
    attribute_filter: AttributeFilter,
    mapping: Mapping[str, str] = fields.CADF_FIELD_MAPPING,
) -> AttributeQuery:
    return AttributeQuery(
        field=fields.resolve(attribute_filter.query_name, mapping),
        limit=normalize_attribute_limit(attribute_filter.limit),
        max_depth=normalize_max_depth(attribute_filter.max_depth),
    )


def render_bool_query(
    plan: EventQuery,
    extra_filters: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """
    Shared ``bool`` query.

    Term and range clauses go to ``filter`` (no scoring), exclusions to
    ``must_not``; only the free-text search is a scoring ``must`` clause.
    """
    filter_clauses = [clause.render() for clause in plan.filters]
    if plan.time_range:
        filter_clauses.append({"range": {plan.time_field: dict(plan.time_range)}})
    filter_clauses.extend(extra_filters or [])

    must = []
    if plan.search:
        must.append({"query_string": {"query": plan.search}})

    return {
        "bool": {
            "must": must,
            "filter": filter_clauses,
            "must_not": [clause.render() for clause in plan.exclusions],
        }
    }


def render_sort(plan: EventQuery) -> list[dict[str, Any]]:
    return [{name: {"order": order}} for name, order in plan.sort]


def render_id_lookup(event_id: str, extra_filters: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return {
        "bool": {
            "filter": [TermClause(fields.ID_FIELD, event_id).render(), *(extra_filters or [])],
        }
    }


def render_terms_aggregation(plan: AttributeQuery, name: str = "attributes") -> dict[str, Any]:
    return {name: {"terms": {"field": plan.field, "size": plan.limit}}}
