"""
Query value objects and normalization of untrusted numbers.

Filters are built per request and never mutated afterwards. Offsets, limits
and depth bounds arrive straight from callers, so they are clamped here, once,
for every backend.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence

from .errors import InvalidFilterError

INT32_MAX = 2**31 - 1

DEFAULT_EVENT_LIMIT = 10
# Matches the search engines' own default bucket count for terms aggregations.
DEFAULT_ATTRIBUTE_LIMIT = 10000

TIME_OPERATORS = ("lt", "lte", "gt", "gte")
SORT_ORDERS = ("asc", "desc")

# EventFilter attribute -> logical field name, in clause order.
SCALAR_FILTER_FIELDS = (
    "observer_type",
    "target_type",
    "target_id",
    "initiator_type",
    "initiator_id",
    "initiator_name",
    "action",
    "outcome",
    "request_path",
)


@dataclass(frozen=True)
class SortField:
    field: str
    order: str = "desc"

    def __post_init__(self) -> None:
        if self.order not in SORT_ORDERS:
            raise InvalidFilterError(f"invalid sort order {self.order!r} for {self.field!r}")


@dataclass(frozen=True)
class EventFilter:
    observer_type: str = ""
    target_type: str = ""
    target_id: str = ""
    initiator_type: str = ""
    initiator_id: str = ""
    initiator_name: str = ""
    action: str = ""
    outcome: str = ""
    request_path: str = ""
    time: Mapping[str, str] = field(default_factory=dict)
    search: str = ""
    sort: Sequence[SortField] = ()
    offset: int = 0
    limit: int = 0

    def __post_init__(self) -> None:
        unknown = sorted(set(self.time) - set(TIME_OPERATORS))
        if unknown:
            raise InvalidFilterError(f"unsupported time operator(s): {', '.join(unknown)}")
        object.__setattr__(self, "time", MappingProxyType(dict(self.time)))
        object.__setattr__(self, "sort", tuple(self.sort))

    def scalar_filters(self) -> list[tuple[str, str]]:
        """(logical field, raw value) for every non-empty scalar filter."""
        pairs = []
        for name in SCALAR_FILTER_FIELDS:
            value = getattr(self, name)
            if value:
                pairs.append((name, value))
        return pairs


@dataclass(frozen=True)
class AttributeFilter:
    query_name: str
    limit: int = 0
    # 0 disables hierarchical truncation.
    max_depth: int = 0


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(int(value), high))


def normalize_offset(offset: int) -> int:
    return _clamp(offset, 0, INT32_MAX)


def normalize_event_limit(limit: int) -> int:
    if limit < 1:
        return DEFAULT_EVENT_LIMIT
    return min(int(limit), INT32_MAX)


def normalize_attribute_limit(limit: int) -> int:
    if limit < 1:
        return DEFAULT_ATTRIBUTE_LIMIT
    return min(int(limit), INT32_MAX)


def normalize_max_depth(max_depth: int) -> int:
    if max_depth <= 0:
        return 0
    return min(int(max_depth), INT32_MAX)


def parse_sort(spec: str) -> tuple[SortField, ...]:
    """Parse ``field:dir,field2`` into sort fields; direction defaults to desc."""
    fields = []
    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        name, _, order = part.partition(":")
        fields.append(SortField(name.strip(), (order.strip() or "desc").lower()))
    return tuple(fields)


def parse_time_bounds(values: Sequence[str]) -> dict[str, str]:
    """Parse ``op:timestamp`` strings into a time-range mapping."""
    bounds: dict[str, str] = {}
    for item in values:
        op, sep, ts = item.partition(":")
        op = op.strip().lower()
        if not sep or op not in TIME_OPERATORS or not ts.strip():
            raise InvalidFilterError(f"invalid time bound {item!r}, expected <op>:<timestamp>")
        bounds[op] = ts.strip()
    return bounds
