# Search response -> canonical results (events, totals, attribute values)

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from pydantic import ValidationError

from auditsearch.core.time import parse_event_time
from auditsearch.schemas.cadf import Event

from . import fields
from .errors import EventDecodeError, ResponseFormatError

_LOGGER = logging.getLogger(__name__)

PATH_SEPARATOR = "/"


def _hits_envelope(response: Mapping[str, Any]) -> Mapping[str, Any]:
    hits = response.get("hits") if isinstance(response, Mapping) else None
    if not isinstance(hits, Mapping):
        raise ResponseFormatError("search response has no hits object")
    return hits


def hits_total(response: Mapping[str, Any]) -> int:
    raw_total = _hits_envelope(response).get("total", 0)
    # {"value": n, "relation": "eq"} on current engines, a bare int on old ones.
    if isinstance(raw_total, Mapping):
        raw_total = raw_total.get("value", 0)
    try:
        return int(raw_total or 0)
    except (TypeError, ValueError) as exc:
        raise ResponseFormatError(f"unreadable hits.total: {raw_total!r}") from exc


def _raw_hits(response: Mapping[str, Any]) -> list[Any]:
    raw = _hits_envelope(response).get("hits", [])
    if not isinstance(raw, list):
        raise ResponseFormatError("hits.hits is not a list")
    return raw


def parse_event(source: Any, hit_id: str | None = None) -> Event:
    if not isinstance(source, Mapping):
        raise EventDecodeError(hit_id, "document source is not an object")
    try:
        return Event.model_validate(source)
    except ValidationError as exc:
        raise EventDecodeError(hit_id, str(exc)) from exc


def parse_events(response: Mapping[str, Any]) -> list[Event]:
    """All hits as events; a single undecodable hit fails the whole call."""
    events = []
    for hit in _raw_hits(response):
        if not isinstance(hit, Mapping):
            raise ResponseFormatError("search hit is not an object")
        events.append(parse_event(hit.get("_source"), hit.get("_id")))
    return events


def first_event(response: Mapping[str, Any]) -> Event | None:
    hits = _raw_hits(response)
    if not hits:
        return None
    hit = hits[0]
    if not isinstance(hit, Mapping):
        raise ResponseFormatError("search hit is not an object")
    return parse_event(hit.get("_source"), hit.get("_id"))


def truncate_slash_path(path: str, max_depth: int) -> str:
    """
    Keep at most ``max_depth`` slash-separated segments.

    ``truncate_slash_path("service/compute/instance", 2) == "service/compute"``.
    A depth of 0 (or less) and values without a slash are returned unchanged.
    """
    if max_depth <= 0 or PATH_SEPARATOR not in path:
        return path
    parts = path.split(PATH_SEPARATOR)
    if len(parts) <= max_depth:
        return path
    return PATH_SEPARATOR.join(parts[:max_depth])


def bucket_key(bucket: Mapping[str, Any]) -> str:
    # Numeric/boolean/date terms carry the human form in key_as_string.
    if "key_as_string" in bucket:
        return str(bucket["key_as_string"])
    return str(bucket.get("key", ""))


def unique_attributes(keys: Iterable[str], max_depth: int) -> list[str]:
    return sorted({truncate_slash_path(key, max_depth) for key in keys})


def parse_attribute_buckets(
    response: Mapping[str, Any],
    max_depth: int,
    name: str = "attributes",
) -> list[str]:
    aggregations = response.get("aggregations") if isinstance(response, Mapping) else None
    if aggregations is None:
        _LOGGER.debug("response carries no aggregations")
        return []
    if not isinstance(aggregations, Mapping):
        raise ResponseFormatError("aggregations is not an object")

    terms = aggregations.get(name)
    if terms is None:
        _LOGGER.debug("aggregation %s not found in response", name)
        return []
    buckets = terms.get("buckets") if isinstance(terms, Mapping) else None
    if not isinstance(buckets, list):
        raise ResponseFormatError(f"aggregation {name} has no bucket list")

    _LOGGER.debug("number of buckets: %d", len(buckets))
    keys = []
    for bucket in buckets:
        if not isinstance(bucket, Mapping):
            raise ResponseFormatError("aggregation bucket is not an object")
        keys.append(bucket_key(bucket))
    return unique_attributes(keys, max_depth)


def deduplicate_events(events: Iterable[Event | None]) -> list[Event]:
    """
    Drop repeated event IDs, keeping the first occurrence and its position.

    Needed whenever results from two indexes are merged, e.g. while events are
    migrated from one backend to another. ``None`` entries are skipped.
    """
    seen: set[str] = set()
    unique: list[Event] = []
    for event in events:
        if event is None:
            continue
        if event.id in seen:
            continue
        seen.add(event.id)
        unique.append(event)
    return unique


def event_value(event: Event, logical_name: str) -> Any:
    """Read a logical field out of an event through the shared field mapping."""
    current: Any = event.to_dict()
    for part in fields.source_path(logical_name).split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def _sortable(event: Event, logical_name: str) -> Any:
    value = event_value(event, logical_name)
    if value is None:
        return None
    if logical_name == fields.TIME_FIELD:
        return parse_event_time(value)
    return str(value)


def sort_events(events: Sequence[Event], sort: Sequence[tuple[str, str]]) -> list[Event]:
    """Stable multi-key sort on logical fields, first key most significant."""
    ordered = list(events)
    for logical_name, order in reversed(sort):
        keyed = [(_sortable(event, logical_name), event) for event in ordered]
        present = [item for item in keyed if item[0] is not None]
        # Missing values sort last in both directions, like the engines do.
        missing = [event for value, event in keyed if value is None]
        present.sort(key=lambda item: item[0], reverse=(order == "desc"))
        ordered = [event for _, event in present] + missing
    return ordered
