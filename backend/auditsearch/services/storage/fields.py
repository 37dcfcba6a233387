# Logical filter/sort field names -> indexed CADF document fields

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

KEYWORD_SUFFIX = ".keyword"

# The .keyword sub-fields give exact-match terms and aggregations without
# text analysis. Shared by every backend so filter semantics stay identical.
CADF_FIELD_MAPPING: Mapping[str, str] = MappingProxyType({
    "time": "eventTime",
    "action": "action.keyword",
    "outcome": "outcome.keyword",
    "request_path": "requestPath.keyword",
    "observer_id": "observer.id.keyword",
    "observer_type": "observer.typeURI.keyword",
    "target_id": "target.id.keyword",
    "target_type": "target.typeURI.keyword",
    "initiator_id": "initiator.id.keyword",
    "initiator_type": "initiator.typeURI.keyword",
    "initiator_name": "initiator.name.keyword",
})

TIME_FIELD = "time"
ID_FIELD = "id"


def resolve(name: str, mapping: Mapping[str, str] = CADF_FIELD_MAPPING) -> str:
    """Backend field for a logical name; unmapped names are used verbatim."""
    return mapping.get(name, name)


def source_path(name: str, mapping: Mapping[str, str] = CADF_FIELD_MAPPING) -> str:
    """Document path of a logical field, e.g. initiator_id -> initiator.id."""
    field = resolve(name, mapping)
    if field.endswith(KEYWORD_SUFFIX):
        return field[: -len(KEYWORD_SUFFIX)]
    return field
