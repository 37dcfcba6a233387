"""
Audit event storage: one query interface over interchangeable search backends.

Public interface:
  - StorageBackend: get_events(), get_event(), get_attributes(), max_limit()
  - EventFilter / AttributeFilter / SortField: per-request query descriptions
  - get_backend(): backend for the configured driver (opensearch,
    elasticsearch or hybrid)
  - deduplicate_events(), truncate_slash_path(): result helpers

Errors are subclasses of StorageError (see .errors).

Internal interface (query plans, adapters, client handles):
  - from auditsearch.services.storage.internal import ...
"""

from .base import StorageBackend
from .errors import (
    BackendError,
    BackendUnavailableError,
    EventDecodeError,
    InvalidFilterError,
    InvalidTenantError,
    LimitExceededError,
    ResponseFormatError,
    SearchCancelledError,
    StorageError,
    TransportFailure,
)
from .factory import build_backend, get_backend, reset_backend
from .filters import AttributeFilter, EventFilter, SortField
from .results import deduplicate_events, truncate_slash_path

__all__ = [
    "StorageBackend",
    "EventFilter",
    "AttributeFilter",
    "SortField",
    "build_backend",
    "get_backend",
    "reset_backend",
    "deduplicate_events",
    "truncate_slash_path",
    # errors
    "StorageError",
    "InvalidTenantError",
    "InvalidFilterError",
    "LimitExceededError",
    "BackendError",
    "TransportFailure",
    "ResponseFormatError",
    "EventDecodeError",
    "SearchCancelledError",
    "BackendUnavailableError",
]
