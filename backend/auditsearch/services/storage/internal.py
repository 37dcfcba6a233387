"""
Storage internals.

Only for tests, tooling and backend adapters; may change without notice.
Application code should use ``auditsearch.services.storage``.
"""

# Field mapping
from .fields import CADF_FIELD_MAPPING, resolve, source_path

# Query plans
from .query import (
    AttributeQuery,
    EventQuery,
    TermClause,
    build_attribute_query,
    build_event_query,
    render_bool_query,
    render_id_lookup,
    render_sort,
    render_terms_aggregation,
    split_negation,
)

# Execution
from .client import LazyClient, build_elasticsearch_client, build_opensearch_client
from .executor import SearchExecutor

# Backends
from .elasticsearch import ElasticSearchBackend
from .hybrid import HybridBackend
from .memory import MemoryBackend
from .opensearch import OpenSearchBackend

__all__ = [
    "CADF_FIELD_MAPPING",
    "resolve",
    "source_path",
    "AttributeQuery",
    "EventQuery",
    "TermClause",
    "build_attribute_query",
    "build_event_query",
    "render_bool_query",
    "render_id_lookup",
    "render_sort",
    "render_terms_aggregation",
    "split_negation",
    "LazyClient",
    "build_elasticsearch_client",
    "build_opensearch_client",
    "SearchExecutor",
    "ElasticSearchBackend",
    "HybridBackend",
    "MemoryBackend",
    "OpenSearchBackend",
]
