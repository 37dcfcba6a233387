"""Audit event search: CADF event queries over OpenSearch and Elasticsearch."""

__version__ = "0.1.0"
