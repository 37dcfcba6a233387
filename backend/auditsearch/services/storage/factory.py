# Backend selection from settings and the process-wide backend instance

from __future__ import annotations

import logging
from threading import Lock

from auditsearch.core.config import Settings, settings as default_settings

from .base import StorageBackend
from .elasticsearch import ElasticSearchBackend
from .hybrid import HybridBackend
from .opensearch import OpenSearchBackend

_LOGGER = logging.getLogger(__name__)

DRIVERS = ("opensearch", "elasticsearch", "hybrid")

_backend: StorageBackend | None = None
_backend_lock = Lock()


def build_backend(settings: Settings) -> StorageBackend:
    driver = settings.storage_driver
    if driver == "opensearch":
        return OpenSearchBackend(settings)
    if driver == "elasticsearch":
        return ElasticSearchBackend(settings)
    if driver == "hybrid":
        # New store first: its copy of an event wins over the legacy one.
        return HybridBackend(OpenSearchBackend(settings), ElasticSearchBackend(settings))
    raise ValueError(f"unknown storage driver {driver!r}, expected one of {', '.join(DRIVERS)}")


def get_backend() -> StorageBackend:
    """Shared backend for the configured driver; clients connect on first query."""
    global _backend
    if _backend is None:
        with _backend_lock:
            if _backend is None:
                _backend = build_backend(default_settings)
                _LOGGER.info("using %s storage backend", _backend.name)
    return _backend


async def reset_backend() -> None:
    """Close and forget the shared backend (configuration reloads, tests)."""
    global _backend
    with _backend_lock:
        backend, _backend = _backend, None
    if backend is not None:
        await backend.close()
