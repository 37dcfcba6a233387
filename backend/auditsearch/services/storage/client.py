# Search client construction and the process-wide lazy client handle

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Callable, Generic, TypeVar
from urllib.parse import urlparse

from elasticsearch import AsyncElasticsearch
from opensearchpy import AsyncOpenSearch

from auditsearch.core.config import Settings

from .errors import BackendUnavailableError

_LOGGER = logging.getLogger(__name__)

ClientT = TypeVar("ClientT")

# Idle keep-alive connections per node.
POOL_MAXSIZE = 10


class LazyClient(Generic[ClientT]):
    """
    Builds a search client on first use and keeps it for the process lifetime.

    Construction runs at most once at a time; concurrent first callers wait for
    the same client instead of opening duplicate pools. A failed construction
    is not cached: the caller gets ``BackendUnavailableError`` and the next
    call tries again.
    """

    def __init__(self, name: str, factory: Callable[[], ClientT]) -> None:
        self.name = name
        self._factory = factory
        self._client: ClientT | None = None
        self._lock = Lock()

    @property
    def initialized(self) -> bool:
        return self._client is not None

    def get(self) -> ClientT:
        client = self._client
        if client is not None:
            return client
        with self._lock:
            if self._client is None:
                _LOGGER.debug("initializing %s client", self.name)
                try:
                    self._client = self._factory()
                except Exception as exc:
                    _LOGGER.error("cannot initialize %s client: %s", self.name, exc)
                    raise BackendUnavailableError(f"{self.name} client unavailable: {exc}") from exc
            return self._client

    def reset(self) -> ClientT | None:
        """Forget the current client so the next ``get`` reconnects; returns the old one."""
        with self._lock:
            client, self._client = self._client, None
        return client

    async def close(self) -> None:
        client = self.reset()
        if client is not None and hasattr(client, "close"):
            await client.close()


def _opensearch_config(settings: Settings) -> dict[str, Any]:
    parsed = urlparse(settings.opensearch_url)
    if not parsed.hostname:
        raise ValueError(f"invalid OPENSEARCH_NODE {settings.opensearch_url!r}")
    use_ssl = parsed.scheme == "https"

    config: dict[str, Any] = {
        "hosts": [{"host": parsed.hostname, "port": parsed.port or 9200}],
        "use_ssl": use_ssl,
        "timeout": settings.opensearch_response_timeout,
        "maxsize": POOL_MAXSIZE,
        # Retries belong to whoever calls the storage layer.
        "max_retries": 0,
        "retry_on_timeout": False,
    }
    if use_ssl:
        config["verify_certs"] = settings.opensearch_verify_certs
        config["ssl_show_warn"] = settings.opensearch_verify_certs
    if settings.opensearch_username and settings.opensearch_password:
        config["http_auth"] = (settings.opensearch_username, settings.opensearch_password)
    return config


def build_opensearch_client(settings: Settings) -> AsyncOpenSearch:
    _LOGGER.debug("using OpenSearch node %s", settings.opensearch_url)
    if settings.opensearch_username:
        _LOGGER.debug("using OpenSearch username %s", settings.opensearch_username)
    return AsyncOpenSearch(**_opensearch_config(settings))


def _elasticsearch_config(settings: Settings) -> dict[str, Any]:
    parsed = urlparse(settings.elasticsearch_url)
    if not parsed.scheme or not parsed.hostname:
        raise ValueError(f"invalid ELASTICSEARCH_URL {settings.elasticsearch_url!r}")

    config: dict[str, Any] = {
        "hosts": [settings.elasticsearch_url],
        "request_timeout": settings.elasticsearch_response_timeout,
        "connections_per_node": POOL_MAXSIZE,
        "max_retries": 0,
        "retry_on_timeout": False,
    }
    if settings.elasticsearch_username and settings.elasticsearch_password:
        config["basic_auth"] = (settings.elasticsearch_username, settings.elasticsearch_password)
    return config


def build_elasticsearch_client(settings: Settings) -> AsyncElasticsearch:
    _LOGGER.debug("using Elasticsearch URL %s", settings.elasticsearch_url)
    if settings.elasticsearch_username:
        _LOGGER.debug("using Elasticsearch username %s", settings.elasticsearch_username)
    return AsyncElasticsearch(**_elasticsearch_config(settings))
