"""
Runs one search round trip against a backend client.

Errors raised by the client library are sorted into two kinds: a structured
error reported by the backend (``BackendError``, status and details kept) and
everything the transport or serializer raised (``TransportFailure``). Nothing
is retried here.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Mapping

from .client import LazyClient
from .errors import BackendError, SearchCancelledError, StorageError, TransportFailure

_LOGGER = logging.getLogger(__name__)

# Maps a client-library exception to a storage error, or None when the
# exception is not one the library raises for request failures.
Classifier = Callable[[str, Exception], StorageError | None]


def _details_json(details: Any) -> str:
    try:
        return json.dumps(details, default=str)
    except (TypeError, ValueError):
        return repr(details)


class SearchExecutor:
    def __init__(
        self,
        backend: str,
        client: LazyClient[Any],
        classify: Classifier,
        default_timeout: float | None = None,
    ) -> None:
        self.backend = backend
        self._client = client
        self._classify = classify
        self._default_timeout = default_timeout

    async def search(self, *, timeout: float | None = None, **request: Any) -> Mapping[str, Any]:
        """
        Submit ``client.search(**request)`` and return the response body.

        ``timeout`` (seconds) bounds the whole round trip; when it expires the
        in-flight request is cancelled and ``SearchCancelledError`` is raised.
        """
        client = self._client.get()
        deadline = timeout if timeout is not None else self._default_timeout
        try:
            response = await asyncio.wait_for(client.search(**request), deadline)
        except asyncio.TimeoutError as exc:
            _LOGGER.warning("%s query cancelled after %ss", self.backend, deadline)
            raise SearchCancelledError(self.backend, deadline) from exc
        except Exception as exc:
            error = self._classify(self.backend, exc)
            if error is None:
                raise
            if isinstance(error, BackendError):
                _LOGGER.error(
                    "%s failed with status %s and error %s",
                    self.backend,
                    error.status,
                    _details_json(error.details),
                )
            else:
                _LOGGER.error("%s request failed: %s", self.backend, exc)
            raise error from exc

        # elasticsearch-py wraps bodies in ObjectApiResponse.
        body = getattr(response, "body", response)
        if not isinstance(body, Mapping):
            raise TransportFailure(f"{self.backend} returned a non-object response")
        return body
