from __future__ import annotations

from typing import Any


class StorageError(Exception):
    """Base class for every failure raised by the storage layer."""


class InvalidTenantError(StorageError, ValueError):
    pass


class InvalidFilterError(StorageError, ValueError):
    pass


class LimitExceededError(StorageError, ValueError):
    def __init__(self, requested: int, max_limit: int) -> None:
        super().__init__(
            f"requested result window {requested} exceeds the backend maximum of {max_limit}"
        )
        self.requested = requested
        self.max_limit = max_limit


class BackendError(StorageError):
    """The search backend answered with a structured error."""

    def __init__(self, backend: str, status: int, details: Any = None) -> None:
        super().__init__(f"{backend} returned status {status}")
        self.backend = backend
        self.status = status
        self.details = details


class TransportFailure(StorageError):
    """Network failure, unreadable response or undecodable event body."""


class ResponseFormatError(TransportFailure):
    pass


class EventDecodeError(TransportFailure):
    def __init__(self, hit_id: str | None, reason: str) -> None:
        super().__init__(f"cannot decode event {hit_id or '<unknown>'}: {reason}")
        self.hit_id = hit_id


class SearchCancelledError(StorageError):
    """The query deadline expired before the backend answered."""

    def __init__(self, backend: str, timeout: float | None) -> None:
        super().__init__(f"{backend} query cancelled after {timeout}s")
        self.backend = backend
        self.timeout = timeout


class BackendUnavailableError(StorageError):
    """The backend client could not be constructed; later calls retry."""
