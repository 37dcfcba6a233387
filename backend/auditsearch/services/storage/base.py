from __future__ import annotations

import abc
import re

from auditsearch.schemas.cadf import Event

from .errors import InvalidTenantError
from .filters import AttributeFilter, EventFilter


# Tenant placeholder emitted upstream when the project could not be resolved.
UNAVAILABLE_TENANT = "unavailable"

# Document field listing the tenants an event belongs to.
TENANT_FIELD = "tenant_ids"

# Tenant IDs end up in index names and patterns; wildcards, commas and the
# like would widen a query to other tenants' indices.
_TENANT_ID = re.compile(r"[A-Za-z0-9_-]+")


def validate_tenant_id(tenant_id: str | None) -> None:
    """
    ``None`` means no tenant restriction. Empty, placeholder and non
    ``[A-Za-z0-9_-]`` IDs are rejected.
    """
    if tenant_id is None:
        return
    if not tenant_id.strip():
        raise InvalidTenantError("tenant ID cannot be empty")
    if tenant_id == UNAVAILABLE_TENANT:
        raise InvalidTenantError(f"tenant ID {UNAVAILABLE_TENANT!r} is not valid for queries")
    if not _TENANT_ID.fullmatch(tenant_id):
        raise InvalidTenantError(f"tenant ID {tenant_id!r} contains unsupported characters")


class StorageBackend(abc.ABC):
    """
    Capability set shared by every search backend.

    The public coroutines validate the tenant before any backend work and then
    delegate to the ``_``-prefixed implementation hooks.
    """

    name = "storage"

    async def get_events(
        self,
        event_filter: EventFilter,
        tenant_id: str | None,
        *,
        timeout: float | None = None,
    ) -> tuple[list[Event], int]:
        """Matching events in result order, plus the total number of matches."""
        validate_tenant_id(tenant_id)
        return await self._get_events(event_filter, tenant_id, timeout=timeout)

    async def get_event(
        self,
        event_id: str,
        tenant_id: str | None,
        *,
        timeout: float | None = None,
    ) -> Event | None:
        """The event with this ID, or ``None`` when there is none."""
        validate_tenant_id(tenant_id)
        return await self._get_event(event_id, tenant_id, timeout=timeout)

    async def get_attributes(
        self,
        attribute_filter: AttributeFilter,
        tenant_id: str | None,
        *,
        timeout: float | None = None,
    ) -> list[str]:
        """Sorted distinct values of one attribute, truncated to ``max_depth``."""
        validate_tenant_id(tenant_id)
        return await self._get_attributes(attribute_filter, tenant_id, timeout=timeout)

    @abc.abstractmethod
    def max_limit(self) -> int:
        """Largest result window the backend serves; 0 when unlimited."""

    async def close(self) -> None:
        return None

    @abc.abstractmethod
    async def _get_events(
        self, event_filter: EventFilter, tenant_id: str | None, *, timeout: float | None
    ) -> tuple[list[Event], int]: ...

    @abc.abstractmethod
    async def _get_event(
        self, event_id: str, tenant_id: str | None, *, timeout: float | None
    ) -> Event | None: ...

    @abc.abstractmethod
    async def _get_attributes(
        self, attribute_filter: AttributeFilter, tenant_id: str | None, *, timeout: float | None
    ) -> list[str]: ...


def configured_max_limit(value: int) -> int:
    return value if value > 0 else 0
