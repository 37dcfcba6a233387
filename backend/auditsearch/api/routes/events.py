from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from auditsearch.api.utils import err, ok, storage_error_response, utc_now_rfc3339
from auditsearch.core.config import settings
from auditsearch.services import events as event_service
from auditsearch.services.storage import (
    AttributeFilter,
    EventFilter,
    StorageBackend,
    StorageError,
    get_backend,
)
from auditsearch.services.storage.base import TENANT_FIELD
from auditsearch.services.storage.filters import parse_sort, parse_time_bounds


router = APIRouter()

# Tenant scoping: the (external) auth layer resolves the caller's project and
# passes it as project_id. Omitting it lifts the tenant restriction.
_PROJECT_ID = Query(None, description="tenant to scope the query to")


@router.get("/v1/events")
async def list_events(
    project_id: str | None = _PROJECT_ID,
    observer_type: str = "",
    target_type: str = "",
    target_id: str = "",
    initiator_type: str = "",
    initiator_id: str = "",
    initiator_name: str = "",
    action: str = "",
    outcome: str = "",
    request_path: str = "",
    time: list[str] = Query([], description="<op>:<timestamp>, op in lt|lte|gt|gte"),
    search: str = "",
    sort: str = Query("", description="field:asc|desc, comma separated"),
    offset: int = Query(0, ge=0),
    limit: int = Query(10, ge=0),
    backend: StorageBackend = Depends(get_backend),
):
    try:
        event_filter = EventFilter(
            observer_type=observer_type,
            target_type=target_type,
            target_id=target_id,
            initiator_type=initiator_type,
            initiator_id=initiator_id,
            initiator_name=initiator_name,
            action=action,
            outcome=outcome,
            request_path=request_path,
            time=parse_time_bounds(time),
            search=search,
            sort=parse_sort(sort),
            offset=offset,
            limit=limit,
        )
        items, total = await event_service.get_events(
            event_filter, project_id, backend, timeout=settings.query_timeout
        )
    except StorageError as error:
        return storage_error_response(error)

    return ok(
        total=total,
        items=[item.model_dump(by_alias=True) for item in items],
        server_time=utc_now_rfc3339(),
    )


@router.get("/v1/events/{event_id}")
async def show_event(
    event_id: str,
    project_id: str | None = _PROJECT_ID,
    backend: StorageBackend = Depends(get_backend),
):
    try:
        event = await event_service.get_event(
            event_id, project_id, backend, timeout=settings.query_timeout
        )
    except StorageError as error:
        return storage_error_response(error)

    if event is None:
        return JSONResponse(status_code=404, content=err("NOT_FOUND", f"event {event_id} not found"))
    data = event.to_dict()
    # Tenant membership is scoping metadata, not part of the CADF record.
    data.pop(TENANT_FIELD, None)
    return ok(event=data)


@router.get("/v1/attributes/{query_name}")
async def list_attributes(
    query_name: str,
    project_id: str | None = _PROJECT_ID,
    limit: int = Query(0, ge=0),
    max_depth: int = Query(0, ge=0, description="0 keeps full hierarchical values"),
    backend: StorageBackend = Depends(get_backend),
):
    attribute_filter = AttributeFilter(query_name=query_name, limit=limit, max_depth=max_depth)
    try:
        values = await event_service.get_attributes(
            attribute_filter, project_id, backend, timeout=settings.query_timeout
        )
    except StorageError as error:
        return storage_error_response(error)

    return ok(items=values)
