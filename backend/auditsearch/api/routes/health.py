from __future__ import annotations

from fastapi import APIRouter, Depends

from auditsearch.api.utils import ok, utc_now_rfc3339
from auditsearch.services.storage import StorageBackend, get_backend


router = APIRouter()


@router.get("/health")
def health(backend: StorageBackend = Depends(get_backend)):
    # Liveness only: backends connect lazily on the first query.
    return ok(backend=backend.name, max_limit=backend.max_limit(), server_time=utc_now_rfc3339())
