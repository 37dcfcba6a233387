from __future__ import annotations

from fastapi.responses import JSONResponse

from auditsearch.core.time import utc_now_rfc3339
from auditsearch.services.storage import (
    BackendError,
    BackendUnavailableError,
    InvalidFilterError,
    InvalidTenantError,
    LimitExceededError,
    SearchCancelledError,
    StorageError,
    TransportFailure,
)


def ok(**data: object) -> dict[str, object]:
    return {"status": "ok", **data}


def err(code: str, message: str) -> dict[str, object]:
    return {
        "status": "error",
        "error": {
            "code": code,
            "message": message,
        },
    }


# Most specific first.
_ERROR_RESPONSES: tuple[tuple[type[StorageError], int, str], ...] = (
    (InvalidTenantError, 400, "INVALID_TENANT"),
    (InvalidFilterError, 400, "INVALID_FILTER"),
    (LimitExceededError, 400, "LIMIT_EXCEEDED"),
    (BackendError, 502, "BACKEND_ERROR"),
    (BackendUnavailableError, 503, "BACKEND_UNAVAILABLE"),
    (TransportFailure, 503, "BACKEND_UNREACHABLE"),
    (SearchCancelledError, 504, "QUERY_TIMEOUT"),
)


def storage_error_response(error: StorageError) -> JSONResponse:
    for error_type, status_code, code in _ERROR_RESPONSES:
        if isinstance(error, error_type):
            return JSONResponse(status_code=status_code, content=err(code, str(error)))
    return JSONResponse(status_code=500, content=err("STORAGE_ERROR", str(error)))


__all__ = ["ok", "err", "storage_error_response", "utc_now_rfc3339"]
