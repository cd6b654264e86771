from __future__ import annotations

from ..schemas import ActionResult
from .errors import (
    FileActionError,
    IOFailure,
    NotFound,
    PathTraversalRejected,
    PermissionDenied,
    TypeConflict,
    UnsupportedCombination,
)

_HTTP_STATUS = {
    NotFound: 404,
    PermissionDenied: 403,
    PathTraversalRejected: 403,
    TypeConflict: 409,
    UnsupportedCombination: 409,
    IOFailure: 500,
}


def success(message: str) -> ActionResult:
    return ActionResult(message=message, is_error=False)


def failure(error: FileActionError) -> ActionResult:
    return ActionResult(message=error.message, is_error=True, error_kind=error.kind)


def http_status_for(error: FileActionError) -> int:
    return _HTTP_STATUS.get(type(error), 400)
