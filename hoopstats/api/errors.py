"""Mapping of domain errors onto HTTP status codes and the error envelope."""

from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from hoopstats.errors import DomainError, FieldError, InvalidInputError, StorageError

logger = structlog.get_logger(__name__)

STATUS_BY_CODE: dict[str, int] = {
    InvalidInputError.code: status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "already_exists": status.HTTP_409_CONFLICT,
    "conflict": status.HTTP_409_CONFLICT,
    StorageError.code: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Location prefixes FastAPI puts in front of the offending field name
_LOC_SOURCES = {"body", "path", "query", "header", "cookie"}


def map_error(exc: DomainError) -> tuple[int, dict[str, Any]]:
    """
    Translate a domain error into an HTTP status and envelope.

    Internal errors carry no message so storage details never reach callers.
    """
    code = STATUS_BY_CODE.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        return code, {"error": StorageError.code}

    payload: dict[str, Any] = {"error": exc.code, "message": exc.message}
    if isinstance(exc, InvalidInputError):
        payload["field_errors"] = [fe.to_dict() for fe in exc.field_errors]
    return code, payload


def field_errors_from_validation(exc: RequestValidationError) -> list[FieldError]:
    """Flatten pydantic's error list into field errors named after the offending input."""
    out = []
    for err in exc.errors():
        if err.get("type") == "json_invalid":
            out.append(FieldError("body", "malformed JSON"))
            continue
        loc = [str(part) for part in err.get("loc", ()) if str(part) not in _LOC_SOURCES]
        out.append(FieldError(".".join(loc) or "body", err.get("msg", "invalid value")))
    return out


async def _domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    code, payload = map_error(exc)
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "request_failed",
            method=request.method,
            path=request.url.path,
            error=exc.code,
            detail=exc.message,
            cause=repr(exc.__cause__) if exc.__cause__ else None,
        )
    return JSONResponse(status_code=code, content=payload)


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    invalid = InvalidInputError(field_errors_from_validation(exc))
    logger.debug(
        "request_validation_failed",
        path=request.url.path,
        field_errors=[fe.to_dict() for fe in invalid.field_errors],
    )
    code, payload = map_error(invalid)
    return JSONResponse(status_code=code, content=payload)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
