"""Exception handlers rendering every error as ``{"message": ...}``."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

DEFAULT_MESSAGES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not found",
    405: "Method Not Allowed",
    409: "Conflict",
    413: "Payload Too Large",
    415: "Unsupported Media Type",
}

# PostgreSQL SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
CHECK_VIOLATION = "23514"
NOT_NULL_VIOLATION = "23502"
INVALID_TEXT_REPRESENTATION = "22P02"

_SQLITE_MARKERS = {
    "UNIQUE constraint failed": UNIQUE_VIOLATION,
    "FOREIGN KEY constraint failed": FOREIGN_KEY_VIOLATION,
    "CHECK constraint failed": CHECK_VIOLATION,
    "NOT NULL constraint failed": NOT_NULL_VIOLATION,
}

_CONSTRAINT_RESPONSES = {
    UNIQUE_VIOLATION: (status.HTTP_409_CONFLICT, "Resource already exists."),
    FOREIGN_KEY_VIOLATION: (status.HTTP_400_BAD_REQUEST, "Referenced record does not exist."),
    CHECK_VIOLATION: (status.HTTP_400_BAD_REQUEST, "Invalid value provided."),
    NOT_NULL_VIOLATION: (status.HTTP_400_BAD_REQUEST, "Missing required field."),
    INVALID_TEXT_REPRESENTATION: (status.HTTP_400_BAD_REQUEST, "Invalid input format."),
}


def constraint_code(exc: IntegrityError) -> str | None:
    """Return the SQLSTATE of a constraint violation, for PostgreSQL or SQLite."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code
    text = str(orig)
    for marker, mapped in _SQLITE_MARKERS.items():
        if marker in text:
            return mapped
    return None


def integrity_error_response(exc: IntegrityError) -> tuple[int, str]:
    """Map a constraint violation to an HTTP status and a user-facing message."""
    code = constraint_code(exc)
    return _CONSTRAINT_RESPONSES.get(code, (status.HTTP_400_BAD_REQUEST, "Invalid request."))


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    msg = first.get("msg", "Invalid value")
    if field:
        return f"Invalid value for '{field}': {msg}"
    return f"Invalid request: {msg}"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        code = exc.status_code
        message = exc.detail or DEFAULT_MESSAGES.get(code) or "Unexpected error"
        return JSONResponse(
            status_code=code,
            content={"message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": _validation_message(exc)},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_exception_handler(request: Request, exc: IntegrityError):
        code, message = integrity_error_response(exc)
        logger.warning(
            "Constraint violation on %s %s: %s", request.method, request.url.path, exc.orig
        )
        return JSONResponse(status_code=code, content={"message": message})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error."},
        )
