# app/shared/exception_handlers.py
"""
Error envelope for every failure the API returns:
{statusCode, timestamp, path, error, message}
"""
import logging
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.helpers.time import utcnow

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"

DB_ERROR_MAP = {
    UNIQUE_VIOLATION: (status.HTTP_409_CONFLICT, "Duplicate Entry", "A record with this value already exists"),
    FOREIGN_KEY_VIOLATION: (status.HTTP_400_BAD_REQUEST, "Foreign Key Violation", "Referenced record does not exist"),
    NOT_NULL_VIOLATION: (status.HTTP_400_BAD_REQUEST, "Missing Required Field", "Required field is missing"),
}

# SQLite reports constraint failures by message only
SQLITE_MESSAGE_CODES = {
    "UNIQUE constraint failed": UNIQUE_VIOLATION,
    "FOREIGN KEY constraint failed": FOREIGN_KEY_VIOLATION,
    "NOT NULL constraint failed": NOT_NULL_VIOLATION,
}


def error_body(status_code: int, path: str, error: str, message, **extra) -> dict:
    body = {
        "statusCode": status_code,
        "timestamp": utcnow().isoformat(),
        "path": path,
        "error": error,
        "message": message,
    }
    body.update(extra)
    return body


def db_error_code(exc: DBAPIError) -> Optional[str]:
    """Vendor SQLSTATE for a driver error (asyncpg/psycopg), or the SQLite equivalent."""
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return str(code)
    text = str(orig)
    for fragment, mapped in SQLITE_MESSAGE_CODES.items():
        if fragment in text:
            return mapped
    return None


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    try:
        phrase = HTTPStatus(exc.status_code).phrase
    except ValueError:
        phrase = "Error"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, request.url.path, phrase, exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    validation_errors = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        validation_errors.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            status.HTTP_400_BAD_REQUEST,
            request.url.path,
            "Validation Error",
            "Validation failed",
            validationErrors=validation_errors,
        ),
    )


async def database_exception_handler(request: Request, exc: DBAPIError) -> JSONResponse:
    code = db_error_code(exc)
    if code in DB_ERROR_MAP:
        status_code, error, message = DB_ERROR_MAP[code]
    else:
        logger.error(f"Unhandled database error: {code}", exc_info=exc)
        status_code, error, message = (
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Database Error",
            "Database error occurred",
        )
    return JSONResponse(
        status_code=status_code,
        content=error_body(status_code, request.url.path, error, message),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            request.url.path,
            "Internal Server Error",
            "An unexpected error occurred",
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DBAPIError, database_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
