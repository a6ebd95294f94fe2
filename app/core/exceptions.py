# app/core/exceptions.py

"""
Global exception handlers.

Every error response shares one envelope:
    {"detail", "status_code", "timestamp", "path", "method"}
plus "errors" for request validation failures.
"""

import logging
from datetime import datetime, UTC
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings

logger = logging.getLogger(__name__)

HTTP_422 = 422


def error_body(request: Request, status_code: int, detail: Any, errors: Optional[list] = None) -> dict:
    body = {
        "detail": detail,
        "status_code": status_code,
        "timestamp": datetime.now(UTC).isoformat(),
        "path": request.url.path,
        "method": request.method,
    }
    if errors is not None:
        body["errors"] = errors
    return body


def classify_integrity_error(exc: IntegrityError) -> tuple[int, str]:
    """
    Maps a constraint violation to a status code and message.
    Driver messages differ between asyncpg and sqlite, so both wordings are matched.
    """
    message = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
    if "unique" in message or "duplicate" in message:
        return status.HTTP_409_CONFLICT, "Resource already exists"
    if "foreign key" in message:
        return status.HTTP_400_BAD_REQUEST, "Referenced resource not found"
    return status.HTTP_400_BAD_REQUEST, "Database constraint violation"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    else:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(error_body(request, exc.status_code, exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("%s %s -> 422: validation failed", request.method, request.url.path)
    return JSONResponse(
        status_code=HTTP_422,
        content=jsonable_encoder(
            error_body(request, HTTP_422, "Validation failed", errors=exc.errors())
        ),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    status_code, detail = classify_integrity_error(exc)
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, status_code, exc.orig)
    return JSONResponse(status_code=status_code, content=error_body(request, status_code, detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    detail = f"Internal server error: {exc}" if settings.DEBUG_MODE else "Internal server error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(request, status.HTTP_500_INTERNAL_SERVER_ERROR, detail),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
