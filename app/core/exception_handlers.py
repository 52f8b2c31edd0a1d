"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses (SRP, OCP for adding new handlers).
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import PhotoCatalogException
from app.infrastructure.exceptions import (
    StorageException,
    StorageNotFoundError,
    StoragePermissionError,
)

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "RESOURCE_NOT_FOUND": 404,
    "CONFLICT_ON_CLEANUP": 409,
    "STORE_UNAVAILABLE": 503,
    "SERVICE_UNAVAILABLE": 503,
}


def _photo_catalog_exception_handler(
    request: Request, exc: PhotoCatalogException
) -> JSONResponse:
    """Return JSON from PhotoCatalogException.to_dict() with appropriate status code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status >= 500:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.error_code, exc.details)
    return JSONResponse(
        status_code=status,
        content=exc.to_dict(),
    )


def _storage_exception_handler(request: Request, exc: StorageException) -> JSONResponse:
    """Storage errors that escape a use case (local grant endpoints)."""
    if isinstance(exc, StorageNotFoundError):
        status, code = 404, "RESOURCE_NOT_FOUND"
    elif isinstance(exc, StoragePermissionError):
        status, code = 403, "PERMISSION_DENIED"
    else:
        logger.error("Storage error on %s: %s", request.url.path, exc)
        status, code = 503, "STORE_UNAVAILABLE"
    return JSONResponse(
        status_code=status,
        content={"error": code, "message": exc.message, "details": {}},
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_encoder(exc.errors()),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: PhotoCatalogException (and
    subclasses), StorageException, RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(PhotoCatalogException, _photo_catalog_exception_handler)
    app.add_exception_handler(StorageException, _storage_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
