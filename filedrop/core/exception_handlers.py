"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain, storage and
framework exceptions to ``{success: false, error}`` responses.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from filedrop.core.config import Settings, get_settings
from filedrop.domain.exceptions import FileDropException
from filedrop.infrastructure.exceptions import StorageException

logger = logging.getLogger(__name__)

# Map error_code to HTTP status; unknown codes are client errors
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "PAYLOAD_TOO_LARGE": 413,
    "AUTHENTICATION_ERROR": 401,
    "RESOURCE_NOT_FOUND": 404,
    "NO_BUCKETS_AVAILABLE": 500,
    "STORAGE_UPLOAD_ERROR": 500,
    "STORAGE_DOWNLOAD_ERROR": 500,
    "STORAGE_DELETE_ERROR": 500,
    "STORAGE_LIST_ERROR": 500,
}

GENERIC_STORAGE_REASON = "storage backend error"


def _settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def _error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def _storage_message(request: Request, exc: StorageException) -> str:
    """Caller-facing message; the backend's reason is hidden unless exposure is on."""
    if _settings(request).expose_storage_errors:
        return exc.message
    return f"{exc.operation}: {GENERIC_STORAGE_REASON}"


def _filedrop_exception_handler(
    request: Request, exc: FileDropException
) -> JSONResponse:
    """Return ``{success: false, error}`` with the status mapped from error_code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if isinstance(exc, StorageException):
        log = logger.error if status >= 500 else logger.warning
        log(
            "%s %s failed [%s]: %s",
            request.method,
            request.url.path,
            exc.error_code,
            exc.reason,
        )
        return _error_response(status, _storage_message(request, exc))
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    elif exc.error_code == "AUTHENTICATION_ERROR":
        logger.info(
            "Rejected %s %s: %s",
            request.method,
            request.url.path,
            exc.details.get("reason", "unauthenticated"),
        )
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return _error_response(status, exc.message, headers)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 naming the first invalid parameter."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(p) for p in first.get("loc", ()) if p != "query")
        message = f"Invalid request: {location} {first.get('msg', '')}".strip()
    else:
        message = "Invalid request"
    return _error_response(400, message)


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return _error_response(exc.status_code, str(exc.detail), exc.headers)


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    detail = str(exc) if _settings(request).debug else "Internal server error"
    return _error_response(500, detail)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: FileDropException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(FileDropException, _filedrop_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
