"""
Global Exception Handlers

Renders every API error in the standard ErrorResponse shape and logs
it with request context.

Design Considerations:
- Standardized error response format
- Status code chosen by exception type
- Internal details never leak from unexpected errors
"""

import logging
import traceback
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models.errors import ErrorResponse, ValidationErrorItem, ValidationErrorResponse
from secure_inbox.storage.secure import StorageError

# Configure logging
logger = logging.getLogger(__name__)


def add_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Exception handlers registered")


def _error_json(status_code: int, error_response: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json")
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """
    Handle HTTP exceptions with standardized format.

    Args:
        request: Request that caused exception
        exc: HTTP exception

    Returns:
        Standardized error response
    """
    log_exception(request, exc, exc.status_code)

    error_response = ErrorResponse(
        message=str(exc.detail),
        error_code=f"HTTP_{exc.status_code}",
        details=getattr(exc, "details", None),
    )
    return _error_json(exc.status_code, error_response)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors with field-level detail.

    Args:
        request: Request that caused exception
        exc: Validation exception

    Returns:
        Detailed validation error response
    """
    log_exception(request, exc, status.HTTP_422_UNPROCESSABLE_ENTITY)

    validation_errors = [
        ValidationErrorItem(
            loc=[str(loc_item) for loc_item in error["loc"]],
            msg=error["msg"],
            type=error["type"]
        )
        for error in exc.errors()
    ]

    error_response = ValidationErrorResponse(
        message="Request validation error",
        error_code="VALIDATION_ERROR",
        validation_errors=validation_errors,
    )
    return _error_json(status.HTTP_422_UNPROCESSABLE_ENTITY, error_response)


async def storage_error_handler(
    request: Request,
    exc: StorageError
) -> JSONResponse:
    """Handle unreadable or unwritable statistics storage."""
    log_exception(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, include_traceback=True)

    error_response = ErrorResponse(
        message="Statistics storage error",
        error_code="STORAGE_ERROR",
    )
    return _error_json(status.HTTP_500_INTERNAL_SERVER_ERROR, error_response)


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle all unhandled exceptions with safe error responses.

    Args:
        request: Request that caused exception
        exc: Unhandled exception

    Returns:
        Sanitized error response
    """
    log_exception(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, include_traceback=True)

    error_response = ErrorResponse(
        message="An unexpected error occurred",
        error_code="INTERNAL_SERVER_ERROR",
        details={"type": exc.__class__.__name__},
    )
    return _error_json(status.HTTP_500_INTERNAL_SERVER_ERROR, error_response)


def log_exception(
    request: Request,
    exc: Exception,
    status_code: int,
    include_traceback: bool = False
) -> None:
    """
    Log exception with request context and appropriate severity.

    Args:
        request: Request that caused exception
        exc: Exception instance
        status_code: HTTP status code
        include_traceback: Whether to include full traceback
    """
    if status_code >= 500:
        log_level = logging.ERROR
    elif status_code >= 400:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO

    error_details = {
        "status_code": status_code,
        "error_type": exc.__class__.__name__,
        "error_message": str(exc),
        "client_host": request.client.host if request.client else "unknown",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if include_traceback:
        error_details["traceback"] = traceback.format_exc()

    logger.log(
        log_level,
        f"Exception during request to {request.method} {request.url.path}",
        extra={"error_details": error_details}
    )
