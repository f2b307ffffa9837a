"""Exceptions and FastAPI exception handlers for the caching service."""

from typing import Any, Dict, Optional

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

logger = structlog.get_logger()


class CachingServiceException(Exception):
    """Base exception for caching service errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidInputError(CachingServiceException):
    """Raised when an entity or id is missing or malformed."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            error_code="INVALID_INPUT",
            status_code=400,
            details=details,
        )


class StoreError(CachingServiceException):
    """Raised when the durable store fails.

    The original store exception is kept as ``__cause__``.
    """

    def __init__(
        self,
        operation: str,
        entity_id: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.operation = operation
        self.entity_id = entity_id
        details: Dict[str, Any] = {"operation": operation}
        if entity_id is not None:
            details["entity_id"] = entity_id
        if original_error is not None:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        message = f"Durable store operation '{operation}' failed"
        if entity_id is not None:
            message += f" for entity {entity_id}"

        super().__init__(
            message=message,
            error_code="STORE_ERROR",
            status_code=503,
            details=details,
        )


async def caching_service_exception_handler(request: Request, exc: CachingServiceException) -> JSONResponse:
    """Render a caching service exception as an error response."""
    logger.error(
        "Caching service error",
        path=request.url.path,
        error_code=exc.error_code,
        error_message=exc.message,
        details=exc.details
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "error_message": exc.message
        }
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render any unexpected exception as a 500 response."""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True
    )
    return JSONResponse(
        status_code=500,
        content={
            "error_code": "INTERNAL_ERROR",
            "error_message": "An unexpected error occurred"
        }
    )
