"""
Custom exception handlers for consistent error responses.

Storage engine errors are translated here so routers can let them propagate:
not-found maps to 404, ownership mismatch to 409, and live I/O failures to 503.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from fastapi.responses import JSONResponse

from bytestore.logging import get_logger
from bytestore.services.errors import (
    ContainerNotFoundError,
    ObjectNotFoundError,
    OwnershipError,
    StorageIOError,
    StoreError,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine
    from typing import Any

    from fastapi import FastAPI, Request
    from starlette.requests import Request as StarletteRequest

    ExceptionHandler = Callable[
        [StarletteRequest, Exception],
        Coroutine[Any, Any, JSONResponse],
    ]

__all__ = [
    "ServiceError",
    "register_exception_handlers",
    "service_error_from_store_error",
    "service_error_handler",
    "store_error_handler",
    "unhandled_exception_handler",
]


class ServiceError(Exception):
    """
    Base exception for service errors.

    Attributes:
        error: Machine-readable error code
        message: Human-readable description
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        error: str,
        message: str,
        status_code: int,
        details: dict[str, object] | None,
    ) -> None:
        self.error = error
        self.message = message
        self.status_code = status_code
        if details is None:
            self.details: dict[str, object] = {}
        else:
            self.details = details
        super().__init__(message)


def service_error_from_store_error(exc: StoreError) -> ServiceError:
    """Translate a storage engine error into a ServiceError."""
    if isinstance(exc, ContainerNotFoundError):
        return ServiceError(
            error="container_not_found",
            message=str(exc),
            status_code=404,
            details={"container_id": str(exc.container_id)},
        )
    if isinstance(exc, ObjectNotFoundError):
        return ServiceError(
            error="object_not_found",
            message=str(exc),
            status_code=404,
            details={"container_id": str(exc.container_id), "object_id": str(exc.object_id)},
        )
    if isinstance(exc, OwnershipError):
        return ServiceError(
            error="not_in_container",
            message=str(exc),
            status_code=409,
            details={
                "container_id": str(exc.container_id),
                "object_id": str(exc.object_id),
                "owner_id": str(exc.owner_id),
            },
        )
    if isinstance(exc, StorageIOError):
        return ServiceError(
            error=f"storage_{exc.operation.replace(' ', '_')}_failed",
            message=f"Failed to {exc.operation}",
            status_code=503,
            details={
                "exception_type": exc.cause.__class__.__name__,
                "reason": str(exc.cause),
            },
        )
    return ServiceError(
        error="storage_error",
        message=str(exc),
        status_code=500,
        details={"exception_type": exc.__class__.__name__},
    )


async def service_error_handler(
    request: Request,
    exc: ServiceError,
) -> JSONResponse:
    """Handle ServiceError exceptions."""
    logger = get_logger()
    logger.warning(
        "Service error",
        extra={
            "error_code": exc.error,
            "error_message": exc.message,
            "status_code": exc.status_code,
            "details": exc.details,
            "path": str(request.url.path),
            "method": request.method,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error,
            "message": exc.message,
            "details": exc.details,
        },
    )


async def store_error_handler(
    request: Request,
    exc: StoreError,
) -> JSONResponse:
    """Handle storage engine errors that reached the app boundary."""
    return await service_error_handler(request, service_error_from_store_error(exc))


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger = get_logger()
    logger.exception(
        "Unhandled exception",
        extra={
            "path": str(request.url.path),
            "method": request.method,
        },
    )
    exception_message = str(exc)
    message = (
        exception_message
        if exception_message
        else f"Unhandled exception of type {exc.__class__.__name__}"
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": message,
            "details": {
                "exception_type": exc.__class__.__name__,
                "path": str(request.url.path),
                "method": request.method,
            },
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the app."""
    app.add_exception_handler(ServiceError, cast("ExceptionHandler", service_error_handler))
    app.add_exception_handler(StoreError, cast("ExceptionHandler", store_error_handler))
    app.add_exception_handler(Exception, unhandled_exception_handler)
