"""
Service-level exceptions and their HTTP translation.

Services raise these without knowing about HTTP; the handlers registered
by ``register_exception_handlers`` turn them into JSON error responses.
"""
import functools
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for all service errors (surfaced as 500 unless subclassed)."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class PermissionDeniedError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT


class BadRequestError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class InsufficientBalanceError(BadRequestError):
    """Raised when a wallet debit would take the balance below zero."""


def service_operation(action: str):
    """
    Wrap a service function so data-store failures surface as
    ``ServiceError("Failed to <action>: <message>")``.

    The wrapped function must take the SQLAlchemy session as keyword ``db``
    or as its last positional argument; the session is rolled back on failure.
    Domain errors (``ServiceError`` subclasses) pass through unchanged.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except ServiceError:
                raise
            except SQLAlchemyError as e:
                db = kwargs.get("db")
                if db is None and args:
                    db = args[-1]
                if hasattr(db, "rollback"):
                    db.rollback()
                logger.error(f"Failed to {action}: {e}")
                raise ServiceError(f"Failed to {action}: {e}") from e
        return wrapper
    return decorator


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    """Register the service error handler with the application."""
    app.add_exception_handler(ServiceError, service_error_handler)
