"""
Application Errors

Every user-facing failure is an ``AppError`` carrying a machine-readable
error code and the HTTP status it maps to. Routers let these propagate; the
handlers registered in ``register_exception_handlers`` render them as

    {"detail": {"error": "<CODE>", "message": "<text>"}}

Anything else becomes a 500. Outside production the 500 body also carries
the exception text and traceback.
"""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from academy.core.config import settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base exception for typed application errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 400,
        headers: dict[str, str] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.headers = headers
        super().__init__(message)


class BadRequestError(AppError):
    def __init__(self, message: str, error_code: str = "BAD_REQUEST"):
        super().__init__(message, error_code, status.HTTP_400_BAD_REQUEST)


class UnauthorizedError(AppError):
    def __init__(self, message: str, error_code: str = "UNAUTHORIZED"):
        super().__init__(message, error_code, status.HTTP_401_UNAUTHORIZED)


class ForbiddenError(AppError):
    def __init__(self, message: str, error_code: str = "FORBIDDEN"):
        super().__init__(message, error_code, status.HTTP_403_FORBIDDEN)


class NotFoundError(AppError):
    def __init__(self, message: str, error_code: str = "NOT_FOUND"):
        super().__init__(message, error_code, status.HTTP_404_NOT_FOUND)


class ConflictError(AppError):
    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message, error_code, status.HTTP_409_CONFLICT)


class ServiceUnavailableError(AppError):
    def __init__(self, message: str, error_code: str = "SERVICE_UNAVAILABLE"):
        super().__init__(message, error_code, status.HTTP_503_SERVICE_UNAVAILABLE)


def error_body(error_code: str, message: str) -> dict:
    return {"detail": {"error": error_code, "message": message}}


async def app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error_code, exc.message),
        headers=exc.headers,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")

    content = error_body(
        "INTERNAL_ERROR",
        "Something went wrong. Please try again later.",
    )
    if not settings.is_production:
        content["detail"]["exception"] = str(exc)
        content["detail"]["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the AppError and catch-all handlers to the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


__all__ = [
    "AppError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ServiceUnavailableError",
    "register_exception_handlers",
]
