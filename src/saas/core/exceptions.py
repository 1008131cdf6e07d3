"""Domain error taxonomy and exception handlers with request_id in responses.

Services raise these errors; the handlers below translate them into
``{"detail": ..., "error": ..., "request_id": ...}`` JSON responses.
"""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.saas.core.logging import get_logger

logger = get_logger(__name__)


class AppError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "InternalError"
    default_message: str = "An error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "ValidationError"
    default_message = "Invalid input"


class Unauthorized(AppError):
    """Missing, invalid or expired credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "Unauthorized"
    default_message = "Not authenticated"


class InvalidCredentials(Unauthorized):
    code = "InvalidCredentials"
    default_message = "Invalid email or password"


class AccountLocked(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "AccountLocked"
    default_message = "Account is locked. Please contact support."


class PermissionDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "PermissionDenied"
    default_message = "You do not have permission to perform this action"


class InvariantViolation(AppError):
    """The operation would break a data invariant (e.g. leave a team without an owner)."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "InvariantViolation"
    default_message = "Operation would violate a team invariant"


class ResourceNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "ResourceNotFound"
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "ConflictError"
    default_message = "Resource already exists"


class InvalidSignature(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "InvalidSignature"
    default_message = "Invalid webhook signature"


class InternalError(AppError):
    default_message = "Internal server error"


def _error_response(status_code: int, detail: object, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "error": code,
            "request_id": correlation_id.get(),
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Request failed", error=exc.message, code=exc.code, path=request.url.path)
        return _error_response(exc.status_code, exc.message, exc.code)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail, "HTTPError")

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail, "HTTPError")

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=correlation_id.get(),
            path=request.url.path,
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, InternalError.default_message, InternalError.code
        )
