from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse


class AppError(Exception):
    """Base application error with consistent schema."""

    def __init__(
        self,
        message: str,
        code: str = "ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class AuthRequired(AppError):
    """No valid session. Clients send the user back to login; never retried."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="AUTH_REQUIRED", status_code=status.HTTP_401_UNAUTHORIZED)


class ProfileNotFound(AppError):
    def __init__(self, message: str = "User profile not found"):
        super().__init__(message, code="PROFILE_NOT_FOUND", status_code=status.HTTP_404_NOT_FOUND)


class PersistenceFailure(AppError):
    """A ledger write or read failed. Recoverable; state is reconciled on reload."""

    def __init__(self, message: str = "Failed to persist", details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code="PERSISTENCE_FAILURE",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
        )


class VerseSourceUnavailable(AppError):
    def __init__(self, message: str = "Verse text unavailable", details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code="VERSE_SOURCE_UNAVAILABLE",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=details,
        )


class DailyLimitReached(AppError):
    def __init__(self, message: str = "Daily credit limit reached", details: dict[str, Any] | None = None):
        super().__init__(message, code="DAILY_LIMIT_REACHED", status_code=status.HTTP_409_CONFLICT, details=details)


class NotFoundError(AppError):
    def __init__(self, message: str = "Not found"):
        super().__init__(message, code="NOT_FOUND", status_code=status.HTTP_404_NOT_FOUND)


class BadRequestError(AppError):
    def __init__(self, message: str = "Bad request", details: dict[str, Any] | None = None):
        super().__init__(message, code="BAD_REQUEST", status_code=status.HTTP_400_BAD_REQUEST, details=details)


def error_response(request: Request, exc: AppError) -> ORJSONResponse:
    body = {
        "error": {
            "message": exc.message,
            "code": exc.code,
            "details": exc.details,
        }
    }
    if hasattr(request.state, "request_id"):
        body["request_id"] = request.state.request_id
    return ORJSONResponse(status_code=exc.status_code, content=body)


async def app_exception_handler(request: Request, exc: AppError) -> ORJSONResponse:
    if isinstance(exc, (PersistenceFailure, VerseSourceUnavailable)):
        from versescribe.core.logging import get_logger
        get_logger(__name__).warning(exc.code.lower(), message=exc.message, **exc.details)
    return error_response(request, exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
    body = {
        "error": {
            "message": "Validation error",
            "code": "VALIDATION_ERROR",
            "details": {"errors": exc.errors()},
        }
    }
    if hasattr(request.state, "request_id"):
        body["request_id"] = request.state.request_id
    return ORJSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=body,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    from versescribe.core.logging import get_logger
    get_logger(__name__).exception("unhandled_exception", exc_info=exc)
    body = {
        "error": {
            "message": "Internal server error",
            "code": "INTERNAL_ERROR",
            "details": {},
        }
    }
    if hasattr(request.state, "request_id"):
        body["request_id"] = request.state.request_id
    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body,
    )
