"""Domain error taxonomy and the terminal exception boundary.

Every domain error carries its HTTP status and a stable ``error_code`` from the
point where it is raised. ``register_exception_handlers`` turns them into the
``{"success": false, "message": ..., "code": ...}`` envelope; anything that is
not a domain error is logged in full and downgraded to a sanitized 500.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings

logger = logging.getLogger("error")


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "UNEXPECTED_ERROR"
    default_message: str = "Internal Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Any = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class MissingFile(ValidationError):
    error_code = "MISSING_FILE"
    default_message = "No file provided"


class UnsupportedMediaType(ValidationError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    error_code = "UNSUPPORTED_MEDIA_TYPE"
    default_message = "Unsupported file type"


class PayloadTooLarge(ValidationError):
    status_code = 413
    error_code = "PAYLOAD_TOO_LARGE"
    default_message = "File size exceeds allowed limit"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class InvalidCredentials(AuthError):
    # Reported as 400 to keep the login contract of the existing clients.
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class MissingToken(AuthError):
    error_code = "MISSING_TOKEN"
    default_message = "Refresh token cookie not found"


class InvalidToken(AuthError):
    error_code = "INVALID_TOKEN"
    default_message = "Invalid token"


class ExpiredToken(InvalidToken):
    error_code = "EXPIRED_TOKEN"
    default_message = "Token has expired"


class MalformedToken(InvalidToken):
    error_code = "MALFORMED_TOKEN"
    default_message = "Malformed token"


class InvalidOrExpiredToken(AuthError):
    error_code = "INVALID_OR_EXPIRED_TOKEN"
    default_message = "Invalid or expired refresh token"


class UserNotFound(AuthError):
    error_code = "USER_NOT_FOUND"
    default_message = "User not found"


class TokenMismatch(AuthError):
    error_code = "TOKEN_MISMATCH"
    default_message = "Refresh token mismatch - please login again"


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"
    default_message = "Forbidden - Insufficient permissions"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_message = "Resource already exists"


class UnexpectedError(AppError):
    pass


_STATUS_TO_CODE = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "PAYLOAD_TOO_LARGE",
    415: "UNSUPPORTED_MEDIA_TYPE",
}


def error_response(status_code: int, message: Any, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "code": code},
    )


def _request_context(request: Request) -> dict:
    identity = getattr(request.state, "identity", None)
    return {
        "http_method": request.method,
        "endpoint": request.url.path,
        "ip_address": request.client.host if request.client else None,
        "user_id": getattr(identity, "user_id", None),
    }


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            exc.message,
            extra={
                "error_code": exc.error_code,
                "error_type": type(exc).__name__,
                "status_code": exc.status_code,
                **_request_context(request),
            },
        )
        return error_response(exc.status_code, exc.message, exc.error_code)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        field_errors = {}
        for err in exc.errors():
            loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "form")]
            field_errors[".".join(loc) or "request"] = err.get("msg", "Invalid value")
        logger.warning(
            "Request validation failed",
            extra={"error_code": "VALIDATION_ERROR", "fields": field_errors, **_request_context(request)},
        )
        return error_response(status.HTTP_400_BAD_REQUEST, field_errors, "VALIDATION_ERROR")

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        logger.warning(
            "Integrity constraint violated",
            extra={"error_code": "CONFLICT", "db_error": str(exc.orig), **_request_context(request)},
        )
        return error_response(status.HTTP_409_CONFLICT, "Resource conflicts with existing data", "CONFLICT")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            message = f"Cannot find {request.url.path} on this server"
        else:
            message = exc.detail
        code = _STATUS_TO_CODE.get(exc.status_code, "UNEXPECTED_ERROR")
        if exc.status_code >= 500:
            logger.error(str(message), extra={"error_code": code, **_request_context(request)})
        return error_response(exc.status_code, message, code)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        extra = {
            "error_code": "UNHANDLED_ERROR",
            "error_type": type(exc).__name__,
            "status_code": 500,
            **_request_context(request),
        }
        if not settings.is_production:
            extra["error_message"] = str(exc)
        logger.error("Unhandled exception", extra=extra, exc_info=exc)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            UnexpectedError.default_message,
            UnexpectedError.error_code,
        )
