"""Map domain errors to HTTP responses in the {status, message} envelope."""

import logging
from typing import TypeVar

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from warden.core.errors import AuthError, ErrorKind, Outcome
from warden.core.validation import format_validation_errors
from warden.schemas.envelope import ErrorResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

INTERNAL_ERROR = "Internal server error"


class ApiError(HTTPException):
    """HTTPException built from an AuthError; rendered by the envelope handler."""

    def __init__(self, error: AuthError) -> None:
        headers = {"WWW-Authenticate": "Bearer"} if error.kind is ErrorKind.UNAUTHORIZED else None
        super().__init__(status_code=error.status_code, detail=error.message, headers=headers)
        self.error = error

    @classmethod
    def of(cls, kind: ErrorKind, message: str) -> "ApiError":
        return cls(AuthError(kind, message))


def unwrap_or_raise(outcome: Outcome[T]) -> T:
    """Return the outcome's value, or raise the ApiError for its failure."""
    if outcome.error is not None:
        raise ApiError(outcome.error)
    return outcome.value  # type: ignore[return-value]


def _envelope(status_code: int, message: str, detail: object | None = None, headers: dict | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, detail=detail).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_exception_handlers(app: FastAPI, verbose_errors: bool = False) -> None:
    """
    Install the envelope handlers. verbose_errors adds the exception type to
    500 responses and is only enabled for dev with DEBUG on.
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND and not isinstance(exc, ApiError) and exc.detail == "Not Found":
            message = "Route not found"
        else:
            message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return _envelope(exc.status_code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _envelope(status.HTTP_400_BAD_REQUEST, format_validation_errors(exc.errors()))

    @app.exception_handler(RateLimitExceeded)
    def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        retry_after = int(getattr(exc, "retry_after", 60))
        logger.warning(
            "Rate limit exceeded on %s from %s",
            request.url.path,
            request.client.host if request.client else "unknown",
        )
        return _envelope(
            status.HTTP_429_TOO_MANY_REQUESTS,
            "Too many requests, please try again later.",
            headers={"Retry-After": str(retry_after)},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        detail = type(exc).__name__ if verbose_errors else None
        return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR, detail=detail)
