"""
Domain errors and their translation into HTTP responses.

Services raise these instead of HTTPException so the same rules apply whether
an operation is reached through a route or called directly. The handlers
registered by register_exception_handlers() turn them into JSON bodies of the
form {"detail": "..."} (plus "errors" for validation failures).
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from nexus.core.logging import get_logger

logger = get_logger(__name__)


class NexusError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal Server Error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(NexusError):
    """Input failed schema constraints."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request data"

    def __init__(self, detail: str | None = None, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(detail)
        self.errors = errors or []


class UnauthenticatedError(NexusError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"


class AuthorizationError(NexusError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized"


class NotFoundError(NexusError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(NexusError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class PayloadTooLargeError(NexusError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    default_detail = "Payload too large"


def format_validation_errors(errors: Any) -> list[dict[str, Any]]:
    """Reduce pydantic error dicts to JSON-safe field-level entries."""
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in errors
    ]


async def nexus_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, NexusError)
    content: dict[str, Any] = {"detail": exc.detail}
    if isinstance(exc, ValidationError):
        content["errors"] = exc.errors
        logger.info("validation_failed", path=request.url.path, errors=exc.errors)
    elif isinstance(exc, UnauthenticatedError):
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return JSONResponse(status_code=exc.status_code, content=content)


async def request_validation_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    errors = format_validation_errors(exc.errors())
    logger.info("validation_failed", path=request.url.path, errors=errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": ValidationError.default_detail, "errors": errors},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NexusError, nexus_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
