"""API error envelope and exception handler registration."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
from http import HTTPStatus
import logging
from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shopapi.db.errors import DuplicateKeyError
from shopapi.db.errors import RecordNotFoundError
from shopapi.schemas.error import ErrorEnvelope
from shopapi.schemas.error import ValidationIssue

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Request validation failed"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
INVALID_TOKEN_MESSAGE = "Invalid or missing token"
NOT_FOUND_MESSAGE = "Resource not found"
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred"

_TRANSPORT_PREFIXES = {"body", "query", "path", "header", "cookie"}


def status_label(status_code: int) -> str:
    """Return the standard reason phrase used as the envelope ``error`` label."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


class APIError(Exception):
    """Base application exception for explicit API error responses."""

    def __init__(
        self,
        *,
        status_code: int,
        message: str,
        issues: Sequence[ValidationIssue] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error = status_label(status_code)
        self.message = message
        self.issues = list(issues) if issues is not None else None
        self.headers = dict(headers) if headers else None


class ValidationFailure(APIError):
    """Input failed its endpoint contract; carries every field-level issue."""

    def __init__(self, issues: Sequence[ValidationIssue], *, message: str = VALIDATION_MESSAGE) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, message=message, issues=issues)


class AuthFailure(APIError):
    """Credentials or token rejected. The message never says which part failed."""

    def __init__(self, *, message: str = INVALID_CREDENTIALS_MESSAGE) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message=message,
            headers={"WWW-Authenticate": "Bearer"},
        )


class NotFoundFailure(APIError):
    """Convenience exception for missing resources."""

    def __init__(self, *, message: str = NOT_FOUND_MESSAGE) -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, message=message)


class ConflictFailure(APIError):
    """A write collided with a unique constraint on ``fields``."""

    def __init__(self, fields: Sequence[str]) -> None:
        self.fields = tuple(fields)
        super().__init__(status_code=status.HTTP_409_CONFLICT, message=conflict_message(self.fields))


class UnexpectedFailure(APIError):
    """Wraps an internal fault; ``cause`` is logged, never serialized."""

    def __init__(self, cause: BaseException | None = None) -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, message=INTERNAL_ERROR_MESSAGE)
        self.cause = cause


def conflict_message(fields: Sequence[str]) -> str:
    if not fields:
        return "Unique constraint violation"
    return f"Unique constraint violation on field: {', '.join(fields)}"


def build_error_response(
    *,
    status_code: int,
    message: str,
    issues: Sequence[ValidationIssue] | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    payload = ErrorEnvelope(
        status_code=status_code,
        error=status_label(status_code),
        message=message,
        issues=list(issues) if issues is not None else None,
    )
    return JSONResponse(
        status_code=status_code,
        content=payload.model_dump(mode="json", by_alias=True, exclude_none=True),
        headers=dict(headers) if headers else None,
    )


def format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    """Render a validation location as a dotted field path."""
    if not isinstance(location, (tuple, list)):
        return str(location)

    filtered = [str(part) for part in location if part not in _TRANSPORT_PREFIXES]
    if filtered:
        return ".".join(filtered)

    if not location:
        return "body"

    return str(location[0])


def issues_from_errors(errors: Sequence[Mapping[str, Any]]) -> list[ValidationIssue]:
    """Convert pydantic-style error dicts into ordered validation issues."""
    return [
        ValidationIssue(
            field=format_location(error.get("loc", ())),
            message=str(error.get("msg", "Invalid value")),
        )
        for error in errors
    ]


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize framework-level (path/query) validation errors."""
    return build_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        message=VALIDATION_MESSAGE,
        issues=issues_from_errors(exc.errors()),
    )


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap framework HTTP exceptions (unknown route, bad method) in the envelope."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        message = INTERNAL_ERROR_MESSAGE
    elif isinstance(exc.detail, str) and exc.detail:
        message = exc.detail
    else:
        message = status_label(exc.status_code)
    return build_error_response(
        status_code=exc.status_code,
        message=message,
        headers=getattr(exc, "headers", None),
    )


async def api_error_handler(_: Request, exc: APIError) -> JSONResponse:
    """Return explicit domain errors in the shared envelope."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        cause = getattr(exc, "cause", None) or exc
        logger.error("Unexpected failure: %r", cause, exc_info=cause)

    return build_error_response(
        status_code=exc.status_code,
        message=exc.message,
        issues=exc.issues,
        headers=exc.headers,
    )


async def duplicate_key_handler(request: Request, exc: DuplicateKeyError) -> JSONResponse:
    """Unique-constraint violations become 409 naming the offending fields."""
    logger.info("Rejected duplicate write constraint=%s fields=%s", exc.constraint, exc.fields)
    return await api_error_handler(request, ConflictFailure(exc.fields))


async def record_not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    """Missing referenced records become a generic 404."""
    logger.info("Referenced %s not found constraint=%s", exc.entity, exc.constraint)
    return await api_error_handler(request, NotFoundFailure())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Avoid leaking internal exceptions while keeping response shape stable."""
    return await api_error_handler(request, UnexpectedFailure(exc))


def register_error_handlers(app: FastAPI) -> None:
    """Attach all error handlers to a FastAPI app instance."""

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    app.add_exception_handler(RecordNotFoundError, record_not_found_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
