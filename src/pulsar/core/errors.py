"""Error taxonomy and the boundary translator that renders it as JSON.

Handlers and services raise the exceptions defined here and never build
error responses themselves. `register_exception_handlers` installs the
single translation layer on the FastAPI app; every error leaves the API as
``{"error": "<message>"}`` with the matching status code.
"""

from __future__ import annotations

import logging
import re

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"

EMAIL_TAKEN_MESSAGE = "Email is already registered"
USERNAME_TAKEN_MESSAGE = "Username is already taken"

# Matches SQLite ("user_account.email") and PostgreSQL ("user_account_email_key").
_UNIQUE_FIELD_PATTERN = re.compile(r"user_account[._](email|username)")
_UNIQUE_FIELD_MESSAGES = {
    "email": EMAIL_TAKEN_MESSAGE,
    "username": USERNAME_TAKEN_MESSAGE,
}


class PulsarError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = GENERIC_ERROR_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PulsarError):
    """A required field is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ConflictError(PulsarError):
    """A unique field (email, username) is already taken."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Value is already in use"


class AuthenticationError(PulsarError):
    """Missing, invalid or expired credential.

    The message is the same whatever the cause so callers cannot tell a
    malformed token from an expired one or from an unknown subject.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Please log in"


class PermissionDeniedError(PulsarError):
    """Authenticated, but not allowed to touch the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not allowed to perform this action"


class NotFoundError(PulsarError):
    """A referenced id does not resolve."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


def error_response(status_code: int, message: str) -> JSONResponse:
    """Render an error in the API's single-field error shape."""
    return JSONResponse(status_code=status_code, content={"error": message})


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    message = str(first.get("msg", ValidationError.default_message))
    # Pydantic prefixes messages raised from validators.
    message = message.removeprefix("Value error, ")
    if location:
        return f"{location[-1]}: {message}"
    return message


async def _pulsar_error_handler(request: Request, exc: PulsarError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def _request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, _first_validation_message(exc))


def conflict_message(exc: IntegrityError) -> str:
    """Name the unique field a failed insert collided on, when it is known."""
    match = _UNIQUE_FIELD_PATTERN.search(str(exc.orig))
    if match is None:
        return ConflictError.default_message
    return _UNIQUE_FIELD_MESSAGES[match.group(1)]


async def _integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return error_response(status.HTTP_400_BAD_REQUEST, conflict_message(exc))


async def _http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error translators on `app`."""
    app.add_exception_handler(PulsarError, _pulsar_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)
