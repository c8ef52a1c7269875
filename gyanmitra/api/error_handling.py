"""
API error handling utilities.

Maps the domain exception hierarchy onto HTTP responses with one body
shape: {success: false, error, details?, conversationId?, existingFeedback?}.

Routers are wrapped with handle_api_errors; errors raised before a router
runs (authentication dependency, request parsing) go through the
app-level handlers registered by register_exception_handlers.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from gyanmitra.core.exceptions import (
    AuthError,
    ConflictError,
    GyanMitraException,
    InternalError,
    UpstreamUnavailableError,
    ValidationError,
)
from gyanmitra.models.common import ErrorResponse

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# Only these carry details to the client; the rest are logged.
_DETAILED_ERRORS = (ValidationError, ConflictError)


def error_response(exc: GyanMitraException) -> JSONResponse:
    """Build the JSON error response for a domain exception."""
    body = ErrorResponse(error=exc.message)
    if isinstance(exc, _DETAILED_ERRORS) and exc.details:
        body.details = exc.details
    if isinstance(exc, UpstreamUnavailableError) and exc.conversation_id is not None:
        body.conversation_id = str(exc.conversation_id)
    if isinstance(exc, ConflictError) and exc.existing:
        body.existing_feedback = exc.existing

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


def _log_domain_error(exc: GyanMitraException) -> None:
    extra = {"error": exc.message, "error_type": type(exc).__name__}
    if isinstance(exc, AuthError):
        extra["reason"] = exc.reason
    if isinstance(exc, UpstreamUnavailableError):
        extra["kind"] = exc.kind.value
        extra["upstream_status"] = exc.upstream_status
        extra["conversation_id"] = str(exc.conversation_id) if exc.conversation_id else None

    if exc.status_code >= 500:
        logger.error("Request failed", extra=extra)
    else:
        logger.warning("Request rejected", extra=extra)


def handle_api_errors(func: F) -> F:
    """
    Decorator converting domain exceptions raised by a router into responses.

    This centralizes:
    - Logging of errors with context
    - Mapping exception classes to HTTP status codes
    - The uniform error body
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except GyanMitraException as e:
            _log_domain_error(e)
            return error_response(e)

        except Exception as e:
            logger.exception(
                "Unexpected failure in API operation",
                extra={"error": str(e), "operation": func.__name__},
            )
            return error_response(InternalError("An internal error occurred"))

    return wrapper  # type: ignore


async def _domain_exception_handler(request: Request, exc: GyanMitraException) -> JSONResponse:
    _log_domain_error(exc)
    return error_response(exc)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]
    logger.warning("Malformed request", extra={"path": request.url.path, "errors": len(errors)})
    body = ErrorResponse(error="Invalid request", details={"errors": errors})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception", extra={"path": request.url.path})
    return error_response(InternalError("An internal error occurred"))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the app-level handlers sharing the router error shape."""
    app.add_exception_handler(GyanMitraException, _domain_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
