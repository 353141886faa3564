"""
Exceptions and centralized exception handlers.

Services raise ``ResponseError`` subclasses; the handlers registered by
``register_exception_handlers`` turn them, request validation failures and
any unexpected error into the ``{"errors": ...}`` envelope.
"""

from typing import Any, Dict, List

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)


class ResponseError(Exception):
    """
    Base exception for errors surfaced to the API caller.

    Args:
        status_code: HTTP status to respond with
        errors: Message string or list of field errors
    """

    def __init__(self, status_code: int, errors: Any):
        super().__init__(errors if isinstance(errors, str) else repr(errors))
        self.status_code = status_code
        self.errors = errors


class BadRequestError(ResponseError):
    """Raised for invalid input that passed schema validation."""

    def __init__(self, errors: Any):
        super().__init__(status.HTTP_400_BAD_REQUEST, errors)


class UnauthorizedError(ResponseError):
    """Raised when the API token is missing, unknown or revoked."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, message)


class NotFoundError(ResponseError):
    """Raised when a row is missing or outside the caller's ownership chain."""

    def __init__(self, message: str):
        super().__init__(status.HTTP_404_NOT_FOUND, message)


class ContactNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__("Contact is not found")


class AddressNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__("Address is not found")


def format_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Flatten Pydantic error dicts into ``{"field", "message"}`` pairs.

    The leading location segment (``body``, ``query``, ``path``) is dropped.

    Args:
        errors: ``RequestValidationError.errors()`` output

    Returns:
        List of field/message dicts
    """
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        formatted.append({
            "field": ".".join(loc) or "body",
            "message": error.get("msg", "Invalid value"),
        })
    return formatted


async def response_error_handler(request: Request, exc: ResponseError) -> JSONResponse:
    """Handle domain errors raised by services."""
    logger.warning(
        "response_error",
        path=request.url.path,
        status_code=exc.status_code,
        errors=exc.errors
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"errors": exc.errors}
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors as 400."""
    errors = format_validation_errors(exc.errors())
    logger.warning(
        "validation_error",
        path=request.url.path,
        errors=errors
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": errors}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions (unknown routes, wrong methods)."""
    logger.warning(
        "http_exception",
        path=request.url.path,
        status_code=exc.status_code,
        detail=exc.detail
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"errors": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unexpected_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"errors": "Internal server error"}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the application."""
    app.add_exception_handler(ResponseError, response_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
