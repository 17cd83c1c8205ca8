"""
Custom exceptions and error handlers for the API.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from api.logging_config import logger
from filmorate.exceptions import FilmorateError, NotFoundError, ValidationError


class APIError(HTTPException):
    """Base API error with structured error response."""

    def __init__(
        self,
        status_code: int,
        error: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.error = error
        self.message = message
        self.details = details
        super().__init__(status_code=status_code, detail=message)


class DatabaseError(APIError):
    """Database connection/operation error."""

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(
            status_code=503,
            error="database_unavailable",
            message=message,
        )


def from_domain_error(exc: FilmorateError) -> APIError:
    """Translate a core exception into its HTTP counterpart."""
    if isinstance(exc, NotFoundError):
        return APIError(
            status_code=404,
            error="not_found",
            message=str(exc),
            details={"resource": exc.resource, "id": exc.identifier},
        )
    if isinstance(exc, ValidationError):
        return APIError(
            status_code=422,
            error="validation_error",
            message=exc.message,
        )
    return APIError(status_code=400, error="bad_request", message=str(exc))


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions and return structured JSON response."""
    content = {
        "error": exc.error,
        "message": exc.message,
    }
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


async def domain_error_handler(request: Request, exc: FilmorateError) -> JSONResponse:
    """Handle not-found and validation errors raised by the services."""
    logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
    return await api_error_handler(request, from_domain_error(exc))


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle store failures."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return await api_error_handler(request, DatabaseError())


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
        },
    )
