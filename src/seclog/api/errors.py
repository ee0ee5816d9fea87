"""Structured API error handling.

This module provides:
- ErrorCode enum with domain-grouped error codes
- APIError exception class for structured error responses
- Global exception handlers for consistent error formatting
- archive_error_to_api_error, mapping engine read failures to HTTP errors

Usage:
    from seclog.api.errors import APIError, ErrorCode

    raise APIError(
        status_code=404,
        code=ErrorCode.ARCHIVE_NOT_FOUND,
        message="Archive not found",
        details={"archive_id": "security-logs-2025-01.zip"},
    )

Response format:
    {
        "detail": {
            "code": "ARCHIVE_NOT_FOUND",
            "message": "Archive not found",
            "details": {"archive_id": "security-logs-2025-01.zip"}
        }
    }
"""

from __future__ import annotations

__all__ = [
    "APIError",
    "ErrorCode",
    "api_error_handler",
    "archive_error_to_api_error",
    "http_exception_handler",
    "validation_error_handler",
]

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from seclog.engine.models import ArchiveError, ArchiveErrorKind


class ErrorCode(str, Enum):
    """API error codes for programmatic handling.

    Codes are namespaced by domain:
    - ARCHIVE_*: Archive lookup errors
    - VALIDATION_*: Input validation errors
    - INTERNAL_*: Internal server errors
    """

    # Archive errors (400, 404, 422)
    ARCHIVE_ID_INVALID = "ARCHIVE_ID_INVALID"
    ARCHIVE_NOT_FOUND = "ARCHIVE_NOT_FOUND"
    ARCHIVE_UNREADABLE = "ARCHIVE_UNREADABLE"

    # Resource errors (404)
    NOT_FOUND = "NOT_FOUND"  # Generic 404 for unmapped exceptions

    # Validation errors (400, 422)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Internal errors (500, 503)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class APIError(HTTPException):
    """Structured API error with error code.

    Extends HTTPException to provide consistent structured error responses
    with error codes for programmatic handling.

    Attributes:
        status_code: HTTP status code.
        code: Error code from ErrorCode enum.
        error_message: Human-readable error message.
        error_details: Optional contextual details.
        validation_errors: Optional Pydantic validation errors.
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
        validation_errors: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize structured API error.

        Args:
            status_code: HTTP status code.
            code: Error code from ErrorCode enum.
            message: Human-readable error message.
            details: Optional contextual details (varies by error type).
            validation_errors: Optional Pydantic validation errors.
        """
        self.code = code
        self.error_message = message
        self.error_details = details
        self.validation_errors = validation_errors

        detail: dict[str, Any] = {
            "code": code.value,
            "message": message,
        }
        if details:
            detail["details"] = details
        if validation_errors:
            detail["validation_errors"] = validation_errors

        super().__init__(status_code=status_code, detail=detail)


_ARCHIVE_ERROR_STATUS: dict[ArchiveErrorKind, tuple[int, ErrorCode]] = {
    ArchiveErrorKind.INVALID_IDENTIFIER: (400, ErrorCode.ARCHIVE_ID_INVALID),
    ArchiveErrorKind.NOT_FOUND: (404, ErrorCode.ARCHIVE_NOT_FOUND),
    ArchiveErrorKind.OPEN_FAILED: (422, ErrorCode.ARCHIVE_UNREADABLE),
}


def archive_error_to_api_error(error: ArchiveError) -> APIError:
    """Convert an engine ArchiveError value into an APIError to raise.

    Args:
        error: Failure returned by the archive reader.

    Returns:
        APIError with the status code and error code for the failure kind.
    """
    status_code, code = _ARCHIVE_ERROR_STATUS[error.kind]
    return APIError(
        status_code=status_code,
        code=code,
        message=error.message,
        details={"archive_id": error.archive_id},
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions with structured response.

    Args:
        request: FastAPI request object.
        exc: APIError exception instance.

    Returns:
        JSONResponse with structured error detail.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors with structured response.

    Converts Pydantic validation errors to our structured format while
    preserving the detailed field-level error information.

    Args:
        request: FastAPI request object.
        exc: RequestValidationError from Pydantic.

    Returns:
        JSONResponse with structured error detail including validation_errors.
    """
    errors = exc.errors()
    first_error = errors[0] if errors else {}

    loc = first_error.get("loc", [])
    msg = first_error.get("msg", "Validation error")

    if len(errors) == 1:
        # Drop the "query"/"path" source prefix from the location
        field_parts = [str(part) for part in loc if part not in ("body", "query", "path")]
        field_name = ".".join(field_parts)
        message = f"{field_name}: {msg}" if field_name else msg
    else:
        message = f"{len(errors)} validation errors"

    detail: dict[str, Any] = {
        "code": ErrorCode.VALIDATION_ERROR.value,
        "message": message,
        "validation_errors": [
            {
                "loc": list(e.get("loc", [])),
                "msg": e.get("msg", ""),
                "type": e.get("type", ""),
            }
            for e in errors
        ],
    }

    return JSONResponse(
        status_code=422,
        content={"detail": detail},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle standard HTTPException.

    Wraps plain string details in structured format for consistency.
    Passes through already-structured details from APIError.

    Args:
        request: FastAPI request object.
        exc: HTTPException (Starlette or FastAPI).

    Returns:
        JSONResponse with structured error detail.
    """
    if isinstance(exc.detail, dict) and "code" in exc.detail:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    code = _status_to_error_code(exc.status_code)
    message = str(exc.detail) if exc.detail else f"HTTP {exc.status_code}"

    detail: dict[str, Any] = {
        "code": code.value,
        "message": message,
    }

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": detail},
    )


def _status_to_error_code(status_code: int) -> ErrorCode:
    """Map HTTP status code to default error code.

    Args:
        status_code: HTTP status code.

    Returns:
        Appropriate ErrorCode for the status code.
    """
    mapping = {
        400: ErrorCode.VALIDATION_ERROR,
        404: ErrorCode.NOT_FOUND,
        422: ErrorCode.VALIDATION_ERROR,
        500: ErrorCode.INTERNAL_ERROR,
        503: ErrorCode.SERVICE_UNAVAILABLE,
    }
    return mapping.get(status_code, ErrorCode.INTERNAL_ERROR)
