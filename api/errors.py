"""
Module 07 - API Error Handling

Standardized error handling for the API. Engine exceptions keep their
error codes; only the HTTP status is chosen here.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorDetail, ErrorResponse
from core.schemas.errors import AllowlistException, ErrorCodes


logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


class InvalidIdentifierError(APIError):
    """Address failed canonicalization."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code=ErrorCodes.INVALID_IDENTIFIER,
            message=message,
            status_code=400,
            details=details,
        )


class MalformedHashError(APIError):
    """Root or sibling is not a 32-byte hex value."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code=ErrorCodes.MALFORMED_HASH,
            message=message,
            status_code=400,
            details=details,
        )


class MemberNotFoundError(APIError):
    """Address is not on the allowlist."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code=ErrorCodes.MEMBER_NOT_FOUND,
            message=message,
            status_code=404,
            details=details,
        )


class InternalError(APIError):
    """Internal server error."""

    def __init__(self, message: str = "Internal server error", details: dict[str, Any] | None = None):
        super().__init__(
            code="INTERNAL_ERROR",
            message=message,
            status_code=500,
            details=details,
        )


_STATUS_BY_CODE = {
    ErrorCodes.INVALID_IDENTIFIER: 400,
    ErrorCodes.MALFORMED_HASH: 400,
    ErrorCodes.HASH_FUNCTION_UNAVAILABLE: 400,
    ErrorCodes.MEMBER_NOT_FOUND: 404,
}


def from_allowlist_exception(exc: AllowlistException) -> APIError:
    """Map an engine exception to an APIError with a matching status."""
    return APIError(
        code=exc.code,
        message=exc.message,
        status_code=_STATUS_BY_CODE.get(exc.code, 500),
        details=exc.details,
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def allowlist_error_handler(request: Request, exc: AllowlistException) -> JSONResponse:
    """Handle engine exceptions that reach the app unconverted."""
    return await api_error_handler(request, from_allowlist_exception(exc))


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
