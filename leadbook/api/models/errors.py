"""Error response models for consistent API error handling."""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    INVALID_REQUEST = "INVALID_REQUEST"
    """Request validation failed (malformed JSON, missing fields, broken field rule)."""

    UNAUTHORIZED = "UNAUTHORIZED"
    """Bearer token missing, invalid or expired."""

    FORBIDDEN = "FORBIDDEN"
    """The caller is neither the owner of the buyer nor an admin."""

    BUYER_NOT_FOUND = "BUYER_NOT_FOUND"
    """The specified buyer does not exist."""

    EDIT_CONFLICT = "EDIT_CONFLICT"
    """The buyer changed after the caller read it."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""


class ErrorDetail(BaseModel):
    """Field-level error information for validation failures."""

    field: str | None = None
    """The field that caused the error, if applicable."""

    message: str
    """Human-readable error description."""


class ErrorBody(BaseModel):
    """Error body content for API error responses."""

    code: ErrorCode
    message: str
    details: list[ErrorDetail] | None = None


class ErrorResponse(BaseModel):
    """Standard error response format for all API errors.

    Example:
        {
            "error": {
                "code": "EDIT_CONFLICT",
                "message": "Record changed since last read, please refresh"
            }
        }
    """

    error: ErrorBody
