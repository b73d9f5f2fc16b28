"""API exception hierarchy for consistent error handling.

All API exceptions inherit from LeadbookAPIError, which provides
status_code and error_code attributes used by the global exception
handler to generate consistent error responses.
"""

from leadbook.api.models.errors import ErrorCode, ErrorDetail


class LeadbookAPIError(Exception):
    """Base exception for all API errors.

    Subclasses set status_code and error_code to define the HTTP response.
    """

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    @property
    def details(self) -> list[ErrorDetail] | None:
        return None


class InvalidRequestError(LeadbookAPIError):
    """Raised when a request breaks a field rule."""

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    @property
    def details(self) -> list[ErrorDetail] | None:
        if self.field is None:
            return None
        return [ErrorDetail(field=self.field, message=self.message)]


class BuyerNotFoundError(LeadbookAPIError):
    """Raised when buyer_id doesn't exist."""

    status_code = 404
    error_code = ErrorCode.BUYER_NOT_FOUND


class EditForbiddenError(LeadbookAPIError):
    """Raised when the caller may not modify the buyer."""

    status_code = 403
    error_code = ErrorCode.FORBIDDEN


class EditConflictError(LeadbookAPIError):
    """Raised when the submitted updated_at no longer matches."""

    status_code = 409
    error_code = ErrorCode.EDIT_CONFLICT
