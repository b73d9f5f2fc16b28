"""Store error hierarchy for buyer storage backends.

All store implementations must raise these errors for consistent error handling.
"""


class StoreError(Exception):
    """Base exception for all store errors.

    All store implementations should wrap backend-specific errors
    in one of the StoreError subclasses.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConnectionError(StoreError):
    """Raised when a store operation fails for infrastructure reasons.

    Examples:
        - Database connection timeout
        - Query failure inside the backend
        - Network errors
    """

    pass


class NotFoundError(StoreError):
    """Raised when requested entity is not found.

    This should be raised when a specific entity lookup fails,
    not for empty search results.
    """

    pass


class ConflictError(StoreError):
    """Raised when a write is rejected because the row moved on.

    Examples:
        - Stale optimistic concurrency token
        - Duplicate primary key
    """

    pass


class ValidationError(StoreError):
    """Raised on invalid data.

    Examples:
        - Invalid enum value
        - Budget upper bound below lower bound
        - Required sub-attribute missing
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.field = field
