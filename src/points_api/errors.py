"""
Exceptions whose messages are safe to show to API clients
"""


class PointsAPIError(Exception):
    """Base class for errors surfaced to GraphQL clients unmasked."""

    pass


class ValidationError(PointsAPIError):
    """Raised when caller-supplied arguments are missing or malformed."""

    pass


class StorageError(PointsAPIError):
    """Raised when a database operation fails.

    The message is intentionally generic; the underlying driver error is
    logged server-side and chained as ``__cause__``.
    """

    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(message)
