"""
Custom exceptions for Robinhood session and document operations.

Every error raised by the library derives from RobinhoodError so callers
can catch the whole family at once.
"""
from typing import Optional, Union


class RobinhoodError(Exception):
    """Base exception for all robinpy errors."""

    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            error_code: Numeric error code (if available)
        """
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class NetworkError(RobinhoodError):
    """The transport could not complete the exchange (connection, DNS, timeout)."""
    pass


class ServerError(RobinhoodError):
    """The server answered with a non-success status."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        body: Union[bytes, str, None] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Server-provided message
            status: HTTP status code
            body: Raw response body
        """
        self.status = status
        self.body = body
        super().__init__(message, status)


class AuthError(ServerError):
    """The server rejected the credentials, the MFA code or the token."""
    pass


class MfaValidationError(RobinhoodError):
    """An MFA code did not match the six-digit format."""
    pass


class MfaResolverError(RobinhoodError):
    """The MFA resolver itself failed to produce a code."""
    pass


class PreconditionError(RobinhoodError):
    """An operation was invoked on an invalid or unauthenticated session."""
    pass


class NotFoundError(RobinhoodError):
    """No persisted session record exists."""
    pass


class SessionExpiredError(RobinhoodError):
    """The persisted session record has expired."""
    pass


class FileSystemError(RobinhoodError):
    """A local read, write or mkdir failed."""
    pass


class ThrottleLimitError(NetworkError):
    """A document stayed throttled past the configured attempt or time cap."""

    def __init__(self, message: str, document_id: Optional[str] = None) -> None:
        self.document_id = document_id
        super().__init__(message)
