"""Core components of robinpy."""
from .exceptions import (
    RobinhoodError,
    NetworkError,
    ServerError,
    AuthError,
    MfaValidationError,
    MfaResolverError,
    PreconditionError,
    NotFoundError,
    SessionExpiredError,
    FileSystemError,
    ThrottleLimitError,
)

__all__ = [
    'RobinhoodError',
    'NetworkError',
    'ServerError',
    'AuthError',
    'MfaValidationError',
    'MfaResolverError',
    'PreconditionError',
    'NotFoundError',
    'SessionExpiredError',
    'FileSystemError',
    'ThrottleLimitError',
]
