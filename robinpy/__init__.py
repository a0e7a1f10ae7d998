"""
robinpy - Async session and document layer for the Robinhood API.

Usage:
    >>> from robinpy import RobinhoodClient
    >>>
    >>> async with RobinhoodClient("session", username="me@example.com") as rh:
    ...     paths = await rh.download_documents("documents")
"""
import logging
from .client import RobinhoodClient

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    ThrottleConfig,
    AsyncAPIClient,
    AsyncAuthService,
    MfaResolver,
    InteractiveMfaResolver,
    CallbackMfaResolver,
)

# Session management
from .core.session import (
    SessionStorage,
    Session,
    SessionRecord,
    Credentials,
    JSONSession,
    MemorySession,
    SessionManager,
)

# Documents
from .core.documents import (
    DocumentDescriptor,
    DocumentService,
    ThrottledDocumentRetriever,
)

from .core.exceptions import (
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
from .core.logging import PACKAGE_LOGGERS

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for robinpy modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    for logger_name in PACKAGE_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'RobinhoodClient',
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'ThrottleConfig',
    'AsyncAPIClient',
    'AsyncAuthService',
    'MfaResolver',
    'InteractiveMfaResolver',
    'CallbackMfaResolver',
    'SessionStorage',
    'Session',
    'SessionRecord',
    'Credentials',
    'JSONSession',
    'MemorySession',
    'SessionManager',
    'DocumentDescriptor',
    'DocumentService',
    'ThrottledDocumentRetriever',
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
    'setup_logging',
]
