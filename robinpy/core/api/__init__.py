"""Robinhood API module: transport, authentication and MFA."""
from .config import APIConfig, ProxyConfig, SSLConfig, TimeoutConfig, ThrottleConfig
from .async_client import AsyncAPIClient, TransportResult, StreamResponse
from .async_auth import AsyncAuthService, AuthResult
from .request import ResponseHandler
from .retry import RetryStrategy, ThrottleStrategy
from .mfa import (
    MfaResolver,
    InteractiveMfaResolver,
    CallbackMfaResolver,
    validate_mfa_code,
    resolver_for
)

__all__ = [
    # Transport
    'AsyncAPIClient',
    'TransportResult',
    'StreamResponse',
    'ResponseHandler',

    # Authentication
    'AsyncAuthService',
    'AuthResult',

    # MFA
    'MfaResolver',
    'InteractiveMfaResolver',
    'CallbackMfaResolver',
    'validate_mfa_code',
    'resolver_for',

    # Retry
    'RetryStrategy',
    'ThrottleStrategy',

    # Configuration
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'ThrottleConfig',
]
