"""Retry strategies using Strategy Pattern."""
from .retry_strategy import RetryStrategy, ThrottleStrategy

__all__ = [
    'RetryStrategy',
    'ThrottleStrategy',
]
