"""Retry strategies using Strategy Pattern."""
import asyncio
import re
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from ..config import ThrottleConfig

THROTTLE_PATTERN = re.compile(r'available in (\d+(?:\.\d+)?) seconds?')


class RetryStrategy(ABC):
    """Abstract retry strategy."""

    @abstractmethod
    def should_retry(self, attempt: int, elapsed: float) -> bool:
        """Determines if another attempt may be made."""
        pass

    @abstractmethod
    async def wait_async(self, seconds: float):
        """Waits before retry."""
        pass


class ThrottleStrategy(RetryStrategy):
    """
    Honors the server's advertised cooldown.

    A throttled response body reads like
    ``"Request was throttled. Expected available in 12 seconds."``;
    the strategy waits ``base_delay + N`` seconds and retries.
    Attempts are unbounded unless ThrottleConfig sets a cap.
    """

    def __init__(
        self,
        config: Optional[ThrottleConfig] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.config = config or ThrottleConfig()
        self._sleep = sleep

    @staticmethod
    def parse_wait(body: str) -> Optional[float]:
        """Extracts N from "available in N seconds", or None if absent."""
        if not body:
            return None
        match = THROTTLE_PATTERN.search(body)
        if match is None:
            return None
        return float(match.group(1))

    def delay_for(self, advertised: float) -> float:
        return self.config.base_delay + advertised

    def should_retry(self, attempt: int, elapsed: float) -> bool:
        """
        Args:
            attempt: Number of attempts already made for this document
            elapsed: Seconds spent on this document so far
        """
        if self.config.max_attempts is not None and attempt >= self.config.max_attempts:
            return False
        if self.config.deadline is not None and elapsed >= self.config.deadline:
            return False
        return True

    async def wait_async(self, seconds: float):
        await self._sleep(seconds)
