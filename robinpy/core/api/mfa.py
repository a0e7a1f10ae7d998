"""
Multi-factor authentication resolvers using Strategy Pattern.

A resolver produces the six-digit code the server asks for during login.
The authentication flow depends only on MfaResolver; whether the code
comes from a terminal prompt or from caller code is the resolver's concern.
"""
import asyncio
import getpass
import inspect
import re
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Union

from ..exceptions import MfaResolverError, MfaValidationError
from ..logging import get_logger

MFA_CODE_PATTERN = re.compile(r'^[0-9]{6}$')

logger = get_logger('robinpy.mfa')


def validate_mfa_code(code: Any) -> str:
    """
    Check that an MFA code is exactly six digits.

    Args:
        code: Value returned by a resolver

    Returns:
        The code, unchanged

    Raises:
        MfaValidationError: If the value is not a six-digit string
    """
    if not isinstance(code, str):
        raise MfaValidationError(
            f"MFA resolver must return a string, got {type(code).__name__}"
        )
    if not MFA_CODE_PATTERN.fullmatch(code):
        raise MfaValidationError("MFA code must contain exactly six digits")
    return code


class MfaResolver(ABC):
    """Abstract MFA code source."""

    @abstractmethod
    async def resolve(self) -> str:
        """Produce an MFA code. Validation is done by the caller."""
        pass


class InteractiveMfaResolver(MfaResolver):
    """
    Reads the code from the terminal with a masked prompt.

    The blocking read runs in the default executor so the event loop is
    free while the operator types. A single read is taken; there is no
    automatic re-prompt.
    """

    PROMPT = "Enter your six-digit MFA code: "

    def __init__(
        self,
        prompt: Optional[str] = None,
        reader: Callable[[str], str] = getpass.getpass
    ):
        self._prompt = prompt or self.PROMPT
        self._reader = reader

    async def resolve(self) -> str:
        logger.info("Multi-factor authentication required, waiting for code input")
        loop = asyncio.get_running_loop()
        try:
            code = await loop.run_in_executor(None, self._reader, self._prompt)
        except (EOFError, OSError) as e:
            raise MfaResolverError(f"Could not read MFA code: {e}") from e
        return code.strip() if isinstance(code, str) else code


class CallbackMfaResolver(MfaResolver):
    """
    Obtains the code from a caller-supplied function.

    The function may be a coroutine function or a plain callable that
    returns either the code or an awaitable resolving to it.
    """

    def __init__(self, func: Callable[[], Union[str, Awaitable[str]]]):
        if not callable(func):
            raise TypeError("MFA callback must be callable")
        self._func = func

    async def resolve(self) -> str:
        logger.info("Multi-factor authentication required, calling provided resolver")
        try:
            result = self._func()
            if inspect.isawaitable(result):
                result = await result
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"MFA resolver failed: {e!r}")
            raise MfaResolverError(f"MFA resolver failed: {e}") from e
        return result


def resolver_for(mfa: Union[None, MfaResolver, Callable[[], Any]]) -> MfaResolver:
    """
    Normalize the ``mfa`` argument accepted by authenticate().

    None selects the interactive prompt, a callable is wrapped in
    CallbackMfaResolver, a resolver is returned unchanged.
    """
    if mfa is None:
        return InteractiveMfaResolver()
    if isinstance(mfa, MfaResolver):
        return mfa
    if callable(mfa):
        return CallbackMfaResolver(mfa)
    raise TypeError(f"Unsupported MFA resolver: {type(mfa).__name__}")
