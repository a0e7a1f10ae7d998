"""
Session lifecycle management.

SessionManager owns the authentication state machine:

    Start -> CredentialsSubmitted -> Success -> AccountResolved -> Authenticated
                                  -> MfaRequested -> MfaResolving -> MfaSubmitted
                                       -> Success -> AccountResolved -> Authenticated
                                  -> Failed

Expiry is never acted upon automatically; it is observed lazily through
is_authenticated() and load().
"""
import asyncio
import getpass
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Union

from ..api.async_client import AsyncAPIClient
from ..api.async_auth import AsyncAuthService
from ..api.mfa import MfaResolver, resolver_for, validate_mfa_code
from ..exceptions import (
    AuthError,
    NotFoundError,
    PreconditionError,
    SessionExpiredError,
)
from ..logging import get_logger, mask_secret
from .json_session import JSONSession
from .models import Credentials, Session, SessionRecord, utcnow
from .protocols import SessionStorage

DEFAULT_SESSION_NAME = 'robinhood'

MfaArgument = Union[None, MfaResolver, Callable[[], Any]]


class SessionManager:
    """
    Authenticates, tracks and persists a Robinhood session.

    All state changes (authenticate, load, save, logout) run under a
    single asyncio.Lock, so an in-flight authentication is exclusive.
    The current session is an immutable snapshot that is replaced with
    one assignment; readers never observe a half-updated session.

    Example:
        >>> async with AsyncAPIClient() as client:
        ...     manager = SessionManager(client, JSONSession("me"))
        ...     session = await manager.authenticate("me@example.com", "secret")
        ...     await manager.save()
    """

    def __init__(
        self,
        client: AsyncAPIClient,
        storage: Optional[SessionStorage] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        persist_password: bool = False,
        clock: Callable[[], datetime] = utcnow,
        password_reader: Callable[[str], str] = getpass.getpass
    ):
        """
        Initialize session manager.

        Args:
            client: API transport
            storage: Where sessions are persisted (JSON file by default)
            username: Login name
            password: Password; prompted for on authenticate() if missing
            persist_password: Also write the password into the saved record
            clock: Returns the current timezone-aware time
            password_reader: Masked input function used for the password prompt
        """
        self._client = client
        self._auth = AsyncAuthService(client)
        self._storage = storage if storage is not None else JSONSession(DEFAULT_SESSION_NAME)
        self._credentials = Credentials(username, password)
        self._persist_password = persist_password
        self._clock = clock
        self._password_reader = password_reader
        self._session: Optional[Session] = None
        self._lock = asyncio.Lock()
        self._logger = get_logger('robinpy.session')

        if persist_password:
            self._logger.warning(
                "persist_password is enabled: the password will be stored in plain text"
            )

    @property
    def session(self) -> Optional[Session]:
        """Current session snapshot, or None."""
        return self._session

    @property
    def storage(self) -> SessionStorage:
        return self._storage

    @property
    def username(self) -> Optional[str]:
        return self._credentials.username

    def is_authenticated(self) -> bool:
        """True if a token is present and has not expired."""
        session = self._session
        return session is not None and session.is_valid(self._clock())

    async def _prompt_password(self) -> str:
        """Prompt for the password without blocking the event loop."""
        self._logger.info("No password supplied, prompting")
        loop = asyncio.get_running_loop()
        prompt = f"Password for {self._credentials.username}: "
        try:
            password = await loop.run_in_executor(None, self._password_reader, prompt)
        except (EOFError, OSError) as e:
            raise PreconditionError(f"A password is required to authenticate: {e}") from e
        if not password:
            raise PreconditionError("A password is required to authenticate")
        return password

    async def authenticate(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        mfa: MfaArgument = None
    ) -> Session:
        """
        Exchange credentials for a session.

        Args:
            username: Login name (overrides the constructor value)
            password: Password (overrides the constructor value)
            mfa: MfaResolver, a callable returning the code (sync or async),
                 or None to prompt on the terminal when MFA is requested

        Returns:
            The new Session, which also becomes the current session

        Raises:
            PreconditionError: If no username is known or no password can be obtained
            NetworkError: If a request cannot be completed
            AuthError: If the server rejects the credentials or the MFA code
            MfaValidationError: If the resolver returns a malformed code
            MfaResolverError: If the resolver itself fails
            ServerError: If the account lookup fails
        """
        async with self._lock:
            if username and username != self._credentials.username:
                # a password never carries over to another login
                if self._credentials.username:
                    self._credentials.clear()
                self._credentials.username = username
            if password:
                self._credentials.password = password

            if not self._credentials.username:
                raise PreconditionError("A username is required to authenticate")
            if not self._credentials.password:
                self._credentials.password = await self._prompt_password()

            username = self._credentials.username
            password = self._credentials.password

            self._logger.info(f"Authenticating {username}")
            result = await self._auth.request_token(username, password)

            if result.mfa_required:
                self._logger.info(f"Multi-factor authentication requested for {username}")
                resolver = resolver_for(mfa)
                code = validate_mfa_code(await resolver.resolve())
                self._logger.debug("Submitting MFA code")
                result = await self._auth.request_token(username, password, mfa_code=code)
                if result.mfa_required or not result.token:
                    raise AuthError("MFA code was not accepted")

            expires = self._clock() + timedelta(seconds=result.expires_in)
            self._logger.debug(
                f"Token {mask_secret(result.token)} issued, expires {expires.isoformat()}"
            )

            account = await self._auth.get_account(result.token)

            session = Session(
                username=username,
                token=result.token,
                account=str(account['account_number']),
                expires=expires,
            )
            self._session = session

            if not self._persist_password:
                self._credentials.clear()

            self._logger.info(f"Authenticated {username} (account {session.account})")
            return session

    async def save(self, session: Optional[Session] = None) -> None:
        """
        Persist a session, replacing any saved record.

        Args:
            session: Session to save (defaults to the current one)

        Raises:
            PreconditionError: If the session is missing, has no token or has expired
            FileSystemError: If the record cannot be written
        """
        async with self._lock:
            session = session or self._session
            if session is None or not session.is_valid(self._clock()):
                raise PreconditionError("Cannot save an unauthenticated session")

            password = None
            if self._persist_password and session.username == self._credentials.username:
                password = self._credentials.password
            self._storage.save(SessionRecord.from_session(session, password))
            self._logger.info(f"Session for {session.username} saved")

    async def load(self) -> Session:
        """
        Restore the saved session.

        The record is trusted as-is; the server is not contacted.

        Returns:
            The restored Session, which also becomes the current session

        Raises:
            NotFoundError: If nothing is saved
            SessionExpiredError: If the saved session has expired
            FileSystemError: If the record cannot be read
        """
        async with self._lock:
            record = self._storage.load()
            if record is None:
                raise NotFoundError("A saved session does not exist")

            if record.is_expired(self._clock()):
                self._logger.info(f"Saved session for {record.username} has expired")
                raise SessionExpiredError("Saved session has expired, authenticate again")

            session = record.to_session()
            self._session = session
            self._credentials.username = record.username
            if self._persist_password and record.password:
                self._credentials.password = record.password

            self._logger.info(f"Session for {record.username} loaded")
            return session

    async def logout(self, session: Optional[Session] = None) -> None:
        """
        Revoke the token on the server and delete the saved record.

        The Session object passed in (or held by the caller) is no longer
        usable afterwards and should be discarded.

        Raises:
            PreconditionError: If there is no session to log out
            NetworkError: If the request cannot be completed
            AuthError: If the server rejects the logout
            FileSystemError: If the saved record cannot be deleted
        """
        async with self._lock:
            session = session or self._session
            if session is None or not session.token:
                raise PreconditionError("There is no session to log out")

            await self._auth.revoke_token(session.token)
            self._storage.delete()

            if self._session is session:
                self._session = None

            self._logger.info(f"Logged out {session.username}")
