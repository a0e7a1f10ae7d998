"""
RobinhoodClient - High-level async client for the Robinhood session layer.

Example:
    >>> async with RobinhoodClient("me", username="me@example.com") as rh:
    ...     await rh.download_documents("documents")
"""
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .core.api import APIConfig, AsyncAPIClient, AsyncAuthService
from .core.documents import DocumentDescriptor, DocumentService, ThrottledDocumentRetriever
from .core.exceptions import NotFoundError, PreconditionError, SessionExpiredError
from .core.logging import get_logger
from .core.session import JSONSession, Session, SessionManager, SessionStorage
from .core.session.manager import MfaArgument


class RobinhoodClient:
    """
    Robinhood client with persistent sessions.

    On start() a saved session is reused when it is still valid;
    otherwise the client authenticates and saves the new session.

    Args:
        session_name: Name of the JSON session file (``<name>.json``)
        username: Login name
        password: Password (prompted for if needed and not given)
        config: API configuration
        storage: Custom session storage (overrides session_name)
        persist_password: Store the password in the session file
    """

    def __init__(
        self,
        session_name: Union[str, Path] = 'robinhood',
        username: Optional[str] = None,
        password: Optional[str] = None,
        config: Optional[APIConfig] = None,
        storage: Optional[SessionStorage] = None,
        persist_password: bool = False
    ):
        self._config = config or APIConfig.default()
        self._api = AsyncAPIClient(self._config)
        self._storage = storage if storage is not None else JSONSession(session_name)
        self._manager = SessionManager(
            self._api,
            self._storage,
            username=username,
            password=password,
            persist_password=persist_password
        )
        self._documents = DocumentService(self._api)
        self._retriever = ThrottledDocumentRetriever(self._api)
        self._logger = get_logger('robinpy.client')

    @property
    def manager(self) -> SessionManager:
        return self._manager

    @property
    def session(self) -> Optional[Session]:
        return self._manager.session

    @property
    def config(self) -> APIConfig:
        return self._config

    async def __aenter__(self) -> 'RobinhoodClient':
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        mfa: MfaArgument = None
    ) -> Session:
        """
        Resume the saved session or log in.

        Returns:
            Active Session
        """
        try:
            session = await self._manager.load()
            if username is None or username == session.username:
                return session
            self._logger.info(f"Saved session belongs to {session.username}, logging in again")
        except (NotFoundError, SessionExpiredError) as e:
            self._logger.info(f"No usable saved session: {e}")

        session = await self._manager.authenticate(username, password, mfa)
        await self._manager.save(session)
        return session

    async def close(self) -> None:
        await self._api.close()
        self._storage.close()

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    async def authenticate(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        mfa: MfaArgument = None
    ) -> Session:
        return await self._manager.authenticate(username, password, mfa)

    async def save(self) -> None:
        await self._manager.save()

    async def load(self) -> Session:
        return await self._manager.load()

    async def logout(self) -> None:
        await self._manager.logout()

    def is_authenticated(self) -> bool:
        return self._manager.is_authenticated()

    def _require_session(self) -> Session:
        session = self._manager.session
        if session is None or not session.is_valid():
            raise PreconditionError("Not authenticated")
        return session

    # =========================================================================
    # Account and documents
    # =========================================================================

    async def get_account(self) -> Dict[str, Any]:
        """Account summary (balances, account number, enabled features)."""
        session = self._require_session()
        return await AsyncAuthService(self._api).get_account(session.token)

    async def get_documents(self) -> List[DocumentDescriptor]:
        """All account documents (statements, tax forms, ...)."""
        return await self._documents.list_documents(self._require_session())

    async def download_documents(self, folder: Union[str, Path]) -> List[Path]:
        """
        Download every account document into ``folder``.

        Because of server-side throttling this can take a while for
        accounts with many documents.
        """
        session = self._require_session()
        documents = await self._documents.list_documents(session)
        return await self._retriever.download_all(session, documents, folder)
