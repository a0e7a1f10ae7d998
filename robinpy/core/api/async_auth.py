"""
Async authentication service.

Performs the wire-level exchanges of the Robinhood login flow. It keeps
no state; SessionManager drives the state machine on top of it.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .async_client import AsyncAPIClient
from .request import ResponseHandler
from ..exceptions import AuthError, ServerError
from ..logging import get_logger

TOKEN_ENDPOINT = '/oauth2/token/'
LOGOUT_ENDPOINT = '/api-token-logout/'
ACCOUNTS_ENDPOINT = '/accounts/'


@dataclass
class AuthResult:
    """Parsed token endpoint response."""
    token: Optional[str]
    expires_in: float
    mfa_required: bool = False

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'AuthResult':
        if not isinstance(payload, dict):
            raise ServerError("Unexpected token response", body=str(payload))

        mfa_required = bool(payload.get('mfa_required'))
        token = payload.get('access_token')
        if not mfa_required and not token:
            raise AuthError("Token response did not include an access token")

        try:
            expires_in = float(payload.get('expires_in', 0) or 0)
        except (TypeError, ValueError):
            raise ServerError(f"Invalid expires_in: {payload.get('expires_in')!r}")

        return cls(token=token, expires_in=expires_in, mfa_required=mfa_required)


class AsyncAuthService:
    """
    Asynchronous authentication service.

    Handles the token exchange, account lookup and token revocation.
    """

    def __init__(self, client: AsyncAPIClient):
        """
        Initialize auth service.

        Args:
            client: Async API client
        """
        self._client = client
        self._logger = get_logger('robinpy.auth')

    async def request_token(
        self,
        username: str,
        password: str,
        mfa_code: Optional[str] = None
    ) -> AuthResult:
        """
        Exchange credentials (and optionally an MFA code) for a token.

        Raises:
            NetworkError: If the transport fails
            AuthError: If the server rejects the exchange
        """
        config = self._client.config
        form = {
            'username': username,
            'password': password,
            'client_id': config.client_id,
            'grant_type': 'password',
            'scope': config.scope,
        }
        if mfa_code is not None:
            form['mfa_code'] = mfa_code

        self._logger.debug(
            f"Requesting token for {username}" + (" with MFA code" if mfa_code else "")
        )
        result = await self._client.send('POST', TOKEN_ENDPOINT, data=form)
        payload = ResponseHandler.translate(result, error_cls=AuthError)
        return AuthResult.from_payload(payload)

    async def get_account(self, token: str) -> Dict[str, Any]:
        """
        Fetch the account summary.

        The endpoint returns a paginated list; the first account is used.
        """
        result = await self._client.send('GET', ACCOUNTS_ENDPOINT, token=token)
        payload = ResponseHandler.translate(result)

        if isinstance(payload, dict) and 'results' in payload:
            results = payload['results'] or []
            if not results:
                raise ServerError("No account associated with this login")
            payload = results[0]

        if not isinstance(payload, dict) or not payload.get('account_number'):
            raise ServerError("Account response did not include an account number")

        return payload

    async def revoke_token(self, token: str) -> None:
        """Invalidate the token on the server."""
        result = await self._client.send('POST', LOGOUT_ENDPOINT, token=token)
        ResponseHandler.translate(result, error_cls=AuthError, parse_json=False)
