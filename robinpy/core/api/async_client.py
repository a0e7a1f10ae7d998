"""
Async Robinhood API client.

Thin asynchronous transport with configuration support. It never raises
for a non-success status: every exchange yields a TransportResult that
the ResponseHandler translates into a payload or a typed error.
"""
import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional

import aiohttp

from .config import APIConfig
from ..exceptions import NetworkError
from ..logging import get_logger


@dataclass
class TransportResult:
    """
    Outcome of a single HTTP exchange.

    Exactly one of three shapes:
    - network failure: ``error`` is set, ``status`` is None
    - server rejection: ``status`` is not 2xx
    - success: ``status`` is 2xx
    """
    status: Optional[int] = None
    body: bytes = b''
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        """True if the transport could not complete the exchange."""
        return self.error is not None

    @property
    def ok(self) -> bool:
        return not self.failed and self.status is not None and 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode('utf-8', errors='replace')


class StreamResponse:
    """Streaming view over an aiohttp response, used for binary downloads."""

    def __init__(self, response: aiohttp.ClientResponse):
        self._response = response

    @property
    def status(self) -> int:
        return self._response.status

    @property
    def ok(self) -> bool:
        return 200 <= self._response.status < 300

    async def text(self) -> str:
        try:
            return await self._response.text(errors='replace')
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"Network error while reading response: {e}") from e

    async def iter_chunks(self, chunk_size: int = 65536) -> AsyncIterator[bytes]:
        """Yield the body in chunks; transport failures become NetworkError."""
        try:
            async for chunk in self._response.content.iter_chunked(chunk_size):
                yield chunk
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"Network error while streaming: {e}") from e


class AsyncAPIClient:
    """
    Asynchronous Robinhood API transport.

    Features:
    - Full async/await support
    - Configurable proxy, SSL, timeouts
    - Connection pooling
    - Uniform TransportResult for every exchange

    The client holds no authentication state; callers pass the bearer
    token on each request.

    Example:
        >>> async with AsyncAPIClient(APIConfig.default()) as client:
        ...     result = await client.send('GET', '/accounts/', token=token)
    """

    def __init__(self, config: Optional[APIConfig] = None):
        """
        Initialize async API client.

        Args:
            config: API configuration (uses defaults if not provided)
        """
        self._config = config or APIConfig.default()
        self._session: Optional[aiohttp.ClientSession] = None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._closed = False

        self._logger = get_logger('robinpy.api')
        if self._config.log_level is not None:
            self._logger.setLevel(self._config.log_level)

    @property
    def config(self) -> APIConfig:
        """Get current configuration."""
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> 'AsyncAPIClient':
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._closed:
            raise NetworkError("Client is closed")

        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                **self._config.get_session_kwargs()
            )
        return self._session

    async def close(self):
        """Close client and release resources."""
        self._closed = True

        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

        if self._connector and not self._connector.closed:
            await self._connector.close()
        self._connector = None

    def _build_headers(self, token: Optional[str]) -> Dict[str, str]:
        headers = {}
        if token:
            headers['Authorization'] = f"Bearer {token}"
        return headers

    def _proxy_kwargs(self) -> Dict[str, Any]:
        proxy = self._config.proxy
        if proxy is None:
            return {}
        return {'proxy': proxy.to_aiohttp_proxy(), 'proxy_auth': proxy.to_aiohttp_auth()}

    async def send(
        self,
        method: str,
        url: str,
        *,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None
    ) -> TransportResult:
        """
        Issue a request and read the whole body.

        Args:
            method: HTTP method
            url: Endpoint path (relative to base_url) or absolute URL
            data: Optional form body
            params: Optional query string parameters
            token: Optional bearer token

        Returns:
            TransportResult describing the exchange
        """
        session = await self._ensure_session()
        full_url = self._config.url(url)

        self._logger.debug(f"{method} {full_url}")

        try:
            async with session.request(
                method,
                full_url,
                data=data,
                params=params,
                headers=self._build_headers(token),
                **self._proxy_kwargs()
            ) as response:
                body = await response.read()
                self._logger.debug(f"{method} {full_url} -> {response.status} ({len(body)} bytes)")
                return TransportResult(status=response.status, body=body)

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.error(f"Network error on {method} {full_url}: {e!r}")
            return TransportResult(error=e)

    @asynccontextmanager
    async def stream(
        self,
        url: str,
        *,
        token: Optional[str] = None
    ) -> AsyncIterator[StreamResponse]:
        """
        Open a streamed GET.

        Args:
            url: Endpoint path or absolute URL
            token: Optional bearer token

        Yields:
            StreamResponse whose body has not been read yet

        Raises:
            NetworkError: If the connection cannot be established
        """
        session = await self._ensure_session()
        full_url = self._config.url(url)

        self._logger.debug(f"GET (stream) {full_url}")

        try:
            async with session.get(
                full_url,
                headers=self._build_headers(token),
                **self._proxy_kwargs()
            ) as response:
                yield StreamResponse(response)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.error(f"Network error on GET {full_url}: {e!r}")
            raise NetworkError(f"Network error: {e}") from e
