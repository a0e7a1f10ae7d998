"""
API configuration module.

Provides configuration for the Robinhood API client.
Open for extension through custom configurations.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Union
import ssl

import aiohttp

MIN_BASE_DELAY = 1.0


@dataclass
class ProxyConfig:
    """HTTP(S) proxy, optionally with basic-auth credentials."""
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def to_aiohttp_proxy(self) -> Optional[str]:
        return self.url or None

    def to_aiohttp_auth(self) -> Optional[aiohttp.BasicAuth]:
        """Credentials for the proxy, passed to aiohttp as ``proxy_auth``."""
        if not self.url or not self.username:
            return None
        return aiohttp.BasicAuth(self.username, self.password or '')


@dataclass
class SSLConfig:
    """
    TLS verification settings.

    ``ca_file`` pins a private CA bundle, e.g. for an intercepting proxy.
    """
    verify: bool = True
    ca_file: Optional[str] = None

    def create_ssl_context(self) -> Union[ssl.SSLContext, bool]:
        """SSL context for the connector, or False to skip verification."""
        if not self.verify:
            return False
        return ssl.create_default_context(cafile=self.ca_file)


@dataclass
class TimeoutConfig:
    """
    Per-request timeouts, in seconds.

    Throttling waits happen between requests and are not bounded by
    these; see ThrottleConfig.
    """
    total: float = 300.0
    connect: float = 30.0
    sock_read: float = 60.0
    sock_connect: float = 30.0

    def to_aiohttp_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
            sock_connect=self.sock_connect
        )


@dataclass
class ThrottleConfig:
    """
    Throttling retry configuration for document downloads.

    The server advertises how long to wait ("available in N seconds");
    the retriever waits ``base_delay + N`` seconds before asking again.

    Attributes:
        base_delay: Seconds added on top of the advertised wait
        max_attempts: Maximum GETs per document (None = unbounded)
        deadline: Maximum seconds spent on one document (None = unbounded)
    """
    base_delay: float = 1.0
    max_attempts: Optional[int] = None
    deadline: Optional[float] = None

    def __post_init__(self):
        if self.base_delay < MIN_BASE_DELAY:
            raise ValueError(f"base_delay must be at least {MIN_BASE_DELAY} second")

    @property
    def unbounded(self) -> bool:
        return self.max_attempts is None and self.deadline is None


@dataclass
class APIConfig:
    """
    Complete API configuration.

    Centralizes all configuration options for the Robinhood API client.
    """
    # Endpoint settings
    base_url: str = 'https://api.robinhood.com'
    client_id: str = 'c82SH0WZOsabOXGP2sxqcj34FxkvfnWRZBKlBjFS'
    scope: str = 'internal'

    user_agent: str = 'robinpy/1.0.0'

    keepalive: bool = True

    # Sub-configurations
    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    throttle: ThrottleConfig = field(default_factory=ThrottleConfig)

    extra_headers: Dict[str, str] = field(default_factory=dict)

    # Level for the transport logger; None leaves it to logging configuration
    log_level: Optional[int] = None

    # Connection pool settings
    limit_per_host: int = 10
    limit: int = 100

    @classmethod
    def default(cls) -> 'APIConfig':
        """Create default configuration."""
        return cls()

    @classmethod
    def with_proxy(cls, proxy_url: str, **kwargs) -> 'APIConfig':
        """Create configuration with proxy."""
        return cls(
            proxy=ProxyConfig(url=proxy_url),
            **kwargs
        )

    @classmethod
    def insecure(cls, **kwargs) -> 'APIConfig':
        """Create configuration with SSL verification disabled."""
        return cls(
            ssl=SSLConfig(verify=False),
            **kwargs
        )

    def url(self, path: str) -> str:
        """
        Resolve an endpoint against the base URL.

        Absolute URLs (e.g. document download links) are returned unchanged.
        """
        if path.startswith(('http://', 'https://')):
            return path
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp TCPConnector."""
        return {
            'limit': self.limit,
            'limit_per_host': self.limit_per_host,
            'ssl': self.ssl.create_ssl_context(),
            'force_close': not self.keepalive,
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Get kwargs for aiohttp ClientSession."""
        headers = {
            'User-Agent': self.user_agent,
            **self.extra_headers
        }

        return {
            'headers': headers,
            'timeout': self.timeout.to_aiohttp_timeout(),
        }
