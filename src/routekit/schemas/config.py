"""
Defines structured configuration models using dataclasses.
"""

from dataclasses import dataclass, field

from routekit.errors import ConfigurationError


@dataclass
class SessionConfig:
    """Configuration for HTTP session behavior.

    Attributes:
        timeout: Per-request timeout in seconds.
        max_connections: Maximum number of concurrent connections.
        user_agent: Custom User-Agent string.
        headers: Session-wide headers sent with every request.
        cookies: Initial cookies for the session.
        impersonate: Browser impersonation mode. (`curl_cffi`)
        verify_ssl: Whether to verify SSL certificates.
        http2: Whether HTTP/2 should be used. (`httpx`)
        trust_env: Whether environment variables are used for proxies.
        proxy: Proxy server URL.
        proxy_user: Proxy authentication username.
        proxy_pass: Proxy authentication password.
    """

    timeout: float = 10.0
    max_connections: int = 10
    user_agent: str | None = None
    headers: dict[str, str] | None = None
    cookies: dict[str, str] | None = None
    impersonate: str | None = "chrome"
    verify_ssl: bool = True
    http2: bool = False
    trust_env: bool = False
    proxy: str | None = None
    proxy_user: str | None = None
    proxy_pass: str | None = None


@dataclass
class ClientConfig:
    """Top-level configuration for an API client.

    Attributes:
        backend: HTTP backend name (aiohttp, httpx, curl_cffi).
        max_redirects: Maximum number of redirect hops followed by one call.
        call_timeout: Deadline in seconds for a whole call, redirect chain
            included. ``None`` disables it.
        follow_transport_redirects: Let the backend follow 3xx responses by
            itself instead of applying the declared redirect rules.
        session_cfg: HTTP session configuration.
    """

    backend: str = "aiohttp"
    max_redirects: int = 10
    call_timeout: float | None = None
    follow_transport_redirects: bool = False
    session_cfg: SessionConfig = field(default_factory=SessionConfig)

    def __post_init__(self) -> None:
        if self.max_redirects < 0:
            raise ConfigurationError("max_redirects must be >= 0")
        if self.call_timeout is not None and self.call_timeout <= 0:
            raise ConfigurationError("call_timeout must be positive")
