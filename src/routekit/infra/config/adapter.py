from __future__ import annotations

from typing import Any

from routekit.errors import ConfigurationError
from routekit.infra.cookies import parse_cookies
from routekit.schemas import ApiSpec, ClientConfig, SessionConfig

_API_ONLY_KEYS = frozenset(
    {
        "base_url",
        "baseURL",
        "routes",
        "default_responses",
        "defaultResponses",
        "default_error_handling",
        "defaultErrorHandling",
        "default_external_responses",
        "defaultExternalResponses",
    }
)


class ConfigAdapter:
    """High-level accessor for general and API-specific configuration.

    All configuration resolution follows the order:

    **general -> api-specific -> built-in defaults**

    Expected layout::

        [general]
        backend = "aiohttp"
        timeout = 10.0

        [apis.<name>]
        base_url = "https://example.com/api"
        max_redirects = 5

        [apis.<name>.routes.<route>]
        url = "/user/login"
        method = "POST"
        request_content_type = "application/json"

    Args:
        config (dict[str, Any]): Fully loaded configuration mapping containing
            a ``general`` block and optionally an ``apis`` block.
    """

    def __init__(self, config: dict[str, Any]) -> None:
        self._config: dict[str, Any] = dict(config)

    def get_config(self) -> dict[str, Any]:
        """Return the full raw configuration mapping."""
        return self._config

    def get_api_names(self) -> list[str]:
        """Return the names of the APIs declared in the configuration."""
        apis = self._config.get("apis")
        return list(apis) if isinstance(apis, dict) else []

    def get_api_spec(self, api: str) -> ApiSpec:
        """Build the ApiSpec declared under ``[apis.<api>]``.

        Raises:
            ConfigurationError: If the API is not declared or is invalid.
        """
        api_cfg = self._api_cfg(api)
        if not api_cfg:
            raise ConfigurationError(f"API {api!r} is not declared in the config")
        return ApiSpec.from_dict(api_cfg)

    def get_session_config(self, api: str | None = None) -> SessionConfig:
        """Build a SessionConfig by merging general and API overrides.

        Args:
            api (str | None): Target API name, or None for general settings only.

        Returns:
            SessionConfig: Resolved session configuration.
        """
        cfg = self._merged(api)
        cookies = cfg.get("cookies")

        return SessionConfig(
            timeout=float(cfg.get("timeout", 10.0)),
            max_connections=int(cfg.get("max_connections", 10)),
            user_agent=cfg.get("user_agent"),
            headers=cfg.get("headers"),
            cookies=parse_cookies(cookies) if cookies else None,
            impersonate=cfg.get("impersonate", "chrome"),
            verify_ssl=bool(cfg.get("verify_ssl", True)),
            http2=bool(cfg.get("http2", False)),
            trust_env=bool(cfg.get("trust_env", False)),
            proxy=cfg.get("proxy"),
            proxy_user=cfg.get("proxy_user"),
            proxy_pass=cfg.get("proxy_pass"),
        )

    def get_client_config(self, api: str | None = None) -> ClientConfig:
        """Build a ClientConfig by merging general and API overrides.

        Args:
            api (str | None): Target API name, or None for general settings only.

        Returns:
            ClientConfig: Resolved client configuration.
        """
        cfg = self._merged(api)
        call_timeout = cfg.get("call_timeout")
        backend = cfg.get("backend")

        return ClientConfig(
            backend=backend if isinstance(backend, str) else "aiohttp",
            max_redirects=int(cfg.get("max_redirects", 10)),
            call_timeout=float(call_timeout) if call_timeout is not None else None,
            follow_transport_redirects=bool(
                cfg.get("follow_transport_redirects", False)
            ),
            session_cfg=self.get_session_config(api),
        )

    def get_log_level(self) -> str:
        """Return the configured logging level, ``"INFO"`` if missing."""
        debug_cfg = self._gen_cfg().get("debug", {})
        return debug_cfg.get("log_level") or "INFO"

    def _merged(self, api: str | None) -> dict[str, Any]:
        api_cfg = self._api_cfg(api) if api else {}
        overrides = {k: v for k, v in api_cfg.items() if k not in _API_ONLY_KEYS}
        return {**self._gen_cfg(), **overrides}

    def _gen_cfg(self) -> dict[str, Any]:
        """Return general configuration mapping, or an empty dict."""
        general = self._config.get("general")
        return general if isinstance(general, dict) else {}

    def _api_cfg(self, api: str) -> dict[str, Any]:
        """Return the configuration block of the given API, or an empty dict."""
        apis_cfg = self._config.get("apis") or {}
        value = apis_cfg.get(api)
        return value if isinstance(value, dict) else {}
