from __future__ import annotations

import abc
import json
import logging
import types
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any, Self, TypedDict, Unpack
from urllib.parse import urlencode

from multidict import MultiDict

from routekit.errors import TransportError
from routekit.infra.http_defaults import DEFAULT_USER_HEADERS
from routekit.schemas import Blob, FormData, MIMEType, RequestBody, SessionConfig

from .response import BaseResponse, Headers

logger = logging.getLogger(__name__)

Params = Mapping[str, str] | Sequence[tuple[str, str]]


class RequestKwargs(TypedDict, total=False):
    headers: Mapping[str, str] | Sequence[tuple[str, str]]
    params: Params | None
    body: RequestBody
    mode: str | None
    credentials: str | None


class CookieRecord(TypedDict):
    name: str
    value: str
    domain: str | None
    path: str | None


class BaseSession(abc.ABC):
    """Transport used by the API client to send requests.

    Subclasses wrap one HTTP library. They receive bodies already normalized
    to ``bytes`` or :class:`FormData`, and report failures of the underlying
    library as :class:`TransportError`.
    """

    backend_name: str
    transport_errors: tuple[type[BaseException], ...] = (OSError, TimeoutError)

    def __init__(self, cfg: SessionConfig | None = None, **kwargs: Any) -> None:
        """Initializes the session using the provided configuration.

        Args:
            cfg: Optional configuration object defining session behavior.
            **kwargs: Additional parameters reserved for backend-specific
                initialization.
        """
        cfg = cfg or SessionConfig()

        self._timeout = cfg.timeout
        self._max_connections = cfg.max_connections
        self._verify_ssl = cfg.verify_ssl
        self._impersonate = cfg.impersonate
        self._http2 = cfg.http2
        self._proxy = cfg.proxy
        self._proxy_user = cfg.proxy_user
        self._proxy_pass = cfg.proxy_pass
        self._trust_env = cfg.trust_env
        self._cookies = cfg.cookies or {}
        self._session: Any = None

        self._headers = (
            cfg.headers.copy()
            if cfg.headers is not None
            else DEFAULT_USER_HEADERS.copy()
        )
        if cfg.user_agent:
            self._headers["User-Agent"] = cfg.user_agent

    @abc.abstractmethod
    async def init(
        self,
        **kwargs: Any,
    ) -> None:
        """Initializes backend-specific resources."""
        ...

    @abc.abstractmethod
    async def close(self) -> None:
        """Releases and cleans up any allocated resources."""
        ...

    @abc.abstractmethod
    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: Headers,
        params: list[tuple[str, str]] | None,
        content: bytes | FormData | None,
        allow_redirects: bool,
    ) -> BaseResponse:
        """Sends one request with the backend library."""
        ...

    async def request(
        self,
        method: str,
        url: str,
        *,
        allow_redirects: bool = False,
        **kwargs: Unpack[RequestKwargs],
    ) -> BaseResponse:
        """Performs an HTTP request.

        Args:
            method: HTTP method.
            url: Target URL.
            allow_redirects: Whether the backend follows 3xx responses.
            **kwargs: Headers, query parameters and body of the request.
                ``mode`` and ``credentials`` are accepted for symmetry with
                the route specification and are not used by the backends.

        Returns:
            BaseResponse: The response, whatever its status code.

        Raises:
            RuntimeError: If the session has not been initialized.
            TransportError: If the backend failed to perform the request.
        """
        headers = Headers(kwargs.get("headers"))
        content = self._normalize_body(kwargs.get("body"), headers)
        raw_params = kwargs.get("params")
        params = None
        if raw_params:
            items = (
                raw_params.items() if isinstance(raw_params, Mapping) else raw_params
            )
            params = [(str(k), str(v)) for k, v in items]

        logger.debug("%s %s (%s)", method, url, self.backend_name)
        try:
            return await self._send(
                method.upper(),
                url,
                headers=headers,
                params=params,
                content=content,
                allow_redirects=allow_redirects,
            )
        except self.transport_errors as e:
            raise TransportError(str(e) or type(e).__name__) from e

    async def get(
        self,
        url: str,
        *,
        allow_redirects: bool = True,
        **kwargs: Unpack[RequestKwargs],
    ) -> BaseResponse:
        """Performs an HTTP GET request."""
        return await self.request(
            "GET", url, allow_redirects=allow_redirects, **kwargs
        )

    async def post(
        self,
        url: str,
        *,
        allow_redirects: bool = True,
        **kwargs: Unpack[RequestKwargs],
    ) -> BaseResponse:
        """Performs an HTTP POST request."""
        return await self.request(
            "POST", url, allow_redirects=allow_redirects, **kwargs
        )

    @staticmethod
    def _normalize_body(
        body: RequestBody, headers: Headers
    ) -> bytes | FormData | None:
        """Converts a request body to bytes, filling a missing Content-Type
        the way browsers do for the same body types."""
        match body:
            case None:
                return None
            case FormData():
                return body
            case str():
                headers.setdefault("Content-Type", "text/plain; charset=utf-8")
                return body.encode("utf-8")
            case bytes() | bytearray() | memoryview():
                return bytes(body)
            case Blob():
                if body.content_type:
                    headers.setdefault("Content-Type", body.content_type)
                return body.data
            case MultiDict():
                headers.setdefault("Content-Type", MIMEType.X_WWW_FORM_URLENCODED.value)
                return urlencode(list(body.items())).encode("ascii")
            case _:
                raise TypeError(f"Unsupported request body type: {type(body)!r}")

    @abc.abstractmethod
    def _iter_cookies(self) -> Iterator[CookieRecord]:
        """Yields the cookies of the backend jar."""
        ...

    @abc.abstractmethod
    def _set_cookie(
        self, name: str, value: str, domain: str = "", path: str = "/"
    ) -> None:
        ...

    def load_cookies(self, cookies_dir: Path, filename: str | None = None) -> bool:
        """Loads cookies from a JSON file.

        Args:
            cookies_dir: Directory where cookie files are stored.
            filename: Optional specific filename to load. Defaults to
                ``<backend>.cookies``.

        Returns:
            bool: True if cookies were loaded successfully, otherwise False.
        """
        if self._session is None:
            return False

        path = cookies_dir / (filename or f"{self.backend_name}.cookies")
        if not path.exists():
            return False

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load cookies from %s: %s", path, e)
            return False

        for item in data:
            name, value = item.get("name"), item.get("value")
            if name and value:
                self._set_cookie(
                    name,
                    value,
                    domain=item.get("domain") or "",
                    path=item.get("path") or "/",
                )
        return True

    def save_cookies(self, cookies_dir: Path, filename: str | None = None) -> bool:
        """Saves cookies to a JSON file.

        Returns:
            bool: True if cookies were saved successfully, otherwise False.
        """
        if self._session is None:
            return False

        cookies_dir.mkdir(parents=True, exist_ok=True)
        path = cookies_dir / (filename or f"{self.backend_name}.cookies")
        path.write_text(
            json.dumps(list(self._iter_cookies()), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        return True

    def update_cookies(self, cookies: dict[str, str]) -> None:
        """Updates or adds cookie entries."""
        if self._session is None:
            return
        for name, value in cookies.items():
            self._set_cookie(name, value)

    def get_cookie(self, key: str) -> str | None:
        """Retrieves a cookie value by name, or None if absent."""
        if self._session is None:
            return self._cookies.get(key)
        for cookie in self._iter_cookies():
            if cookie["name"] == key:
                return cookie["value"]
        return None

    @abc.abstractmethod
    def clear_cookie(self, name: str) -> None:
        """Removes a single cookie."""
        ...

    @abc.abstractmethod
    def clear_cookies(self) -> None:
        """Removes all stored cookies."""
        ...

    @property
    def headers(self) -> dict[str, str]:
        """Returns a copy of the current session headers."""
        return self._headers.copy()

    async def __aenter__(self) -> Self:
        await self.init()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        await self.close()
