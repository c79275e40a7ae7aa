from collections.abc import Iterator
from typing import Any

import httpx

from routekit.schemas import FormData

from .base import BaseSession, CookieRecord
from .response import BaseResponse, Headers


class HttpxSession(BaseSession):
    """Session backend based on httpx providing async HTTP/1.1 and HTTP/2 support."""

    backend_name = "httpx"
    transport_errors = (httpx.HTTPError, httpx.InvalidURL, OSError, TimeoutError)

    _session: httpx.AsyncClient | None

    async def init(
        self,
        **kwargs: Any,
    ) -> None:
        if self._session and not self._session.is_closed:
            return
        limits = httpx.Limits(
            max_keepalive_connections=self._max_connections,
            max_connections=self._max_connections,
        )
        proxy = self._build_proxy_config(
            self._proxy,
            self._proxy_user,
            self._proxy_pass,
        )

        self._session = httpx.AsyncClient(
            http2=self._http2,
            timeout=self._timeout,
            verify=self._verify_ssl,
            headers=self._headers,
            cookies=self._cookies,
            limits=limits,
            proxy=proxy,
            trust_env=self._trust_env,
        )

    async def close(self) -> None:
        """
        Shutdown and clean up any resources.
        """
        if self._session is None:
            return
        if not self._session.is_closed:
            await self._session.aclose()
        self._session = None

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
        kwargs: dict[str, Any] = {}
        if isinstance(content, FormData):
            # (None, value) parts are sent as plain fields, forcing multipart
            kwargs["files"] = [
                (f.name, (f.filename, f.value, f.content_type))
                for f in content.fields
            ]
        elif content is not None:
            kwargs["content"] = content

        r = await self.session.request(
            method,
            url,
            headers=headers.items_multi(),
            params=params,
            follow_redirects=allow_redirects,
            **kwargs,
        )
        return BaseResponse(
            content=r.content,
            headers=r.headers.multi_items(),
            status=r.status_code,
            reason=r.reason_phrase,
            url=str(r.url),
            encoding=r.encoding or "utf-8",
        )

    def _iter_cookies(self) -> Iterator[CookieRecord]:
        if self._session is None:
            return
        for cookie in self._session.cookies.jar:
            yield {
                "name": cookie.name,
                "value": cookie.value or "",
                "domain": cookie.domain or None,
                "path": cookie.path or None,
            }

    def _set_cookie(
        self, name: str, value: str, domain: str = "", path: str = "/"
    ) -> None:
        if self._session is None:
            return
        self._session.cookies.set(name, value, domain=domain, path=path)

    def clear_cookie(self, name: str) -> None:
        if self._session is None:
            return

        jar = self._session.cookies.jar
        for cookie in list(jar):
            if cookie.name == name:
                jar.clear(cookie.domain, cookie.path, cookie.name)

    def clear_cookies(self) -> None:
        if self._session is None:
            return
        self._session.cookies.clear()

    @property
    def session(self) -> httpx.AsyncClient:
        if self._session is None:
            raise RuntimeError("Session is not initialized or has been shut down.")
        return self._session

    @staticmethod
    def _build_proxy_config(
        proxy: str | None = None,
        proxy_user: str | None = None,
        proxy_pass: str | None = None,
    ) -> str | httpx.Proxy | None:
        """Builds proxy configuration."""
        if not proxy:
            return None

        if "@" in proxy:
            return proxy

        if proxy_user and proxy_pass:
            return httpx.Proxy(proxy, auth=(proxy_user, proxy_pass))

        return proxy
