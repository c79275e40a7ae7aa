from collections.abc import Iterator
from typing import Any

import aiohttp

from routekit.schemas import FormData

from .base import BaseSession, CookieRecord
from .response import BaseResponse, Headers


class AiohttpSession(BaseSession):
    """Session backend implemented with aiohttp for asynchronous HTTP requests."""

    backend_name = "aiohttp"
    transport_errors = (aiohttp.ClientError, OSError, TimeoutError)

    _session: aiohttp.ClientSession | None

    async def init(
        self,
        **kwargs: Any,
    ) -> None:
        if self._session and not self._session.closed:
            return

        proxy_auth: aiohttp.BasicAuth | None = None
        if self._proxy_user and self._proxy_pass:
            proxy_auth = aiohttp.BasicAuth(self._proxy_user, self._proxy_pass)

        timeout = aiohttp.ClientTimeout(total=self._timeout)
        connector = aiohttp.TCPConnector(
            ssl=self._verify_ssl,
            limit_per_host=self._max_connections,
        )

        self._session = aiohttp.ClientSession(
            connector=connector,
            timeout=timeout,
            headers=self._headers,
            cookies=self._cookies,
            trust_env=self._trust_env,
            proxy=self._proxy,
            proxy_auth=proxy_auth,
        )

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
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
        data: Any = content
        if isinstance(content, FormData):
            data = aiohttp.FormData(default_to_multipart=True)
            for f in content.fields:
                data.add_field(
                    f.name,
                    f.value,
                    filename=f.filename,
                    content_type=f.content_type,
                )

        async with self.session.request(
            method,
            url,
            headers=headers.items_multi(),
            params=params,
            data=data,
            allow_redirects=allow_redirects,
        ) as r:
            body = await r.read()
            return BaseResponse(
                content=body,
                headers=r.headers,
                status=r.status,
                reason=r.reason or "",
                url=str(r.url),
                encoding=r.charset or "utf-8",
            )

    def _iter_cookies(self) -> Iterator[CookieRecord]:
        if self._session is None:
            return
        for cookie in self._session.cookie_jar:
            yield {
                "name": cookie.key,
                "value": cookie.value,
                "domain": cookie["domain"] or None,
                "path": cookie["path"] or None,
            }

    def _set_cookie(
        self, name: str, value: str, domain: str = "", path: str = "/"
    ) -> None:
        if self._session is None:
            return
        self._session.cookie_jar.update_cookies({name: value})

    def clear_cookie(self, name: str) -> None:
        if self._session is None:
            return
        self._session.cookie_jar.clear(predicate=lambda morsel: morsel.key == name)

    def clear_cookies(self) -> None:
        if self._session is None:
            return
        self._session.cookie_jar.clear()

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("Session is not initialized or has been shut down.")
        return self._session
