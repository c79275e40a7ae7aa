# mypy: disable-error-code=unused-ignore

from collections.abc import Iterator
from typing import Any

from curl_cffi import CurlMime
from curl_cffi.requests import AsyncSession
from curl_cffi.requests.exceptions import RequestException

from routekit.schemas import FormData

from .base import BaseSession, CookieRecord
from .response import BaseResponse, Headers


class CurlCffiSession(BaseSession):
    """Session backend using curl_cffi for browser-like HTTP requests."""

    backend_name = "curl_cffi"
    transport_errors = (RequestException, OSError, TimeoutError)

    _session: AsyncSession[Any] | None

    async def init(
        self,
        **kwargs: Any,
    ) -> None:
        if self._session:
            return

        proxy_auth = None
        if self._proxy_user and self._proxy_pass:
            proxy_auth = (self._proxy_user, self._proxy_pass)

        self._session = AsyncSession(
            headers=self._headers,
            cookies=self._cookies,
            timeout=self._timeout,
            impersonate=self._impersonate,  # type: ignore[arg-type]
            verify=self._verify_ssl,
            proxy=self._proxy,
            proxy_auth=proxy_auth,
            trust_env=self._trust_env,
        )

    async def close(self) -> None:
        """
        Shutdown and clean up any resources.
        """
        if self._session is not None:
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
        mime: CurlMime | None = None
        data: bytes | None = None
        if isinstance(content, FormData):
            mime = CurlMime()
            for f in content.fields:
                value = f.value
                if isinstance(value, str):
                    value = value.encode("utf-8")
                mime.addpart(
                    name=f.name,
                    content_type=f.content_type,
                    filename=f.filename,
                    data=value,
                )
        else:
            data = content

        try:
            r = await self.session.request(
                method,  # type: ignore[arg-type]
                url,
                headers=dict(headers.items()),
                params=params,
                data=data,
                multipart=mime,
                allow_redirects=allow_redirects,
            )
        finally:
            if mime is not None:
                mime.close()

        return BaseResponse(
            content=r.content,
            headers=list(r.headers.items()),
            status=r.status_code,
            reason=r.reason or "",
            url=str(r.url),
            encoding=r.encoding or "utf-8",
        )

    def _iter_cookies(self) -> Iterator[CookieRecord]:
        if self._session is None:
            return
        for name, value in self._session.cookies.items():
            yield {"name": name, "value": value, "domain": None, "path": None}

    def _set_cookie(
        self, name: str, value: str, domain: str = "", path: str = "/"
    ) -> None:
        if self._session is None:
            return
        self._session.cookies.set(name, value, domain=domain, path=path)

    def clear_cookie(self, name: str) -> None:
        if self._session is None:
            return
        self._session.cookies.pop(name, None)

    def clear_cookies(self) -> None:
        if self._session is None:
            return
        self._session.cookies.clear()

    @property
    def session(self) -> AsyncSession[Any]:
        if self._session is None:
            raise RuntimeError("Session is not initialized or has been shut down.")
        return self._session
