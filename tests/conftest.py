from __future__ import annotations

import asyncio
from collections.abc import Iterator
from typing import Any

import pytest

from routekit.client import APIClient
from routekit.infra.sessions.base import BaseSession, CookieRecord
from routekit.infra.sessions.response import BaseResponse, Headers
from routekit.schemas import ApiSpec, ClientConfig, FormData


class FakeSession(BaseSession):
    """In-memory transport replaying queued responses.

    Every call to ``_send`` is recorded in ``sent``. Queued items are either
    a :class:`BaseResponse` to return or an exception to raise.
    """

    backend_name = "fake"

    def __init__(self, *queued: BaseResponse | BaseException, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.queue: list[BaseResponse | BaseException] = list(queued)
        self.sent: list[dict[str, Any]] = []
        self.jar: dict[str, str] = {}
        self.delay: float | None = None

    def push(self, *items: BaseResponse | BaseException) -> None:
        self.queue.extend(items)

    async def init(self, **kwargs: Any) -> None:
        self._session = object()

    async def close(self) -> None:
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
        self.sent.append(
            {
                "method": method,
                "url": url,
                "headers": headers,
                "params": params,
                "content": content,
                "allow_redirects": allow_redirects,
            }
        )
        if self.delay is not None:
            await asyncio.sleep(self.delay)
        if not self.queue:
            raise AssertionError(f"unexpected request: {method} {url}")
        item = self.queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def _iter_cookies(self) -> Iterator[CookieRecord]:
        for name, value in self.jar.items():
            yield {"name": name, "value": value, "domain": None, "path": None}

    def _set_cookie(
        self, name: str, value: str, domain: str = "", path: str = "/"
    ) -> None:
        self.jar[name] = value

    def clear_cookie(self, name: str) -> None:
        self.jar.pop(name, None)

    def clear_cookies(self) -> None:
        self.jar.clear()


def make_response(
    status: int = 200,
    content: bytes | str = b"",
    *,
    content_type: str | None = None,
    headers: dict[str, str] | None = None,
    reason: str = "",
    url: str = "",
) -> BaseResponse:
    all_headers = dict(headers or {})
    if content_type is not None:
        all_headers["Content-Type"] = content_type
    if isinstance(content, str):
        content = content.encode("utf-8")
    return BaseResponse(
        content=content,
        headers=all_headers,
        status=status,
        reason=reason,
        url=url,
    )


class DictCookies:
    """Cookie reader over a plain dict."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values = dict(values or {})

    def get(self, name: str, /) -> str | None:
        return self.values.get(name)


@pytest.fixture
def respond():
    """Factory building a :class:`BaseResponse`."""
    return make_response


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def cookies():
    return DictCookies()


@pytest.fixture
def make_client(fake_session, cookies):
    """Build an APIClient over the fake transport and the dict cookie reader."""

    def _make(api: ApiSpec, **config: Any) -> APIClient:
        return APIClient(
            api,
            session=fake_session,
            cookies=cookies,
            config=ClientConfig(**config),
        )

    return _make
