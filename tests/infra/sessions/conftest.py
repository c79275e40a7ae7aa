from __future__ import annotations

import base64
from typing import Any

import aiohttp
import aiohttp.web
import pytest
import pytest_asyncio

from routekit.infra.sessions import BACKENDS, BaseSession, create_session
from routekit.schemas import SessionConfig

SUPPORTED_BACKENDS: list[str] = sorted(BACKENDS)


@pytest.fixture(params=SUPPORTED_BACKENDS)
def backend(request) -> str:
    return request.param


@pytest.fixture
def make_session():
    """Create a backend instance, skipping if its library is not installed."""

    def _make(
        backend: str, cfg: SessionConfig | None = None, **kw: Any
    ) -> BaseSession:
        try:
            return create_session(backend, cfg or SessionConfig(), **kw)
        except ImportError as e:
            pytest.skip(f"backend {backend!r} not installed: {e}")

    return _make


@pytest.fixture(autouse=True)
def allow_ip_cookies(monkeypatch):
    """Allow cookie acceptance for localhost tests."""
    import aiohttp.cookiejar

    monkeypatch.setattr(aiohttp.cookiejar, "is_ip_address", lambda host: False)


@pytest_asyncio.fixture
async def http_server(aiohttp_server):
    async def handler_ok(request):
        return aiohttp.web.Response(text="hello", status=200)

    async def handler_echo(request):
        body = await request.read()
        return aiohttp.web.json_response(
            {
                "method": request.method,
                "query": list(request.query.items()),
                "content_type": request.headers.get("Content-Type"),
                "content_length": request.headers.get("Content-Length"),
                "body": body.decode("utf-8", errors="replace"),
            }
        )

    async def handler_form(request):
        form = await request.post()
        fields = {}
        for name, value in form.items():
            if isinstance(value, aiohttp.web.FileField):
                fields[name] = {
                    "filename": value.filename,
                    "content_type": value.content_type,
                    "data": value.file.read().decode(),
                }
            else:
                fields[name] = value
        return aiohttp.web.json_response(fields)

    async def handler_status(request):
        code = int(request.match_info["code"])
        return aiohttp.web.Response(status=code, reason="Custom Reason")

    async def handler_set_cookie(request):
        resp = aiohttp.web.Response(text="cookie!")
        resp.set_cookie("token", "abc123")
        return resp

    async def handler_redirect(request):
        raise aiohttp.web.HTTPFound("/ok")

    async def handler_echo_headers(request):
        return aiohttp.web.json_response({"headers": dict(request.headers)})

    async def handler_echo_cookies(request):
        return aiohttp.web.json_response({"cookies": dict(request.cookies)})

    app = aiohttp.web.Application()
    app.router.add_get("/ok", handler_ok)
    app.router.add_route("*", "/echo", handler_echo)
    app.router.add_post("/form", handler_form)
    app.router.add_get("/status/{code}", handler_status)
    app.router.add_get("/set-cookie", handler_set_cookie)
    app.router.add_get("/redirect", handler_redirect)
    app.router.add_get("/echo-headers", handler_echo_headers)
    app.router.add_get("/echo-cookies", handler_echo_cookies)

    return await aiohttp_server(app)


@pytest_asyncio.fixture
async def proxy_auth_server(aiohttp_server):
    """Proxy enforcing Basic authentication."""
    required_user = "user1"
    required_pass = "pass1"
    token = base64.b64encode(f"{required_user}:{required_pass}".encode()).decode()

    seen = {"auth_headers": [], "authed_count": 0}

    async def handler(request):
        auth = request.headers.get("Proxy-Authorization")
        if auth:
            seen["auth_headers"].append(auth)
        if auth != f"Basic {token}":
            return aiohttp.web.Response(
                text="proxy auth required",
                status=407,
                headers={"Proxy-Authenticate": "Basic"},
            )
        seen["authed_count"] += 1
        return aiohttp.web.Response(text="proxied", status=200)

    app = aiohttp.web.Application()
    app.router.add_route("*", "/{tail:.*}", handler)

    server = await aiohttp_server(app)
    server.required_user = required_user
    server.required_pass = required_pass
    server.required_header = f"Basic {token}"
    server.seen = seen
    return server
