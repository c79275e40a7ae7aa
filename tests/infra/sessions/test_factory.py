import pytest

from routekit.infra.sessions import (
    BACKENDS,
    BaseSession,
    available_backends,
    create_session,
)
from routekit.schemas import SessionConfig


def test_factory_rejects_unknown_backend():
    with pytest.raises(ValueError):
        create_session("not-a-backend", SessionConfig())


def test_factory_supports_declared_backends(backend, make_session):
    s = make_session(backend)
    assert isinstance(s, BaseSession)
    assert s.backend_name == backend


def test_headers_property_returns_copy(backend, make_session):
    s = make_session(backend, SessionConfig(headers={"A": "1", "B": "2"}))

    h1 = s.headers
    h1["A"] = "999"

    assert s.headers == {"A": "1", "B": "2"}


def test_user_agent_added_to_default_headers(backend, make_session):
    s = make_session(backend, SessionConfig(user_agent="RouteKitTest/1.0"))
    assert s.headers["User-Agent"] == "RouteKitTest/1.0"
    assert "Accept" in s.headers


def test_available_backends_are_known():
    available = available_backends()
    assert set(available) <= set(BACKENDS)
    assert "aiohttp" in available


def test_create_session_forwards_cookies(make_session):
    s = make_session("aiohttp", SessionConfig(cookies={"a": "1"}))
    assert s.get_cookie("a") == "1"
