import json

import pytest

from routekit.client import RequestResult
from routekit.schemas import MIMEType


def test_result_without_response():
    result = RequestResult(False, "boom")

    assert not result.is_ok()
    assert not result.is_200()
    assert not result.is_of_type(MIMEType.JSON)
    assert result.get_json() is None
    assert result.get_text() is None


def test_result_ok_requires_response(respond):
    assert RequestResult(True).is_ok() is False
    assert RequestResult(True, response=respond(201)).is_ok() is True


def test_is_200(respond):
    assert RequestResult(True, response=respond(200)).is_200()
    assert not RequestResult(True, response=respond(204)).is_200()
    assert not RequestResult(False, response=respond(200)).is_200()


def test_is_of_type_ignores_parameters(respond):
    response = respond(200, content_type="application/json; charset=utf-8")
    result = RequestResult(True, response=response)

    assert result.is_of_type(MIMEType.JSON)
    assert result.is_of_type("application/json")
    assert not result.is_of_type(MIMEType.HTML)


def test_get_json_and_text(respond):
    response = respond(200, '{"name": "bob"}', content_type="application/json")
    result = RequestResult(True, response=response)

    assert result.get_json() == {"name": "bob"}
    assert result.get_text() == '{"name": "bob"}'


def test_get_json_invalid(respond):
    result = RequestResult(True, response=respond(200, "<html>"))
    with pytest.raises(json.JSONDecodeError):
        result.get_json()


def test_repr(respond):
    r = repr(RequestResult(False, "bad", respond(500)))
    assert r.startswith("<RequestResult ok=False")
    assert "'bad'" in r


def test_is_of_type_uses_first_listed_type(respond):
    response = respond(200, content_type="text/html , text/plain")
    result = RequestResult(True, response=response)

    assert result.is_of_type(MIMEType.HTML)
    assert not result.is_of_type(MIMEType.PLAIN_TEXT)
