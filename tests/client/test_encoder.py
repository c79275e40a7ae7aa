import json

import pytest
from multidict import MultiDict

from routekit.client.encoder import (
    apply_query,
    encode_body,
    encode_query,
    encode_request,
    json_to_record,
    to_json,
)
from routekit.errors import EncodingError
from routekit.schemas import Blob, FormData, MIMEType, RouteSpec


@pytest.fixture
def json_route() -> RouteSpec:
    return RouteSpec(
        url="/login",
        method="POST",
        request_content_type=MIMEType.JSON,
        base_body={"token": "#{token}", "client": "web"},
        base_query_params={"v": "2"},
    )


def test_to_json_is_compact():
    assert to_json({"a": [1, 2], "b": "é"}) == '{"a":[1,2],"b":"é"}'


def test_json_to_record_stringifies_values():
    record = json_to_record({"s": "x", "n": 1, "b": True, "o": {"k": None}})
    assert record == {"s": "x", "n": "1", "b": "true", "o": '{"k":null}'}


def test_encode_query_merges_over_base(cookies):
    cookies.values["sid"] = "42"
    route = RouteSpec(url="/s", base_query_params={"foo": "1", "sid": "#{sid}"})

    query = encode_query("s", route, {"foo": "2", "bar": 3}, cookies)

    assert list(query.items()) == [("foo", "2"), ("sid", "42"), ("bar", "3")]


def test_encode_query_none_uses_base(cookies):
    route = RouteSpec(url="/s", base_query_params={"foo": "1"})
    assert list(encode_query("s", route, None, cookies).items()) == [("foo", "1")]


def test_encode_query_multidict_verbatim(cookies):
    route = RouteSpec(url="/s", base_query_params={"foo": "1"})
    params = MultiDict([("a", "1"), ("a", "2")])

    assert encode_query("s", route, params, cookies) is params


def test_encode_query_rejects_non_mapping(cookies):
    route = RouteSpec(url="/s")
    with pytest.raises(EncodingError) as exc:
        encode_query("s", route, [1, 2], cookies)
    assert exc.value.route_name == "s"
    assert str(exc.value).startswith("Route 's': ")


def test_encode_body_substitutes_first_level_only(json_route, cookies):
    cookies.values["token"] = "abc"

    body = encode_body(
        "login", json_route, {"nested": {"t": "#{token}"}, "t": "#{token}"}, cookies
    )

    assert json.loads(body) == {
        "token": "abc",
        "client": "web",
        "nested": {"t": "#{token}"},
        "t": "abc",
    }


def test_encode_body_missing_cookie_becomes_empty(json_route, cookies):
    body = encode_body("login", json_route, {}, cookies)
    assert json.loads(body) == {"token": "", "client": "web"}


def test_encode_body_none_is_not_merged(json_route, cookies):
    assert encode_body("login", json_route, None, cookies) is None


@pytest.mark.parametrize(
    "data",
    ["raw text", b"raw", bytearray(b"raw"), Blob(b"x"), FormData(), MultiDict(a="1")],
)
def test_encode_body_transport_types_pass_through(json_route, cookies, data):
    assert encode_body("login", json_route, data, cookies) is data


def test_encode_body_list_with_base_body_rejected(json_route, cookies):
    with pytest.raises(EncodingError):
        encode_body("login", json_route, [1, 2], cookies)


def test_encode_body_list_without_base_body(cookies):
    route = RouteSpec(url="/b", method="POST", request_content_type=MIMEType.JSON)
    assert encode_body("b", route, ({"a": 1},), cookies) == '[{"a":1}]'


def test_encode_body_form_urlencoded(cookies):
    route = RouteSpec(
        url="/f",
        method="POST",
        request_content_type=MIMEType.X_WWW_FORM_URLENCODED,
    )

    body = encode_body("f", route, {"a": "x", "n": 2}, cookies)

    assert isinstance(body, MultiDict)
    assert list(body.items()) == [("a", "x"), ("n", "2")]


@pytest.mark.parametrize("content_type", [MIMEType.NONE, MIMEType.PLAIN_TEXT])
def test_encode_body_generic_object_rejected(cookies, content_type):
    route = RouteSpec(url="/x", method="POST", request_content_type=content_type)
    with pytest.raises(EncodingError):
        encode_body("x", route, {"a": 1}, cookies)


def test_encode_request_get(cookies):
    route = RouteSpec(url="/s", base_query_params={"foo": "1"})

    encoded = encode_request("s", route, {"bar": "2"}, cookies)

    assert encoded.body is None
    assert list(encoded.query.items()) == [("foo", "1"), ("bar", "2")]


def test_encode_request_post_ignores_base_query(json_route, cookies):
    encoded = encode_request("login", json_route, {"a": 1}, cookies)

    assert encoded.query is None
    assert json.loads(encoded.body)["a"] == 1


def test_apply_query_replaces_existing_query():
    url = apply_query("https://x.test/p?old=1", MultiDict([("a", "1"), ("b", "2")]))
    assert url == "https://x.test/p?a=1&b=2"


def test_apply_query_empty_keeps_url():
    assert apply_query("https://x.test/p?old=1", MultiDict()) == (
        "https://x.test/p?old=1"
    )
    assert apply_query("https://x.test/p", None) == "https://x.test/p"
