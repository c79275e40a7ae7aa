import pytest

from routekit.errors import ConfigurationError, UnknownRouteError
from routekit.schemas import (
    HEADER_LOCATION,
    ApiSpec,
    ErrorPolicy,
    HTTPStatus,
    MIMEType,
    ResponseRule,
    RouteSpec,
    is_known_status,
)

# ---------------------------------------------------------
# ResponseRule
# ---------------------------------------------------------


def test_response_rule_merged_skips_none():
    base = ResponseRule(is_success=True, message="base", preserve_request=False)
    top = ResponseRule(message="top")

    merged = ResponseRule.merged(base, None, top)

    assert merged == ResponseRule(
        is_success=True, message="top", preserve_request=False
    )


def test_response_rule_coerces_content_types():
    rule = ResponseRule(expected_content_types=["application/json", "x/custom"])

    assert rule.expected_content_types == (MIMEType.JSON, "x/custom")
    assert isinstance(rule.expected_content_types[0], MIMEType)


def test_response_rule_from_camel_case():
    rule = ResponseRule.from_dict(
        {
            "isSuccess": True,
            "expectedContentTypes": ["application/json"],
            "shouldRedirectTo": HEADER_LOCATION,
            "shouldPreserveRequest": True,
        }
    )

    assert rule.is_success is True
    assert rule.expected_content_types == (MIMEType.JSON,)
    assert rule.redirect_to == HEADER_LOCATION
    assert rule.preserve_request is True
    assert rule.message is None


def test_response_rule_from_snake_case():
    rule = ResponseRule.from_dict({"is_success": False, "message": "nope"})
    assert rule == ResponseRule(is_success=False, message="nope")


def test_error_policy_from_dict():
    policy = ErrorPolicy.from_dict({"shouldRethrow": True})
    assert policy == ErrorPolicy(should_log_error=True, should_rethrow=True)


# ---------------------------------------------------------
# RouteSpec
# ---------------------------------------------------------


def test_route_defaults():
    route = RouteSpec(url="/x")

    assert route.method == "GET"
    assert route.is_get
    assert route.request_content_type == MIMEType.NONE
    assert dict(route.expected_responses) == {}


def test_route_method_is_normalized():
    assert RouteSpec(url="/x", method="post").method == "POST"


def test_route_rejects_unknown_method():
    with pytest.raises(ConfigurationError):
        RouteSpec(url="/x", method="BREW")


def test_route_base_body_requires_json():
    with pytest.raises(ConfigurationError):
        RouteSpec(url="/x", method="POST", base_body={"a": 1})


def test_route_rejects_unknown_status_rule():
    with pytest.raises(ConfigurationError):
        RouteSpec(url="/x", expected_responses={418: ResponseRule()})


def test_route_mappings_are_read_only():
    route = RouteSpec(url="/x", headers={"A": "1"})
    with pytest.raises(TypeError):
        route.headers["B"] = "2"


def test_route_from_dict():
    route = RouteSpec.from_dict(
        {
            "url": "/login",
            "method": "post",
            "requestContentType": "application/json",
            "baseJSONBody": {"client": "web"},
            "baseQueryParams": {"v": "1"},
            "headers": {"X-A": "1"},
            "expectedResponses": {
                "401": {"isSuccess": False, "message": "Bad credentials"},
            },
            "errorHandling": {"shouldLogError": False},
        }
    )

    assert route.method == "POST"
    assert route.request_content_type == MIMEType.JSON
    assert route.base_body == {"client": "web"}
    assert route.base_query_params == {"v": "1"}
    assert route.expected_responses[401].message == "Bad credentials"
    assert route.error_handling == ErrorPolicy(should_log_error=False)


def test_route_from_dict_requires_url():
    with pytest.raises(ConfigurationError):
        RouteSpec.from_dict({"method": "GET"})


# ---------------------------------------------------------
# ApiSpec
# ---------------------------------------------------------


def test_api_route_lookup():
    route = RouteSpec(url="/a")
    api = ApiSpec(base_url="https://x.test", routes={"a": route})

    assert api.route("a") is route
    assert api.url_for(route) == "https://x.test/a"
    with pytest.raises(UnknownRouteError):
        api.route("b")
    with pytest.raises(KeyError):
        api.route("b")


def test_api_rejects_undeclared_redirect_target():
    with pytest.raises(ConfigurationError):
        ApiSpec(
            base_url="https://x.test",
            routes={
                "a": RouteSpec(
                    url="/a",
                    expected_responses={401: ResponseRule(redirect_to="login")},
                ),
            },
        )


def test_api_rejects_route_redirect_in_external_rules():
    with pytest.raises(ConfigurationError):
        ApiSpec(
            base_url="https://x.test",
            routes={"a": RouteSpec(url="/a")},
            default_external_responses={302: ResponseRule(redirect_to="a")},
        )


def test_api_rejects_unknown_status_in_defaults():
    with pytest.raises(ConfigurationError):
        ApiSpec(base_url="https://x.test", default_responses={299: ResponseRule()})


def test_api_from_dict():
    api = ApiSpec.from_dict(
        {
            "baseURL": "https://x.test",
            "defaultResponses": {"200": {"expectedContentTypes": ["text/html"]}},
            "defaultErrorHandling": {"shouldRethrow": True},
            "routes": {
                "home": {"url": "/"},
                "login": {
                    "url": "/login",
                    "method": "POST",
                    "expectedResponses": {"401": {"redirectTo": "home"}},
                },
            },
        }
    )

    assert set(api.routes) == {"home", "login"}
    assert api.default_responses[200].expected_content_types == (MIMEType.HTML,)
    assert api.default_error_handling.should_rethrow is True
    assert api.route("login").expected_responses[401].redirect_to == "home"


def test_api_from_dict_requires_base_url():
    with pytest.raises(ConfigurationError):
        ApiSpec.from_dict({"routes": {}})


def test_known_status_codes():
    assert is_known_status(200)
    assert is_known_status(HTTPStatus.NOT_FOUND)
    assert not is_known_status(418)
    assert not is_known_status(299)
