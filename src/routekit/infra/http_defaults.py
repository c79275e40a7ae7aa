"""
Default HTTP headers, response handling rules and error policy.

The response rules follow the conventions of HTTP status codes and form the
lowest layer of the rule cascade: API-level defaults and route-level
overrides are merged on top of them, field by field.
"""

from types import MappingProxyType
from typing import Final

from routekit.schemas import ErrorPolicy, HTTPStatus, ResponseRule

# -----------------------------------------------------------------------------
# Default session headers
# -----------------------------------------------------------------------------

DEFAULT_USER_AGENT = "RouteKit/0.1 (+https://pypi.org/project/routekit/)"
DEFAULT_ACCEPT = "application/json,text/plain;q=0.9,*/*;q=0.8"

DEFAULT_USER_HEADERS = {
    "Accept": DEFAULT_ACCEPT,
    "Accept-Encoding": "gzip, deflate",
    "User-Agent": DEFAULT_USER_AGENT,
    "Connection": "keep-alive",
}

# -----------------------------------------------------------------------------
# Default response handling
# -----------------------------------------------------------------------------

_SUCCESS = ResponseRule(is_success=True)


def _redirect(preserve_request: bool) -> ResponseRule:
    return ResponseRule(
        is_success=True,
        redirect_to="header-location",
        preserve_request=preserve_request,
    )


def _failure(code: int, text: str) -> ResponseRule:
    return ResponseRule(is_success=False, message=f"{int(code)}: {text}")


_FAILURE_MESSAGES: dict[HTTPStatus, str] = {
    HTTPStatus.BAD_REQUEST: "Bad request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method not allowed",
    HTTPStatus.NOT_ACCEPTABLE: "Not acceptable",
    HTTPStatus.PROXY_AUTHENTICATION_REQUIRED: "Proxy authentication required",
    HTTPStatus.REQUEST_TIMEOUT: "Request timeout",
    HTTPStatus.CONFLICT: "Conflict",
    HTTPStatus.LENGTH_REQUIRED: "Content-Length required",
    HTTPStatus.PRECONDITION_FAILED: "Precondition failed",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload is too large",
    HTTPStatus.URI_TOO_LONG: "URI too long (try to use POST)",
    HTTPStatus.UNSUPPORTED_MEDIA_TYPE: "The provided media type is not supported",
    HTTPStatus.RANGE_NOT_SATISFIABLE: "Range not satisfiable",
    HTTPStatus.EXPECTATION_FAILED: "Expectation failed",
    HTTPStatus.LOCKED: "The requested resource is locked",
    HTTPStatus.UPGRADE_REQUIRED: "Upgrade required",
    HTTPStatus.TOO_MANY_REQUESTS: "Too many requests",
    HTTPStatus.REQUEST_HEADER_FIELDS_TOO_LARGE: "Request header fields too large",
    HTTPStatus.UNAVAILABLE_FOR_LEGAL_REASONS: "Unavailable for legal reasons",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal server error",
    HTTPStatus.NOT_IMPLEMENTED: "This route is not implemented",
    HTTPStatus.BAD_GATEWAY: "Bad gateway",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service unavailable",
    HTTPStatus.GATEWAY_TIMEOUT: "Gateway timeout",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP version not supported",
    HTTPStatus.VARIANT_ALSO_NEGOTIATES: "Variant also negotiates",
    HTTPStatus.INSUFFICIENT_STORAGE: "Insufficient storage",
    HTTPStatus.LOOP_DETECTED: "Loop detected",
    HTTPStatus.NOT_EXTENDED: "Not extended",
    HTTPStatus.NETWORK_AUTHENTICATION_REQUIRED: "Network authentication required",
}


def _build_default_rules() -> dict[int, ResponseRule]:
    rules: dict[int, ResponseRule] = {}
    for status in HTTPStatus:
        if status < 400:
            rules[status] = _SUCCESS
        else:
            rules[status] = _failure(status, _FAILURE_MESSAGES[status])

    # 301/302 are preserved in theory; 307/308 always are. 303 switches to GET.
    rules[HTTPStatus.MOVED_PERMANENTLY] = _redirect(preserve_request=True)
    rules[HTTPStatus.FOUND] = _redirect(preserve_request=True)
    rules[HTTPStatus.SEE_OTHER] = _redirect(preserve_request=False)
    rules[HTTPStatus.TEMPORARY_REDIRECT] = _redirect(preserve_request=True)
    rules[HTTPStatus.PERMANENT_REDIRECT] = _redirect(preserve_request=True)
    return rules


DEFAULT_RESPONSE_RULES: Final = MappingProxyType(_build_default_rules())

DEFAULT_ERROR_POLICY: Final = ErrorPolicy(should_log_error=True, should_rethrow=False)
