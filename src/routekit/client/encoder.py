"""
Turns a caller payload into the query string or body of a route request.

GET routes take their payload as query parameters; other methods take it
as a body. Plain mappings and lists are encoded according to the route's
request content type, while transport-level bodies (text, bytes, blobs,
form data, search parameters) are sent as they are.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode, urlsplit, urlunsplit

from multidict import MultiDict

from routekit.errors import EncodingError
from routekit.infra.cookies import CookieReader, substitute_mapping
from routekit.schemas import Blob, FormData, MIMEType, RequestBody, RouteSpec

TRANSPORT_BODY_TYPES = (str, bytes, bytearray, memoryview, Blob, FormData, MultiDict)


@dataclass(frozen=True, slots=True)
class EncodedRequest:
    query: MultiDict[str] | None
    body: RequestBody = None


def to_json(value: Any) -> str:
    """Serialize ``value`` the way ``JSON.stringify`` does (compact)."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def json_to_record(data: Mapping[str, Any]) -> dict[str, str]:
    """Stringify every value of ``data``; non-strings are JSON-encoded."""
    return {
        str(key): value if isinstance(value, str) else to_json(value)
        for key, value in data.items()
    }


def is_transport_body(data: Any) -> bool:
    return data is None or isinstance(data, TRANSPORT_BODY_TYPES)


def encode_query(
    route_name: str,
    route: RouteSpec,
    data: Any,
    cookies: CookieReader,
) -> MultiDict[str]:
    """Build the query parameters of a GET request.

    A search-parameter container is used verbatim. A flat mapping is
    stringified, cookie-substituted and merged over the route's base query
    parameters, the caller's values winning.

    Raises:
        EncodingError: If ``data`` is neither None, a mapping nor a
            search-parameter container.
    """
    if isinstance(data, MultiDict):
        return data
    if data is not None and not isinstance(data, Mapping):
        raise EncodingError(
            route_name,
            f"GET payload must be a mapping or search parameters, "
            f"got {type(data).__name__}.",
        )

    params = substitute_mapping(json_to_record(data) if data else None, cookies)
    base = substitute_mapping(route.base_query_params, cookies)
    return MultiDict({**base, **params})


def encode_body(
    route_name: str,
    route: RouteSpec,
    data: Any,
    cookies: CookieReader,
) -> RequestBody:
    """Build the body of a non-GET request.

    Raises:
        EncodingError: If a list is given to a route with a base body, or if a
            generic object is given to a route whose content type is neither
            JSON nor form-urlencoded.
    """
    if is_transport_body(data):
        return data

    content_type = route.request_content_type
    if content_type == MIMEType.JSON:
        if isinstance(data, Mapping):
            processed = substitute_mapping(data, cookies)
            base = substitute_mapping(route.base_body, cookies)
            return to_json({**base, **processed})
        if isinstance(data, list | tuple):
            if route.base_body:
                raise EncodingError(
                    route_name,
                    "A list was given as the body, but the route declares a "
                    "base body. Unable to merge.",
                )
            return to_json(list(data))
    elif content_type == MIMEType.X_WWW_FORM_URLENCODED and isinstance(data, Mapping):
        return MultiDict(json_to_record(data))

    raise EncodingError(
        route_name,
        f"A {type(data).__name__} body requires the '{MIMEType.JSON}' content "
        f"type (or '{MIMEType.X_WWW_FORM_URLENCODED}' for mappings), "
        f"got '{content_type}'.",
    )


def encode_request(
    route_name: str,
    route: RouteSpec,
    data: Any,
    cookies: CookieReader,
) -> EncodedRequest:
    """Encode ``data`` for ``route`` into a query and a body."""
    if route.is_get:
        return EncodedRequest(query=encode_query(route_name, route, data, cookies))

    return EncodedRequest(
        query=None, body=encode_body(route_name, route, data, cookies)
    )


def apply_query(url: str, query: MultiDict[str] | None) -> str:
    """Replace the query string of ``url`` with ``query`` when it is non-empty."""
    if not query:
        return url
    parts = urlsplit(url)
    return urlunsplit(parts._replace(query=urlencode(list(query.items()))))
