from __future__ import annotations

from routekit.infra.cookies import CookieReader, substitute_mapping
from routekit.infra.sessions import Headers
from routekit.schemas import Blob, MIMEType, RequestBody, RouteSpec


def declared_headers(route: RouteSpec, cookies: CookieReader) -> Headers:
    """Return the route's declared headers with cookie placeholders resolved."""
    return Headers(
        {k: str(v) for k, v in substitute_mapping(route.headers, cookies).items()}
    )


def content_length(body: RequestBody) -> int | None:
    """Length in bytes of ``body``, or None when it cannot be known upfront."""
    match body:
        case str():
            return len(body.encode("utf-8"))
        case bytes() | bytearray():
            return len(body)
        case memoryview():
            return body.nbytes
        case Blob():
            return body.size
        case _:
            return None


def synthesize_headers(
    route: RouteSpec,
    body: RequestBody,
    cookies: CookieReader,
) -> Headers:
    """Complete the declared headers of a request carrying ``body``.

    ``Content-Length`` and ``Content-Type`` are only added when the route does
    not declare them. ``; charset=utf-8`` is appended to the declared content
    type for text bodies.
    """
    headers = declared_headers(route, cookies)

    if "Content-Length" not in headers:
        length = content_length(body)
        if length is not None:
            headers["Content-Length"] = str(length)

    content_type = route.request_content_type
    if "Content-Type" not in headers and content_type != MIMEType.NONE:
        if isinstance(body, str):
            headers["Content-Type"] = f"{content_type}; charset=utf-8"
        else:
            headers["Content-Type"] = str(content_type)

    return headers
