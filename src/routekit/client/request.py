from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from routekit.schemas import RequestBody


@dataclass(frozen=True, slots=True)
class RequestInit:
    """Everything sent to the transport besides the URL.

    Attributes:
        method: HTTP method.
        headers: Final request headers.
        body: Encoded request body.
        mode: Request mode declared on the route.
        credentials: Credentials mode declared on the route.
    """

    method: str = "GET"
    headers: Mapping[str, str] | None = None
    body: RequestBody = None
    mode: str | None = None
    credentials: str | None = None


@dataclass(frozen=True, slots=True)
class PendingRequest:
    """A request about to be sent, with the route it was built from.

    ``route_name`` is None for external calls.
    """

    url: str
    init: RequestInit
    route_name: str | None = None

    def describe(self) -> str:
        if self.route_name is None:
            return f"an external call to '{self.url}'"
        return f"a call to '{self.route_name}'"
