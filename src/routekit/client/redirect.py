"""
Redirect decisions.

A response rule may ask to redirect either to the URL in the response's
``Location`` header (an external call) or to another declared route (an
internal call). This module only decides what the next request is; the
client drives the chain and bounds its length.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urljoin

from routekit.infra.sessions import BaseResponse
from routekit.schemas import HEADER_LOCATION, ApiSpec, ResponseRule

from .request import RequestInit
from .result import RequestResult

MISSING_LOCATION_MESSAGE = (
    "Specification indicates to redirect to the location given in the "
    "response's 'Location' header, but none was provided."
)


@dataclass(frozen=True, slots=True)
class FollowLocation:
    """Follow the ``Location`` header with an external call."""

    url: str
    init: RequestInit


@dataclass(frozen=True, slots=True)
class ChainRoute:
    """Chain into another declared route with an internal call."""

    route_name: str
    payload: Any = None


RedirectStep = FollowLocation | ChainRoute | RequestResult


def resolve_redirect(
    rule: ResponseRule,
    response: BaseResponse,
    init: RequestInit,
    request_url: str,
    api: ApiSpec,
) -> RedirectStep | None:
    """Decide the redirect requested by ``rule``, if any.

    Args:
        rule: Effective rule of the response.
        response: The response being handled.
        init: The request that produced ``response``.
        request_url: URL of that request, used to resolve relative locations.
        api: The API specification, to look up chained routes.

    Returns:
        None when no redirect is requested, a failed :class:`RequestResult`
        when the ``Location`` header is missing, otherwise the next step.
    """
    target = rule.redirect_to
    if target is None:
        return None

    if target == HEADER_LOCATION:
        location = response.headers.get("Location")
        if not location:
            return RequestResult(False, MISSING_LOCATION_MESSAGE, response)

        url = urljoin(response.url or request_url, location)
        if rule.preserve_request:
            return FollowLocation(url, init)
        return FollowLocation(url, RequestInit(method="GET"))

    # Chaining is a choice of the API author, not an HTTP redirection: only
    # the body may be carried over.
    if rule.preserve_request and not api.route(target).is_get:
        return ChainRoute(target, init.body)
    return ChainRoute(target)
