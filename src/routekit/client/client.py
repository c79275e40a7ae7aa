"""
The API client: sends requests to declared routes and interprets their
responses according to the API specification.
"""

from __future__ import annotations

import asyncio
import logging
import types
from typing import Any, Self

from routekit.errors import (
    CallTimeoutError,
    PayloadValidationError,
    TooManyRedirectsError,
    TransportError,
)
from routekit.infra.cookies import CookieReader, SessionCookieReader
from routekit.infra.sessions import BaseResponse, BaseSession, create_session
from routekit.schemas import ApiSpec, ClientConfig, ResponseRule

from .encoder import apply_query, encode_request
from .error_handler import handle_error, resolve_policy
from .headers import declared_headers, synthesize_headers
from .interpreter import check_content_type, effective_rule
from .redirect import ChainRoute, FollowLocation, resolve_redirect
from .request import PendingRequest, RequestInit
from .result import RequestResult

logger = logging.getLogger(__name__)


class APIClient:
    """Client of an API described by an :class:`ApiSpec`.

    Every call goes through the same pipeline: the payload is encoded for the
    route, headers are completed, the request is sent, and the response is
    interpreted with the merged response rule for its status code, following
    the redirects that rule asks for.

    Example::

        async with APIClient(spec) as client:
            result = await client.call("login", {"username": "bob"})
            if result.is_ok():
                data = result.get_json()
    """

    def __init__(
        self,
        api: ApiSpec,
        *,
        session: BaseSession | None = None,
        cookies: CookieReader | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        """Creates a client for ``api``.

        Args:
            api: Specification of the API.
            session: Transport to use. If omitted, a new session is created
                via :func:`create_session` from ``config``.
            cookies: Source of the ``#{name}`` cookie placeholders. Defaults
                to the cookie jar of the session.
            config: Client configuration. Defaults to :class:`ClientConfig`.
        """
        self._api = api
        self._config = config or ClientConfig()
        self.session = session or create_session(
            backend=self._config.backend,
            cfg=self._config.session_cfg,
        )
        self._cookies: CookieReader = (
            cookies if cookies is not None else SessionCookieReader(self.session)
        )

    @property
    def api(self) -> ApiSpec:
        return self._api

    async def init(self) -> None:
        """Initializes the underlying session."""
        await self.session.init()

    async def close(self) -> None:
        """Closes the underlying session."""
        await self.session.close()

    async def call(
        self,
        route_name: str,
        data: Any = None,
        *,
        timeout: float | None = None,
    ) -> RequestResult:
        """Sends a request to a declared route and handles the response.

        Args:
            route_name: Name of the route in the API specification.
            data: Payload of the request.

                * GET routes: query parameters, as a flat mapping (merged
                  over the route's base query parameters) or a ``MultiDict``.
                * Other methods: the body. Mappings are JSON-encoded (merged
                  over the route's base body) on JSON routes and
                  form-encoded on form-urlencoded routes; ``str``, bytes,
                  ``Blob``, ``FormData`` and ``MultiDict`` are sent as-is.

                First-level string values may use the ``#{cookie}`` syntax.
            timeout: Deadline in seconds for the whole call, redirects
                included. Defaults to ``ClientConfig.call_timeout``.

        Returns:
            RequestResult: The outcome of the call.

        Raises:
            UnknownRouteError: If the route is not declared.
            PayloadValidationError: If the route's validator rejects ``data``.
            EncodingError: If ``data`` cannot be encoded for the route.
            TransportError: If the transport fails and the error policy asks
                to rethrow.
        """
        route = self._api.route(route_name)
        if route.payload_validator is not None:
            if route.payload_validator(data) is False:
                raise PayloadValidationError(
                    f"Route {route_name!r}: payload rejected by the route validator."
                )

        request = self._build_request(route_name, data)
        return await self._run(request, timeout)

    async def external_call(
        self,
        url: str,
        init: RequestInit | None = None,
        *,
        timeout: float | None = None,
    ) -> RequestResult:
        """Sends a request to an arbitrary URL and handles the response.

        Only the built-in and API-level external response rules apply.

        Args:
            url: Target URL.
            init: Method, headers and body of the request. Defaults to a GET.
            timeout: Deadline in seconds for the whole call, redirects
                included. Defaults to ``ClientConfig.call_timeout``.
        """
        request = PendingRequest(url=url, init=init or RequestInit())
        return await self._run(request, timeout)

    def _build_request(self, route_name: str, data: Any) -> PendingRequest:
        route = self._api.route(route_name)
        encoded = encode_request(route_name, route, data, self._cookies)

        if route.is_get:
            headers = declared_headers(route, self._cookies)
        else:
            headers = synthesize_headers(route, encoded.body, self._cookies)

        return PendingRequest(
            url=apply_query(self._api.url_for(route), encoded.query),
            init=RequestInit(
                method=route.method,
                headers=headers,
                body=encoded.body,
                mode=route.mode,
                credentials=route.credentials,
            ),
            route_name=route_name,
        )

    async def _run(
        self, request: PendingRequest, timeout: float | None
    ) -> RequestResult:
        deadline = timeout if timeout is not None else self._config.call_timeout
        if deadline is None:
            return await self._drive(request)

        try:
            async with asyncio.timeout(deadline) as cm:
                return await self._drive(request)
        except TimeoutError:
            if not cm.expired():
                raise
            error = CallTimeoutError(
                f"The call did not complete within {deadline} seconds."
            )
            return self._handle_error(request, error)

    async def _drive(self, request: PendingRequest) -> RequestResult:
        """Sends ``request`` and follows the redirect chain it starts."""
        origin = request
        hops = 0
        while True:
            try:
                response = await self._send(request)
            except TransportError as e:
                return self._handle_error(request, e)

            rule = self._rule_for(request, response)

            mismatch = check_content_type(rule, response)
            if mismatch is not None:
                logger.warning("Response to %s: %s", request.describe(), mismatch)
                return RequestResult(False, mismatch, response)

            step = resolve_redirect(
                rule, response, request.init, request.url, self._api
            )
            if step is None:
                return RequestResult(rule.is_success is True, rule.message, response)
            if isinstance(step, RequestResult):
                logger.warning("Response to %s: %s", request.describe(), step.message)
                return step

            if hops >= self._config.max_redirects:
                result = self._handle_error(
                    origin, TooManyRedirectsError(self._config.max_redirects)
                )
                result.response = response
                return result
            hops += 1

            match step:
                case FollowLocation(url=url, init=init):
                    logger.debug("Redirecting %s to %s", request.describe(), url)
                    request = PendingRequest(url=url, init=init)
                case ChainRoute(route_name=route_name, payload=payload):
                    logger.debug(
                        "Chaining %s into route '%s'", request.describe(), route_name
                    )
                    request = self._build_request(route_name, payload)

    async def _send(self, request: PendingRequest) -> BaseResponse:
        init = request.init
        logger.debug("Sending %s: %s %s", request.describe(), init.method, request.url)
        return await self.session.request(
            init.method,
            request.url,
            headers=init.headers or {},
            body=init.body,
            mode=init.mode,
            credentials=init.credentials,
            allow_redirects=self._config.follow_transport_redirects,
        )

    def _rule_for(
        self, request: PendingRequest, response: BaseResponse
    ) -> ResponseRule:
        if request.route_name is None:
            return effective_rule(
                response.status,
                response.reason,
                self._api.default_external_responses,
            )
        return effective_rule(
            response.status,
            response.reason,
            self._api.default_responses,
            self._api.route(request.route_name).expected_responses,
        )

    def _handle_error(
        self, request: PendingRequest, error: BaseException
    ) -> RequestResult:
        if request.route_name is None:
            policy = resolve_policy(self._api.default_error_handling)
        else:
            policy = resolve_policy(
                self._api.route(request.route_name).error_handling,
                self._api.default_error_handling,
            )
        context = (
            f"[APIClient] The following error was thrown during "
            f"{request.describe()}:"
        )
        return handle_error(policy, error, context)

    async def __aenter__(self) -> Self:
        await self.init()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        await self.close()
