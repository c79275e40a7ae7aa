"""
Declarative description of a remote API: routes, per-status response rules
and error policies.

All models are frozen; a specification is built once and only read
afterwards, so a single instance can be shared by concurrent calls.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Final

from routekit.errors import ConfigurationError, UnknownRouteError

from .http import MIMEType, is_known_status

HEADER_LOCATION: Final = "header-location"
METHODS: Final = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH", "HEAD"})

ResponseRules = Mapping[int, "ResponseRule"]


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the value of the first key present in ``data``."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _coerce_mime(value: str) -> MIMEType | str:
    try:
        return MIMEType(value)
    except ValueError:
        return value


def _freeze(mapping: Mapping[Any, Any] | None) -> Mapping[Any, Any] | None:
    if mapping is None:
        return None
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True, slots=True)
class ResponseRule:
    """Interpretation attached to one status code.

    Every field is optional: ``None`` means "not set here", letting the value
    of a lower-priority layer show through when rules are merged.

    Attributes:
        is_success: Whether the response counts as a success.
        message: Human readable message attached to the result.
        expected_content_types: Accepted response media types. An empty
            tuple accepts anything; ``MIMEType.NONE`` accepts a response
            without a ``Content-Type`` header.
        redirect_to: ``"header-location"`` to follow the ``Location``
            header, or the name of a declared route to chain into.
        preserve_request: Whether the redirect reuses the original request.
    """

    is_success: bool | None = None
    message: str | None = None
    expected_content_types: tuple[MIMEType | str, ...] | None = None
    redirect_to: str | None = None
    preserve_request: bool | None = None

    def __post_init__(self) -> None:
        if self.expected_content_types is not None:
            object.__setattr__(
                self,
                "expected_content_types",
                tuple(_coerce_mime(t) for t in self.expected_content_types),
            )

    @classmethod
    def merged(cls, *layers: ResponseRule | None) -> ResponseRule:
        """Merge rules field by field, later layers winning.

        A field left to ``None`` in a layer falls through to the previous
        layers instead of erasing them.
        """
        values: dict[str, Any] = {}
        for layer in layers:
            if layer is None:
                continue
            for f in fields(layer):
                value = getattr(layer, f.name)
                if value is not None:
                    values[f.name] = value
        return cls(**values)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ResponseRule:
        types = _pick(data, "expected_content_types", "expectedContentTypes")
        return cls(
            is_success=_pick(data, "is_success", "isSuccess"),
            message=_pick(data, "message"),
            expected_content_types=tuple(types) if types is not None else None,
            redirect_to=_pick(
                data, "redirect_to", "redirectTo", "shouldRedirectTo"
            ),
            preserve_request=_pick(
                data, "preserve_request", "preserveRequest", "shouldPreserveRequest"
            ),
        )


@dataclass(frozen=True, slots=True)
class ErrorPolicy:
    """What to do when the transport raises.

    Attributes:
        should_log_error: Log a context message and the error.
        should_rethrow: Propagate the error to the caller.
        callback: Called with the error before the result is built.
    """

    should_log_error: bool = True
    should_rethrow: bool = False
    callback: Callable[[BaseException | str], None] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ErrorPolicy:
        return cls(
            should_log_error=bool(
                _pick(data, "should_log_error", "shouldLogError", default=True)
            ),
            should_rethrow=bool(
                _pick(data, "should_rethrow", "shouldRethrow", default=False)
            ),
        )


def _rules_from_dict(data: Mapping[Any, Any] | None) -> dict[int, ResponseRule]:
    if not data:
        return {}
    return {
        int(code): (
            rule if isinstance(rule, ResponseRule) else ResponseRule.from_dict(rule)
        )
        for code, rule in data.items()
    }


def _check_rules(owner: str, rules: Mapping[int, ResponseRule]) -> None:
    for code in rules:
        if not is_known_status(code):
            raise ConfigurationError(
                f"{owner}: status code {code} is not a recognized status code "
                f"and cannot be declared."
            )


@dataclass(frozen=True, slots=True)
class RouteSpec:
    """One declared endpoint of an API.

    Attributes:
        url: Path appended to the API's base URL.
        method: HTTP method (GET, POST, PUT, DELETE, PATCH or HEAD).
        request_content_type: Media type of the request body.
        mode: Request mode, carried on the request for the transport.
        credentials: Credentials mode, carried on the request for the transport.
        base_body: JSON object merged under the caller's body.
        base_query_params: Query parameters merged under the caller's ones.
        headers: Declared headers, winning over computed ones. Values may
            contain ``#{cookie}`` placeholders.
        expected_responses: Route-level response rules by status code.
        error_handling: Route-level transport error policy.
        payload_validator: Optional check run on the caller payload before
            encoding. Returning ``False`` rejects the payload.
    """

    url: str
    method: str = "GET"
    request_content_type: MIMEType | str = MIMEType.NONE
    mode: str | None = None
    credentials: str | None = None
    base_body: Mapping[str, Any] | None = None
    base_query_params: Mapping[str, str] | None = None
    headers: Mapping[str, str] | None = None
    expected_responses: ResponseRules = field(default_factory=dict)
    error_handling: ErrorPolicy | None = None
    payload_validator: Callable[[Any], bool | None] | None = None

    def __post_init__(self) -> None:
        method = self.method.upper()
        if method not in METHODS:
            raise ConfigurationError(f"Unsupported HTTP method: {self.method!r}")
        object.__setattr__(self, "method", method)
        object.__setattr__(
            self, "request_content_type", _coerce_mime(self.request_content_type)
        )

        if self.base_body and self.request_content_type != MIMEType.JSON:
            raise ConfigurationError(
                f"Route {self.url!r}: base_body requires the "
                f"'{MIMEType.JSON}' request content type."
            )
        _check_rules(f"Route {self.url!r}", self.expected_responses or {})

        object.__setattr__(self, "base_body", _freeze(self.base_body))
        object.__setattr__(
            self, "base_query_params", _freeze(self.base_query_params)
        )
        object.__setattr__(self, "headers", _freeze(self.headers))
        object.__setattr__(
            self, "expected_responses", _freeze(self.expected_responses or {})
        )

    @property
    def is_get(self) -> bool:
        return self.method == "GET"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RouteSpec:
        """Build a route from a plain mapping (e.g. a parsed TOML table).

        Both ``snake_case`` and ``camelCase`` keys are accepted.
        """
        if "url" not in data:
            raise ConfigurationError("Missing required route field 'url'")

        error_handling = _pick(data, "error_handling", "errorHandling")
        return cls(
            url=str(data["url"]),
            method=str(data.get("method", "GET")),
            request_content_type=_pick(
                data,
                "request_content_type",
                "requestContentType",
                default=MIMEType.NONE,
            ),
            mode=data.get("mode"),
            credentials=data.get("credentials"),
            base_body=_pick(data, "base_body", "baseBody", "baseJSONBody"),
            base_query_params=_pick(data, "base_query_params", "baseQueryParams"),
            headers=data.get("headers"),
            expected_responses=_rules_from_dict(
                _pick(data, "expected_responses", "expectedResponses")
            ),
            error_handling=(
                ErrorPolicy.from_dict(error_handling)
                if error_handling is not None
                else None
            ),
        )


@dataclass(frozen=True, slots=True)
class ApiSpec:
    """Specification of a whole API.

    Attributes:
        base_url: Prefix of every route URL.
        routes: Declared routes by name.
        default_responses: API-level response rules for internal calls.
        default_error_handling: API-level transport error policy.
        default_external_responses: API-level response rules for external
            calls (redirect targets and ad hoc URLs).
    """

    base_url: str
    routes: Mapping[str, RouteSpec] = field(default_factory=dict)
    default_responses: ResponseRules = field(default_factory=dict)
    default_error_handling: ErrorPolicy | None = None
    default_external_responses: ResponseRules = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_rules("API default responses", self.default_responses)
        _check_rules("API default external responses", self.default_external_responses)

        rule_sets: list[tuple[str, ResponseRules]] = [
            ("default_responses", self.default_responses),
        ]
        rule_sets.extend(
            (f"route {name!r}", route.expected_responses)
            for name, route in self.routes.items()
        )
        for owner, rules in rule_sets:
            for rule in rules.values():
                target = rule.redirect_to
                if target is None or target == HEADER_LOCATION:
                    continue
                if target not in self.routes:
                    raise ConfigurationError(
                        f"{owner}: redirect target {target!r} is not a declared route."
                    )

        for rule in self.default_external_responses.values():
            if rule.redirect_to not in (None, HEADER_LOCATION):
                raise ConfigurationError(
                    "External responses can only redirect to 'header-location'."
                )

        object.__setattr__(self, "routes", _freeze(self.routes))
        object.__setattr__(self, "default_responses", _freeze(self.default_responses))
        object.__setattr__(
            self,
            "default_external_responses",
            _freeze(self.default_external_responses),
        )

    def route(self, name: str) -> RouteSpec:
        """Return the route declared under ``name``.

        Raises:
            UnknownRouteError: If no such route is declared.
        """
        try:
            return self.routes[name]
        except KeyError:
            raise UnknownRouteError(name) from None

    def url_for(self, route: RouteSpec) -> str:
        return self.base_url + route.url

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ApiSpec:
        """Build an API specification from a plain mapping.

        Raises:
            ConfigurationError: If a required field is missing or a route is
                invalid.
        """
        base_url = _pick(data, "base_url", "baseURL")
        if base_url is None:
            raise ConfigurationError("Missing required API field 'base_url'")

        routes_cfg = data.get("routes") or {}
        error_handling = _pick(
            data, "default_error_handling", "defaultErrorHandling"
        )
        return cls(
            base_url=str(base_url),
            routes={
                str(name): RouteSpec.from_dict(route)
                for name, route in routes_cfg.items()
            },
            default_responses=_rules_from_dict(
                _pick(data, "default_responses", "defaultResponses")
            ),
            default_error_handling=(
                ErrorPolicy.from_dict(error_handling)
                if error_handling is not None
                else None
            ),
            default_external_responses=_rules_from_dict(
                _pick(data, "default_external_responses", "defaultExternalResponses")
            ),
        )
