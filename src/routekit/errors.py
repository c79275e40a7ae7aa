class RouteKitError(Exception):
    """Base class for all errors raised by RouteKit."""


class ConfigurationError(RouteKitError):
    """A route or call is misconfigured; detected before any network I/O."""


class EncodingError(ConfigurationError):
    """The payload cannot be encoded for the route's content type."""

    def __init__(self, route_name: str, message: str) -> None:
        super().__init__(f"Route {route_name!r}: {message}")
        self.route_name = route_name


class UnknownRouteError(ConfigurationError, KeyError):
    """The requested route is not declared in the API specification."""

    def __init__(self, route_name: str) -> None:
        super().__init__(
            f"'route_name' must be defined in the API specification. "
            f"Found: '{route_name}'."
        )
        self.route_name = route_name

    def __str__(self) -> str:
        return str(self.args[0])


class PayloadValidationError(ConfigurationError):
    """The payload was rejected by the route's validator."""


class TransportError(RouteKitError):
    """The underlying HTTP transport failed (DNS, connection, timeout...)."""


class CallTimeoutError(TransportError):
    """A call, including its redirect chain, exceeded its deadline."""


class TooManyRedirectsError(RouteKitError):
    """A redirect chain exceeded the configured maximum number of hops."""

    def __init__(self, max_redirects: int) -> None:
        super().__init__(f"Exceeded the maximum of {max_redirects} redirects.")
        self.max_redirects = max_redirects
