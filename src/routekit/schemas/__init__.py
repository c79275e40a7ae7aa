"""
Data contracts and type definitions.
"""

__all__ = [
    "HEADER_LOCATION",
    "ApiSpec",
    "Blob",
    "ClientConfig",
    "ErrorPolicy",
    "FormData",
    "FormField",
    "HTTPStatus",
    "MIMEType",
    "RequestBody",
    "ResponseRule",
    "RouteSpec",
    "SearchParams",
    "SessionConfig",
    "is_known_status",
]

from .body import Blob, FormData, FormField, RequestBody, SearchParams
from .config import ClientConfig, SessionConfig
from .http import HTTPStatus, MIMEType, is_known_status
from .route import HEADER_LOCATION, ApiSpec, ErrorPolicy, ResponseRule, RouteSpec
