"""
HTTP transports for the API client.

Each backend wraps one async HTTP library behind :class:`BaseSession`. The
library of a backend is only imported when that backend is created, so only
the libraries actually used need to be installed.
"""

__all__ = [
    "BACKENDS",
    "create_session",
    "available_backends",
    "BaseSession",
    "BaseResponse",
    "Headers",
]

import importlib
import importlib.util
from typing import Any

from routekit.schemas import SessionConfig

from .base import BaseSession
from .response import BaseResponse, Headers

# backend name -> (module, session class, third-party distribution)
BACKENDS: dict[str, tuple[str, str, str]] = {
    "aiohttp": ("._aiohttp", "AiohttpSession", "aiohttp"),
    "httpx": ("._httpx", "HttpxSession", "httpx"),
    "curl_cffi": ("._curl_cffi", "CurlCffiSession", "curl_cffi"),
}


def available_backends() -> list[str]:
    """Return the names of the backends whose library is installed."""
    return [
        name
        for name, (_, _, library) in BACKENDS.items()
        if importlib.util.find_spec(library) is not None
    ]


def create_session(
    backend: str,
    cfg: SessionConfig | None = None,
    **kwargs: Any,
) -> BaseSession:
    """Instantiate the session of a backend.

    Args:
        backend: One of the keys of :data:`BACKENDS`.
        cfg: Session configuration passed to the backend.
        **kwargs: Forwarded to the backend constructor.

    Raises:
        ValueError: If ``backend`` is not a known backend.
        ImportError: If the library of the backend is not installed.
    """
    try:
        module_name, class_name, _ = BACKENDS[backend]
    except KeyError:
        raise ValueError(
            f"Unsupported backend: {backend!r} (expected one of {sorted(BACKENDS)})"
        ) from None

    module = importlib.import_module(module_name, __name__)
    session_cls: type[BaseSession] = getattr(module, class_name)
    return session_cls(cfg, **kwargs)
