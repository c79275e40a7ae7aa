"""
Cookie readers and the ``#{name}`` cookie template syntax.

Header values, base query parameters and first-level string values of
request bodies may reference cookies with ``#{cookie_name}``. The
placeholders are resolved against a :class:`CookieReader` when a request is
built; an absent cookie is replaced by an empty string.
"""

from __future__ import annotations

__all__ = [
    "parse_cookies",
    "substitute_cookies",
    "substitute_mapping",
    "CookieReader",
    "CookieStore",
    "SessionCookieReader",
]

import json
import re
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from routekit.infra.paths import COOKIES_DIR

if TYPE_CHECKING:
    from routekit.infra.sessions import BaseSession

_COOKIE_SYNTAX = re.compile(r"#\{(?P<name>\w+)\}")

T = TypeVar("T")


class CookieReader(Protocol):
    """Read-only access to a cookie jar."""

    def get(self, name: str, /) -> str | None: ...


def substitute_cookies(raw: str, cookies: CookieReader) -> str:
    """Replace every ``#{name}`` in ``raw`` with the value of cookie ``name``.

    Args:
        raw: The text to process.
        cookies: Cookie source used to resolve the placeholders.

    Returns:
        The processed text. Unknown cookies are replaced by ``""``.
    """
    return _COOKIE_SYNTAX.sub(lambda m: cookies.get(m["name"]) or "", raw)


def substitute_mapping(
    raw: Mapping[str, T | str] | None,
    cookies: CookieReader,
) -> dict[str, T | str]:
    """Apply :func:`substitute_cookies` to every string value of ``raw``.

    Only the first level is processed; nested values are kept as-is.
    """
    if not raw:
        return {}
    return {
        key: substitute_cookies(value, cookies) if isinstance(value, str) else value
        for key, value in raw.items()
    }


def parse_cookies(cookies: str | Mapping[str, str]) -> dict[str, str]:
    """Parse cookies from a string or mapping into a normalized dictionary.

    Supports input such as:

    - ``"key1=value1; key2=value2"``
    - ``{"key1": "value1", "key2": "value2"}``

    Args:
        cookies: A cookie string or a dict-like object containing cookie
            key/value pairs.

    Returns:
        A normalized cookie dictionary mapping keys to values.

    Raises:
        TypeError: If ``cookies`` is neither a string nor a mapping.
    """
    if isinstance(cookies, str):
        result: dict[str, str] = {}
        for part in cookies.split(";"):
            if "=" not in part:
                continue
            key, value = part.split("=", 1)
            key, value = key.strip(), value.strip()
            if not key:
                continue
            result[key] = value
        return result
    elif isinstance(cookies, Mapping):
        return {str(k).strip(): str(v).strip() for k, v in cookies.items()}
    raise TypeError("Unsupported cookie format: must be str or dict-like")


class CookieStore:
    """Cookie reader backed by the cookie files saved by the sessions.

    Supported cookie files (by default):

    - ``aiohttp.cookies``
    - ``curl_cffi.cookies``
    - ``httpx.cookies``

    Files are re-read only when their modification time changes.
    """

    DEFAULT_FILENAMES = ["aiohttp.cookies", "curl_cffi.cookies", "httpx.cookies"]

    def __init__(
        self,
        cookies_dir: Path = COOKIES_DIR,
        filenames: list[str] | None = None,
    ) -> None:
        """Initialize a CookieStore instance.

        Args:
            cookies_dir: Path to the directory containing cookie state files.
                Defaults to the user cookies directory.
            filenames: Optional list of filenames to load. If omitted, defaults
                to ``DEFAULT_FILENAMES``.
        """
        self.cookies_dir = cookies_dir
        self.filenames = filenames or self.DEFAULT_FILENAMES
        self.cache: dict[str, str] = {}
        self.mtimes: dict[str, float] = {}

    def get(self, key: str, /) -> str | None:
        """Retrieve a cookie value by name.

        Args:
            key: The cookie name.

        Returns:
            str | None: The cookie value if present, otherwise None.
        """
        self._load_all()
        return self.cache.get(key)

    def _load_all(self) -> None:
        """Load or refresh cookies from all configured cookie files."""
        for filename in self.filenames:
            state_file = self.cookies_dir / filename
            if not state_file.exists():
                continue
            try:
                mtime = state_file.stat().st_mtime
                if self.mtimes.get(filename) == mtime:
                    continue
                self.mtimes[filename] = mtime
                data: list[dict[str, Any]] = (
                    json.loads(state_file.read_text(encoding="utf-8")) or []
                )
                for c in data:
                    if "name" in c and "value" in c:
                        self.cache[c["name"]] = c["value"]
            except (OSError, json.JSONDecodeError):
                continue


class SessionCookieReader:
    """Cookie reader over the live cookie jar of a transport session.

    This mirrors a browser, where the cookies set by earlier responses are
    visible to the next requests.
    """

    __slots__ = ("_session",)

    def __init__(self, session: BaseSession) -> None:
        self._session = session

    def get(self, key: str, /) -> str | None:
        return self._session.get_cookie(key)
