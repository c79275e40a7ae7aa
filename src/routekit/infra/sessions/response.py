"""
Backend-agnostic HTTP response objects.

Every session backend converts its native response into a
:class:`BaseResponse`, which is what the response interpreter and the
callers of the client see.
"""

from __future__ import annotations

import json
from collections import defaultdict
from collections.abc import Iterator, Mapping, MutableMapping, Sequence
from typing import Any


class Headers(MutableMapping[str, str]):
    """A case-insensitive, multi-value HTTP header container.

    Keys are matched case-insensitively but keep the spelling of their first
    insertion, so headers are sent the way they were declared. Assignment
    overwrites all values, while `add()` appends to the existing list.

    Args:
        headers: Optional initial header mapping or sequence of key-value pairs.
    """

    __slots__ = ("_store", "_names")

    def __init__(
        self,
        headers: Mapping[str, str] | Sequence[tuple[str, str]] | None = None,
    ) -> None:
        self._store: dict[str, list[str]] = defaultdict(list)
        self._names: dict[str, str] = {}
        if not headers:
            return

        items = headers.items() if isinstance(headers, Mapping) else headers
        for k, v in items:
            self.add(k, v)

    def add(self, key: str, value: str | None) -> None:
        lower = key.lower()
        self._names.setdefault(lower, key)
        self._store[lower].append(value or "")

    def get_all(self, key: str) -> list[str]:
        return self._store.get(key.lower(), [])

    def items_multi(self) -> list[tuple[str, str]]:
        """Return every (name, value) pair, repeated headers included."""
        return [
            (self._names[lower], value)
            for lower, values in self._store.items()
            for value in values
        ]

    def __getitem__(self, key: str) -> str:
        vals = self._store.get(key.lower())
        if not vals:
            raise KeyError(key)
        return vals[0]

    def __setitem__(self, key: str, value: str) -> None:
        lower = key.lower()
        self._names.setdefault(lower, key)
        self._store[lower] = [value]

    def __delitem__(self, key: str) -> None:
        lower = key.lower()
        del self._store[lower]
        del self._names[lower]

    def __iter__(self) -> Iterator[str]:
        return iter(self._names.values())

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return key.lower() in self._store

    def copy(self) -> Headers:
        return Headers(self.items_multi())

    def __repr__(self) -> str:
        items_preview = ", ".join(f"{k}={len(v)}" for k, v in self._store.items())
        return f"<Headers ({items_preview})>"


class BaseResponse:
    """A lightweight, backend-agnostic HTTP response object.

    Args:
        content: Raw response body as bytes.
        headers: Optional header mapping or sequence of header pairs.
        status: HTTP status code.
        reason: Reason phrase sent with the status line (``statusText``).
        url: Final URL of the response.
        encoding: Default text encoding used when decoding the response body.
    """

    __slots__ = ("content", "headers", "status", "reason", "url", "encoding")

    def __init__(
        self,
        *,
        content: bytes,
        headers: Mapping[str, str] | Sequence[tuple[str, str]] | None = None,
        status: int = 200,
        reason: str = "",
        url: str = "",
        encoding: str = "utf-8",
    ) -> None:
        self.content = content
        self.headers = Headers(headers)
        self.status = status
        self.reason = reason
        self.url = url
        self.encoding = encoding

    @property
    def text(self) -> str:
        """Returns the decoded response text.

        Tries the declared encoding, then UTF-8, then UTF-8 with a permissive
        error handler.
        """
        for enc in (self.encoding, "utf-8"):
            try:
                return self.content.decode(enc)
            except (UnicodeDecodeError, LookupError):
                continue
        return self.content.decode("utf-8", errors="ignore")

    def json(self) -> Any:
        """Parses the response text as JSON.

        Raises:
            json.JSONDecodeError: If the content is not valid JSON.
        """
        return json.loads(self.text)

    @property
    def ok(self) -> bool:
        """True if the status code is less than 400."""
        return self.status < 400

    def __repr__(self) -> str:
        return f"<BaseResponse status={self.status} len={len(self.content)}>"
