"""
Transport-level request body containers.

These are passed through the encoder untouched and converted to the
backend's native representation by the session implementations.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from multidict import MultiDict

__all__ = ["Blob", "FormData", "FormField", "RequestBody", "SearchParams"]

SearchParams = MultiDict


@dataclass(frozen=True, slots=True)
class Blob:
    """Immutable binary payload with an optional media type.

    Attributes:
        data: Raw bytes of the payload.
        content_type: Media type of the payload, if known.
    """

    data: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True, slots=True)
class FormField:
    name: str
    value: str | bytes
    filename: str | None = None
    content_type: str | None = None


@dataclass
class FormData:
    """A ``multipart/form-data`` body.

    The encoded length depends on the boundary chosen by the backend, so no
    ``Content-Length`` is computed for it.
    """

    fields: list[FormField] = field(default_factory=list)

    def add_field(
        self,
        name: str,
        value: str | bytes,
        *,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> None:
        self.fields.append(FormField(name, value, filename, content_type))


RequestBody = (
    str | bytes | bytearray | memoryview | Blob | FormData | MultiDict[str] | None
)
