from __future__ import annotations

from typing import Any

from routekit.infra.sessions import BaseResponse
from routekit.schemas import MIMEType

from .interpreter import media_type


class RequestResult:
    """Outcome of a call.

    ``response`` is set whenever the transport succeeded, even when the call
    failed logically (unexpected content type, missing redirect location,
    error status), so callers can still inspect what the server sent.

    Attributes:
        ok: Whether the call succeeded.
        message: Error message, or the message of the response rule.
        response: The last HTTP response, if any.
    """

    __slots__ = ("ok", "message", "response")

    def __init__(
        self,
        ok: bool,
        message: str | None = None,
        response: BaseResponse | None = None,
    ) -> None:
        self.ok = ok
        self.message = message
        self.response = response

    def is_ok(self) -> bool:
        """True if the call succeeded and a response is available."""
        return self.ok and self.response is not None

    def is_200(self) -> bool:
        """True if the call succeeded with a ``200 OK`` response."""
        return (
            self.ok and self.response is not None and self.response.status == 200
        )

    def is_of_type(self, mime: MIMEType | str) -> bool:
        """Check the media type of the response, ignoring its parameters."""
        if self.response is None:
            return False
        content_type = self.response.headers.get("Content-Type")
        if not content_type:
            return False
        return media_type(content_type) == mime

    def get_json(self) -> Any:
        """Parse the response body as JSON.

        Returns:
            The decoded JSON, or None if there is no response.

        Raises:
            json.JSONDecodeError: If the body is not valid JSON. Check
                ``is_of_type(MIMEType.JSON)`` first.
        """
        if self.response is None:
            return None
        return self.response.json()

    def get_text(self) -> str | None:
        """Return the decoded response body, or None if there is no response."""
        if self.response is None:
            return None
        return self.response.text

    def __repr__(self) -> str:
        return (
            f"<RequestResult ok={self.ok} message={self.message!r} "
            f"response={self.response!r}>"
        )
