"""
Interpretation of HTTP responses against the declared response rules.

The rule applied to a response is merged from up to three layers, field by
field: the built-in defaults for its status code, the API-level defaults and
the route-level overrides. Status codes outside the recognized set always
fail, whatever was declared.
"""

from __future__ import annotations

from collections.abc import Mapping

from routekit.infra.http_defaults import DEFAULT_RESPONSE_RULES
from routekit.infra.sessions import BaseResponse
from routekit.schemas import MIMEType, ResponseRule, is_known_status


def effective_rule(
    status: int,
    reason: str,
    *layers: Mapping[int, ResponseRule] | None,
) -> ResponseRule:
    """Merge the rules declared for ``status`` in ``layers``.

    Args:
        status: Status code of the response.
        reason: Reason phrase of the response, used for unknown codes.
        *layers: Rule maps from lowest to highest priority, on top of the
            built-in defaults.
    """
    if not is_known_status(status):
        return ResponseRule(
            is_success=False,
            message=f"Unknown status code: {status} ({reason})",
        )
    return ResponseRule.merged(
        DEFAULT_RESPONSE_RULES.get(status),
        *(layer.get(status) if layer else None for layer in layers),
    )


def media_type(content_type: str) -> str:
    """Extract the media type of a ``Content-Type`` value.

    >>> media_type("text/html ; charset=utf-8")
    'text/html'
    """
    return content_type.split(";")[0].strip().split(",")[0].strip()


def _format_types(types: tuple[MIMEType | str, ...]) -> str:
    return ",".join(f"'{t}'" for t in types)


def check_content_type(rule: ResponseRule, response: BaseResponse) -> str | None:
    """Check the response's content type against the rule's expected ones.

    Returns:
        An error message on mismatch, otherwise None. An empty or missing
        expected set always passes.
    """
    expected = rule.expected_content_types
    if not expected:
        return None

    header = response.headers.get("Content-Type")
    if header:
        actual = media_type(header)
        if actual in expected:
            return None
        return f"Expected content types [{_format_types(expected)}], got '{actual}'."

    if MIMEType.NONE in expected:
        return None
    return (
        f"Expected content types [{_format_types(expected)}], "
        f"but the request didn't specify a content type."
    )
