from __future__ import annotations

import logging

from routekit.infra.http_defaults import DEFAULT_ERROR_POLICY
from routekit.schemas import ErrorPolicy

from .result import RequestResult

logger = logging.getLogger(__name__)


def resolve_policy(*policies: ErrorPolicy | None) -> ErrorPolicy:
    """Return the first declared policy, or the default one."""
    for policy in policies:
        if policy is not None:
            return policy
    return DEFAULT_ERROR_POLICY


def handle_error(
    policy: ErrorPolicy,
    error: BaseException,
    context: str,
) -> RequestResult:
    """Apply ``policy`` to an error raised while performing a call.

    The error is logged, handed to the policy's callback, then either raised
    again or turned into a failed result without a response.

    Args:
        policy: Error policy to apply.
        error: The error to handle.
        context: Message logged before the error.

    Raises:
        BaseException: ``error`` itself, when the policy asks to rethrow.
    """
    if policy.should_log_error:
        logger.error("%s %s", context, error, exc_info=error)

    if policy.callback is not None:
        policy.callback(error)

    if policy.should_rethrow:
        raise error

    return RequestResult(False, str(error) or type(error).__name__)
