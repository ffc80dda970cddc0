r"""Retry decision and backoff schedule.

This module contains the pure part of the retry engine: deciding whether
the outcome of one attempt warrants another one, and computing how long to
wait before it. Neither function keeps state beyond its configuration.
"""

from __future__ import annotations

__all__ = ["RetryPolicy", "compute_backoff", "is_retryable_status"]

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from resilnet.core.config import DEFAULT_MAX_RETRIES, DEFAULT_WAIT_MAX, DEFAULT_WAIT_MIN
from resilnet.core.validation import validate_retry_params
from resilnet.exceptions import ErrorCategory, classify_error

if TYPE_CHECKING:
    import httpx

    from resilnet.context import RequestContext

logger: logging.Logger = logging.getLogger(__name__)

# Permanent transport failures: retrying cannot change the outcome.
PERMANENT_ERROR_CATEGORIES = frozenset(
    {
        ErrorCategory.REDIRECT_LIMIT,
        ErrorCategory.UNTRUSTED_AUTHORITY,
        ErrorCategory.UNSUPPORTED_SCHEME,
    }
)

# 501 Not Implemented is a capability gap of the server, not a transient state.
NOT_IMPLEMENTED = 501


def is_retryable_status(status_code: int) -> bool:
    """Indicate whether a response status code is transient.

    Status 0 (no usable status) and every 5xx code except 501 are
    transient. Everything else is returned to the caller as-is.

    Args:
        status_code: The HTTP status code of the response.

    Returns:
        ``True`` if the request should be attempted again.

    Example:
        ```pycon
        >>> from resilnet.retry.policy import is_retryable_status
        >>> is_retryable_status(503)
        True
        >>> is_retryable_status(501)
        False
        >>> is_retryable_status(404)
        False

        ```
    """
    if status_code == 0:
        return True
    return 500 <= status_code <= 599 and status_code != NOT_IMPLEMENTED


def compute_backoff(wait_min: float, wait_max: float, attempt: int) -> float:
    """Compute the delay before the next attempt.

    The delay is ``wait_min * 2 ** attempt``, clamped to ``wait_max`` when
    it is larger or cannot be represented.

    Args:
        wait_min: The delay before the first retry, in seconds.
        wait_max: The upper bound of the delay, in seconds.
        attempt: The zero-based index of the attempt that just failed.

    Returns:
        The delay in seconds.

    Example:
        ```pycon
        >>> from resilnet.retry.policy import compute_backoff
        >>> compute_backoff(2.0, 8.0, 0)
        2.0
        >>> compute_backoff(2.0, 8.0, 1)
        4.0
        >>> compute_backoff(2.0, 8.0, 5)
        8.0

        ```
    """
    try:
        delay = wait_min * 2**attempt
    except OverflowError:
        return wait_max
    if not math.isfinite(delay) or delay > wait_max:
        return wait_max
    return delay


@dataclass(frozen=True)
class RetryPolicy:
    """Decide whether to retry an attempt and how long to wait before it.

    Args:
        max_retries: Maximum number of extra attempts beyond the first one.
        wait_min: The backoff delay before the first retry, in seconds.
        wait_max: The upper bound of any backoff delay, in seconds.

    Raises:
        ValueError: If the parameters are invalid.

    Example:
        ```pycon
        >>> from resilnet.retry.policy import RetryPolicy
        >>> policy = RetryPolicy(max_retries=3, wait_min=1.0, wait_max=3.0)
        >>> [policy.backoff(attempt) for attempt in range(3)]
        [1.0, 2.0, 3.0]

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    wait_min: float = DEFAULT_WAIT_MIN
    wait_max: float = DEFAULT_WAIT_MAX

    def __post_init__(self) -> None:
        validate_retry_params(
            max_retries=self.max_retries, wait_min=self.wait_min, wait_max=self.wait_max
        )

    def is_retryable(
        self,
        response: httpx.Response | None,
        error: BaseException | None,
        context: RequestContext,
    ) -> tuple[bool, BaseException | None]:
        """Decide whether the outcome of one attempt should be retried.

        A finished context always wins: the attempt is not retried and the
        context error replaces whatever the attempt produced.

        Args:
            response: The response of the attempt, if any.
            error: The error raised by the attempt, if any.
            context: The cancellation context of the request.

        Returns:
            A tuple ``(retry, override)``. ``override`` is an error that
            must be surfaced instead of the attempt's own error, or
            ``None``.
        """
        context_error = context.err()
        if context_error is not None:
            return (False, context_error)

        if error is not None:
            category = classify_error(error)
            if category in PERMANENT_ERROR_CATEGORIES:
                logger.debug(f"Not retrying permanent error ({category.value}): {error}")
                return (False, None)
            return (True, None)

        if response is None:
            return (True, None)
        return (is_retryable_status(response.status_code), None)

    def backoff(self, attempt: int) -> float:
        """Compute the delay before the attempt following ``attempt``.

        Args:
            attempt: The zero-based index of the attempt that just failed.

        Returns:
            The delay in seconds.
        """
        return compute_backoff(self.wait_min, self.wait_max, attempt)
