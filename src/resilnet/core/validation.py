r"""Parameter validation utilities for the retry configuration.

This module provides validation functions for retry parameters to ensure
they meet the required constraints before being used by the retry policy
or handed to the transport.
"""

from __future__ import annotations

__all__ = ["validate_retry_params", "validate_timeout"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


def validate_timeout(timeout: float | httpx.Timeout) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for a single call.
            Must be > 0 if provided as a numeric value.

    Raises:
        ValueError: If timeout is a numeric value <= 0.

    Example:
        ```pycon
        >>> from resilnet.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(30)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if isinstance(timeout, (int, float)) and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_params(max_retries: int, wait_min: float, wait_max: float) -> None:
    """Validate retry parameters.

    Args:
        max_retries: Maximum number of extra attempts beyond the first one.
            Must be >= 0. A value of 0 means only the initial attempt.
        wait_min: Backoff delay before the first retry, in seconds.
            Must be >= 0.
        wait_max: Upper bound of any backoff delay, in seconds.
            Must be >= wait_min.

    Raises:
        ValueError: If a parameter is negative or if wait_min > wait_max.

    Example:
        ```pycon
        >>> from resilnet.core.validation import validate_retry_params
        >>> validate_retry_params(max_retries=4, wait_min=2.0, wait_max=8.0)
        >>> validate_retry_params(max_retries=0, wait_min=0.0, wait_max=0.0)
        >>> validate_retry_params(max_retries=3, wait_min=5.0, wait_max=1.0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: wait_min must be <= wait_max, got wait_min=5.0 and wait_max=1.0

        ```
    """
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    if wait_min < 0:
        msg = f"wait_min must be >= 0, got {wait_min}"
        raise ValueError(msg)
    if wait_max < 0:
        msg = f"wait_max must be >= 0, got {wait_max}"
        raise ValueError(msg)
    if wait_min > wait_max:
        msg = f"wait_min must be <= wait_max, got wait_min={wait_min} and wait_max={wait_max}"
        raise ValueError(msg)
