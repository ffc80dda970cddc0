r"""Callback data structures for observing the retry lifecycle.

Four hooks can be configured on a ``ClientConfig``:

- on_request: called before each physical attempt
- on_retry: called before each backoff wait
- on_success: called when a response is handed back to the caller
- on_failure: called when the request fails for good

Example:
    ```pycon
    >>> from resilnet import ResilientClient
    >>> from resilnet.callbacks import RetryInfo
    >>> from resilnet.core import ClientConfig
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"retrying {info.url} in {info.wait_time}s ({info.remaining} left)")
    ...
    >>> client = ResilientClient(config=ClientConfig(on_retry=log_retry))  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = ["FailureInfo", "RequestInfo", "ResponseInfo", "RetryInfo"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


@dataclass(frozen=True)
class RequestInfo:
    """Information passed to on_request callback.

    Attributes:
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The attempt about to be made (1-indexed).
        max_retries: Maximum number of extra attempts configured.
    """

    url: str
    method: str
    attempt: int
    max_retries: int


@dataclass(frozen=True)
class RetryInfo:
    """Information passed to on_retry callback.

    Attributes:
        url: The URL being requested.
        method: The HTTP method.
        attempt: The attempt that will follow the wait (1-indexed).
        remaining: Number of attempts left, including the next one.
        wait_time: The backoff delay in seconds.
        error: The exception that triggered the retry (if any).
        status_code: The HTTP status code that triggered the retry (if any).
    """

    url: str
    method: str
    attempt: int
    remaining: int
    wait_time: float
    error: BaseException | None
    status_code: int | None


@dataclass(frozen=True)
class ResponseInfo:
    """Information passed to on_success callback.

    Attributes:
        url: The URL that was requested.
        method: The HTTP method.
        attempt: The attempt that produced the response (1-indexed).
        response: The HTTP response returned to the caller.
        total_time: Seconds spent on all attempts including backoff.
    """

    url: str
    method: str
    attempt: int
    response: httpx.Response
    total_time: float


@dataclass(frozen=True)
class FailureInfo:
    """Information passed to on_failure callback.

    Attributes:
        url: The URL that was requested.
        method: The HTTP method.
        attempt: The last attempt made (1-indexed).
        error: The error raised to the caller.
        status_code: The last HTTP status code seen (if any).
        total_time: Seconds spent on all attempts including backoff.
    """

    url: str
    method: str
    attempt: int
    error: BaseException
    status_code: int | None
    total_time: float
