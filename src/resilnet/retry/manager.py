r"""Callback manager for orchestrating retry lifecycle events."""

from __future__ import annotations

__all__ = ["CallbackManager"]

import time
from typing import TYPE_CHECKING

from resilnet.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo

if TYPE_CHECKING:
    import httpx

    from resilnet.core.config import ClientConfig


class CallbackManager:
    """Invoke the callbacks of a ``ClientConfig`` for one request.

    A manager is created per call so it can measure the total time of
    that call.

    Args:
        config: The configuration holding the callbacks.
        url: The URL being requested.
        method: The HTTP method.
    """

    def __init__(self, config: ClientConfig, url: str, method: str) -> None:
        self.config = config
        self.url = url
        self.method = method
        self.start_time = time.monotonic()

    def elapsed(self) -> float:
        """Return the seconds elapsed since the manager was created."""
        return time.monotonic() - self.start_time

    def on_request(self, attempt: int) -> None:
        """Invoke on_request callback.

        Args:
            attempt: Current attempt number (0-indexed).
        """
        if self.config.on_request is not None:
            self.config.on_request(
                RequestInfo(
                    url=self.url,
                    method=self.method,
                    attempt=attempt + 1,
                    max_retries=self.config.max_retries,
                )
            )

    def on_retry(
        self,
        attempt: int,
        remaining: int,
        wait_time: float,
        error: BaseException | None,
        status_code: int | None,
    ) -> None:
        """Invoke on_retry callback.

        Args:
            attempt: The attempt that just failed (0-indexed).
            remaining: Number of attempts left.
            wait_time: Backoff delay before the next attempt.
            error: Exception that triggered the retry (if any).
            status_code: Status code that triggered the retry (if any).
        """
        if self.config.on_retry is not None:
            self.config.on_retry(
                RetryInfo(
                    url=self.url,
                    method=self.method,
                    attempt=attempt + 2,
                    remaining=remaining,
                    wait_time=wait_time,
                    error=error,
                    status_code=status_code,
                )
            )

    def on_success(self, attempt: int, response: httpx.Response) -> None:
        """Invoke on_success callback.

        Args:
            attempt: Attempt that produced the response (0-indexed).
            response: The response returned to the caller.
        """
        if self.config.on_success is not None:
            self.config.on_success(
                ResponseInfo(
                    url=self.url,
                    method=self.method,
                    attempt=attempt + 1,
                    response=response,
                    total_time=self.elapsed(),
                )
            )

    def on_failure(self, attempt: int, error: BaseException, status_code: int | None) -> None:
        """Invoke on_failure callback.

        Args:
            attempt: Final attempt number (0-indexed).
            error: The error raised to the caller.
            status_code: Last status code seen (if any).
        """
        if self.config.on_failure is not None:
            self.config.on_failure(
                FailureInfo(
                    url=self.url,
                    method=self.method,
                    attempt=attempt + 1,
                    error=error,
                    status_code=status_code,
                    total_time=self.elapsed(),
                )
            )
