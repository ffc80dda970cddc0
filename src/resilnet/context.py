r"""Cancellation context attached to a request.

A ``RequestContext`` carries a cancellation signal and an optional
deadline. The execution loop checks it before each retry decision and
races it against the backoff wait, so a cancelled request never sleeps
longer than necessary.

Example:
    ```pycon
    >>> from resilnet.context import RequestContext
    >>> context = RequestContext()
    >>> context.err() is None
    True
    >>> context.cancel()
    >>> context.err()
    RequestCancelledError('request cancelled')

    ```
"""

from __future__ import annotations

__all__ = ["RequestContext", "background"]

import threading
import time

from resilnet.exceptions import DeadlineExceededError, RequestCancelledError


class RequestContext:
    """Thread-safe cancellation token with an optional deadline.

    Args:
        timeout: Optional number of seconds after which the context
            expires. ``None`` means no deadline.

    Raises:
        ValueError: If ``timeout`` is negative.
    """

    def __init__(self, timeout: float | None = None) -> None:
        if timeout is not None and timeout < 0:
            msg = f"timeout must be >= 0, got {timeout}"
            raise ValueError(msg)
        self._cancelled = threading.Event()
        self._deadline = None if timeout is None else time.monotonic() + timeout

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(cancelled={self._cancelled.is_set()}, "
            f"remaining={self.remaining()})"
        )

    def cancel(self) -> None:
        """Signal that the request should stop as soon as possible."""
        self._cancelled.set()

    def cancel_after(self, delay: float) -> threading.Timer:
        """Schedule cancellation of this context.

        Args:
            delay: Number of seconds to wait before cancelling.

        Returns:
            The started timer; calling ``cancel()`` on it unschedules the
            cancellation.
        """
        timer = threading.Timer(delay, self.cancel)
        timer.daemon = True
        timer.start()
        return timer

    def remaining(self) -> float | None:
        """Return the number of seconds until the deadline, or ``None``
        without deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def err(self) -> RequestCancelledError | None:
        """Return the error describing why the context ended.

        Returns:
            ``RequestCancelledError`` if ``cancel`` was called,
            ``DeadlineExceededError`` if the deadline passed, ``None``
            while the context is still live.
        """
        if self._cancelled.is_set():
            return RequestCancelledError()
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DeadlineExceededError()
        return None

    def done(self) -> bool:
        """Indicate whether the context was cancelled or expired."""
        return self.err() is not None

    def wait(self, duration: float) -> bool:
        """Sleep for ``duration`` seconds unless the context ends first.

        Args:
            duration: Number of seconds to sleep.

        Returns:
            ``True`` if the context was cancelled or expired before the
            duration elapsed, ``False`` otherwise.
        """
        remaining = self.remaining()
        if remaining is not None and remaining < duration:
            # The deadline comes first: sleep until it, then report it.
            self._cancelled.wait(remaining)
            return True
        return self._cancelled.wait(duration)


def background() -> RequestContext:
    """Return a new context that is never cancelled and has no
    deadline."""
    return RequestContext()
