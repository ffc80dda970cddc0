r"""Exceptions raised by resilnet and the classification of transport
errors.

Transport errors are sorted into a closed set of categories by
``classify_error`` so the retry policy never has to inspect error messages.
"""

from __future__ import annotations

__all__ = [
    "DeadlineExceededError",
    "ErrorCategory",
    "HttpRequestError",
    "RequestCancelledError",
    "RetriesExhaustedError",
    "classify_error",
]

import ssl
from enum import Enum
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Iterator


class ErrorCategory(Enum):
    """Category of a transport error, as seen by the retry policy."""

    REDIRECT_LIMIT = "redirect_limit"
    UNTRUSTED_AUTHORITY = "untrusted_authority"
    UNSUPPORTED_SCHEME = "unsupported_scheme"
    OTHER = "other"


class HttpRequestError(RuntimeError):
    """Exception raised when an HTTP request cannot be completed.

    Args:
        method: The HTTP method (e.g., "GET", "POST").
        url: The URL that was requested.
        message: Human-readable description of the failure.
        status_code: The last HTTP status code seen, if any.
        response: The last response object, if any.
        cause: The underlying exception, if any.

    Example:
        ```pycon
        >>> from resilnet.exceptions import HttpRequestError
        >>> error = HttpRequestError(
        ...     method="GET",
        ...     url="https://api.example.com/data",
        ...     message="GET https://api.example.com/data failed",
        ...     status_code=503,
        ... )
        >>> error.status_code
        503

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
        response: httpx.Response | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.status_code = status_code
        self.response = response
        self.cause = cause

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self.method!r}, url={self.url!r}, "
            f"status_code={self.status_code!r})"
        )


class RetriesExhaustedError(HttpRequestError):
    """Raised when a retryable condition persisted through every attempt.

    Args:
        method: The HTTP method.
        url: The URL that was requested.
        attempts: The total number of physical attempts made.
        status_code: The status code of the last response, if any.
        cause: The error of the last attempt, if any.
    """

    def __init__(
        self,
        method: str,
        url: str,
        attempts: int,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            method=method,
            url=url,
            message=f"{method} {url} giving up after {attempts} attempts",
            status_code=status_code,
            cause=cause,
        )
        self.attempts = attempts


class RequestCancelledError(RuntimeError):
    """Raised when the context attached to a request was cancelled."""

    def __init__(self, message: str = "request cancelled") -> None:
        super().__init__(message)


class DeadlineExceededError(RequestCancelledError):
    """Raised when the deadline of a request context has passed."""

    def __init__(self, message: str = "request deadline exceeded") -> None:
        super().__init__(message)


def _iter_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def classify_error(exc: BaseException) -> ErrorCategory:
    """Classify a transport error for the retry policy.

    An exception that carries an ``ErrorCategory`` in a ``category``
    attribute is trusted as-is, which lets custom transports classify their
    own errors. Otherwise httpx exception types are mapped, and the
    exception chain is searched for a certificate verification failure.

    Args:
        exc: The exception raised by one send attempt.

    Returns:
        The category of the error. Anything unknown is ``OTHER``.

    Example:
        ```pycon
        >>> import httpx
        >>> from resilnet.exceptions import classify_error
        >>> classify_error(httpx.TooManyRedirects("Exceeded maximum allowed redirects."))
        <ErrorCategory.REDIRECT_LIMIT: 'redirect_limit'>
        >>> classify_error(httpx.ConnectError("connection reset"))
        <ErrorCategory.OTHER: 'other'>

        ```
    """
    category = getattr(exc, "category", None)
    if isinstance(category, ErrorCategory):
        return category
    if isinstance(exc, httpx.TooManyRedirects):
        return ErrorCategory.REDIRECT_LIMIT
    if isinstance(exc, httpx.UnsupportedProtocol):
        return ErrorCategory.UNSUPPORTED_SCHEME
    if any(isinstance(err, ssl.SSLCertVerificationError) for err in _iter_chain(exc)):
        return ErrorCategory.UNTRUSTED_AUTHORITY
    return ErrorCategory.OTHER
