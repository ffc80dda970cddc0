r"""resilnet - HTTP client with automatic retry and exponential backoff.

This package wraps the single-shot send of an ``httpx.Client`` with a retry
engine. A request is issued once; the caller receives either a response or
a definitive failure, while network errors, 5xx responses (except 501) and
connection resets are absorbed by retrying.

Key Features:
    - Retry of network errors and of status 0 and 5xx responses (except 501)
    - No retry of redirect-limit, untrusted-certificate and unsupported-scheme
      errors
    - Deterministic exponential backoff: wait_min * 2 ** attempt, capped at
      wait_max
    - Fresh request body on every attempt through a body supplier
    - Cancellation and deadlines through a ``RequestContext``
    - Bounded draining of discarded response bodies
    - Callback hooks for observability

Example:
    ```pycon
    >>> import resilnet
    >>> response = resilnet.get("https://api.example.com/data")  # doctest: +SKIP
    >>> from resilnet import ResilientClient
    >>> from resilnet.core.config import ClientConfig
    >>> with ResilientClient(config=ClientConfig(max_retries=2, wait_min=0.5)) as client:  # doctest: +SKIP
    ...     response = client.post(
    ...         "https://api.example.com/items", "application/json", b'{"key": "value"}'
    ...     )
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "ClientConfig",
    "DeadlineExceededError",
    "ErrorCategory",
    "HttpRequestError",
    "Request",
    "RequestCancelledError",
    "RequestContext",
    "ResilientClient",
    "RetriesExhaustedError",
    "RetryPolicy",
    "__version__",
    "compute_backoff",
    "get",
    "get_default_client",
    "new_request",
    "post",
    "send_with_retry",
]

from importlib.metadata import PackageNotFoundError, version

from resilnet.client import ResilientClient
from resilnet.context import RequestContext
from resilnet.core.config import ClientConfig
from resilnet.default import get, get_default_client, post
from resilnet.exceptions import (
    DeadlineExceededError,
    ErrorCategory,
    HttpRequestError,
    RequestCancelledError,
    RetriesExhaustedError,
)
from resilnet.request import Request, new_request
from resilnet.retry import RetryPolicy, compute_backoff, send_with_retry

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
