r"""Process-wide default client.

The default client is created on first use with the default configuration
(30s timeout, 2s to 8s backoff, 4 extra attempts) and is never mutated.
Callers needing other settings construct their own ``ResilientClient``.
"""

from __future__ import annotations

__all__ = ["get", "get_default_client", "post"]

from functools import lru_cache
from typing import TYPE_CHECKING, Any

from resilnet.client import ResilientClient

if TYPE_CHECKING:
    import httpx


@lru_cache(maxsize=1)
def get_default_client() -> ResilientClient:
    r"""Return the process-wide default client.

    Returns:
        The shared ``ResilientClient``, created on first call.

    Example:
        ```pycon
        >>> from resilnet import get_default_client
        >>> client = get_default_client()
        >>> client is get_default_client()
        True
        >>> client.config.max_retries
        4

        ```
    """
    return ResilientClient()


def get(url: str | httpx.URL, **kwargs: Any) -> httpx.Response:
    r"""Send an HTTP GET request through the default client.

    Args:
        url: The URL to send the GET request to.
        **kwargs: Additional keyword arguments passed to
            ``ResilientClient.request``.

    Returns:
        The first non-retryable response.

    Example:
        ```pycon
        >>> from resilnet import get
        >>> response = get("https://api.example.com/data")  # doctest: +SKIP

        ```
    """
    return get_default_client().get(url, **kwargs)


def post(url: str | httpx.URL, content_type: str, body: Any, **kwargs: Any) -> httpx.Response:
    r"""Send an HTTP POST request through the default client.

    Args:
        url: The URL to send the POST request to.
        content_type: The value of the ``Content-Type`` header.
        body: The payload.
        **kwargs: Additional keyword arguments passed to
            ``ResilientClient.request``.

    Returns:
        The first non-retryable response.
    """
    return get_default_client().post(url, content_type, body, **kwargs)
