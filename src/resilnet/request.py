r"""Logical request and body supplier.

A ``Request`` describes one logical HTTP call, however many physical
attempts it takes. Its payload is held by a body supplier: a zero-argument
callable that returns a fresh binary stream each time it is called, because
a stream consumed by one attempt cannot be replayed by the next one.
"""

from __future__ import annotations

__all__ = ["BodySupplier", "Request", "new_request"]

import io
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, BinaryIO

import httpx

from resilnet.context import RequestContext, background

BodySupplier = Callable[[], BinaryIO]


def _replay(payload: bytes) -> BodySupplier:
    def supplier() -> BinaryIO:
        return io.BytesIO(payload)

    return supplier


def _to_supplier(body: Any) -> BodySupplier | None:
    if body is None:
        return None
    if isinstance(body, str):
        return _replay(body.encode("utf-8"))
    if isinstance(body, (bytes, bytearray)):
        return _replay(bytes(body))
    if callable(body):
        return body
    if hasattr(body, "read"):
        # A stream can only be read once; keep its content for later attempts.
        return _replay(body.read())
    msg = f"unsupported body type: {type(body).__name__}"
    raise TypeError(msg)


@dataclass
class Request:
    """One logical HTTP call.

    Attributes:
        method: The HTTP method (e.g., "GET", "POST").
        url: The target URL.
        headers: The request headers.
        body: The body supplier, or ``None`` for a request without payload.
        context: The cancellation context of the call.
        params: Optional query parameters.
    """

    method: str
    url: httpx.URL
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: BodySupplier | None = None
    context: RequestContext = field(default_factory=background)
    params: Any = None

    def open_body(self) -> BinaryIO | None:
        """Materialize the payload for one attempt.

        Returns:
            A fresh readable stream, or ``None`` without body supplier.

        Raises:
            Exception: Whatever the body supplier raises.
        """
        if self.body is None:
            return None
        return self.body()

    def build(self, stream: BinaryIO | None = None) -> httpx.Request:
        """Build the physical request sent by one attempt.

        Args:
            stream: The payload stream returned by ``open_body``. It is
                read to the end and closed.

        Returns:
            The ``httpx.Request`` to hand to the transport.
        """
        content = None
        if stream is not None:
            with stream:
                content = stream.read()
        return httpx.Request(
            self.method,
            self.url,
            headers=self.headers,
            params=self.params,
            content=content,
        )


def new_request(
    method: str,
    url: str | httpx.URL,
    body: Any = None,
    *,
    headers: Any = None,
    params: Any = None,
    context: RequestContext | None = None,
) -> Request:
    r"""Create a ``Request``.

    Args:
        method: The HTTP method.
        url: The target URL.
        body: The payload. ``bytes`` and ``str`` are replayed as-is, a
            callable is used as the body supplier, and a readable stream
            is read once and replayed.
        headers: Optional request headers.
        params: Optional query parameters.
        context: Optional cancellation context. Defaults to a context that
            is never cancelled.

    Returns:
        The new request.

    Raises:
        TypeError: If the body type is not supported.
        httpx.InvalidURL: If the URL cannot be parsed.

    Example:
        ```pycon
        >>> from resilnet.request import new_request
        >>> request = new_request("post", "https://api.example.com/items", b"payload")
        >>> request.method
        'POST'
        >>> request.open_body().read()
        b'payload'
        >>> request.open_body().read()
        b'payload'

        ```
    """
    return Request(
        method=method.upper(),
        url=httpx.URL(url),
        headers=httpx.Headers(headers),
        body=_to_supplier(body),
        context=context if context is not None else background(),
        params=params,
    )
