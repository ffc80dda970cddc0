r"""Client composing a transport, a retry configuration and a logger.

The ResilientClient builds requests and hands them to the execution loop;
no retry logic lives here.
"""

from __future__ import annotations

__all__ = ["ResilientClient"]

import logging
from typing import TYPE_CHECKING, Any

import httpx

from resilnet.core.config import DEFAULT_TIMEOUT, ClientConfig
from resilnet.core.validation import validate_timeout
from resilnet.request import new_request
from resilnet.retry.executor import send_with_retry

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from resilnet.context import RequestContext
    from resilnet.request import Request


class ResilientClient:
    r"""HTTP client with automatic retry of transient failures.

    The client owns three collaborators passed at construction: an
    ``httpx.Client`` performing single-shot sends, a ``ClientConfig``
    describing the retry budget and backoff bounds, and a logger receiving
    warnings about failed attempts.

    If no ``httpx.Client`` is given, one is created with ``timeout`` and
    closed by ``close`` (or when leaving the ``with`` block). A client
    passed in is left open: its lifecycle belongs to the caller.

    Args:
        config: Optional ClientConfig instance for retry configuration.
            If ``None``, a default ClientConfig is used.
        client: Optional httpx.Client instance to use for requests.
        timeout: Overall timeout of one physical send, in seconds. Ignored
            if ``client`` is given.
        logger: Optional logger. Defaults to the ``resilnet`` logger.

    Example:
        ```pycon
        >>> from resilnet import ResilientClient
        >>> from resilnet.core.config import ClientConfig
        >>> with ResilientClient(config=ClientConfig(max_retries=5)) as client:  # doctest: +SKIP
        ...     response = client.get("https://api.example.com/data")
        ...     response = client.post(
        ...         "https://api.example.com/items", "application/json", b'{"key": "value"}'
        ...     )
        ...

        ```
    """

    def __init__(
        self,
        *,
        config: ClientConfig | None = None,
        client: httpx.Client | None = None,
        timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
        logger: logging.Logger | None = None,
    ) -> None:
        validate_timeout(timeout)
        self._config: ClientConfig = config or ClientConfig()
        self._policy = self._config.to_policy()
        self._owns_client = client is None
        self._client: httpx.Client = client or httpx.Client(timeout=timeout)
        self._logger: logging.Logger = logger or logging.getLogger("resilnet")

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(config={self._config!r})"

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def config(self) -> ClientConfig:
        r"""The retry configuration of the client."""
        return self._config

    @property
    def logger(self) -> logging.Logger:
        r"""The logger receiving retry warnings."""
        return self._logger

    def close(self) -> None:
        r"""Close the underlying httpx client if this client created
        it."""
        if self._owns_client:
            self._client.close()

    def send(self, request: Request, *, stream: bool = False) -> httpx.Response:
        r"""Send a prepared request with automatic retry logic.

        Args:
            request: The request to send.
            stream: If ``True``, the response body is not read; the caller
                must close the response.

        Returns:
            The first non-retryable response.

        Raises:
            RetriesExhaustedError: If every attempt failed transiently.
            RequestCancelledError: If the request context ended.
        """
        return send_with_retry(
            self._client,
            request,
            self._policy,
            log=self._logger,
            config=self._config,
            stream=stream,
        )

    def request(
        self,
        method: str,
        url: str | httpx.URL,
        *,
        body: Any = None,
        headers: Any = None,
        params: Any = None,
        context: RequestContext | None = None,
        stream: bool = False,
    ) -> httpx.Response:
        r"""Build and send a request with automatic retry logic.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, ...).
            url: The URL to send the request to.
            body: Optional payload (bytes, str, readable stream or body
                supplier).
            headers: Optional request headers.
            params: Optional query parameters.
            context: Optional cancellation context.
            stream: If ``True``, the response body is not read.

        Returns:
            The first non-retryable response.
        """
        request = new_request(
            method, url, body, headers=headers, params=params, context=context
        )
        return self.send(request, stream=stream)

    def get(self, url: str | httpx.URL, **kwargs: Any) -> httpx.Response:
        r"""Send an HTTP GET request with automatic retry logic.

        Args:
            url: The URL to send the GET request to.
            **kwargs: Additional keyword arguments (see request() method).

        Returns:
            The first non-retryable response.
        """
        return self.request("GET", url, **kwargs)

    def post(
        self, url: str | httpx.URL, content_type: str, body: Any, **kwargs: Any
    ) -> httpx.Response:
        r"""Send an HTTP POST request with automatic retry logic.

        Args:
            url: The URL to send the POST request to.
            content_type: The value of the ``Content-Type`` header.
            body: The payload (bytes, str, readable stream or body
                supplier).
            **kwargs: Additional keyword arguments (see request() method).

        Returns:
            The first non-retryable response.
        """
        headers = httpx.Headers(kwargs.pop("headers", None))
        headers["Content-Type"] = content_type
        return self.request("POST", url, body=body, headers=headers, **kwargs)
