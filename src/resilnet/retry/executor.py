r"""Execution loop driving the attempts of one request.

The loop materializes a fresh body, performs one send through the
transport, asks the retry policy about the outcome, drains the discarded
response and waits for the backoff delay, until it can hand back a
response or raise a terminal error.
"""

from __future__ import annotations

__all__ = ["close_response", "drain_response", "send_with_retry"]

import logging
from typing import TYPE_CHECKING

import httpx

from resilnet.core.config import DRAIN_BODY_LIMIT, ClientConfig
from resilnet.exceptions import DeadlineExceededError, RetriesExhaustedError
from resilnet.retry.manager import CallbackManager
from resilnet.utils.structured_logging import log_safely

if TYPE_CHECKING:
    from resilnet.request import Request
    from resilnet.retry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


def drain_response(
    response: httpx.Response, log: logging.Logger = logger, limit: int = DRAIN_BODY_LIMIT
) -> None:
    """Read at most ``limit`` bytes of a discarded response, then close it.

    Errors are logged and not raised: the caller never sees this response.

    Args:
        response: The streamed response to discard.
        log: The logger receiving read and close errors.
        limit: Maximum number of bytes to read.
    """
    read = 0
    try:
        if not response.is_stream_consumed:
            for chunk in response.iter_raw():
                read += len(chunk)
                if read >= limit:
                    break
    except (httpx.HTTPError, httpx.StreamError) as exc:
        log_safely(log, logging.WARNING, "reading response body: %s", exc)
    close_response(response, log)


def close_response(response: httpx.Response, log: logging.Logger = logger) -> None:
    """Close a response, logging instead of raising on failure."""
    try:
        response.close()
    except httpx.HTTPError as exc:
        log_safely(log, logging.WARNING, "closing response body: %s", exc)


def send_with_retry(
    transport: httpx.Client,
    request: Request,
    policy: RetryPolicy,
    *,
    log: logging.Logger = logger,
    config: ClientConfig | None = None,
    stream: bool = False,
) -> httpx.Response:
    r"""Send a request, retrying transient failures.

    Each attempt materializes a fresh body and performs one send. A
    response with status 0 or 5xx (except 501) and any transport error
    other than a redirect limit, an untrusted certificate or an unsupported
    scheme are retried after a backoff delay, up to ``policy.max_retries``
    extra attempts. Cancelling the request context stops the loop at the
    next retry decision or during the backoff wait.

    Args:
        transport: The httpx client performing single-shot sends.
        request: The logical request.
        policy: The retry policy.
        log: The logger receiving warnings about failed attempts and
            retries.
        config: Optional configuration holding lifecycle callbacks.
        stream: If ``False``, the body of the returned response is read
            and the connection released before returning.

    Returns:
        The first response that is not retryable. Its status code may be
        any non-transient code, including 4xx and 501.

    Raises:
        RequestCancelledError: If the request context was cancelled.
        DeadlineExceededError: If the request context deadline passed.
        RetriesExhaustedError: If the attempts were exhausted.
        httpx.HTTPError: If the transport raised a permanent error.
        Exception: Whatever the body supplier raises.

    Example:
        ```pycon
        >>> import httpx
        >>> from resilnet.request import new_request
        >>> from resilnet.retry import RetryPolicy, send_with_retry
        >>> transport = httpx.MockTransport(lambda request: httpx.Response(200, text="ok"))
        >>> with httpx.Client(transport=transport) as client:
        ...     response = send_with_retry(
        ...         client, new_request("GET", "https://api.example.com"), RetryPolicy()
        ...     )
        ...
        >>> response.status_code, response.text
        (200, 'ok')

        ```
    """
    url = str(request.url)
    callbacks = CallbackManager(config or ClientConfig(), url=url, method=request.method)
    response: httpx.Response | None = None
    error: Exception | None = None
    attempt = 0

    while True:
        body = request.open_body()
        callbacks.on_request(attempt)

        response, error = None, None
        try:
            response = transport.send(request.build(body), stream=True)
        except httpx.HTTPError as exc:
            error = exc
            log_safely(
                log,
                logging.WARNING,
                "%s request failed: %s",
                url,
                exc,
                url=url,
                method=request.method,
                attempt=attempt + 1,
            )
        status_code = response.status_code if response is not None else None

        retry, override = policy.is_retryable(response, error, request.context)
        if not retry:
            if override is not None:
                if response is not None:
                    close_response(response, log)
                callbacks.on_failure(attempt, override, status_code)
                raise override from error
            if error is not None:
                callbacks.on_failure(attempt, error, status_code)
                raise error
            if not stream:
                _read_response(response)
            callbacks.on_success(attempt, response)
            return response

        remain = policy.max_retries - attempt
        if remain <= 0:
            break

        if error is None and response is not None:
            drain_response(response, log)

        wait = policy.backoff(attempt)
        log_safely(
            log,
            logging.WARNING,
            "%s (status: %s) retrying in %.2fs (%d left)",
            url,
            status_code or 0,
            wait,
            remain,
            url=url,
            method=request.method,
            attempt=attempt + 1,
            status_code=status_code,
            remaining=remain,
            wait_time=wait,
        )
        callbacks.on_retry(attempt, remain, wait, error, status_code)

        if request.context.wait(wait):
            context_error = request.context.err() or DeadlineExceededError()
            callbacks.on_failure(attempt, context_error, status_code)
            raise context_error
        attempt += 1

    if response is not None:
        close_response(response, log)
    exhausted = RetriesExhaustedError(
        method=request.method,
        url=url,
        attempts=policy.max_retries + 1,
        status_code=status_code,
        cause=error,
    )
    log_safely(log, logging.DEBUG, "%s", exhausted)
    callbacks.on_failure(attempt, exhausted, status_code)
    raise exhausted from error


def _read_response(response: httpx.Response) -> None:
    try:
        response.read()
    finally:
        response.close()
