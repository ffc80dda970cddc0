r"""Unit tests for ResilientClient."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import httpx
import pytest

from resilnet import ResilientClient
from resilnet.context import RequestContext
from resilnet.core.config import DEFAULT_TIMEOUT, ClientConfig
from resilnet.exceptions import RetriesExhaustedError
from resilnet.request import new_request
from tests.helpers import TEST_URL, create_response

if TYPE_CHECKING:
    from collections.abc import Iterator

#####################################
#     Tests for ResilientClient     #
#####################################


def test_client_default_config(mock_client: httpx.Client) -> None:
    client = ResilientClient(client=mock_client)
    assert client.config == ClientConfig()
    assert client.logger is logging.getLogger("resilnet")


def test_client_creates_httpx_client_with_timeout() -> None:
    with patch("httpx.Client") as mock_client_class:
        ResilientClient()
    mock_client_class.assert_called_once_with(timeout=DEFAULT_TIMEOUT)


def test_client_custom_timeout() -> None:
    with patch("httpx.Client") as mock_client_class:
        ResilientClient(timeout=5.0)
    mock_client_class.assert_called_once_with(timeout=5.0)


def test_client_invalid_timeout() -> None:
    with pytest.raises(ValueError, match=r"timeout must be > 0, got 0"):
        ResilientClient(timeout=0)


def test_client_closes_owned_client() -> None:
    with patch("httpx.Client") as mock_client_class:
        with ResilientClient():
            pass
        mock_client_class.return_value.close.assert_called_once_with()


def test_client_leaves_external_client_open(mock_client: httpx.Client) -> None:
    with ResilientClient(client=mock_client):
        pass
    mock_client.close.assert_not_called()


def test_client_closes_on_exception() -> None:
    with patch("httpx.Client") as mock_client_class:
        with pytest.raises(ValueError, match=r"test error"), ResilientClient():
            msg = "test error"
            raise ValueError(msg)
        mock_client_class.return_value.close.assert_called_once_with()


def test_client_get(mock_client: httpx.Client, mock_wait: Mock) -> None:
    mock_client.send.return_value = create_response(200, b"data")

    with ResilientClient(client=mock_client) as client:
        response = client.get(TEST_URL, params={"page": 1})

    assert response.content == b"data"
    sent = mock_client.send.call_args.args[0]
    assert sent.method == "GET"
    assert sent.url == httpx.URL(f"{TEST_URL}?page=1")
    mock_wait.assert_not_called()


def test_client_post(mock_client: httpx.Client, mock_wait: Mock) -> None:
    mock_client.send.return_value = create_response(201)

    with ResilientClient(client=mock_client) as client:
        response = client.post(TEST_URL, "application/json", b'{"key": "value"}')

    assert response.status_code == 201
    sent = mock_client.send.call_args.args[0]
    assert sent.method == "POST"
    assert sent.headers["Content-Type"] == "application/json"
    assert sent.content == b'{"key": "value"}'
    mock_wait.assert_not_called()


def test_client_post_keeps_other_headers(mock_client: httpx.Client, mock_wait: Mock) -> None:
    mock_client.send.return_value = create_response(200)

    with ResilientClient(client=mock_client) as client:
        client.post(
            TEST_URL,
            "text/plain",
            "hello",
            headers={"Authorization": "Bearer token", "Content-Type": "text/html"},
        )

    sent = mock_client.send.call_args.args[0]
    assert sent.headers["Authorization"] == "Bearer token"
    assert sent.headers["Content-Type"] == "text/plain"
    mock_wait.assert_not_called()


def test_client_post_retries_with_same_body(mock_client: httpx.Client, mock_wait: Mock) -> None:
    mock_client.send.side_effect = [create_response(503), create_response(200)]

    with ResilientClient(client=mock_client) as client:
        client.post(TEST_URL, "text/plain", b"payload")

    assert [c.args[0].content for c in mock_client.send.call_args_list] == [b"payload"] * 2
    mock_wait.assert_called_once_with(2.0)


def test_client_request_uses_config(mock_client: httpx.Client, mock_wait: Mock) -> None:
    mock_client.send.return_value = create_response(500)

    with (
        ResilientClient(
            client=mock_client, config=ClientConfig(max_retries=2, wait_min=0.1, wait_max=0.15)
        ) as client,
        pytest.raises(RetriesExhaustedError, match=r"DELETE .* giving up after 3 attempts"),
    ):
        client.request("DELETE", TEST_URL)

    assert mock_client.send.call_count == 3
    assert [c.args[0] for c in mock_wait.call_args_list] == [0.1, 0.15]


def test_client_request_with_context(mock_client: httpx.Client, mock_wait: Mock) -> None:
    context = RequestContext()
    with (
        ResilientClient(client=mock_client) as client,
        patch("resilnet.client.send_with_retry", return_value=create_response(200)) as send,
    ):
        client.request("GET", TEST_URL, context=context)
    assert send.call_args.args[1].context is context
    mock_wait.assert_not_called()


def test_client_send_prepared_request(mock_client: httpx.Client, mock_wait: Mock) -> None:
    mock_client.send.return_value = create_response(204)

    with ResilientClient(client=mock_client) as client:
        response = client.send(new_request("HEAD", TEST_URL))

    assert response.status_code == 204
    mock_wait.assert_not_called()


def test_client_send_stream(mock_client: httpx.Client, mock_wait: Mock) -> None:
    def generate() -> Iterator[bytes]:
        yield b"chunk"

    mock_client.send.return_value = httpx.Response(
        200, content=generate(), request=httpx.Request("GET", TEST_URL)
    )

    with ResilientClient(client=mock_client) as client:
        response = client.get(TEST_URL, stream=True)
        assert not response.is_stream_consumed
        assert response.read() == b"chunk"
    mock_wait.assert_not_called()


def test_client_logs_to_injected_logger(
    mock_client: httpx.Client, mock_wait: Mock, mock_logger: logging.Logger
) -> None:
    mock_client.send.side_effect = [httpx.ConnectError("refused"), create_response(200)]

    with ResilientClient(client=mock_client, logger=mock_logger) as client:
        client.get(TEST_URL)

    assert mock_logger.log.call_count == 2
    mock_wait.assert_called_once()


def test_client_repr(mock_client: httpx.Client) -> None:
    assert repr(ResilientClient(client=mock_client)).startswith(
        "ResilientClient(config=ClientConfig("
    )
