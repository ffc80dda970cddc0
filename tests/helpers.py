r"""Shared test helpers for building responses and fake servers."""

from __future__ import annotations

__all__ = ["TEST_URL", "CountingHandler", "create_response"]

import threading

import httpx

TEST_URL = "https://api.example.com/data"


def create_response(status_code: int = 200, content: bytes = b"") -> httpx.Response:
    """Create a real httpx.Response bound to a GET request on TEST_URL."""
    return httpx.Response(
        status_code, content=content, request=httpx.Request("GET", TEST_URL)
    )


class CountingHandler:
    """MockTransport handler counting the requests it serves.

    The first ``failures`` requests get ``failure_status``; later ones get
    200 with the request number as body.

    Args:
        failures: Number of requests answered with ``failure_status``.
            ``None`` means every request fails.
        failure_status: Status code of failed requests.
    """

    def __init__(self, failures: int | None = None, failure_status: int = 500) -> None:
        self.failures = failures
        self.failure_status = failure_status
        self.count = 0
        self.bodies: list[bytes] = []
        self._lock = threading.Lock()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.count += 1
            count = self.count
        self.bodies.append(request.read())
        if self.failures is None or count <= self.failures:
            return httpx.Response(self.failure_status, content=b"server error")
        return httpx.Response(200, content=str(count).encode())
