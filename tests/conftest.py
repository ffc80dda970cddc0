from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import httpx
import pytest

from resilnet.context import RequestContext

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_wait() -> Generator[Mock, None, None]:
    """Patch the backoff wait to make tests run faster."""
    with patch.object(RequestContext, "wait", return_value=False) as mock:
        yield mock


@pytest.fixture
def mock_client() -> httpx.Client:
    """Create a mock httpx.Client for testing."""
    return Mock(spec=httpx.Client)


@pytest.fixture
def mock_logger() -> logging.Logger:
    """Create a mock logger for testing."""
    return Mock(spec=logging.Logger)


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing callbacks."""
    return Mock()
