from __future__ import annotations

import json
import logging
from io import StringIO
from typing import TYPE_CHECKING
from unittest.mock import Mock

import pytest

from resilnet.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    get_correlation_id,
    log_safely,
    set_correlation_id,
)

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def stream_logger() -> Generator[tuple[logging.Logger, StringIO], None, None]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("resilnet.tests.structured")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    try:
        yield logger, stream
    finally:
        logger.removeHandler(handler)
        clear_correlation_id()


##############################################
#     Tests for correlation ID management    #
##############################################


def test_correlation_id_lifecycle() -> None:
    clear_correlation_id()
    assert get_correlation_id() is None
    set_correlation_id("req-1")
    assert get_correlation_id() == "req-1"
    set_correlation_id("req-2")
    assert get_correlation_id() == "req-2"
    clear_correlation_id()
    assert get_correlation_id() is None


##########################################
#     Tests for StructuredFormatter      #
##########################################


def test_structured_formatter_basic(stream_logger: tuple[logging.Logger, StringIO]) -> None:
    logger, stream = stream_logger
    logger.warning("retrying %s", "https://api.example.com")

    data = json.loads(stream.getvalue())
    assert data["message"] == "retrying https://api.example.com"
    assert data["level"] == "WARNING"
    assert data["logger"] == "resilnet.tests.structured"
    assert data["timestamp"].endswith("Z")
    assert "correlation_id" not in data
    assert "args" not in data


def test_structured_formatter_extra_fields(
    stream_logger: tuple[logging.Logger, StringIO],
) -> None:
    logger, stream = stream_logger
    logger.info("retry", extra={"attempt": 2, "wait_time": 4.0, "status_code": None})

    data = json.loads(stream.getvalue())
    assert data["attempt"] == 2
    assert data["wait_time"] == 4.0
    assert data["status_code"] is None


def test_structured_formatter_correlation_id(
    stream_logger: tuple[logging.Logger, StringIO],
) -> None:
    logger, stream = stream_logger
    set_correlation_id("trace-42")
    logger.info("hello")
    assert json.loads(stream.getvalue())["correlation_id"] == "trace-42"


def test_structured_formatter_exception(stream_logger: tuple[logging.Logger, StringIO]) -> None:
    logger, stream = stream_logger
    try:
        msg = "boom"
        raise RuntimeError(msg)
    except RuntimeError:
        logger.exception("failed")
    data = json.loads(stream.getvalue())
    assert "RuntimeError: boom" in data["exception"]


def test_structured_formatter_non_serializable_extra(
    stream_logger: tuple[logging.Logger, StringIO],
) -> None:
    logger, stream = stream_logger
    logger.info("error", extra={"error": ValueError("bad")})
    assert json.loads(stream.getvalue())["error"] == "bad"


#################################
#     Tests for log_safely      #
#################################


def test_log_safely(stream_logger: tuple[logging.Logger, StringIO]) -> None:
    logger, stream = stream_logger
    log_safely(logger, logging.WARNING, "%s left", 3, remaining=3)
    data = json.loads(stream.getvalue())
    assert data["message"] == "3 left"
    assert data["remaining"] == 3


def test_log_safely_without_extra() -> None:
    logger = Mock(spec=logging.Logger)
    log_safely(logger, logging.DEBUG, "message")
    logger.log.assert_called_once_with(logging.DEBUG, "message", extra=None)


def test_log_safely_swallows_logger_errors() -> None:
    logger = Mock(spec=logging.Logger)
    logger.log.side_effect = RuntimeError("sink closed")
    log_safely(logger, logging.WARNING, "message", url="https://api.example.com")
    logger.log.assert_called_once()
