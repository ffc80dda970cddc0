r"""Structured logging utilities for machine-readable log output.

The retry loop attaches fields such as ``url``, ``attempt`` or
``wait_time`` to its log records. ``StructuredFormatter`` renders them,
together with an optional correlation ID, as one JSON object per line.

Example:
    Enable structured logging for resilnet:

    ```python
    import logging
    from resilnet.utils.structured_logging import StructuredFormatter, set_correlation_id

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.getLogger("resilnet").addHandler(handler)

    set_correlation_id("request-123")
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "get_correlation_id",
    "log_safely",
    "set_correlation_id",
]

import contextvars
import json
import logging
import time
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "resilnet_correlation_id", default=None
)

# Attributes every LogRecord carries; anything else came from ``extra``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def get_correlation_id() -> str | None:
    """Return the correlation ID of the current context, or ``None``."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID of the current context.

    The ID is stored in a context variable, so each thread or task sees
    its own value.

    Args:
        correlation_id: The ID to attach to log records (e.g., a trace ID).
    """
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    """Remove the correlation ID of the current context."""
    _correlation_id.set(None)


class StructuredFormatter(logging.Formatter):
    """Format log records as JSON objects.

    Each record becomes an object with ``timestamp``, ``level``,
    ``logger``, ``message``, ``module``, ``function`` and ``line`` keys,
    plus ``correlation_id`` when one is set, ``exception`` when the record
    carries exception info, and every field passed through ``extra``.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from resilnet.utils.structured_logging import StructuredFormatter
        >>> record = logging.LogRecord("resilnet", logging.WARNING, __file__, 1, "retrying", None, None)
        >>> record.attempt = 2
        >>> data = json.loads(StructuredFormatter().format(record))
        >>> data["message"], data["level"], data["attempt"]
        ('retrying', 'WARNING', 2)

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        correlation_id = get_correlation_id()
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                log_data[key] = value
        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002
        """Format the record time as ISO 8601 in UTC with millisecond
        precision."""
        timestamp = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
        return f"{timestamp}.{int(record.msecs):03d}Z"


def log_safely(
    logger: logging.Logger, level: int, message: str, *args: Any, **extra: Any
) -> None:
    """Log a message without ever raising.

    A misbehaving logger must not change the outcome of a request, so
    errors raised by the logger are dropped.

    Args:
        logger: The logger to write to.
        level: The log level (e.g., ``logging.WARNING``).
        message: The %-style message.
        *args: The message arguments.
        **extra: Structured fields attached to the record.
    """
    try:
        logger.log(level, message, *args, extra=extra or None)
    except Exception:  # noqa: BLE001, S110
        pass
