r"""Configuration and validation shared by the client and the retry
engine."""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "DEFAULT_WAIT_MAX",
    "DEFAULT_WAIT_MIN",
    "DRAIN_BODY_LIMIT",
    "ClientConfig",
    "validate_retry_params",
    "validate_timeout",
]

from resilnet.core.config import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    DEFAULT_WAIT_MAX,
    DEFAULT_WAIT_MIN,
    DRAIN_BODY_LIMIT,
    ClientConfig,
)
from resilnet.core.validation import validate_retry_params, validate_timeout
