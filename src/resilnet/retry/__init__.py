r"""Retry engine: decision policy, backoff schedule and execution loop."""

from __future__ import annotations

__all__ = [
    "CallbackManager",
    "RetryPolicy",
    "compute_backoff",
    "drain_response",
    "is_retryable_status",
    "send_with_retry",
]

from resilnet.retry.executor import drain_response, send_with_retry
from resilnet.retry.manager import CallbackManager
from resilnet.retry.policy import RetryPolicy, compute_backoff, is_retryable_status
