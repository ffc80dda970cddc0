r"""Utility helpers shared across resilnet."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "get_correlation_id",
    "log_safely",
    "set_correlation_id",
]

from resilnet.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    get_correlation_id,
    log_safely,
    set_correlation_id,
)
