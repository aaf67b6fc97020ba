r"""Utility functions shared by the backoff strategies and retry drivers.

This package provides saturating duration arithmetic and opt-in
structured logging helpers.
"""

from __future__ import annotations

__all__ = [
    "MAX_DURATION",
    "StructuredFormatter",
    "clear_correlation_id",
    "get_correlation_id",
    "log_structured",
    "saturating_add",
    "saturating_mul",
    "set_correlation_id",
    "to_seconds",
]

from aretry.utils.duration import MAX_DURATION, saturating_add, saturating_mul, to_seconds
from aretry.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    get_correlation_id,
    log_structured,
    set_correlation_id,
)
