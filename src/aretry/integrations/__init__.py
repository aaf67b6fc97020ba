r"""Integrations of the retry engine with third-party libraries."""

from __future__ import annotations

__all__ = ["AsyncRetryTransport", "RetryTransport", "RetryableStatusError"]

from aretry.integrations.transport import (
    AsyncRetryTransport,
    RetryTransport,
    RetryableStatusError,
)
