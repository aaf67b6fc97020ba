r"""Retry drivers.

This package provides the drivers that run an operation, evaluate its
failures, consult a backoff sequence and sleep between attempts.

Public API:
    - retry / BlockingRetry: synchronous driver
    - retry_async / AsyncRetry: asynchronous, awaitable driver
    - retry_with_context / BlockingRetryWithContext: synchronous driver
      lending a context to each attempt
    - retry_with_context_async / AsyncRetryWithContext: asynchronous driver
      lending a context to each attempt
    - retryable: decorator building a driver for every call
    - CallbackManager: evaluation of the predicate and notify hook
    - RetryState: phases of a retry loop
"""

from __future__ import annotations

__all__ = [
    "AsyncRetry",
    "AsyncRetryWithContext",
    "BlockingRetry",
    "BlockingRetryWithContext",
    "CallbackManager",
    "RetryState",
    "retry",
    "retry_async",
    "retry_with_context",
    "retry_with_context_async",
    "retryable",
]

from aretry.retry.blocking import BlockingRetry, retry
from aretry.retry.context import (
    AsyncRetryWithContext,
    BlockingRetryWithContext,
    retry_with_context,
    retry_with_context_async,
)
from aretry.retry.core import RetryState
from aretry.retry.decorator import retryable
from aretry.retry.future import AsyncRetry, retry_async
from aretry.retry.manager import CallbackManager
