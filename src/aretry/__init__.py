r"""aretry - Retry with backoff for synchronous and asynchronous operations.

This package runs a fallible operation in a loop until it succeeds, a
failure is judged non-retryable, or the backoff policy runs out of delays.
The last error is re-raised unchanged; nothing is wrapped.

Key Features:
    - Constant, exponential and Fibonacci backoff policies, each with
      optional seeded jitter; any iterable of delays works as well
    - Blocking driver (``retry``) and awaitable driver (``retry_async``)
      sharing the same evaluation rules
    - Retryable predicate (``when``) and notification hook (``notify``)
    - Pluggable sleepers, with ``time.sleep`` and ``asyncio.sleep`` built in
    - Context-carrying drivers for operations that need exclusive access to
      external state on every attempt
    - Retrying ``httpx`` transports

Example:
    ```pycon
    >>> from aretry import ExponentialBuilder, retry
    >>> def fetch():
    ...     return "content"
    ...
    >>> retry(fetch, ExponentialBuilder()).call()
    'content'
    >>> retry(fetch, ExponentialBuilder().with_max_times(5)).when(
    ...     lambda e: isinstance(e, ConnectionError)
    ... ).notify(lambda e, d: print(f"retrying in {d}s")).call()
    'content'

    ```
"""

from __future__ import annotations

__all__ = [
    "AsyncRetry",
    "AsyncRetryWithContext",
    "Backoff",
    "BackoffBuilder",
    "BlockingRetry",
    "BlockingRetryWithContext",
    "ConstantBuilder",
    "ExponentialBuilder",
    "FibonacciBuilder",
    "MissingSleeperError",
    "RetryStateError",
    "__version__",
    "retry",
    "retry_async",
    "retry_with_context",
    "retry_with_context_async",
    "retryable",
]

from importlib.metadata import PackageNotFoundError, version

from aretry.backoff import (
    Backoff,
    BackoffBuilder,
    ConstantBuilder,
    ExponentialBuilder,
    FibonacciBuilder,
)
from aretry.exceptions import MissingSleeperError, RetryStateError
from aretry.retry import (
    AsyncRetry,
    AsyncRetryWithContext,
    BlockingRetry,
    BlockingRetryWithContext,
    retry,
    retry_async,
    retry_with_context,
    retry_with_context_async,
    retryable,
)

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
