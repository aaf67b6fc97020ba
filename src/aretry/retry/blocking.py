r"""Synchronous retry driver.

This module provides ``BlockingRetry``, which runs a blocking operation
in a loop on the calling thread, sleeping with a blocking sleeper between
attempts.
"""

from __future__ import annotations

__all__ = ["BlockingRetry", "retry"]

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from aretry.retry.core import RetryCore, RetryState
from aretry.sleep import as_blocking_sleep, default_blocking_sleeper

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


class BlockingRetry(RetryCore, Generic[T]):
    """Retries a blocking operation until it succeeds or gives up.

    Each iteration invokes the operation. If it returns, its value is
    returned. If it raises an ``Exception``, the retryable predicate decides
    whether to continue; if so the backoff sequence is asked for a delay, the
    notify hook is called with the error and the delay, and the sleeper
    blocks for that delay before the next attempt. The loop ends with the
    last error, re-raised unchanged, when the predicate rejects it or the
    backoff is exhausted.

    Args:
        fn: The operation, called with no arguments.
        backoff: A ``BackoffBuilder``, a ``Backoff`` sequence, or an
            iterable of delays in seconds.

    Example:
        ```pycon
        >>> from aretry import ConstantBuilder, retry
        >>> calls = []
        >>> def flaky():
        ...     calls.append(1)
        ...     if len(calls) < 3:
        ...         raise ConnectionError("boom")
        ...     return "ok"
        ...
        >>> retry(flaky, ConstantBuilder(delay=0.0)).call()
        'ok'
        >>> len(calls)
        3

        ```
    """

    def __init__(self, fn: Callable[[], T], backoff: Any) -> None:
        super().__init__(backoff)
        self._fn = fn
        self._sleep = as_blocking_sleep(default_blocking_sleeper())

    def when(self, retryable: Callable[[Exception], bool]) -> BlockingRetry[T]:
        return super().when(retryable)

    def notify(self, notify: Callable[[Exception, float], None]) -> BlockingRetry[T]:
        return super().notify(notify)

    def sleeper(self, sleeper: Any) -> BlockingRetry[T]:
        """Set the blocking sleeper used between attempts.

        Args:
            sleeper: A callable ``(seconds) -> None`` or an object with such
                a ``sleep`` method. Defaults to ``time.sleep`` when the
                ``std`` sleeper is enabled.

        Returns:
            The driver, for chaining.
        """
        self._sleep = as_blocking_sleep(sleeper)
        return self

    def call(self) -> T:
        """Run the retry loop.

        Returns:
            The value returned by the first successful attempt.

        Raises:
            Exception: The error of the last attempt, when it is not
                retryable or the backoff is exhausted.
            MissingSleeperError: If a retry is needed but no sleeper is
                available.
            RetryStateError: If the driver was already run.
        """
        self._start()
        try:
            while True:
                self.state = RetryState.ATTEMPTING
                self.attempts += 1
                try:
                    result = self._fn()
                except Exception as exc:
                    delay = self._next_delay(exc)
                    if delay is None:
                        raise
                else:
                    return self._resolve(result)

                self.state = RetryState.SUSPENDED
                self._sleep(delay)
                self.state = RetryState.IDLE
        finally:
            self.state = RetryState.DONE


def retry(fn: Callable[[], T], backoff: Any) -> BlockingRetry[T]:
    """Create a synchronous retry driver for ``fn``.

    Args:
        fn: The blocking operation to retry.
        backoff: The backoff policy, e.g. ``ExponentialBuilder()``.

    Returns:
        The driver; configure it with ``when``/``notify``/``sleeper`` and run
        it with ``call``.
    """
    return BlockingRetry(fn, backoff)
