r"""Asynchronous retry driver.

This module provides ``AsyncRetry``, an awaitable driver that retries an
operation returning awaitables and waits between attempts with an async
sleeper, so the event loop keeps running other tasks meanwhile.
"""

from __future__ import annotations

__all__ = ["AsyncRetry", "retry_async"]

import inspect
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from aretry.retry.core import RetryCore, RetryState
from aretry.sleep import as_sleep, default_sleeper

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Generator
    from types import TracebackType

T = TypeVar("T")


class AsyncRetry(RetryCore, Coroutine, Generic[T]):
    """Retries an asynchronous operation until it succeeds or gives up.

    The driver is a coroutine: it can be awaited directly, scheduled with
    ``asyncio.create_task`` or run with ``asyncio.run``. It is an explicit
    state machine: the current phase lives in ``state`` and the single
    awaitable it is suspended on (the in-flight attempt or the pending
    delay) is held in one slot. Each resumption continues from the recorded
    phase, so a driver suspended by the event loop never restarts or
    repeats work. Cancelling the task running the driver cancels whichever
    awaitable is in flight.

    The evaluation rules are those of ``BlockingRetry``; the predicate and
    notify hook are plain synchronous callables.

    Args:
        fn: The operation, called with no arguments and returning an
            awaitable (typically a coroutine function).
        backoff: A ``BackoffBuilder``, a ``Backoff`` sequence, or an
            iterable of delays in seconds.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aretry import ExponentialBuilder, retry_async
        >>> async def fetch():
        ...     return 42
        ...
        >>> asyncio.run(retry_async(fetch, ExponentialBuilder()))
        42

        ```
    """

    def __init__(self, fn: Callable[[], Awaitable[T]], backoff: Any) -> None:
        super().__init__(backoff)
        self._fn = fn
        self._sleep = as_sleep(default_sleeper())
        self._pending: Awaitable[Any] | None = None
        self._coro: Coroutine[Any, Any, T] | None = None

    def when(self, retryable: Callable[[Exception], bool]) -> AsyncRetry[T]:
        return super().when(retryable)

    def notify(self, notify: Callable[[Exception, float], None]) -> AsyncRetry[T]:
        return super().notify(notify)

    def sleeper(self, sleeper: Any) -> AsyncRetry[T]:
        """Set the async sleeper used between attempts.

        Args:
            sleeper: A callable ``(seconds) -> Awaitable[None]`` or an
                object with such a ``sleep`` method. Defaults to
                ``asyncio.sleep`` when the ``asyncio`` sleeper is enabled.

        Returns:
            The driver, for chaining.
        """
        self._sleep = as_sleep(sleeper)
        return self

    def __await__(self) -> Generator[Any, None, T]:
        return self._coroutine().__await__()

    def send(self, value: Any) -> Any:
        return self._coroutine().send(value)

    def throw(
        self,
        typ: Any,
        val: Any = None,
        tb: TracebackType | None = None,
    ) -> Any:
        coro = self._coroutine()
        if val is None and tb is None:
            return coro.throw(typ)
        return coro.throw(typ, val, tb)

    def close(self) -> None:
        if self._coro is not None:
            self._coro.close()

    def _coroutine(self) -> Coroutine[Any, Any, T]:
        # A finished driver gets a fresh coroutine, which then fails with
        # RetryStateError instead of "cannot reuse already awaited coroutine"
        if self._coro is None or self.state is RetryState.DONE:
            self._coro = self._drive()
        return self._coro

    async def _drive(self) -> T:
        self._start()
        try:
            while True:
                if self.state is RetryState.IDLE:
                    self.attempts += 1
                    self.state = RetryState.ATTEMPTING
                    self._pending = self._invoke()
                elif self.state is RetryState.ATTEMPTING:
                    try:
                        result = await self._pending
                    except Exception as exc:
                        delay = self._next_delay(exc)
                        if delay is None:
                            raise
                    else:
                        return self._resolve(result)
                    self.state = RetryState.SUSPENDED
                    self._pending = self._sleep(delay)
                else:
                    await self._pending
                    self._pending = None
                    self.state = RetryState.IDLE
        finally:
            self._pending = None
            self.state = RetryState.DONE

    def _invoke(self) -> Awaitable[Any]:
        try:
            pending = self._fn()
        except Exception as exc:
            # Fails like an attempt whose awaitable raised
            return _raise(exc)
        if not inspect.isawaitable(pending):
            msg = (
                "an operation retried asynchronously must return an awaitable, "
                f"got {type(pending).__name__}"
            )
            raise TypeError(msg)
        return pending


async def _raise(error: Exception) -> Any:
    raise error


def retry_async(fn: Callable[[], Awaitable[T]], backoff: Any) -> AsyncRetry[T]:
    """Create an asynchronous retry driver for ``fn``.

    Args:
        fn: The async operation to retry, e.g. a coroutine function.
        backoff: The backoff policy, e.g. ``ExponentialBuilder()``.

    Returns:
        The driver; configure it with ``when``/``notify``/``sleeper`` and
        ``await`` it.
    """
    return AsyncRetry(fn, backoff)
