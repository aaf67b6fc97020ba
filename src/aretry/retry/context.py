r"""Retry drivers that thread a context value through every attempt.

Some operations need exclusive access to a piece of state on each attempt,
for example a connection or a cursor, without that state being captured by
a closure. The drivers in this module lend the context to the operation on
every attempt and take it back afterwards:

- the operation is called as ``fn(context)`` and returns
  ``(context, value)``;
- when the operation raises, the context it was lent is carried into the
  next attempt;
- when the loop ends, the context is handed back: ``call()`` (or awaiting
  the async driver) returns ``(context, value)`` on success, and on failure
  the last error is raised unchanged while the final context stays
  available as ``current_context``.
"""

from __future__ import annotations

__all__ = [
    "AsyncRetryWithContext",
    "BlockingRetryWithContext",
    "retry_with_context",
    "retry_with_context_async",
]

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from aretry.retry.blocking import BlockingRetry
from aretry.retry.future import AsyncRetry

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

C = TypeVar("C")
T = TypeVar("T")


def _split(result: Any) -> tuple[Any, Any]:
    if not isinstance(result, tuple) or len(result) != 2:
        msg = (
            "an operation retried with a context must return a (context, value) tuple, "
            f"got {type(result).__name__}"
        )
        raise TypeError(msg)
    return result


class BlockingRetryWithContext(BlockingRetry, Generic[C, T]):
    """Synchronous retry driver lending a context to every attempt.

    A failed attempt cannot hand a context back: the next attempt receives
    the object that was lent to the failed one. Changes made to a mutable
    context (a connection, a list, a dict) therefore carry over, while an
    immutable context (an int, a tuple, a frozen dataclass) can only be
    replaced by a successful attempt. Wrap immutable state in a mutable
    holder when a failed attempt needs to update it.

    Args:
        fn: The operation, called as ``fn(context)`` and returning
            ``(context, value)``.
        backoff: A ``BackoffBuilder``, a ``Backoff`` sequence, or an
            iterable of delays in seconds.

    Example:
        ```pycon
        >>> from aretry import ConstantBuilder, retry_with_context
        >>> def attempt(log):
        ...     log.append("try")
        ...     if len(log) < 3:
        ...         raise TimeoutError("slow")
        ...     return log, "done"
        ...
        >>> driver = retry_with_context(attempt, ConstantBuilder(delay=0.0))
        >>> driver.context([]).call()
        (['try', 'try', 'try'], 'done')

        ```
    """

    def __init__(self, fn: Callable[[C], tuple[C, T]], backoff: Any) -> None:
        self._context: Any = None
        super().__init__(lambda: fn(self._context), backoff)

    def context(self, value: C) -> BlockingRetryWithContext[C, T]:
        """Set the context lent to the first attempt."""
        self._context = value
        return self

    @property
    def current_context(self) -> C:
        """The context as of the last attempt."""
        return self._context

    def _resolve(self, result: Any) -> tuple[C, T]:
        self._context, value = _split(result)
        return self._context, value

    def call(self) -> tuple[C, T]:
        """Run the retry loop.

        Returns:
            The context handed back by the successful attempt, and its
            value.

        Raises:
            Exception: The error of the last attempt, when it is not
                retryable or the backoff is exhausted. The context stays
                available as ``current_context``.
            TypeError: If the operation does not return a
                ``(context, value)`` tuple.
        """
        return super().call()


class AsyncRetryWithContext(AsyncRetry, Generic[C, T]):
    """Asynchronous retry driver lending a context to every attempt.

    Awaiting the driver resolves to ``(context, value)``. A failed attempt
    cannot hand a context back, as for ``BlockingRetryWithContext``.

    Args:
        fn: The async operation, called as ``fn(context)`` and resolving to
            ``(context, value)``.
        backoff: A ``BackoffBuilder``, a ``Backoff`` sequence, or an
            iterable of delays in seconds.
    """

    def __init__(self, fn: Callable[[C], Awaitable[tuple[C, T]]], backoff: Any) -> None:
        self._context: Any = None
        super().__init__(lambda: fn(self._context), backoff)

    def context(self, value: C) -> AsyncRetryWithContext[C, T]:
        """Set the context lent to the first attempt."""
        self._context = value
        return self

    @property
    def current_context(self) -> C:
        """The context as of the last attempt."""
        return self._context

    def _resolve(self, result: Any) -> tuple[C, T]:
        self._context, value = _split(result)
        return self._context, value


def retry_with_context(
    fn: Callable[[C], tuple[C, T]], backoff: Any
) -> BlockingRetryWithContext[C, T]:
    """Create a synchronous retry driver that lends a context to ``fn``.

    Args:
        fn: The operation, called as ``fn(context)`` and returning
            ``(context, value)``.
        backoff: The backoff policy.

    Returns:
        The driver; set the initial context with ``context`` and run it
        with ``call``.
    """
    return BlockingRetryWithContext(fn, backoff)


def retry_with_context_async(
    fn: Callable[[C], Awaitable[tuple[C, T]]], backoff: Any
) -> AsyncRetryWithContext[C, T]:
    """Create an asynchronous retry driver that lends a context to ``fn``.

    Args:
        fn: The async operation, called as ``fn(context)`` and resolving to
            ``(context, value)``.
        backoff: The backoff policy.

    Returns:
        The driver; set the initial context with ``context`` and ``await``
        it.
    """
    return AsyncRetryWithContext(fn, backoff)
