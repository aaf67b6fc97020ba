r"""State shared by the synchronous and asynchronous retry drivers.

A retry loop is always in exactly one of the ``RetryState`` phases. Both
drivers move through them the same way:

- ``IDLE``: about to invoke the operation;
- ``ATTEMPTING``: the operation was invoked and its outcome is pending;
- ``SUSPENDED``: waiting out the delay before the next attempt;
- ``DONE``: the loop returned a value or raised its last error.
"""

from __future__ import annotations

__all__ = ["RetryCore", "RetryState"]

import enum
from typing import TYPE_CHECKING, Any

from aretry.backoff.base import as_backoff
from aretry.exceptions import RetryStateError
from aretry.retry.manager import CallbackManager

if TYPE_CHECKING:
    from collections.abc import Callable


class RetryState(enum.Enum):
    """Phase of a retry loop."""

    IDLE = "idle"
    ATTEMPTING = "attempting"
    SUSPENDED = "suspended"
    DONE = "done"


class RetryCore:
    """Configuration and bookkeeping common to every retry driver.

    The backoff policy is turned into a sequence once, when the driver is
    created. A driver runs a single retry loop; running it again after it
    finished raises ``RetryStateError``.

    Args:
        backoff: A ``BackoffBuilder``, a ``Backoff`` sequence, or an
            iterable of delays in seconds.

    Attributes:
        state: The current phase of the loop.
        attempts: The number of attempts started so far.
    """

    def __init__(self, backoff: Any) -> None:
        self._backoff = as_backoff(backoff)
        self._callbacks = CallbackManager()
        self.state = RetryState.IDLE
        self.attempts = 0
        self._started = False

    def when(self, retryable: Callable[[Exception], bool]) -> Any:
        """Set the predicate deciding which errors are retried.

        If not specified, every ``Exception`` is retried. Returns the
        driver for chaining.
        """
        self._callbacks.retryable = retryable
        return self

    def notify(self, notify: Callable[[Exception, float], None]) -> Any:
        """Set the hook called with the error and the delay before each
        retry.

        The hook always runs before the corresponding sleep starts.
        Returns the driver for chaining.
        """
        self._callbacks.notify = notify
        return self

    def _start(self) -> None:
        if self._started:
            msg = f"{type(self).__name__} can only be run once"
            raise RetryStateError(msg)
        self._started = True

    def _resolve(self, result: Any) -> Any:
        """Turn the result of a successful attempt into the loop's value."""
        return result

    def _next_delay(self, error: Exception) -> float | None:
        """Decide how to continue after a failed attempt.

        Returns:
            The delay before the next attempt, or None if the loop must end
            with ``error``.
        """
        if not self._callbacks.is_retryable(error, self.attempts):
            return None
        delay = self._backoff.advance()
        if delay is None:
            self._callbacks.on_exhausted(error, self.attempts)
            return None
        self._callbacks.on_retry(error, delay, self.attempts)
        return delay

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}(state={self.state.name}, attempts={self.attempts})"
