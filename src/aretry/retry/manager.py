r"""Callback manager for the retry predicate and notification hook.

This module provides the CallbackManager class that evaluates the
user-defined retryable predicate and invokes the notification hook at the
points of the retry loop where they apply, logging each decision.
"""

from __future__ import annotations

__all__ = ["CallbackManager"]

import logging
from typing import TYPE_CHECKING

from aretry.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


def _always_retryable(error: Exception) -> bool:  # noqa: ARG001
    return True


def _no_notify(error: Exception, delay: float) -> None:  # noqa: ARG001
    return None


class CallbackManager:
    """Evaluates the retryable predicate and invokes the notify hook.

    Both callables run synchronously on the thread driving the retry loop
    and must not block or suspend. The notify hook is purely informative:
    its return value is ignored and it cannot change the outcome of the
    loop. An exception raised by either callable propagates to the caller
    of the driver.

    Attributes:
        retryable: Predicate receiving the error of a failed attempt. A
            false result ends the loop with that error. Defaults to
            retrying every error.
        notify: Hook receiving the error and the delay in seconds before
            the next attempt. Defaults to doing nothing.
    """

    def __init__(
        self,
        retryable: Callable[[Exception], bool] | None = None,
        notify: Callable[[Exception, float], None] | None = None,
    ) -> None:
        self.retryable = retryable if retryable is not None else _always_retryable
        self.notify = notify if notify is not None else _no_notify

    def is_retryable(self, error: Exception, attempt: int) -> bool:
        """Evaluate the retryable predicate.

        Args:
            error: The error of the failed attempt.
            attempt: The number of the failed attempt (1-indexed).

        Returns:
            Whether the loop may retry after this error.
        """
        if self.retryable(error):
            return True
        logger.debug(f"Attempt {attempt} failed with non-retryable {type(error).__name__}: {error}")
        return False

    def on_retry(self, error: Exception, delay: float, attempt: int) -> None:
        """Invoke the notify hook before the loop sleeps.

        Args:
            error: The error of the failed attempt.
            delay: The delay in seconds before the next attempt.
            attempt: The number of the failed attempt (1-indexed).
        """
        log_structured(
            logger,
            logging.DEBUG,
            f"Attempt {attempt} failed with {type(error).__name__}, retrying in {delay:.3f}s",
            attempt=attempt,
            delay=delay,
            error_type=type(error).__name__,
        )
        self.notify(error, delay)

    def on_exhausted(self, error: Exception, attempt: int) -> None:
        """Record that the backoff has no more delays to offer.

        Args:
            error: The error that ends the loop.
            attempt: The number of the failed attempt (1-indexed).
        """
        log_structured(
            logger,
            logging.DEBUG,
            f"Backoff exhausted after {attempt} attempts, giving up on {type(error).__name__}",
            attempt=attempt,
            error_type=type(error).__name__,
        )
