r"""Decorator that runs every call of a function through a retry driver."""

from __future__ import annotations

__all__ = ["retryable"]

import functools
import inspect
from typing import TYPE_CHECKING, Any

from aretry.backoff.exponential import ExponentialBuilder
from aretry.retry.blocking import retry
from aretry.retry.future import retry_async

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.retry.core import RetryCore


def retryable(
    backoff: Any = None,
    *,
    when: Callable[[Exception], bool] | None = None,
    notify: Callable[[Exception, float], None] | None = None,
    sleep: Any = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Wrap a function so that each call is retried with backoff.

    Coroutine functions get an asynchronous driver, other functions a
    blocking one. A fresh backoff sequence is built for every call, so the
    decorated function can be called concurrently.

    Args:
        backoff: The backoff policy. Defaults to ``ExponentialBuilder()``.
        when: Optional retryable predicate.
        notify: Optional notify hook.
        sleep: Optional sleeper matching the kind of the function.

    Returns:
        The decorator.

    Example:
        ```pycon
        >>> from aretry import ConstantBuilder, retryable
        >>> attempts = []
        >>> @retryable(ConstantBuilder(delay=0.0), when=lambda e: isinstance(e, KeyError))
        ... def lookup(key):
        ...     attempts.append(key)
        ...     if len(attempts) < 2:
        ...         raise KeyError(key)
        ...     return key.upper()
        ...
        >>> lookup("a")
        'A'
        >>> attempts
        ['a', 'a']

        ```
    """
    policy = ExponentialBuilder() if backoff is None else backoff

    def configure(driver: RetryCore) -> Any:
        if when is not None:
            driver.when(when)
        if notify is not None:
            driver.notify(notify)
        if sleep is not None:
            driver.sleeper(sleep)
        return driver

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(fn):

            @functools.wraps(fn)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                return await configure(retry_async(lambda: fn(*args, **kwargs), policy))

            return async_wrapper

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return configure(retry(lambda: fn(*args, **kwargs), policy)).call()

        return wrapper

    return decorator
