r"""Sleepers: the mechanisms that wait out a backoff delay.

A blocking sleeper is any callable ``(seconds) -> None`` or object with
such a ``sleep`` method; it blocks the calling thread. An async sleeper is
any callable ``(seconds) -> Awaitable[None]`` or object with such a
``sleep`` method; it suspends the calling task and leaves the event loop
free. Which kind applies is decided by the driver: ``BlockingRetry`` uses
blocking sleepers, ``AsyncRetry`` uses async ones.

The built-in sleepers are ``StdSleeper`` (``time.sleep``) and
``AsyncioSleeper`` (``asyncio.sleep``). Either can be disabled through
``aretry.core.config.SleeperConfig``; a driver left without a sleeper then
fails with ``MissingSleeperError`` the first time it has to wait.
"""

from __future__ import annotations

__all__ = [
    "AsyncioSleeper",
    "BlockingSleeper",
    "MissingSleeper",
    "Sleeper",
    "StdSleeper",
    "as_blocking_sleep",
    "as_sleep",
    "default_blocking_sleeper",
    "default_sleeper",
]

import asyncio
import time
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from aretry.core.config import get_sleeper_config
from aretry.exceptions import MissingSleeperError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@runtime_checkable
class BlockingSleeper(Protocol):
    """Protocol for sleepers that block the calling thread."""

    def sleep(self, seconds: float) -> None: ...


@runtime_checkable
class Sleeper(Protocol):
    """Protocol for sleepers that suspend the calling task."""

    def sleep(self, seconds: float) -> Awaitable[None]: ...


class StdSleeper:
    """Blocking sleeper backed by ``time.sleep``."""

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}()"


class AsyncioSleeper:
    """Async sleeper backed by ``asyncio.sleep``."""

    def sleep(self, seconds: float) -> Awaitable[None]:
        return asyncio.sleep(seconds)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}()"


class MissingSleeper:
    """Placeholder used when no built-in sleeper is enabled.

    Drivers can be created and configured with it; asking it to sleep
    raises ``MissingSleeperError``.

    Args:
        kind: The kind of sleeper it stands in for, ``"blocking"`` or
            ``"async"``.
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind

    def sleep(self, seconds: float) -> Any:  # noqa: ARG002
        raise MissingSleeperError(self.kind)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(kind={self.kind!r})"


def default_blocking_sleeper() -> BlockingSleeper | MissingSleeper:
    """Return the default blocking sleeper for the current configuration."""
    if get_sleeper_config().std:
        return StdSleeper()
    return MissingSleeper("blocking")


def default_sleeper() -> Sleeper | MissingSleeper:
    """Return the default async sleeper for the current configuration."""
    if get_sleeper_config().asyncio:
        return AsyncioSleeper()
    return MissingSleeper("async")


def as_blocking_sleep(sleeper: Any) -> Callable[[float], None]:
    """Normalize a blocking sleeper to a plain ``(seconds) -> None`` callable.

    Args:
        sleeper: A callable, or an object with a ``sleep`` method.

    Raises:
        TypeError: If ``sleeper`` is neither.
    """
    return _sleep_callable(sleeper)


def as_sleep(sleeper: Any) -> Callable[[float], Awaitable[None]]:
    """Normalize an async sleeper to a plain ``(seconds) -> Awaitable``
    callable.

    Args:
        sleeper: A callable, or an object with a ``sleep`` method.

    Raises:
        TypeError: If ``sleeper`` is neither.
    """
    return _sleep_callable(sleeper)


def _sleep_callable(sleeper: Any) -> Callable[[float], Any]:
    if callable(sleeper):
        return sleeper
    method = getattr(sleeper, "sleep", None)
    if callable(method):
        return method
    msg = f"sleeper must be callable or have a sleep method, got {type(sleeper)}"
    raise TypeError(msg)
