r"""Abstract base classes for backoff policies and sequences."""

from __future__ import annotations

__all__ = ["Backoff", "BackoffBuilder", "IterableBackoff", "as_backoff", "make_rng"]

import random
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any

from aretry.utils.duration import to_seconds


class Backoff(ABC):
    """A stateful sequence of delays between retry attempts.

    A backoff is owned by a single retry loop. Each call to ``advance``
    consumes one delay; ``None`` means the sequence is exhausted and the
    caller should stop retrying and surface its last error.

    Backoffs are also iterators over their delays, so a sequence can be
    inspected with ``list`` or consumed with a ``for`` loop.
    """

    @abstractmethod
    def advance(self) -> float | None:
        """Return the next delay in seconds, or None when exhausted."""

    def __iter__(self) -> Iterator[float]:
        return self

    def __next__(self) -> float:
        delay = self.advance()
        if delay is None:
            raise StopIteration
        return delay


class BackoffBuilder(ABC):
    """An immutable policy that creates fresh backoff sequences.

    ``build`` is a pure function of the builder's fields: every sequence it
    returns starts from the same initial state, so one builder can be shared
    by any number of independent, possibly concurrent, retry loops.
    """

    @abstractmethod
    def build(self) -> Backoff:
        """Create a new backoff sequence from this policy."""


class IterableBackoff(Backoff):
    """Adapt any iterable of delays to the ``Backoff`` interface.

    Args:
        delays: The delays, in seconds or as ``timedelta`` objects. The
            sequence is exhausted when the iterable is.

    Example:
        ```pycon
        >>> from aretry.backoff import IterableBackoff
        >>> backoff = IterableBackoff([0.1, 0.2])
        >>> backoff.advance(), backoff.advance(), backoff.advance()
        (0.1, 0.2, None)

        ```
    """

    def __init__(self, delays: Iterable[Any]) -> None:
        self._delays = iter(delays)

    def advance(self) -> float | None:
        for delay in self._delays:
            return to_seconds(delay)
        return None


def as_backoff(source: Any) -> Backoff:
    """Obtain a fresh backoff sequence from a policy-like object.

    Args:
        source: A ``BackoffBuilder`` (or any object with a ``build``
            method), an existing ``Backoff``, or an iterable of delays.

    Returns:
        The backoff sequence to drive a retry loop with.

    Raises:
        TypeError: If ``source`` is none of the accepted kinds.
    """
    if isinstance(source, Backoff):
        return source
    if isinstance(source, BackoffBuilder) or callable(getattr(source, "build", None)):
        return as_backoff(source.build())
    if isinstance(source, Iterable):
        return IterableBackoff(source)
    msg = f"expected a BackoffBuilder, a Backoff or an iterable of delays, got {type(source)}"
    raise TypeError(msg)


def make_rng(seed: int | None) -> random.Random:
    """Create the random generator used for jitter.

    Args:
        seed: Optional seed. Without one the generator is seeded from
            operating system entropy.
    """
    return random.Random(seed)  # noqa: S311
