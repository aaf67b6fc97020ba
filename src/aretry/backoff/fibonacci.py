r"""Fibonacci backoff strategy."""

from __future__ import annotations

__all__ = ["FibonacciBackoff", "FibonacciBuilder"]

import sys
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from aretry.backoff.base import Backoff, BackoffBuilder, make_rng
from aretry.core.config import DEFAULT_MAX_DELAY, DEFAULT_MAX_TIMES, DEFAULT_MIN_DELAY
from aretry.core.validation import normalize_delay, validate_max_times
from aretry.utils.duration import saturating_add, saturating_mul, to_seconds

if TYPE_CHECKING:
    from datetime import timedelta


@dataclass(frozen=True)
class FibonacciBuilder(BackoffBuilder):
    """Policy for delays following the Fibonacci sequence.

    The first two delays are ``min_delay``; every following delay is the
    sum of the two previous ones, capped at ``max_delay``. This ramps up
    more gradually than exponential backoff (1, 1, 2, 3, 5, 8, ...).

    Args:
        min_delay: The first delay in seconds (default: 1.0).
        max_delay: The cap on a single delay in seconds (default: 60.0).
            None lets the delay grow until it saturates.
        max_times: The number of delays to yield (default: 3). None means
            unbounded.
        jitter: Whether to add a random extra delay in ``[0, min_delay)``.
        seed: Optional seed for the jitter random generator.

    Example:
        ```pycon
        >>> from aretry.backoff import FibonacciBuilder
        >>> list(FibonacciBuilder().with_max_times(6).build())
        [1.0, 1.0, 2.0, 3.0, 5.0, 8.0]
        >>> list(FibonacciBuilder().with_max_times(6).with_max_delay(4.0).build())
        [1.0, 1.0, 2.0, 3.0, 4.0, 4.0]

        ```
    """

    min_delay: float = DEFAULT_MIN_DELAY
    max_delay: float | None = DEFAULT_MAX_DELAY
    max_times: int | None = DEFAULT_MAX_TIMES
    jitter: bool = False
    seed: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "min_delay", normalize_delay("min_delay", self.min_delay))
        object.__setattr__(self, "max_delay", normalize_delay("max_delay", self.max_delay))
        validate_max_times(self.max_times)

    def with_min_delay(self, min_delay: float | timedelta) -> FibonacciBuilder:
        return replace(self, min_delay=to_seconds(min_delay))

    def with_max_delay(self, max_delay: float | timedelta) -> FibonacciBuilder:
        return replace(self, max_delay=to_seconds(max_delay))

    def without_max_delay(self) -> FibonacciBuilder:
        return replace(self, max_delay=None)

    def with_max_times(self, max_times: int) -> FibonacciBuilder:
        return replace(self, max_times=max_times)

    def without_max_times(self) -> FibonacciBuilder:
        return replace(self, max_times=None)

    def with_jitter(self) -> FibonacciBuilder:
        return replace(self, jitter=True)

    def with_jitter_seed(self, seed: int) -> FibonacciBuilder:
        return replace(self, seed=seed)

    def build(self) -> FibonacciBackoff:
        return FibonacciBackoff(self)


class FibonacciBackoff(Backoff):
    """Backoff sequence created by ``FibonacciBuilder``."""

    def __init__(self, builder: FibonacciBuilder) -> None:
        self._min_delay = builder.min_delay
        self._max_delay = builder.max_delay
        self._max_times = sys.maxsize if builder.max_times is None else builder.max_times
        self._jitter = builder.jitter
        self._rng = make_rng(builder.seed)

        self._previous_delay: float | None = None
        self._current_delay: float | None = None
        self._attempts = 0

    def advance(self) -> float | None:
        if self._attempts >= self._max_times:
            return None
        self._attempts += 1

        if self._current_delay is None:
            self._current_delay = delay = self._min_delay
        else:
            current = delay = self._current_delay
            if self._max_delay is None or current < self._max_delay:
                if self._previous_delay is not None:
                    delay = saturating_add(current, self._previous_delay)
                    if self._max_delay is not None:
                        delay = min(delay, self._max_delay)
                    self._current_delay = delay
                self._previous_delay = current

        if self._jitter:
            delay = saturating_add(delay, saturating_mul(self._min_delay, self._rng.random()))
        return delay
