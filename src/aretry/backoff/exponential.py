r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff", "ExponentialBuilder"]

import sys
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from aretry.backoff.base import Backoff, BackoffBuilder, make_rng
from aretry.core.config import (
    DEFAULT_FACTOR,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_TIMES,
    DEFAULT_MIN_DELAY,
)
from aretry.core.validation import check_factor, normalize_delay, validate_max_times
from aretry.utils.duration import saturating_add, saturating_mul, to_seconds

if TYPE_CHECKING:
    from datetime import timedelta


@dataclass(frozen=True)
class ExponentialBuilder(BackoffBuilder):
    """Policy for exponentially growing delays.

    The first delay is ``min_delay``; each following delay is the previous
    one multiplied by ``factor``, capped at ``max_delay``. With jitter
    enabled every yielded delay gets a random extra in ``[0, delay)``; the
    growth itself always uses the un-jittered value.

    Args:
        min_delay: The first delay in seconds (default: 1.0).
        factor: The growth factor (default: 2.0). Values below 1.0 make
            the sequence shrink and are reported with a warning.
        max_delay: The cap on a single delay in seconds (default: 60.0).
            None lets the delay grow until it saturates.
        max_times: The number of delays to yield (default: 3). None means
            unbounded.
        total_delay: Optional budget for the sum of all yielded delays. The
            sequence is exhausted as soon as the next delay would exceed it.
        jitter: Whether to add random jitter.
        seed: Optional seed for the jitter random generator.

    Example:
        ```pycon
        >>> from aretry.backoff import ExponentialBuilder
        >>> list(ExponentialBuilder().build())
        [1.0, 2.0, 4.0]
        >>> list(ExponentialBuilder().with_max_delay(2.0).build())
        [1.0, 2.0, 2.0]
        >>> list(ExponentialBuilder().with_max_times(5).with_total_delay(7.0).build())
        [1.0, 2.0, 4.0]

        ```
    """

    min_delay: float = DEFAULT_MIN_DELAY
    factor: float = DEFAULT_FACTOR
    max_delay: float | None = DEFAULT_MAX_DELAY
    max_times: int | None = DEFAULT_MAX_TIMES
    total_delay: float | None = None
    jitter: bool = False
    seed: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "min_delay", normalize_delay("min_delay", self.min_delay))
        object.__setattr__(self, "max_delay", normalize_delay("max_delay", self.max_delay))
        object.__setattr__(self, "total_delay", normalize_delay("total_delay", self.total_delay))
        validate_max_times(self.max_times)
        check_factor(self.factor)

    def with_min_delay(self, min_delay: float | timedelta) -> ExponentialBuilder:
        return replace(self, min_delay=to_seconds(min_delay))

    def with_factor(self, factor: float) -> ExponentialBuilder:
        return replace(self, factor=factor)

    def with_max_delay(self, max_delay: float | timedelta) -> ExponentialBuilder:
        return replace(self, max_delay=to_seconds(max_delay))

    def without_max_delay(self) -> ExponentialBuilder:
        """Let the delay grow until it saturates at ``MAX_DURATION``."""
        return replace(self, max_delay=None)

    def with_max_times(self, max_times: int) -> ExponentialBuilder:
        return replace(self, max_times=max_times)

    def without_max_times(self) -> ExponentialBuilder:
        """Only a total delay budget, if any, can exhaust the sequence."""
        return replace(self, max_times=None)

    def with_total_delay(self, total_delay: float | timedelta | None) -> ExponentialBuilder:
        return replace(
            self, total_delay=None if total_delay is None else to_seconds(total_delay)
        )

    def with_jitter(self) -> ExponentialBuilder:
        return replace(self, jitter=True)

    def with_jitter_seed(self, seed: int) -> ExponentialBuilder:
        return replace(self, seed=seed)

    def build(self) -> ExponentialBackoff:
        return ExponentialBackoff(self)


class ExponentialBackoff(Backoff):
    """Backoff sequence created by ``ExponentialBuilder``."""

    def __init__(self, builder: ExponentialBuilder) -> None:
        self._min_delay = builder.min_delay
        self._factor = builder.factor
        self._max_delay = builder.max_delay
        self._max_times = sys.maxsize if builder.max_times is None else builder.max_times
        self._total_delay = builder.total_delay
        self._jitter = builder.jitter
        self._rng = make_rng(builder.seed)

        self._current_delay: float | None = None
        self._cumulative_delay = 0.0
        self._attempts = 0
        self._budget_exceeded = False

    def advance(self) -> float | None:
        if self._budget_exceeded or self._attempts >= self._max_times:
            return None
        self._attempts += 1

        current = self._next_base_delay()
        delay = current
        if self._jitter:
            delay = saturating_add(delay, saturating_mul(current, self._rng.random()))

        if self._total_delay is not None:
            if self._cumulative_delay + delay > self._total_delay:
                self._budget_exceeded = True
                return None
            self._cumulative_delay = saturating_add(self._cumulative_delay, delay)

        self._current_delay = current
        return delay

    def _next_base_delay(self) -> float:
        if self._current_delay is None:
            return self._min_delay
        current = self._current_delay
        if self._max_delay is None:
            return saturating_mul(current, self._factor)
        # Stop growing once the cap is reached
        if current < self._max_delay:
            current = saturating_mul(current, self._factor)
        return min(current, self._max_delay)
