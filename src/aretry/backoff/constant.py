r"""Constant backoff strategy."""

from __future__ import annotations

__all__ = ["ConstantBackoff", "ConstantBuilder"]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from aretry.backoff.base import Backoff, BackoffBuilder, make_rng
from aretry.core.config import DEFAULT_DELAY, DEFAULT_MAX_TIMES
from aretry.core.validation import normalize_delay, validate_max_times
from aretry.utils.duration import saturating_add, saturating_mul, to_seconds

if TYPE_CHECKING:
    from datetime import timedelta


@dataclass(frozen=True)
class ConstantBuilder(BackoffBuilder):
    """Policy for a fixed delay between a bounded number of retries.

    Args:
        delay: The delay in seconds before every retry (default: 1.0).
        max_times: The number of delays to yield before the sequence is
            exhausted (default: 3). None means unbounded.
        jitter: Whether to add a random extra delay in ``[0, delay)``.
        seed: Optional seed for the jitter random generator.

    Example:
        ```pycon
        >>> from aretry.backoff import ConstantBuilder
        >>> list(ConstantBuilder().build())
        [1.0, 1.0, 1.0]
        >>> list(ConstantBuilder().with_delay(0.5).with_max_times(2).build())
        [0.5, 0.5]

        ```
    """

    delay: float = DEFAULT_DELAY
    max_times: int | None = DEFAULT_MAX_TIMES
    jitter: bool = False
    seed: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "delay", normalize_delay("delay", self.delay))
        validate_max_times(self.max_times)

    def with_delay(self, delay: float | timedelta) -> ConstantBuilder:
        return replace(self, delay=to_seconds(delay))

    def with_max_times(self, max_times: int) -> ConstantBuilder:
        return replace(self, max_times=max_times)

    def without_max_times(self) -> ConstantBuilder:
        """Never stop yielding delays."""
        return replace(self, max_times=None)

    def with_jitter(self) -> ConstantBuilder:
        """Add a random extra delay in ``[0, delay)`` to every delay."""
        return replace(self, jitter=True)

    def with_jitter_seed(self, seed: int) -> ConstantBuilder:
        return replace(self, seed=seed)

    def build(self) -> ConstantBackoff:
        return ConstantBackoff(self)


class ConstantBackoff(Backoff):
    """Backoff sequence created by ``ConstantBuilder``."""

    def __init__(self, builder: ConstantBuilder) -> None:
        self._delay = builder.delay
        self._max_times = builder.max_times
        self._jitter = builder.jitter
        self._rng = make_rng(builder.seed)
        self._attempts = 0

    def advance(self) -> float | None:
        if self._max_times is not None:
            if self._attempts >= self._max_times:
                return None
            self._attempts += 1
        if self._jitter:
            return saturating_add(self._delay, saturating_mul(self._delay, self._rng.random()))
        return self._delay
