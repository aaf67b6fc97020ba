r"""Saturating arithmetic on durations expressed in seconds.

All delays handled by ``aretry`` are ``float`` seconds bounded by
``MAX_DURATION``, the whole days of ``datetime.timedelta.max`` expressed in
seconds. The helpers in this module clamp at that bound instead of
overflowing, so a delay can always be converted back to a ``timedelta``.
"""

from __future__ import annotations

__all__ = ["MAX_DURATION", "saturating_add", "saturating_mul", "to_seconds"]

import math
from datetime import timedelta

# timedelta.max.total_seconds() rounds up past timedelta.max
MAX_DURATION: float = float(timedelta.max.days * 86400)


def saturating_add(lhs: float, rhs: float) -> float:
    """Add two durations, clamping the result at ``MAX_DURATION``.

    Args:
        lhs: The first duration in seconds.
        rhs: The second duration in seconds.

    Returns:
        ``lhs + rhs``, or ``MAX_DURATION`` if the sum exceeds it.

    Example:
        ```pycon
        >>> from aretry.utils.duration import MAX_DURATION, saturating_add
        >>> saturating_add(1.0, 2.0)
        3.0
        >>> saturating_add(MAX_DURATION, 1.0) == MAX_DURATION
        True

        ```
    """
    total = lhs + rhs
    if math.isnan(total) or total >= MAX_DURATION:
        return MAX_DURATION
    return total


def saturating_mul(duration: float, factor: float) -> float:
    """Multiply a duration by a floating factor, clamping at ``MAX_DURATION``.

    Args:
        duration: The duration in seconds.
        factor: The multiplier.

    Returns:
        ``duration * factor``, or ``MAX_DURATION`` if the product is not
        representable.

    Example:
        ```pycon
        >>> from aretry.utils.duration import MAX_DURATION, saturating_mul
        >>> saturating_mul(1.5, 2.0)
        3.0
        >>> saturating_mul(MAX_DURATION, 2.0) == MAX_DURATION
        True

        ```
    """
    product = duration * factor
    if math.isnan(product):
        # 0 * inf: a zero duration stays zero
        return 0.0 if duration == 0 else MAX_DURATION
    if product >= MAX_DURATION:
        return MAX_DURATION
    return max(product, 0.0)


def to_seconds(duration: float | timedelta) -> float:
    """Normalize a duration given as seconds or ``timedelta`` to seconds.

    Durations beyond ``MAX_DURATION``, including infinity, are clamped to
    it. NaN is returned unchanged so that validation can reject it.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from aretry.utils.duration import MAX_DURATION, to_seconds
        >>> to_seconds(timedelta(milliseconds=250))
        0.25
        >>> to_seconds(float("inf")) == MAX_DURATION
        True

        ```
    """
    if isinstance(duration, timedelta):
        seconds = duration.total_seconds()
    else:
        seconds = float(duration)
    if seconds > MAX_DURATION:
        return MAX_DURATION
    return seconds
