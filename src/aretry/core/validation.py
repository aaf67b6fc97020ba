r"""Parameter validation for backoff builders.

Invalid delays and counts are rejected with ``ValueError`` when a builder is
configured. A growth factor below 1.0 cannot corrupt a sequence, it only
makes it shrink, so it is reported with a warning instead.
"""

from __future__ import annotations

__all__ = ["check_factor", "normalize_delay", "validate_delay", "validate_max_times"]

import logging
from typing import TYPE_CHECKING

from aretry.utils.duration import to_seconds

if TYPE_CHECKING:
    from datetime import timedelta

logger: logging.Logger = logging.getLogger(__name__)


def validate_delay(name: str, value: float | None) -> None:
    """Validate a delay parameter.

    Args:
        name: The parameter name, used in the error message.
        value: The delay in seconds. None is accepted and means unset.

    Raises:
        ValueError: If the delay is negative or not a number.

    Example:
        ```pycon
        >>> from aretry.core.validation import validate_delay
        >>> validate_delay("min_delay", 1.0)
        >>> validate_delay("max_delay", None)
        >>> validate_delay("min_delay", -1.0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: min_delay must be non-negative, got -1.0

        ```
    """
    if value is None:
        return
    if value != value or value < 0:  # NaN compares unequal to itself
        msg = f"{name} must be non-negative, got {value}"
        raise ValueError(msg)


def normalize_delay(name: str, value: float | timedelta | None) -> float | None:
    """Validate a delay parameter and convert it to seconds.

    Args:
        name: The parameter name, used in the error message.
        value: The delay in seconds or as a ``timedelta``. None is kept.

    Returns:
        The delay in seconds, clamped at ``MAX_DURATION``, or None.

    Raises:
        ValueError: If the delay is negative or not a number.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from aretry.core.validation import normalize_delay
        >>> normalize_delay("delay", timedelta(seconds=2))
        2.0
        >>> normalize_delay("max_delay", None)

        ```
    """
    if value is None:
        return None
    seconds = to_seconds(value)
    validate_delay(name, seconds)
    return seconds


def validate_max_times(max_times: int | None) -> None:
    """Validate the maximum number of delays of a sequence.

    Args:
        max_times: The maximum number of delays. None means unbounded.

    Raises:
        ValueError: If max_times is negative.
    """
    if max_times is not None and max_times < 0:
        msg = f"max_times must be >= 0, got {max_times}"
        raise ValueError(msg)


def check_factor(factor: float) -> None:
    """Warn about an exponential growth factor below 1.0.

    Args:
        factor: The growth factor.

    Raises:
        ValueError: If the factor is negative or not a number.
    """
    if factor != factor or factor < 0:
        msg = f"factor must be non-negative, got {factor}"
        raise ValueError(msg)
    if factor < 1.0:
        logger.warning(
            f"factor {factor} is below 1.0: the exponential backoff will shrink instead of grow"
        )
