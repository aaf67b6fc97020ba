r"""Core configuration and validation shared across aretry."""

from __future__ import annotations

__all__ = [
    "DEFAULT_DELAY",
    "DEFAULT_FACTOR",
    "DEFAULT_MAX_DELAY",
    "DEFAULT_MAX_TIMES",
    "DEFAULT_MIN_DELAY",
    "SleeperConfig",
    "check_factor",
    "normalize_delay",
    "get_sleeper_config",
    "set_sleeper_config",
    "validate_delay",
    "validate_max_times",
]

from aretry.core.config import (
    DEFAULT_DELAY,
    DEFAULT_FACTOR,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_TIMES,
    DEFAULT_MIN_DELAY,
    SleeperConfig,
    get_sleeper_config,
    set_sleeper_config,
)
from aretry.core.validation import (
    check_factor,
    normalize_delay,
    validate_delay,
    validate_max_times,
)
