r"""Defaults and sleeper feature selection.

This module holds the default values shared by the backoff builders and the
configuration that decides which built-in sleepers are available to the
retry drivers.
"""

from __future__ import annotations

__all__ = [
    "ASYNCIO_SLEEPER",
    "DEFAULT_DELAY",
    "DEFAULT_FACTOR",
    "DEFAULT_MAX_DELAY",
    "DEFAULT_MAX_TIMES",
    "DEFAULT_MIN_DELAY",
    "SLEEPERS_ENV_VAR",
    "STD_SLEEPER",
    "SleeperConfig",
    "get_sleeper_config",
    "set_sleeper_config",
]

import logging
import os
from dataclasses import dataclass

logger: logging.Logger = logging.getLogger(__name__)

# Fixed delay of ConstantBuilder, in seconds
DEFAULT_DELAY = 1.0

# First delay of ExponentialBuilder and FibonacciBuilder, in seconds
DEFAULT_MIN_DELAY = 1.0

# Upper bound on a single delay, in seconds
DEFAULT_MAX_DELAY = 60.0

# Growth factor of ExponentialBuilder
# With the defaults: 1s, 2s, 4s
DEFAULT_FACTOR = 2.0

# Number of delays a sequence yields before it is exhausted
# Total attempts = max_times + 1 (initial attempt)
DEFAULT_MAX_TIMES = 3

# Built-in sleeper feature names
STD_SLEEPER = "std"
ASYNCIO_SLEEPER = "asyncio"

# Comma separated list of enabled built-in sleepers
# Unset: all enabled. "" or "none": no built-in sleeper.
SLEEPERS_ENV_VAR = "ARETRY_SLEEPERS"


@dataclass(frozen=True)
class SleeperConfig:
    """Selection of the built-in sleepers available to the drivers.

    Disabling a sleeper does not prevent a driver from being created or
    configured. It only means that a driver which was not given a custom
    sleeper raises ``MissingSleeperError`` the first time it needs to
    wait.

    Args:
        std: Whether ``time.sleep`` is the default blocking sleeper.
        asyncio: Whether ``asyncio.sleep`` is the default async sleeper.

    Example:
        ```pycon
        >>> from aretry.core.config import SleeperConfig
        >>> SleeperConfig.from_string("std").asyncio
        False
        >>> SleeperConfig.from_string("none")
        SleeperConfig(std=False, asyncio=False)

        ```
    """

    std: bool = True
    asyncio: bool = True

    @classmethod
    def from_string(cls, value: str) -> SleeperConfig:
        """Parse a comma separated list of sleeper feature names.

        Args:
            value: Feature names, e.g. ``"std,asyncio"``. An empty string or
                ``"none"`` disables every built-in sleeper.

        Returns:
            The parsed configuration.

        Raises:
            ValueError: If an unknown feature name is given.
        """
        names = {name.strip().lower() for name in value.split(",") if name.strip()}
        names.discard("none")
        unknown = names - {STD_SLEEPER, ASYNCIO_SLEEPER}
        if unknown:
            msg = (
                f"unknown sleeper feature(s) {sorted(unknown)}, "
                f"expected any of {[STD_SLEEPER, ASYNCIO_SLEEPER]}"
            )
            raise ValueError(msg)
        return cls(std=STD_SLEEPER in names, asyncio=ASYNCIO_SLEEPER in names)

    @classmethod
    def from_env(cls) -> SleeperConfig:
        """Read the configuration from the ``ARETRY_SLEEPERS`` variable.

        Returns:
            The parsed configuration, or the default (all enabled) when the
            variable is unset.
        """
        value = os.environ.get(SLEEPERS_ENV_VAR)
        if value is None:
            return cls()
        config = cls.from_string(value)
        logger.debug(f"Sleeper features from {SLEEPERS_ENV_VAR}={value!r}: {config}")
        return config


_sleeper_config: SleeperConfig | None = None


def get_sleeper_config() -> SleeperConfig:
    """Get the process-wide sleeper configuration.

    The configuration is read from the environment the first time it is
    needed, unless it was set explicitly with ``set_sleeper_config``.
    """
    global _sleeper_config  # noqa: PLW0603
    if _sleeper_config is None:
        _sleeper_config = SleeperConfig.from_env()
    return _sleeper_config


def set_sleeper_config(config: SleeperConfig | None) -> None:
    """Override the process-wide sleeper configuration.

    Args:
        config: The configuration to use, or None to read it from the
            environment again on next use.
    """
    global _sleeper_config  # noqa: PLW0603
    _sleeper_config = config
