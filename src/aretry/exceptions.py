r"""Exceptions raised by the retry engine itself.

Errors raised by retried operations are never wrapped: the last failure
observed by a driver is re-raised unchanged. The classes below only cover
misuse of the engine.
"""

from __future__ import annotations

__all__ = ["AretryError", "MissingSleeperError", "RetryStateError"]


class AretryError(Exception):
    """Base class for errors raised by aretry."""


class MissingSleeperError(AretryError, RuntimeError):
    """Raised when a driver needs to sleep but no sleeper is available.

    This happens when every built-in sleeper is disabled (see
    ``aretry.core.config.SleeperConfig``) and no custom sleeper was passed to
    the driver. It signals a programming error and is not meant to be
    recovered from.

    Args:
        kind: The kind of sleeper that was requested, ``"blocking"`` or
            ``"async"``.
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(
            f"no {kind} sleeper is enabled; enable a built-in sleeper via "
            f"ARETRY_SLEEPERS or pass a custom one with .sleeper(...)"
        )


class RetryStateError(AretryError, RuntimeError):
    """Raised when a driver is run again after it has finished."""
