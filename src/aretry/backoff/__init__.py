r"""Backoff policies and the delay sequences they build.

A policy (``BackoffBuilder``) is an immutable description of a delay
pattern; calling ``build`` returns a fresh ``Backoff`` sequence that a
single retry loop consumes with ``advance``. Constant, exponential and
Fibonacci strategies are provided; any iterable of delays can be used as
well.
"""

from __future__ import annotations

__all__ = [
    "Backoff",
    "BackoffBuilder",
    "ConstantBackoff",
    "ConstantBuilder",
    "ExponentialBackoff",
    "ExponentialBuilder",
    "FibonacciBackoff",
    "FibonacciBuilder",
    "IterableBackoff",
    "as_backoff",
]

from aretry.backoff.base import Backoff, BackoffBuilder, IterableBackoff, as_backoff
from aretry.backoff.constant import ConstantBackoff, ConstantBuilder
from aretry.backoff.exponential import ExponentialBackoff, ExponentialBuilder
from aretry.backoff.fibonacci import FibonacciBackoff, FibonacciBuilder
