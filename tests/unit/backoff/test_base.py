r"""Unit tests for the backoff base classes and adapters."""

from __future__ import annotations

from datetime import timedelta

import pytest

from aretry.backoff import (
    Backoff,
    BackoffBuilder,
    ConstantBuilder,
    ExponentialBuilder,
    FibonacciBuilder,
    IterableBackoff,
    as_backoff,
)


class CountdownBackoff(Backoff):
    def __init__(self, count: int) -> None:
        self.count = count

    def advance(self) -> float | None:
        if self.count == 0:
            return None
        self.count -= 1
        return 0.1


class CountdownBuilder(BackoffBuilder):
    def build(self) -> Backoff:
        return CountdownBackoff(2)


def test_backoff_cannot_be_instantiated() -> None:
    """Test that Backoff is abstract."""
    with pytest.raises(TypeError):
        Backoff()


def test_backoff_builder_cannot_be_instantiated() -> None:
    """Test that BackoffBuilder is abstract."""
    with pytest.raises(TypeError):
        BackoffBuilder()


def test_backoff_is_iterator() -> None:
    """Test that a backoff can be consumed as an iterator."""
    backoff = CountdownBackoff(3)
    assert iter(backoff) is backoff
    assert list(backoff) == [0.1, 0.1, 0.1]


def test_iterable_backoff() -> None:
    """Test adapting an iterable of delays."""
    backoff = IterableBackoff([1, timedelta(seconds=2), 0.5])
    assert backoff.advance() == 1.0
    assert backoff.advance() == 2.0
    assert backoff.advance() == 0.5
    assert backoff.advance() is None
    assert backoff.advance() is None


def test_iterable_backoff_generator() -> None:
    """Test adapting an infinite generator."""
    backoff = IterableBackoff(float(i) for i in range(10**9))
    assert [backoff.advance() for _ in range(3)] == [0.0, 1.0, 2.0]


def test_as_backoff_with_builder() -> None:
    """Test that builders are built."""
    assert isinstance(as_backoff(CountdownBuilder()), CountdownBackoff)


def test_as_backoff_with_duck_typed_builder() -> None:
    """Test that any object with a build method is accepted."""

    class Policy:
        def build(self) -> list[float]:
            return [0.2, 0.4]

    assert list(as_backoff(Policy())) == [0.2, 0.4]


def test_as_backoff_with_backoff() -> None:
    """Test that sequences are used as-is."""
    backoff = CountdownBackoff(1)
    assert as_backoff(backoff) is backoff


def test_as_backoff_with_iterable() -> None:
    """Test that iterables are adapted."""
    assert list(as_backoff((0.1, 0.2))) == [0.1, 0.2]


def test_as_backoff_invalid() -> None:
    """Test that unsupported objects raise TypeError."""
    with pytest.raises(TypeError, match=r"expected a BackoffBuilder"):
        as_backoff(42)


@pytest.mark.parametrize(
    "builder", [ConstantBuilder(), ExponentialBuilder(), FibonacciBuilder()]
)
@pytest.mark.parametrize("max_times", [0, 1, 2, 5])
def test_builders_yield_exactly_max_times(builder: BackoffBuilder, max_times: int) -> None:
    """Test that every strategy yields exactly max_times delays, with or
    without jitter."""
    assert len(list(builder.with_max_times(max_times).build())) == max_times
    assert len(list(builder.with_jitter().with_max_times(max_times).build())) == max_times


@pytest.mark.parametrize(
    "builder", [ConstantBuilder(), ExponentialBuilder(), FibonacciBuilder()]
)
def test_builders_are_reusable(builder: BackoffBuilder) -> None:
    """Test that two sequences from the same policy are identical."""
    assert list(builder.build()) == list(builder.build())
