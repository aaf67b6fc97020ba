r"""Unit tests for the retry drivers that carry a context."""

from __future__ import annotations

from unittest.mock import Mock, call

import pytest

from aretry import (
    AsyncRetryWithContext,
    BlockingRetryWithContext,
    ConstantBuilder,
    ExponentialBuilder,
    retry_with_context,
    retry_with_context_async,
)
from aretry.retry import RetryState


class Connection:
    def __init__(self) -> None:
        self.uses = 0


##############################################
#     Tests for BlockingRetryWithContext     #
##############################################


def test_retry_with_context_returns_driver() -> None:
    """Test that retry_with_context creates a BlockingRetryWithContext."""
    driver = retry_with_context(Mock(), ConstantBuilder())
    assert isinstance(driver, BlockingRetryWithContext)
    assert driver.current_context is None


def test_retry_with_context_success(recording_sleeper: Mock) -> None:
    """Test that the context returned by the successful attempt is handed
    back with its value."""
    conn = Connection()

    def attempt(ctx: Connection) -> tuple[Connection, str]:
        ctx.uses += 1
        if ctx.uses < 3:
            raise ConnectionError
        return ctx, "ok"

    driver = retry_with_context(attempt, ExponentialBuilder()).context(conn)
    ctx, value = driver.sleeper(recording_sleeper).call()
    assert ctx is conn
    assert value == "ok"
    assert conn.uses == 3
    assert recording_sleeper.call_args_list == [call(1.0), call(2.0)]


def test_retry_with_context_replaced_context(recording_sleeper: Mock) -> None:
    """Test that a successful attempt may hand back a different
    context."""
    fn = Mock(return_value=("new", 1))
    driver = retry_with_context(fn, ConstantBuilder()).context("old").sleeper(recording_sleeper)
    assert driver.call() == ("new", 1)
    fn.assert_called_once_with("old")
    assert driver.current_context == "new"


def test_retry_with_context_lent_to_every_attempt(recording_sleeper: Mock) -> None:
    """Test that every attempt receives the same context."""
    fn = Mock(side_effect=[OSError(), OSError(), ("ctx", 42)])
    driver = retry_with_context(fn, ConstantBuilder()).context("ctx").sleeper(recording_sleeper)
    assert driver.call() == ("ctx", 42)
    assert fn.call_args_list == [call("ctx")] * 3


def test_retry_with_context_failure_keeps_context(recording_sleeper: Mock) -> None:
    """Test that the last error is raised unchanged and the context stays
    available."""
    conn = Connection()
    error = TimeoutError("slow")

    def attempt(ctx: Connection) -> tuple[Connection, str]:
        ctx.uses += 1
        raise error

    driver = retry_with_context(attempt, ConstantBuilder(max_times=2)).context(conn)
    with pytest.raises(TimeoutError) as exc_info:
        driver.sleeper(recording_sleeper).call()
    assert exc_info.value is error
    assert driver.current_context is conn
    assert conn.uses == 3
    assert driver.state is RetryState.DONE


def test_retry_with_context_immutable_context_after_failure(recording_sleeper: Mock) -> None:
    """Test that a failed attempt cannot replace an immutable context."""
    seen = []

    def attempt(ctx: int) -> tuple[int, str]:
        seen.append(ctx)
        if len(seen) < 3:
            raise OSError
        return ctx + 1, "done"

    driver = retry_with_context(attempt, ConstantBuilder()).context(0).sleeper(recording_sleeper)
    assert driver.call() == (1, "done")
    assert seen == [0, 0, 0]
    assert driver.current_context == 1


def test_retry_with_context_mutable_holder_after_failure(recording_sleeper: Mock) -> None:
    """Test that state kept in a mutable holder survives failed
    attempts."""
    seen = []

    def attempt(ctx: dict[str, int]) -> tuple[dict[str, int], int]:
        seen.append(ctx["tries"])
        ctx["tries"] += 1
        if ctx["tries"] < 3:
            raise OSError
        return ctx, ctx["tries"]

    driver = (
        retry_with_context(attempt, ConstantBuilder())
        .context({"tries": 0})
        .sleeper(recording_sleeper)
    )
    assert driver.call() == ({"tries": 3}, 3)
    assert seen == [0, 1, 2]


def test_retry_with_context_non_retryable(recording_sleeper: Mock) -> None:
    """Test that the predicate applies to context-carrying drivers."""
    fn = Mock(side_effect=KeyError("k"))
    driver = (
        retry_with_context(fn, ConstantBuilder())
        .context({})
        .when(lambda e: not isinstance(e, KeyError))
        .sleeper(recording_sleeper)
    )
    with pytest.raises(KeyError):
        driver.call()
    fn.assert_called_once_with({})
    recording_sleeper.assert_not_called()


def test_retry_with_context_invalid_result(recording_sleeper: Mock) -> None:
    """Test that a result that is not a pair is rejected without
    retrying."""
    fn = Mock(return_value="not a pair")
    driver = retry_with_context(fn, ConstantBuilder()).sleeper(recording_sleeper)
    with pytest.raises(TypeError, match=r"must return a \(context, value\) tuple"):
        driver.call()
    fn.assert_called_once_with(None)
    recording_sleeper.assert_not_called()


###########################################
#     Tests for AsyncRetryWithContext     #
###########################################


def test_retry_with_context_async_returns_driver() -> None:
    """Test that retry_with_context_async creates an
    AsyncRetryWithContext."""
    assert isinstance(retry_with_context_async(Mock(), ConstantBuilder()), AsyncRetryWithContext)


@pytest.mark.asyncio
async def test_retry_with_context_async_success(recording_asleeper: Mock) -> None:
    """Test that awaiting the driver resolves to the context and the
    value."""
    conn = Connection()

    async def attempt(ctx: Connection) -> tuple[Connection, int]:
        ctx.uses += 1
        if ctx.uses < 2:
            raise ConnectionError
        return ctx, 7

    driver = retry_with_context_async(attempt, ExponentialBuilder()).context(conn)
    ctx, value = await driver.sleeper(recording_asleeper)
    assert ctx is conn
    assert value == 7
    assert recording_asleeper.call_args_list == [call(1.0)]


@pytest.mark.asyncio
async def test_retry_with_context_async_failure_keeps_context(
    recording_asleeper: Mock,
) -> None:
    """Test that the last error is raised unchanged and the context stays
    available."""
    conn = Connection()

    async def attempt(ctx: Connection) -> tuple[Connection, int]:
        ctx.uses += 1
        raise ConnectionError(ctx.uses)

    driver = retry_with_context_async(attempt, ConstantBuilder(max_times=1)).context(conn)
    with pytest.raises(ConnectionError, match=r"2"):
        await driver.sleeper(recording_asleeper)
    assert driver.current_context is conn
    assert conn.uses == 2


@pytest.mark.asyncio
async def test_retry_with_context_async_invalid_result(recording_asleeper: Mock) -> None:
    """Test that a result that is not a pair is rejected."""

    async def attempt(ctx: object) -> object:
        return ctx

    driver = retry_with_context_async(attempt, ConstantBuilder()).context(1)
    with pytest.raises(TypeError, match=r"got int"):
        await driver.sleeper(recording_asleeper)
    recording_asleeper.assert_not_called()
