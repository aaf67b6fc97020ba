from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from aretry.core.config import set_sleeper_config

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def _reset_sleeper_config() -> Generator[None, None, None]:
    """Make every test start from the default sleeper configuration."""
    set_sleeper_config(None)
    yield
    set_sleeper_config(None)


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def events() -> list[tuple]:
    """Shared list recording the order of operation calls, notifications
    and sleeps."""
    return []


@pytest.fixture
def recording_sleeper(events: list[tuple]) -> Mock:
    """Create a blocking sleeper that records each delay in ``events``."""
    return Mock(side_effect=lambda delay: events.append(("sleep", delay)))


@pytest.fixture
def recording_asleeper(events: list[tuple]) -> Mock:
    """Create an async sleeper that records each delay in ``events``."""

    async def sleep(delay: float) -> None:
        events.append(("sleep", delay))

    return Mock(side_effect=sleep)
