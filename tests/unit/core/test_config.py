r"""Unit tests for the sleeper configuration."""

from __future__ import annotations

import pytest

from aretry.core.config import (
    SLEEPERS_ENV_VAR,
    SleeperConfig,
    get_sleeper_config,
    set_sleeper_config,
)

###################################
#     Tests for SleeperConfig     #
###################################


def test_sleeper_config_default() -> None:
    """Test that every built-in sleeper is enabled by default."""
    assert SleeperConfig() == SleeperConfig(std=True, asyncio=True)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("std,asyncio", SleeperConfig(std=True, asyncio=True)),
        ("std", SleeperConfig(std=True, asyncio=False)),
        (" asyncio ", SleeperConfig(std=False, asyncio=True)),
        ("STD, ASYNCIO", SleeperConfig(std=True, asyncio=True)),
        ("", SleeperConfig(std=False, asyncio=False)),
        ("none", SleeperConfig(std=False, asyncio=False)),
        ("std,,", SleeperConfig(std=True, asyncio=False)),
    ],
)
def test_sleeper_config_from_string(value: str, expected: SleeperConfig) -> None:
    """Test parsing a list of sleeper feature names."""
    assert SleeperConfig.from_string(value) == expected


def test_sleeper_config_from_string_unknown() -> None:
    """Test that an unknown feature name raises ValueError."""
    with pytest.raises(ValueError, match=r"unknown sleeper feature\(s\) \['trio'\]"):
        SleeperConfig.from_string("std,trio")


def test_sleeper_config_from_env_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that an unset variable means the default configuration."""
    monkeypatch.delenv(SLEEPERS_ENV_VAR, raising=False)
    assert SleeperConfig.from_env() == SleeperConfig()


def test_sleeper_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test reading the configuration from the environment."""
    monkeypatch.setenv(SLEEPERS_ENV_VAR, "asyncio")
    assert SleeperConfig.from_env() == SleeperConfig(std=False, asyncio=True)


##########################################################
#     Tests for get_sleeper_config/set_sleeper_config     #
##########################################################


def test_get_sleeper_config_reads_env_once(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that the configuration is read lazily and cached."""
    monkeypatch.setenv(SLEEPERS_ENV_VAR, "none")
    config = get_sleeper_config()
    assert config == SleeperConfig(std=False, asyncio=False)
    monkeypatch.setenv(SLEEPERS_ENV_VAR, "std")
    assert get_sleeper_config() is config


def test_set_sleeper_config() -> None:
    """Test overriding the configuration."""
    config = SleeperConfig(std=False, asyncio=True)
    set_sleeper_config(config)
    assert get_sleeper_config() is config


def test_set_sleeper_config_none_rereads_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that resetting the configuration reads the environment
    again."""
    set_sleeper_config(SleeperConfig(std=False, asyncio=False))
    monkeypatch.setenv(SLEEPERS_ENV_VAR, "std,asyncio")
    set_sleeper_config(None)
    assert get_sleeper_config() == SleeperConfig()
