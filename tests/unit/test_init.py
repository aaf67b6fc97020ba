r"""Unit tests for package initialization and metadata."""

from __future__ import annotations

import aretry


def test_package_version_is_string() -> None:
    """Test that __version__ is a string."""
    assert isinstance(aretry.__version__, str)


def test_package_version_format() -> None:
    """Test that __version__ looks like a version number."""
    assert "." in aretry.__version__


def test_all_exports_defined() -> None:
    """Test that all items in __all__ are defined in the module."""
    for name in aretry.__all__:
        assert hasattr(aretry, name), f"{name} is in __all__ but not defined in module"


def test_public_api_chain() -> None:
    """Test the documented entry points work together."""
    calls = []

    def flaky() -> str:
        calls.append(1)
        if len(calls) < 2:
            raise ConnectionError
        return "ok"

    driver = aretry.retry(flaky, aretry.ConstantBuilder(delay=0.0))
    assert driver.call() == "ok"
    assert len(calls) == 2
