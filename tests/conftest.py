"""Pytest configuration and fixtures for livevalid tests."""

from __future__ import annotations

import os

# Set a fixed terminal width to prevent line wrapping issues in CI
# This must be set before any Rich imports
os.environ.setdefault("COLUMNS", "200")
os.environ.setdefault("LINES", "50")
# Disable Rich's terminal detection to ensure consistent output
os.environ.setdefault("TERM", "dumb")

import pytest  # noqa: E402

from livevalid.condition import Condition  # noqa: E402
from livevalid.conditions import Contains  # noqa: E402
from livevalid.live import MutableLiveValue  # noqa: E402
from livevalid.result import ValidationResult  # noqa: E402


class CountingCondition(Condition[str]):
    """Condition that records every value it checks and always passes."""

    def __init__(self) -> None:
        self.calls: list[str | None] = []

    def validate(self, value: str | None) -> ValidationResult:
        self.calls.append(value)
        return ValidationResult.valid()


@pytest.fixture
def x_condition() -> Condition[str]:
    return Contains("x")


@pytest.fixture
def y_condition() -> Condition[str]:
    return Contains("y")


@pytest.fixture
def z_condition() -> Condition[str]:
    return Contains("z")


@pytest.fixture
def source() -> MutableLiveValue[str]:
    """A live source whose value has been set to None."""
    return MutableLiveValue(None)


@pytest.fixture
def counting_condition() -> CountingCondition:
    return CountingCondition()


@pytest.fixture
def counting_factory() -> type[CountingCondition]:
    """The CountingCondition class, for tests needing several instances."""
    return CountingCondition
