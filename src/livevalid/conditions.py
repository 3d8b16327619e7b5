"""Ready-made conditions for common checks.

Every condition accepts an ``error_message`` keyword that replaces its default
message. Text conditions treat a missing value as the empty string.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sized
from typing import Any

from livevalid.condition import Condition
from livevalid.result import ValidationResult


def _length(value: Sized | None) -> int:
    return len(value) if value is not None else 0


def _check_length(name: str, length: int) -> None:
    if length < 0:
        raise ValueError(f"{name} must be non-negative, got {length}")


class NotNull(Condition[Any]):
    """Valid if the value is not None."""

    def __init__(self, error_message: str | None = "Value should not be null") -> None:
        self.error_message = error_message

    def validate(self, value: Any | None) -> ValidationResult:
        return ValidationResult.obtain(value is not None, self.error_message)


class RequiredField(Condition[str]):
    """Valid if the text is not None, not empty and not only whitespace."""

    def __init__(self, error_message: str | None = "Required field") -> None:
        self.error_message = error_message

    def validate(self, value: str | None) -> ValidationResult:
        return ValidationResult.obtain(value is not None and bool(value.strip()), self.error_message)


class TextMaxLength(Condition[str]):
    """Valid if the text is at most ``max_length`` characters long."""

    def __init__(self, max_length: int, error_message: str | None = None) -> None:
        _check_length("max_length", max_length)
        self.max_length = max_length
        self.error_message = (
            error_message
            if error_message is not None
            else f"Exceeded maximum text length: {max_length}"
        )

    def validate(self, value: str | None) -> ValidationResult:
        return ValidationResult.obtain(_length(value) <= self.max_length, self.error_message)


class TextMinLength(Condition[str]):
    """Valid if the text is at least ``min_length`` characters long."""

    def __init__(self, min_length: int, error_message: str | None = None) -> None:
        _check_length("min_length", min_length)
        self.min_length = min_length
        self.error_message = (
            error_message
            if error_message is not None
            else f"Not reached to minimum text length: {min_length}"
        )

    def validate(self, value: str | None) -> ValidationResult:
        return ValidationResult.obtain(_length(value) >= self.min_length, self.error_message)


class TextLengthRange(Condition[str]):
    """Valid if the text length lies in the inclusive range ``[minimum, maximum]``."""

    def __init__(self, minimum: int, maximum: int, error_message: str | None = None) -> None:
        _check_length("minimum", minimum)
        if maximum < minimum:
            raise ValueError(f"Invalid length range: {minimum} - {maximum}")
        self.minimum = minimum
        self.maximum = maximum
        self.error_message = (
            error_message
            if error_message is not None
            else f"Text length should be in range: {minimum} - {maximum}"
        )

    @classmethod
    def from_range(cls, length_range: range, error_message: str | None = None) -> TextLengthRange:
        """Build from a ``range`` of step 1, e.g. ``range(2, 6)`` means 2 to 5."""
        if length_range.step != 1 or not length_range:
            raise ValueError(f"Unsupported length range: {length_range!r}")
        return cls(length_range.start, length_range.stop - 1, error_message)

    def validate(self, value: str | None) -> ValidationResult:
        return ValidationResult.obtain(
            self.minimum <= _length(value) <= self.maximum, self.error_message
        )


class TextLength(Condition[str]):
    """Valid if the text is exactly ``length`` characters long."""

    def __init__(self, length: int, error_message: str | None = None) -> None:
        _check_length("length", length)
        self.length = length
        self.error_message = (
            error_message if error_message is not None else f"Text length must be {length}"
        )

    def validate(self, value: str | None) -> ValidationResult:
        return ValidationResult.obtain(_length(value) == self.length, self.error_message)


class RegEx(Condition[str]):
    """Valid if the whole text matches ``pattern``. None is checked as ""."""

    def __init__(
        self,
        pattern: str | re.Pattern[str],
        error_message: str | None = "Text does not match given RegEx",
    ) -> None:
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.error_message = error_message

    def validate(self, value: str | None) -> ValidationResult:
        text = value if value is not None else ""
        return ValidationResult.obtain(self.pattern.fullmatch(text) is not None, self.error_message)


class Contains(Condition[str]):
    """Valid if the text contains ``fragment``. None is invalid."""

    def __init__(self, fragment: str, error_message: str | None = None) -> None:
        self.fragment = fragment
        self.error_message = error_message if error_message is not None else f"no {fragment}"

    def validate(self, value: str | None) -> ValidationResult:
        return ValidationResult.obtain(value is not None and self.fragment in value, self.error_message)


def find_max_length(conditions: Iterable[Condition[Any]]) -> int | None:
    """Return the tightest TextMaxLength limit among ``conditions``.

    Args:
        conditions: Conditions to inspect (not evaluated).

    Returns:
        The smallest ``max_length`` found, or None if there is no
        TextMaxLength condition.
    """
    limits = [c.max_length for c in conditions if isinstance(c, TextMaxLength)]
    return min(limits) if limits else None
