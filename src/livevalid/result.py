"""Validation result value type.

A ValidationResult is the verdict produced by every condition, operator and
validator in livevalid. Results combine with ``+`` (logical OR) and ``*``
(logical AND).
"""

from __future__ import annotations

from dataclasses import dataclass


def _is_blank(message: str | None) -> bool:
    return message is None or not message.strip()


@dataclass(frozen=True)
class ValidationResult:
    """Immutable pass/fail verdict with an optional error message.

    Attributes:
        is_valid: Whether the checked value passed.
        error_message: Human-readable reason for failure. Only meaningful
            when ``is_valid`` is False.
    """

    is_valid: bool
    error_message: str | None = None

    @classmethod
    def valid(cls) -> ValidationResult:
        """Return a passing result without a message."""
        return cls(True)

    @classmethod
    def invalid(cls, error_message: str | None = None) -> ValidationResult:
        """Return a failing result carrying ``error_message``."""
        return cls(False, error_message)

    @classmethod
    def obtain(cls, is_valid: bool, error_message: str | None = None) -> ValidationResult:
        """Build a result, dropping the message when the verdict is valid.

        Args:
            is_valid: Outcome of the check.
            error_message: Message to attach if the outcome is a failure.

        Returns:
            ``valid()`` if ``is_valid`` is True, otherwise ``invalid(error_message)``.
        """
        if is_valid:
            return cls.valid()
        return cls.invalid(error_message)

    def _blame(self, other: ValidationResult) -> str | None:
        if not self.is_valid and not _is_blank(self.error_message):
            return self.error_message
        if not other.is_valid and not _is_blank(other.error_message):
            return other.error_message
        return None

    def __add__(self, other: object) -> ValidationResult:
        if not isinstance(other, ValidationResult):
            return NotImplemented
        return self.obtain(self.is_valid or other.is_valid, self._blame(other))

    def __mul__(self, other: object) -> ValidationResult:
        if not isinstance(other, ValidationResult):
            return NotImplemented
        return self.obtain(self.is_valid and other.is_valid, self._blame(other))
