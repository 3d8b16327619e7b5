"""Condition algebra.

A Condition is a pure predicate over a (possibly absent) value that produces
a ValidationResult. Conditions compose with ``+`` (OR) and ``*`` (AND) into
new conditions; both operands are always evaluated.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from livevalid.result import ValidationResult

T = TypeVar("T")


class Condition(ABC, Generic[T]):
    """Abstract base class for all conditions.

    Subclasses implement ``validate`` and must treat ``None`` as a normal
    input. Conditions hold no mutable state, so one instance can be shared by
    any number of validators.

    Example:
        >>> has_x = Condition.create(lambda v: v is not None and "x" in v, "no x")
        >>> has_y = Condition.create(lambda v: v is not None and "y" in v, "no y")
        >>> (has_x * has_y).validate("xy").is_valid
        True
    """

    @abstractmethod
    def validate(self, value: T | None) -> ValidationResult:
        """Check ``value`` and return the verdict.

        Args:
            value: Value to check. May be None.

        Returns:
            ValidationResult for the value.
        """

    def __add__(self, other: object) -> Condition[T]:
        if not isinstance(other, Condition):
            return NotImplemented
        return OrCondition(self, other)

    def __mul__(self, other: object) -> Condition[T]:
        if not isinstance(other, Condition):
            return NotImplemented
        return AndCondition(self, other)

    @staticmethod
    def create(
        predicate: Callable[[Any], bool],
        error_message: str | None = None,
    ) -> PredicateCondition[Any]:
        """Create a condition from a boolean predicate.

        Args:
            predicate: Returns True when the value is acceptable.
            error_message: Message reported when the predicate fails.

        Returns:
            A PredicateCondition wrapping the predicate.
        """
        return PredicateCondition(predicate, error_message)

    @staticmethod
    def of(func: Callable[[Any], ValidationResult]) -> FunctionCondition[Any]:
        """Wrap a function that already returns a ValidationResult."""
        return FunctionCondition(func)


class FunctionCondition(Condition[T]):
    """Condition backed by a ``value -> ValidationResult`` callable."""

    def __init__(self, func: Callable[[T | None], ValidationResult]) -> None:
        self._func = func

    def validate(self, value: T | None) -> ValidationResult:
        return self._func(value)


class PredicateCondition(Condition[T]):
    """Condition backed by a ``value -> bool`` predicate.

    Attributes:
        error_message: Message attached to failing results.
    """

    def __init__(
        self,
        predicate: Callable[[T | None], bool],
        error_message: str | None = None,
    ) -> None:
        self._predicate = predicate
        self.error_message = error_message

    def validate(self, value: T | None) -> ValidationResult:
        return ValidationResult.obtain(bool(self._predicate(value)), self.error_message)

    def __repr__(self) -> str:
        return f"PredicateCondition(error_message={self.error_message!r})"


class OrCondition(Condition[T]):
    """Logical OR of two conditions (``left + right``)."""

    def __init__(self, left: Condition[T], right: Condition[T]) -> None:
        self.left = left
        self.right = right

    def validate(self, value: T | None) -> ValidationResult:
        # Both sides are always evaluated, left first
        left_result = self.left.validate(value)
        right_result = self.right.validate(value)
        return left_result + right_result

    def __repr__(self) -> str:
        return f"({self.left!r} + {self.right!r})"


class AndCondition(Condition[T]):
    """Logical AND of two conditions (``left * right``)."""

    def __init__(self, left: Condition[T], right: Condition[T]) -> None:
        self.left = left
        self.right = right

    def validate(self, value: T | None) -> ValidationResult:
        left_result = self.left.validate(value)
        right_result = self.right.validate(value)
        return left_result * right_result

    def __repr__(self) -> str:
        return f"({self.left!r} * {self.right!r})"
