"""Operators that reduce many validation results into one."""

from __future__ import annotations

from collections.abc import Collection

from livevalid.condition import Condition
from livevalid.result import ValidationResult


class Operator(Condition[Collection[ValidationResult]]):
    """Base class for result-reducing operators.

    An operator is itself a condition over a collection of results, so it can
    be passed anywhere a condition is accepted.
    """

    name: str = ""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Conjunction(Operator):
    """AND over all results.

    Returns the first invalid result in iteration order, or ``valid()`` when
    there is none (including an empty collection).
    """

    name = "conjunction"

    def validate(self, value: Collection[ValidationResult] | None) -> ValidationResult:
        for result in value or ():
            if not result.is_valid:
                return result
        return ValidationResult.valid()


class Disjunction(Operator):
    """OR over all results.

    Returns the first valid result in iteration order, or ``invalid(None)``
    when there is none. An empty collection is invalid.
    """

    name = "disjunction"

    def validate(self, value: Collection[ValidationResult] | None) -> ValidationResult:
        for result in value or ():
            if result.is_valid:
                return result
        return ValidationResult.invalid(None)


OPERATORS: dict[str, type[Operator]] = {
    "conjunction": Conjunction,
    "and": Conjunction,
    "disjunction": Disjunction,
    "or": Disjunction,
}


def operator_from_name(name: str) -> Operator:
    """Create an operator from its name.

    Args:
        name: One of "conjunction", "and", "disjunction", "or" (case-insensitive).

    Returns:
        A new operator instance.

    Raises:
        ValueError: If the name is not known.
    """
    operator_class = OPERATORS.get(name.strip().lower())
    if operator_class is None:
        raise ValueError(
            f"Unknown operator '{name}'. Expected one of: {', '.join(sorted(OPERATORS))}"
        )
    return operator_class()
