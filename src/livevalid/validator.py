"""Validator: an ordered set of conditions reduced by an operator.

When a Validator is asked to validate a value, the value is checked against
every condition in insertion order and the collected results are handed to
the operator, which decides the final verdict. A Validator is itself a
Condition, so validators nest.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from livevalid.condition import Condition
from livevalid.operators import Conjunction, Operator
from livevalid.result import ValidationResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

ConditionsChangedListener = Callable[[tuple[Condition[Any], ...]], None]
OperatorChangedListener = Callable[[], None]


class Validator(Condition[T]):
    """Validate a value of type T against a mutable set of conditions.

    The condition set keeps insertion order and holds each condition once.
    Every mutation notifies the registered listeners synchronously.

    Attributes:
        conditions: Snapshot of the current conditions.
        operator: Operator deciding the overall verdict.
    """

    def __init__(
        self,
        initial_condition: Condition[T] | None = None,
        operator: Operator | None = None,
    ) -> None:
        """Initialize validator.

        Args:
            initial_condition: Optional first condition.
            operator: Result operator. Defaults to Conjunction.
        """
        # dict keys give an insertion-ordered set
        self._conditions: dict[Condition[T], None] = {}
        self._operator: Operator = operator if operator is not None else Conjunction()
        self._conditions_listeners: list[ConditionsChangedListener] = []
        self._operator_listeners: list[OperatorChangedListener] = []

        if initial_condition is not None:
            self.add_condition(initial_condition)

    @classmethod
    def create(
        cls,
        predicate: Callable[[Any], bool],
        error_message: str | None = None,
    ) -> Validator[Any]:
        """Create a validator whose initial condition wraps ``predicate``."""
        return cls(Condition.create(predicate, error_message))

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self, value: T | None) -> ValidationResult:
        """Check ``value`` against all conditions.

        Args:
            value: Value to check.

        Returns:
            The operator's verdict over every condition's result.
        """
        results = [condition.validate(value) for condition in self._conditions]
        return self._operator.validate(results)

    # -------------------------------------------------------------------------
    # Operator
    # -------------------------------------------------------------------------

    @property
    def operator(self) -> Operator:
        return self._operator

    def get_operator(self) -> Operator:
        return self._operator

    def set_operator(self, operator: Operator) -> None:
        """Replace the operator and notify operator listeners once."""
        self._operator = operator
        logger.debug("Operator of %r set to %r", self, operator)
        self._dispatch_operator_changed()

    def add_operator_changed_listener(self, listener: OperatorChangedListener) -> None:
        self._operator_listeners.append(listener)

    def remove_operator_changed_listener(self, listener: OperatorChangedListener) -> None:
        if listener in self._operator_listeners:
            self._operator_listeners.remove(listener)

    def _dispatch_operator_changed(self) -> None:
        for listener in list(self._operator_listeners):
            listener()

    # -------------------------------------------------------------------------
    # Conditions
    # -------------------------------------------------------------------------

    @property
    def conditions(self) -> tuple[Condition[T], ...]:
        return tuple(self._conditions)

    def get_conditions(self) -> tuple[Condition[T], ...]:
        return self.conditions

    def add_condition(self, condition: Condition[T]) -> None:
        """Add a condition. Adding one that is already present does nothing."""
        if condition in self._conditions:
            return
        self._conditions[condition] = None
        self._dispatch_conditions_changed()

    def remove_condition(self, condition: Condition[T]) -> None:
        """Remove a condition. Removing one that is absent does nothing."""
        if condition not in self._conditions:
            return
        del self._conditions[condition]
        self._dispatch_conditions_changed()

    def change_conditions(self, transform: Callable[[list[Condition[T]]], Any]) -> None:
        """Apply an arbitrary edit to the condition set as one change.

        ``transform`` receives a list copy of the current conditions and edits
        it in place. The edited list replaces the set (duplicates dropped) and
        listeners are notified exactly once. If ``transform`` raises, the set
        is left untouched.

        Args:
            transform: Callable mutating the given list.

        Example:
            >>> validator.change_conditions(lambda conditions: conditions.clear())
        """
        working = list(self._conditions)
        transform(working)
        self._conditions = dict.fromkeys(working)
        self._dispatch_conditions_changed()

    def add_conditions_changed_listener(self, listener: ConditionsChangedListener) -> None:
        self._conditions_listeners.append(listener)

    def remove_conditions_changed_listener(self, listener: ConditionsChangedListener) -> None:
        if listener in self._conditions_listeners:
            self._conditions_listeners.remove(listener)

    def _dispatch_conditions_changed(self) -> None:
        snapshot = self.conditions
        logger.debug("Conditions of %r changed (%d conditions)", self, len(snapshot))
        for listener in list(self._conditions_listeners):
            listener(snapshot)
