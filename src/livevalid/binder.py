"""Binding of a live validator to an arbitrary target.

ValidatorBinder is the seam used by presentation code (a form field, a
terminal line, a test double) to follow a LiveValidator without
re-implementing any validation logic. It can be attached and detached any
number of times.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from livevalid.condition import Condition
from livevalid.conditions import find_max_length
from livevalid.live_validator import LiveValidator
from livevalid.result import ValidationResult

logger = logging.getLogger(__name__)

Target = TypeVar("Target")
D = TypeVar("D")


class ValidatorBinder(Generic[Target, D]):
    """Report the verdicts of a live validator for a target.

    Attributes:
        validator: The bound validator.
        target: Whatever the verdicts are reported for. Passed back to
            ``on_result`` untouched.
        max_length: Tightest maximum text length among the validator's
            conditions, kept current as conditions change.
    """

    def __init__(
        self,
        validator: LiveValidator[D],
        on_result: Callable[[Target | None, ValidationResult | None], Any],
        target: Target | None = None,
        on_conditions_changed: Callable[[tuple[Condition[D], ...]], Any] | None = None,
        on_operator_changed: Callable[[], Any] | None = None,
    ) -> None:
        """Initialize binder. The binder starts detached.

        Args:
            validator: Live validator to follow.
            on_result: Called with ``(target, result)`` for every verdict.
            target: Object the verdicts belong to.
            on_conditions_changed: Optional hook for condition set changes.
            on_operator_changed: Optional hook for operator changes.
        """
        self.validator = validator
        self.target = target
        self._on_result = on_result
        self._conditions_hook = on_conditions_changed
        self._operator_hook = on_operator_changed
        self._attached = False
        self.max_length = find_max_length(validator.conditions)

    @property
    def attached(self) -> bool:
        return self._attached

    @property
    def validation_data(self) -> D | None:
        """Data currently held by the bound source."""
        return self.validator.source.value

    def attach(self) -> None:
        """Start following the validator. Safe to call repeatedly."""
        self.validator.remove_observer(self._deliver)
        self.validator.remove_conditions_changed_listener(self._conditions_changed)
        self.validator.remove_operator_changed_listener(self._operator_changed)

        self.validator.add_conditions_changed_listener(self._conditions_changed)
        self.validator.add_operator_changed_listener(self._operator_changed)
        self._attached = True
        self.max_length = find_max_length(self.validator.conditions)
        self.validator.observe(self._deliver)
        logger.debug("Binder for %r attached", self.target)

    def detach(self) -> None:
        """Stop following the validator. Safe to call repeatedly."""
        self.validator.remove_observer(self._deliver)
        self.validator.remove_conditions_changed_listener(self._conditions_changed)
        self.validator.remove_operator_changed_listener(self._operator_changed)
        if self._attached:
            logger.debug("Binder for %r detached", self.target)
        self._attached = False

    def validate(self) -> ValidationResult:
        """Validate the current data now, whether or not the validator is active."""
        return self.validator.validate(self.validation_data)

    def check(self) -> ValidationResult:
        """Validate the current data now and report the verdict."""
        result = self.validate()
        # An attached binder already received the verdict through the validator's state.
        if not self._attached:
            self._on_result(self.target, result)
        return result

    def is_valid(self) -> bool:
        return self.validate().is_valid

    def _deliver(self, result: ValidationResult | None) -> None:
        self._on_result(self.target, result)

    def _conditions_changed(self, conditions: tuple[Condition[D], ...]) -> None:
        self.max_length = find_max_length(conditions)
        if self._conditions_hook is not None:
            self._conditions_hook(conditions)

    def _operator_changed(self) -> None:
        if self._operator_hook is not None:
            self._operator_hook()
