"""Validator multiplexer.

MuxValidator subscribes to the verdicts of other live validators and, when any
of them changes, recomputes one aggregate verdict. Unlike LiveValidator it is
not bound to a single source with a single data type: its members may
validate completely different things.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from livevalid.live import LiveValue, MediatorLiveValue, Subscription
from livevalid.live_validator import LiveValidator
from livevalid.operators import Conjunction, Operator
from livevalid.result import ValidationResult
from livevalid.validator import OperatorChangedListener

logger = logging.getLogger(__name__)


class MuxValidator:
    """Aggregate the verdicts of many live validators into one.

    The aggregate is ``operator.validate`` over the latest known verdict of
    every member, in the order members were added. Members that have not
    produced a verdict yet are skipped. Members are never asked to validate
    during aggregation; only their cached verdicts are read.

    Attributes:
        state: Latest aggregate verdict.
        validators: Snapshot of the members.
        operator: Operator deciding the aggregate verdict.
    """

    def __init__(
        self,
        validators: Iterable[LiveValidator[Any]] | None = None,
        operator: Operator | None = None,
    ) -> None:
        """Initialize multiplexer.

        Args:
            validators: Initial members.
            operator: Aggregation operator. Defaults to Conjunction.
        """
        self._operator: Operator = operator if operator is not None else Conjunction()
        self._validators: dict[LiveValidator[Any], None] = {}
        self._operator_listeners: list[OperatorChangedListener] = []
        self._holding = False
        self._mediator: MediatorLiveValue[ValidationResult] = MediatorLiveValue(
            on_active=self._on_activated
        )

        if validators is not None:
            self.add_validators(validators)

    @property
    def state(self) -> LiveValue[ValidationResult]:
        return self._mediator

    @property
    def validators(self) -> tuple[LiveValidator[Any], ...]:
        return tuple(self._validators)

    @property
    def active(self) -> bool:
        return self._mediator.has_observers

    # -------------------------------------------------------------------------
    # Operator
    # -------------------------------------------------------------------------

    @property
    def operator(self) -> Operator:
        return self._operator

    def set_operator(self, operator: Operator) -> None:
        """Replace the aggregation operator, recheck, then notify listeners."""
        self._operator = operator
        self.recheck()
        for listener in list(self._operator_listeners):
            listener()

    def add_operator_changed_listener(self, listener: OperatorChangedListener) -> None:
        self._operator_listeners.append(listener)

    def remove_operator_changed_listener(self, listener: OperatorChangedListener) -> None:
        if listener in self._operator_listeners:
            self._operator_listeners.remove(listener)

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    def _attach(self, validator: LiveValidator[Any]) -> bool:
        if validator in self._validators:
            return False
        self._validators[validator] = None
        self._mediator.add_source(validator.state, self._on_member_changed)
        return True

    def add_validator(self, validator: LiveValidator[Any]) -> None:
        """Add a member. Adding one that is already present does nothing.

        While the multiplexer is active, subscribing to the member's state
        delivers its verdict and that delivery performs the recheck.
        """
        if not self._attach(validator):
            return
        logger.debug("Added %r to mux (%d members)", validator, len(self._validators))
        if not self.active:
            self.recheck()

    def add_validators(self, validators: Iterable[LiveValidator[Any]]) -> None:
        """Add several members, then recheck once.

        On an active multiplexer the members' replays do not recheck while
        they are being attached, so observers get a single aggregate.
        """
        self._holding = True
        try:
            added = [validator for validator in validators if self._attach(validator)]
        finally:
            self._holding = False
        if added:
            logger.debug("Added %d members to mux (%d members)", len(added), len(self._validators))
            self.recheck()

    def remove_validator(self, validator: LiveValidator[Any]) -> None:
        """Remove a member. Removing one that is absent does nothing."""
        if validator not in self._validators:
            return
        del self._validators[validator]
        self._mediator.remove_source(validator.state)
        logger.debug("Removed %r from mux (%d members)", validator, len(self._validators))
        self.recheck()

    def watch_on(self, source: LiveValue[Any], observer: Callable[[Any], Any]) -> None:
        """Follow a live value that does not take part in aggregation.

        Useful to react to outside signals, for example by adding or removing
        members when a flag changes.
        """
        self._mediator.add_source(source, observer)

    def remove_source(self, source: LiveValue[Any]) -> None:
        """Stop following a source added with ``watch_on``.

        Raises:
            ValueError: If ``source`` is the state of a member; use
                ``remove_validator`` instead.
        """
        if any(source is validator.state for validator in self._validators):
            raise ValueError("Member states are removed with remove_validator")
        self._mediator.remove_source(source)

    # -------------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------------

    def recheck(self) -> ValidationResult:
        """Recompute the aggregate verdict from the members' cached verdicts.

        Returns:
            The new aggregate verdict, which is also pushed to ``state``.
        """
        results = [
            validator.state.value
            for validator in self._validators
            if validator.state.has_value
        ]
        result = self._operator.validate(results)
        self._mediator.set_value(result)
        return result

    def _on_member_changed(self, _result: ValidationResult | None) -> None:
        if not self._holding:
            self.recheck()

    def _on_activated(self, evaluated: bool) -> None:
        if not evaluated and not self._mediator.has_value:
            self.recheck()

    def observe(self, observer: Callable[[ValidationResult | None], Any]) -> Subscription:
        """Subscribe to aggregate verdicts. Activates every member."""
        return self._mediator.subscribe(observer)

    def remove_observer(self, observer: Callable[[ValidationResult | None], Any]) -> None:
        self._mediator.unsubscribe(observer)

    def is_valid(self) -> bool:
        result = self._mediator.value
        return result is not None and result.is_valid
