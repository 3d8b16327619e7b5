"""Validator bound to a live source.

As soon as the data in the source changes, LiveValidator checks it against its
conditions and publishes the verdict through ``state``.

- Activation: the validator needs an observer. Until something observes
  ``state`` (directly, through ``observe``, or through a MuxValidator) the
  validator is dormant and ignores its sources. The first observer triggers
  an evaluation against the source's current value, plus one more for each
  trigger source that already holds a value.
- Validation: while active, every source emission, condition change and
  operator change re-evaluates synchronously.
- Additional sources: other live values can trigger re-validation
  (``trigger_on``) or run arbitrary callbacks (``watch_on``), for example to
  change the condition set when a flag flips.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from livevalid.condition import Condition
from livevalid.live import _UNSET, LiveValue, MediatorLiveValue, Subscription
from livevalid.operators import Operator
from livevalid.result import ValidationResult
from livevalid.validator import Validator

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LiveValidator(Validator[T]):
    """Reactive validator for the values of a live source.

    Example:
        ```python
        source = MutableLiveValue("123")
        validator = LiveValidator(source, Contains("x"))
        validator.observe(print)   # ValidationResult(is_valid=False, error_message='no x')
        source.value = "x123"      # ValidationResult(is_valid=True, error_message=None)
        ```
    """

    def __init__(
        self,
        source: LiveValue[T],
        initial_condition: Condition[T] | None = None,
        operator: Operator | None = None,
    ) -> None:
        """Initialize live validator.

        Args:
            source: Live value whose data is validated.
            initial_condition: Optional first condition.
            operator: Result operator. Defaults to Conjunction.
        """
        self._source = source
        self._mediator: MediatorLiveValue[ValidationResult] = MediatorLiveValue(
            on_active=self._on_activated
        )
        self._mediator.add_source(source, self._on_source_changed)
        super().__init__(initial_condition, operator)

        self.add_conditions_changed_listener(self._on_conditions_changed)
        self.add_operator_changed_listener(self._on_operator_changed)

    @property
    def source(self) -> LiveValue[T]:
        return self._source

    @property
    def state(self) -> LiveValue[ValidationResult]:
        """Latest verdict. New observers receive it immediately."""
        return self._mediator

    @property
    def active(self) -> bool:
        return self._mediator.has_observers

    # -------------------------------------------------------------------------
    # Observation
    # -------------------------------------------------------------------------

    def observe(self, observer: Callable[[ValidationResult | None], Any]) -> Subscription:
        """Subscribe to verdicts. Activates the validator."""
        return self._mediator.subscribe(observer)

    def remove_observer(self, observer: Callable[[ValidationResult | None], Any]) -> None:
        self._mediator.unsubscribe(observer)

    def is_valid(self) -> bool:
        """Whether the latest verdict is valid. False before the first evaluation."""
        result = self._mediator.value
        return result is not None and result.is_valid

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self, value: Any = _UNSET) -> ValidationResult:
        """Validate a value and publish the verdict to ``state``.

        This always evaluates, whether or not the validator is active.

        Args:
            value: Value to check. Defaults to the source's current value.

        Returns:
            The verdict.
        """
        if value is _UNSET:
            value = self._source.value
        result = super().validate(value)
        self._mediator.set_value(result)
        return result

    def _on_source_changed(self, value: T | None) -> None:
        self.validate(value)

    def _revalidate(self, _value: Any = None) -> None:
        self.validate()

    def _on_conditions_changed(self, _conditions: tuple[Condition[T], ...]) -> None:
        if self.active:
            self.validate()

    def _on_operator_changed(self) -> None:
        if self.active:
            self.validate()

    def _on_activated(self, evaluated: bool) -> None:
        logger.debug("%r activated", self)
        if not evaluated:
            self.validate()

    # -------------------------------------------------------------------------
    # Additional sources
    # -------------------------------------------------------------------------

    def track_source(
        self,
        source: LiveValue[Any],
        on_change: Callable[[Any], Any] | None = None,
    ) -> None:
        """Follow an additional live value.

        Args:
            source: Live value to follow.
            on_change: Called with each value of ``source``. When omitted,
                every emission re-validates the primary source's value.

        Raises:
            SourceConflictError: If ``source`` is already tracked with a
                different callback (this includes the primary source).
        """
        self._mediator.add_source(source, on_change if on_change is not None else self._revalidate)

    def trigger_on(self, *sources: LiveValue[Any]) -> None:
        """Re-validate whenever any of ``sources`` changes."""
        for source in sources:
            self.track_source(source)

    def watch_on(self, *sources: LiveValue[Any], observer: Callable[[Any], Any]) -> None:
        """Call ``observer`` whenever any of ``sources`` changes."""
        for source in sources:
            self.track_source(source, observer)

    def untrack_source(self, source: LiveValue[Any]) -> None:
        """Stop following an additional source. Unknown sources are ignored.

        Raises:
            ValueError: If ``source`` is the primary source.
        """
        if source is self._source:
            raise ValueError("The primary source of a LiveValidator cannot be untracked")
        self._mediator.remove_source(source)

    def __repr__(self) -> str:
        return f"LiveValidator(source={self._source!r}, conditions={len(self.conditions)})"
