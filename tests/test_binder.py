"""Tests for livevalid.binder module."""

from __future__ import annotations

from typing import Any

import pytest

from livevalid.binder import ValidatorBinder
from livevalid.conditions import Contains, RequiredField, TextMaxLength
from livevalid.live import MutableLiveValue
from livevalid.live_validator import LiveValidator
from livevalid.operators import Disjunction
from livevalid.result import ValidationResult


@pytest.fixture
def reports() -> list[tuple[Any, Any]]:
    return []


@pytest.fixture
def binder(
    source: MutableLiveValue[str], reports: list[tuple[Any, Any]]
) -> ValidatorBinder[str, str]:
    """Binder for a validator requiring "x", reporting into ``reports``."""
    validator = LiveValidator(source, Contains("x"))
    return ValidatorBinder(validator, lambda target, result: reports.append((target, result)), "field")


class TestAttachment:
    """Tests for attach and detach."""

    def test_starts_detached(
        self, binder: ValidatorBinder[str, str], reports: list[tuple[Any, Any]]
    ) -> None:
        assert not binder.attached
        assert not binder.validator.active
        assert reports == []

    def test_attach_reports_current_verdict(
        self,
        binder: ValidatorBinder[str, str],
        source: MutableLiveValue[str],
        reports: list[tuple[Any, Any]],
    ) -> None:
        """Test attaching delivers a verdict and follows the source."""
        binder.attach()
        assert reports == [("field", ValidationResult.invalid("no x"))]

        source.value = "x"

        assert reports[-1] == ("field", ValidationResult.valid())
        assert binder.attached

    def test_attach_is_idempotent(
        self,
        binder: ValidatorBinder[str, str],
        source: MutableLiveValue[str],
        reports: list[tuple[Any, Any]],
    ) -> None:
        """Test attaching twice never delivers a verdict twice."""
        binder.attach()
        binder.attach()
        count = len(reports)

        source.value = "abc"

        assert len(reports) == count + 1
        assert binder.validator.state.observer_count == 1

    def test_detach(
        self,
        binder: ValidatorBinder[str, str],
        source: MutableLiveValue[str],
        reports: list[tuple[Any, Any]],
    ) -> None:
        binder.attach()
        binder.detach()
        binder.detach()
        count = len(reports)

        source.value = "x"

        assert len(reports) == count
        assert not binder.attached
        assert not binder.validator.active

    def test_reattach(
        self,
        binder: ValidatorBinder[str, str],
        source: MutableLiveValue[str],
        reports: list[tuple[Any, Any]],
    ) -> None:
        """Test a re-attached binder reports the verdict for the current data."""
        binder.attach()
        binder.detach()
        source.value = "x"

        binder.attach()

        assert reports[-1] == ("field", ValidationResult.valid())


class TestChecks:
    """Tests for explicit validation through the binder."""

    def test_check_detached_reports(
        self,
        binder: ValidatorBinder[str, str],
        source: MutableLiveValue[str],
        reports: list[tuple[Any, Any]],
    ) -> None:
        source.value = "abc"

        result = binder.check()

        assert result == ValidationResult.invalid("no x")
        assert reports == [("field", result)]

    def test_check_attached_reports_once(
        self, binder: ValidatorBinder[str, str], reports: list[tuple[Any, Any]]
    ) -> None:
        """Test an attached binder receives a check's verdict exactly once."""
        binder.attach()
        count = len(reports)

        binder.check()

        assert len(reports) == count + 1

    def test_validate_does_not_report(
        self, binder: ValidatorBinder[str, str], reports: list[tuple[Any, Any]]
    ) -> None:
        assert not binder.validate().is_valid
        assert not binder.is_valid()
        assert reports == []

    def test_validation_data(
        self, binder: ValidatorBinder[str, str], source: MutableLiveValue[str]
    ) -> None:
        source.value = "data"
        assert binder.validation_data == "data"


class TestHooks:
    """Tests for condition and operator hooks."""

    def test_max_length_follows_conditions(self, source: MutableLiveValue[str]) -> None:
        """Test the binder keeps the tightest maximum length current."""
        validator = LiveValidator(source, TextMaxLength(10))
        changes: list[Any] = []
        binder: ValidatorBinder[None, str] = ValidatorBinder(
            validator, lambda target, result: None, on_conditions_changed=changes.append
        )
        assert binder.max_length == 10
        binder.attach()

        limit = TextMaxLength(4)
        validator.add_condition(limit)
        assert binder.max_length == 4

        validator.remove_condition(limit)
        assert binder.max_length == 10
        assert len(changes) == 2
        assert changes[-1] == validator.conditions

    def test_max_length_refreshed_on_attach(self, source: MutableLiveValue[str]) -> None:
        """Test changes made while detached are picked up on attach."""
        validator = LiveValidator(source, RequiredField())
        binder: ValidatorBinder[None, str] = ValidatorBinder(validator, lambda target, result: None)
        assert binder.max_length is None

        validator.add_condition(TextMaxLength(5))
        assert binder.max_length is None

        binder.attach()
        assert binder.max_length == 5

    def test_operator_hook(self, source: MutableLiveValue[str]) -> None:
        validator = LiveValidator(source, Contains("x"))
        calls: list[str] = []
        binder: ValidatorBinder[None, str] = ValidatorBinder(
            validator, lambda target, result: None, on_operator_changed=lambda: calls.append("op")
        )
        binder.attach()

        validator.set_operator(Disjunction())
        binder.detach()
        validator.set_operator(Disjunction())

        assert calls == ["op"]
