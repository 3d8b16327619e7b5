"""Tests for livevalid.mux module."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from livevalid.condition import Condition
from livevalid.conditions import Contains
from livevalid.live import MutableLiveValue
from livevalid.live_validator import LiveValidator
from livevalid.mux import MuxValidator
from livevalid.operators import Disjunction
from livevalid.result import ValidationResult

if TYPE_CHECKING:
    from conftest import CountingCondition


@pytest.fixture
def members(source: MutableLiveValue[str]) -> tuple[LiveValidator[str], ...]:
    """Three validators on one source requiring X, Y and Z."""
    return (
        LiveValidator(source, Contains("X")),
        LiveValidator(source, Contains("Y")),
        LiveValidator(source, Contains("Z")),
    )


class TestAggregation:
    """Tests for the aggregate verdict of active multiplexers."""

    def test_first_missing_member_reports(
        self, source: MutableLiveValue[str], members: tuple[LiveValidator[str], ...]
    ) -> None:
        """Test the aggregate follows the members' verdicts."""
        mux = MuxValidator(members)
        mux.observe(lambda result: None)

        source.value = "XY"
        assert mux.state.value == ValidationResult.invalid("no Z")
        assert not mux.is_valid()

        source.value = "XYZ"
        assert mux.is_valid()
        assert mux.state.value is not None
        assert mux.state.value.error_message is None

    def test_observing_activates_members(self, members: tuple[LiveValidator[str], ...]) -> None:
        mux = MuxValidator(members)
        assert not any(member.active for member in members)

        subscription = mux.observe(lambda result: None)
        assert all(member.active for member in members)

        subscription.cancel()
        assert not mux.active
        assert not any(member.active for member in members)

    def test_members_of_different_types(self) -> None:
        """Test members may validate unrelated data."""
        name: MutableLiveValue[str] = MutableLiveValue("")
        age: MutableLiveValue[int] = MutableLiveValue(0)
        mux = MuxValidator(
            [
                LiveValidator(name, Condition.create(lambda v: bool(v), "name missing")),
                LiveValidator(age, Condition.create(lambda v: v is not None and v > 0, "bad age")),
            ]
        )
        seen: list[Any] = []
        mux.observe(seen.append)
        assert seen[-1] == ValidationResult.invalid("name missing")

        name.value = "Ada"
        assert seen[-1] == ValidationResult.invalid("bad age")

        age.value = 36
        assert seen[-1] == ValidationResult.valid()

    def test_members_are_never_asked_to_validate(
        self, source: MutableLiveValue[str], counting_condition: CountingCondition
    ) -> None:
        """Test aggregation reads cached verdicts only."""
        member = LiveValidator(source, counting_condition)
        mux = MuxValidator([member])
        mux.observe(lambda result: None)
        assert counting_condition.calls == [None]

        mux.recheck()
        mux.set_operator(Disjunction())

        assert counting_condition.calls == [None]

    def test_empty_mux_activation(self) -> None:
        """Test an empty multiplexer is valid once observed."""
        mux = MuxValidator()
        seen: list[Any] = []

        mux.observe(seen.append)

        assert seen == [ValidationResult.valid()]

    def test_is_valid_before_any_verdict(self) -> None:
        assert not MuxValidator().is_valid()

    def test_remove_observer(self, members: tuple[LiveValidator[str], ...]) -> None:
        mux = MuxValidator(members)
        seen: list[Any] = []
        mux.observe(seen.append)
        mux.remove_observer(seen.append)
        assert not mux.active


class TestMembership:
    """Tests for adding and removing members."""

    def test_remove_validator_rechecks(
        self, source: MutableLiveValue[str], members: tuple[LiveValidator[str], ...]
    ) -> None:
        """Test a removed member no longer counts nor stays active."""
        mux = MuxValidator(members)
        mux.observe(lambda result: None)
        source.value = "XY"

        mux.remove_validator(members[2])

        assert mux.is_valid()
        assert mux.validators == members[:2]
        assert not members[2].active

    def test_remove_absent_validator(self, members: tuple[LiveValidator[str], ...]) -> None:
        mux = MuxValidator(members[:1])
        mux.remove_validator(members[1])
        assert mux.validators == members[:1]

    def test_add_duplicate_validator(self, members: tuple[LiveValidator[str], ...]) -> None:
        """Test re-adding a member changes nothing and pushes nothing."""
        mux = MuxValidator(members[:1])
        seen: list[Any] = []
        mux.observe(seen.append)
        count = len(seen)

        mux.add_validator(members[0])
        mux.add_validators(members[:1])

        assert mux.validators == members[:1]
        assert len(seen) == count

    def test_add_while_active_pushes_once(
        self, source: MutableLiveValue[str], members: tuple[LiveValidator[str], ...]
    ) -> None:
        """Test a member added to an active mux joins with one new aggregate."""
        source.value = "XY"
        mux = MuxValidator(members[:2])
        seen: list[Any] = []
        mux.observe(seen.append)
        count = len(seen)

        mux.add_validator(members[2])

        assert len(seen) == count + 1
        assert seen[-1] == ValidationResult.invalid("no Z")
        assert members[2].active

    def test_dormant_add_uses_cached_verdicts(
        self, source: MutableLiveValue[str], counting_condition: CountingCondition
    ) -> None:
        """Test a dormant mux rechecks against members' latest verdicts."""
        explicit = LiveValidator(source, Contains("X"))
        explicit.validate("abc")
        counted = LiveValidator(source, counting_condition)
        mux = MuxValidator()

        mux.add_validator(explicit)
        mux.add_validator(counted)

        assert mux.state.value == ValidationResult.invalid("no X")
        assert counting_condition.calls == []
        assert not explicit.active

    def test_add_validators_in_order(self, members: tuple[LiveValidator[str], ...]) -> None:
        mux = MuxValidator()
        mux.add_validators(members)
        assert mux.validators == members

    def test_add_validators_while_active_pushes_once(self) -> None:
        """Test a batch added to an active mux yields one complete aggregate."""
        text = MutableLiveValue("X")
        mux = MuxValidator()
        seen: list[Any] = []
        mux.observe(seen.append)
        seen.clear()
        batch = [LiveValidator(text, Contains("X")), LiveValidator(text, Contains("Y"))]

        mux.add_validators(batch)

        assert seen == [ValidationResult.invalid("no Y")]
        assert all(member.active for member in batch)

        text.value = "XY"
        assert seen[-1] == ValidationResult.valid()


class TestOperatorAndSources:
    """Tests for operator replacement and watched sources."""

    def test_set_operator_rechecks_then_notifies(
        self, source: MutableLiveValue[str], members: tuple[LiveValidator[str], ...]
    ) -> None:
        """Test listeners see the aggregate computed with the new operator."""
        mux = MuxValidator(members)
        mux.observe(lambda result: None)
        source.value = "X"
        observed: list[bool] = []
        mux.add_operator_changed_listener(lambda: observed.append(mux.is_valid()))

        mux.set_operator(Disjunction())

        assert observed == [True]
        assert isinstance(mux.operator, Disjunction)

    def test_remove_operator_listener(self) -> None:
        mux = MuxValidator()
        calls: list[str] = []

        def listener() -> None:
            calls.append("changed")

        mux.add_operator_changed_listener(listener)
        mux.remove_operator_changed_listener(listener)
        mux.remove_operator_changed_listener(listener)
        mux.set_operator(Disjunction())

        assert calls == []

    def test_watch_on_edits_membership(
        self, source: MutableLiveValue[str], members: tuple[LiveValidator[str], ...]
    ) -> None:
        """Test a watched flag adding and removing a member."""
        require_z = MutableLiveValue(False)
        mux = MuxValidator(members[:2])

        def on_flag(enabled: Any) -> None:
            if enabled:
                mux.add_validator(members[2])
            else:
                mux.remove_validator(members[2])

        mux.watch_on(require_z, on_flag)
        mux.observe(lambda result: None)
        source.value = "XY"
        assert mux.is_valid()

        require_z.value = True
        assert mux.state.value == ValidationResult.invalid("no Z")

        mux.remove_source(require_z)
        require_z.value = False
        assert not mux.is_valid()
        assert not require_z.has_observers

    def test_member_state_is_not_a_plain_source(
        self, members: tuple[LiveValidator[str], ...]
    ) -> None:
        mux = MuxValidator(members)
        with pytest.raises(ValueError, match="remove_validator"):
            mux.remove_source(members[0].state)
