"""livevalid - reactive value validation.

Conditions check values, validators combine conditions, live validators keep
a verdict in sync with a changing source, and a multiplexer aggregates many
live validators into one verdict.
"""

from __future__ import annotations

from livevalid.binder import ValidatorBinder
from livevalid.condition import (
    AndCondition,
    Condition,
    FunctionCondition,
    OrCondition,
    PredicateCondition,
)
from livevalid.conditions import (
    Contains,
    NotNull,
    RegEx,
    RequiredField,
    TextLength,
    TextLengthRange,
    TextMaxLength,
    TextMinLength,
    find_max_length,
)
from livevalid.live import (
    LiveValue,
    MediatorLiveValue,
    MutableLiveValue,
    SourceConflictError,
    Subscription,
)
from livevalid.live_validator import LiveValidator
from livevalid.mux import MuxValidator
from livevalid.operators import Conjunction, Disjunction, Operator, operator_from_name
from livevalid.result import ValidationResult
from livevalid.validator import Validator

__version__ = "0.1.0"

__all__ = [
    # Results and conditions
    "ValidationResult",
    "Condition",
    "FunctionCondition",
    "PredicateCondition",
    "OrCondition",
    "AndCondition",
    # Operators
    "Operator",
    "Conjunction",
    "Disjunction",
    "operator_from_name",
    # Validators
    "Validator",
    "LiveValidator",
    "MuxValidator",
    "ValidatorBinder",
    # Live values
    "LiveValue",
    "MutableLiveValue",
    "MediatorLiveValue",
    "Subscription",
    "SourceConflictError",
    # Standard conditions
    "NotNull",
    "RequiredField",
    "TextMaxLength",
    "TextMinLength",
    "TextLengthRange",
    "TextLength",
    "RegEx",
    "Contains",
    "find_max_length",
]
