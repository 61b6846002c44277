"""Per-field degradation policy for combined analysis results.

Each FieldPolicy states what happens to one output field when its
extraction operation settles: a success assigns the value, a failure
either assigns a fixed fallback or leaves the field out.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from app.services.analysis.fan_out import TaskOutcome

NO_SUMMARY_FALLBACK = "No summary could be generated."


class FailureAction(str, Enum):
    """What to do with a field whose operation failed."""
    FALLBACK = "fallback"
    OMIT = "omit"


@dataclass(frozen=True)
class FieldPolicy:
    """Maps one sub-task outcome onto one output field."""

    field: str
    on_failure: FailureAction
    fallback: Any = None

    def apply(self, outcome: TaskOutcome, values: Dict[str, Any]) -> None:
        """Write this field into ``values`` according to the outcome.

        Omitted fields are not written at all.
        """
        if outcome.succeeded:
            values[self.field] = outcome.value
        elif self.on_failure is FailureAction.FALLBACK:
            values[self.field] = self.fallback


DEFAULT_FIELD_POLICIES: Tuple[FieldPolicy, ...] = (
    FieldPolicy("summary", FailureAction.FALLBACK, NO_SUMMARY_FALLBACK),
    FieldPolicy("key_information", FailureAction.OMIT),
    FieldPolicy("identified_characters", FailureAction.OMIT),
)
