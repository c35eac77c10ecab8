"""Insight x Context x Execution scoring.

Every finding is scored on three independent dimensions in [0, 10]:

- insight: how much the finding matters in principle
- context: how much it matters in the environment being analysed
- execution: how mechanical and safe the fix is

The combined score is ``insight * context * execution / 100`` (range 0-10)
and maps to a priority bucket.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import math
from numbers import Real

from schemalens_mcp.schema_tools.constants import Constants, Priority
from schemalens_mcp.schema_tools.exceptions import ScoreRangeError


def _check_dimension(name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        msg = f"{name.capitalize()} score must be a number, got {value!r}"
        raise ScoreRangeError(msg)
    number = float(value)
    if not math.isfinite(number) or not Constants.SCORE_MIN <= number <= Constants.SCORE_MAX:
        msg = f"{name.capitalize()} score must be between 0 and 10, got {value}"
        raise ScoreRangeError(msg)
    return number


def priority_for(combined: float) -> Priority:
    """Map a combined score to its priority bucket."""
    if combined >= Constants.HIGH_PRIORITY_THRESHOLD:
        return Priority.HIGH
    if combined >= Constants.MEDIUM_PRIORITY_THRESHOLD:
        return Priority.MEDIUM
    return Priority.LOW


@dataclass(frozen=True)
class ScoreModel:
    """Immutable three-dimension score with derived combined value and priority.

    Raises:
        ScoreRangeError: If any dimension is non-numeric, non-finite or outside [0, 10]
    """

    insight: float
    context: float
    execution: float
    combined: float = field(init=False)
    priority: Priority = field(init=False)

    def __post_init__(self) -> None:
        insight = _check_dimension("insight", self.insight)
        context = _check_dimension("context", self.context)
        execution = _check_dimension("execution", self.execution)
        object.__setattr__(self, "insight", insight)
        object.__setattr__(self, "context", context)
        object.__setattr__(self, "execution", execution)
        combined = insight * context * execution / 100.0
        object.__setattr__(self, "combined", combined)
        object.__setattr__(self, "priority", priority_for(combined))

    @classmethod
    def create(cls, insight: float, context: float, execution: float) -> ScoreModel:
        return cls(insight=insight, context=context, execution=execution)

    def compare(self, other: ScoreModel) -> int:
        """Return a negative, zero or positive number ordering by combined score."""
        if self.combined < other.combined:
            return -1
        if self.combined > other.combined:
            return 1
        return 0

    def is_stronger_than(self, other: ScoreModel) -> bool:
        return self.compare(other) > 0

    @property
    def is_high_priority(self) -> bool:
        return self.priority is Priority.HIGH

    @property
    def is_medium_priority(self) -> bool:
        return self.priority is Priority.MEDIUM

    @property
    def is_low_priority(self) -> bool:
        return self.priority is Priority.LOW

    def describe(self) -> str:
        return (
            f"I:{self.insight:g} x C:{self.context:g} x E:{self.execution:g} "
            f"= {self.combined:.2f} ({self.priority.value})"
        )
