"""Checkpoint condition enumeration and its point scale."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Condition(Enum):
    """Inspector judgement recorded against a single checkpoint."""

    GOOD = "Good"
    BAD = "Bad"
    BETTER = "Better"

    @property
    def points(self) -> int:
        """Get the fixed point value of this condition."""
        return CONDITION_POINTS[self]

    @classmethod
    def parse(cls, value: Union["Condition", str, None]) -> Optional["Condition"]:
        """Return the matching condition, or None for empty/unrecognized input.

        Matching is exact and case-sensitive once surrounding whitespace is
        stripped, so "Good" is recognized while "good" is not.
        """
        if isinstance(value, Condition):
            return value
        if not isinstance(value, str):
            return None

        candidate = value.strip()
        for condition in cls:
            if condition.value == candidate:
                return condition
        return None


CONDITION_POINTS = {
    Condition.GOOD: 80,
    Condition.BETTER: 100,
    Condition.BAD: 40,
}


@dataclass(frozen=True)
class ConditionScore:
    """Immutable value object for the scoring outcome of one checkpoint.

    A checkpoint is either answered, carrying its condition and points, or
    unanswered. Unanswered checkpoints are left out of both the sum and the
    count when a unit is averaged.
    """

    condition: Optional[Condition] = None

    def __post_init__(self) -> None:
        """Validate condition score data."""
        if self.condition is not None and not isinstance(self.condition, Condition):
            raise ValueError("condition must be a Condition enum or None")

    @classmethod
    def answered(cls, condition: Condition) -> "ConditionScore":
        """Build the score of an answered checkpoint."""
        return cls(condition=condition)

    @classmethod
    def unanswered(cls) -> "ConditionScore":
        """Build the score of an empty or unrecognized checkpoint."""
        return cls(condition=None)

    @property
    def is_answered(self) -> bool:
        """Check if the checkpoint counts towards its unit score."""
        return self.condition is not None

    @property
    def points(self) -> Optional[int]:
        """Get the points, or None when unanswered."""
        if self.condition is None:
            return None
        return self.condition.points
