"""Condition summary value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConditionSummary:
    """Immutable count of answered checkpoints per condition."""

    good: int = 0
    bad: int = 0
    better: int = 0

    def __post_init__(self) -> None:
        """Validate summary counts."""
        if self.good < 0 or self.bad < 0 or self.better < 0:
            raise ValueError("Condition counts cannot be negative")

    @property
    def total(self) -> int:
        """Get the number of answered checkpoints."""
        return self.good + self.bad + self.better
