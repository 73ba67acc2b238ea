"""Checklist structure: units, sub-units and checkpoints."""

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from ..value_objects.condition import Condition


@dataclass(frozen=True)
class Checkpoint:
    """A single inspectable attribute of a machine section.

    ``condition`` keeps the raw value supplied by the client. Values outside
    the known conditions are tolerated here and treated as unanswered when
    scored.
    """

    name: str
    condition: Optional[str] = None
    remarks: str = ""
    checkpoint_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate checkpoint data."""
        if not self.name or not self.name.strip():
            raise ValueError("Checkpoint name cannot be empty")
        if isinstance(self.condition, Condition):
            object.__setattr__(self, "condition", self.condition.value)

    @property
    def parsed_condition(self) -> Optional[Condition]:
        """Get the recognized condition, if any."""
        return Condition.parse(self.condition)

    @property
    def is_answered(self) -> bool:
        """Check if the checkpoint holds a recognized condition."""
        return self.parsed_condition is not None

    def with_condition(self, condition: Union[Condition, str, None]) -> "Checkpoint":
        """Return a copy with a new condition."""
        if isinstance(condition, Condition):
            condition = condition.value
        return replace(self, condition=condition)

    def with_remarks(self, remarks: str) -> "Checkpoint":
        """Return a copy with new remarks."""
        return replace(self, remarks=(remarks or "").strip())


@dataclass(frozen=True)
class SubUnit:
    """Named group of checkpoints nested one level under a unit."""

    name: str
    checkpoints: Tuple[Checkpoint, ...] = ()
    sub_unit_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate sub-unit data."""
        if not self.name or not self.name.strip():
            raise ValueError("Sub-unit name cannot be empty")
        object.__setattr__(self, "checkpoints", tuple(self.checkpoints))


@dataclass(frozen=True)
class InspectionUnit:
    """Named machine section holding checkpoints directly, through sub-units, or both."""

    name: str
    checkpoints: Tuple[Checkpoint, ...] = ()
    sub_units: Tuple[SubUnit, ...] = ()
    unit_score: int = 0
    unit_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate unit data."""
        if not self.name or not self.name.strip():
            raise ValueError("Unit name cannot be empty")
        if not isinstance(self.unit_score, int) or not (0 <= self.unit_score <= 100):
            raise ValueError("Unit score must be an integer between 0 and 100")
        object.__setattr__(self, "checkpoints", tuple(self.checkpoints))
        object.__setattr__(self, "sub_units", tuple(self.sub_units))

    def all_checkpoints(self) -> Tuple[Checkpoint, ...]:
        """Get direct checkpoints followed by sub-unit checkpoints, in order."""
        flattened = list(self.checkpoints)
        for sub_unit in self.sub_units:
            flattened.extend(sub_unit.checkpoints)
        return tuple(flattened)

    def with_score(self, unit_score: int) -> "InspectionUnit":
        """Return a copy carrying a new unit score."""
        return replace(self, unit_score=unit_score)

    def get_checkpoint(self, checkpoint_index: int, sub_unit_index: Optional[int] = None) -> Checkpoint:
        """Get a checkpoint by position, directly or inside a sub-unit."""
        checkpoints = self._checkpoints_at(sub_unit_index)
        if not (0 <= checkpoint_index < len(checkpoints)):
            raise ValueError(f"Checkpoint index {checkpoint_index} is out of range for unit '{self.name}'")
        return checkpoints[checkpoint_index]

    def replace_checkpoint(
        self,
        checkpoint_index: int,
        checkpoint: Checkpoint,
        sub_unit_index: Optional[int] = None
    ) -> "InspectionUnit":
        """Return a copy with one checkpoint swapped out."""
        self.get_checkpoint(checkpoint_index, sub_unit_index)

        if sub_unit_index is None:
            checkpoints = list(self.checkpoints)
            checkpoints[checkpoint_index] = checkpoint
            return replace(self, checkpoints=tuple(checkpoints))

        sub_units = list(self.sub_units)
        sub_unit = sub_units[sub_unit_index]
        sub_checkpoints = list(sub_unit.checkpoints)
        sub_checkpoints[checkpoint_index] = checkpoint
        sub_units[sub_unit_index] = replace(sub_unit, checkpoints=tuple(sub_checkpoints))
        return replace(self, sub_units=tuple(sub_units))

    def _checkpoints_at(self, sub_unit_index: Optional[int]) -> Tuple[Checkpoint, ...]:
        """Get the checkpoint collection addressed by a sub-unit index."""
        if sub_unit_index is None:
            return self.checkpoints
        if not (0 <= sub_unit_index < len(self.sub_units)):
            raise ValueError(f"Sub-unit index {sub_unit_index} is out of range for unit '{self.name}'")
        return self.sub_units[sub_unit_index].checkpoints
