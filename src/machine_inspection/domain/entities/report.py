"""Inspection report entity for the machine inspection system."""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union
from uuid import UUID, uuid4

from ..value_objects.condition import Condition
from ..value_objects.rating import Rating
from ..value_objects.report_metadata import CustomerInfo, InspectorContext, MachineInfo
from .unit import InspectionUnit


class ReportStatus(Enum):
    """Report status enumeration."""
    DRAFT = "draft"
    SCORED = "scored"
    SAVED = "saved"


class InspectionReport:
    """Inspection report entity, the aggregate root of a machine inspection."""

    def __init__(
        self,
        machine: MachineInfo,
        inspector: InspectorContext,
        units: Optional[Sequence[InspectionUnit]] = None,
        customer: Optional[CustomerInfo] = None,
        report_id: Optional[UUID] = None,
        overall_score: int = 0,
        overall_rating: Rating = Rating.NOT_GOOD,
        comments: str = "",
        status: ReportStatus = ReportStatus.DRAFT,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        """Initialize report entity."""
        if not isinstance(machine, MachineInfo):
            raise ValueError("Machine must be a MachineInfo instance")
        if not isinstance(inspector, InspectorContext):
            raise ValueError("Inspector must be an InspectorContext instance")
        if not isinstance(overall_rating, Rating):
            raise ValueError("Overall rating must be a Rating enum")
        if not isinstance(status, ReportStatus):
            raise ValueError("Status must be a ReportStatus enum")
        if not isinstance(overall_score, int) or not (0 <= overall_score <= 100):
            raise ValueError("Overall score must be an integer between 0 and 100")

        self._id = report_id or uuid4()
        self._machine = machine
        self._inspector = inspector
        self._customer = customer or CustomerInfo()
        self._units: Tuple[InspectionUnit, ...] = tuple(units or ())
        self._overall_score = overall_score
        self._overall_rating = overall_rating
        self._comments = (comments or "").strip()
        self._status = status
        self._created_at = created_at or datetime.utcnow()
        self._updated_at = updated_at or datetime.utcnow()

        self._validate_units()

    @property
    def id(self) -> UUID:
        """Get report ID."""
        return self._id

    @property
    def machine(self) -> MachineInfo:
        """Get inspected machine."""
        return self._machine

    @property
    def inspector(self) -> InspectorContext:
        """Get owning inspector."""
        return self._inspector

    @property
    def customer(self) -> CustomerInfo:
        """Get customer details."""
        return self._customer

    @property
    def units(self) -> Tuple[InspectionUnit, ...]:
        """Get inspection units."""
        return self._units

    @property
    def overall_score(self) -> int:
        """Get overall score percentage."""
        return self._overall_score

    @property
    def overall_rating(self) -> Rating:
        """Get overall rating."""
        return self._overall_rating

    @property
    def comments(self) -> str:
        """Get inspector comments."""
        return self._comments

    @property
    def status(self) -> ReportStatus:
        """Get report status."""
        return self._status

    @property
    def created_at(self) -> datetime:
        """Get creation timestamp."""
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        """Get last update timestamp."""
        return self._updated_at

    def set_checkpoint_condition(
        self,
        unit_index: int,
        checkpoint_index: int,
        condition: Union[Condition, str, None],
        sub_unit_index: Optional[int] = None
    ) -> None:
        """Record a condition against one checkpoint."""
        self._ensure_editable()
        unit = self._get_unit(unit_index)
        checkpoint = unit.get_checkpoint(checkpoint_index, sub_unit_index)
        self._replace_unit(
            unit_index,
            unit.replace_checkpoint(checkpoint_index, checkpoint.with_condition(condition), sub_unit_index)
        )

    def set_checkpoint_remarks(
        self,
        unit_index: int,
        checkpoint_index: int,
        remarks: str,
        sub_unit_index: Optional[int] = None
    ) -> None:
        """Record remarks against one checkpoint."""
        self._ensure_editable()
        unit = self._get_unit(unit_index)
        checkpoint = unit.get_checkpoint(checkpoint_index, sub_unit_index)
        self._replace_unit(
            unit_index,
            unit.replace_checkpoint(checkpoint_index, checkpoint.with_remarks(remarks), sub_unit_index)
        )

    def update_comments(self, comments: str) -> None:
        """Update inspector comments."""
        self._ensure_editable()
        self._comments = (comments or "").strip()
        self._updated_at = datetime.utcnow()

    def mark_saved(self) -> None:
        """Mark the report as handed off to persistence."""
        if self._status == ReportStatus.SAVED:
            raise ValueError("Report is already saved")

        self._status = ReportStatus.SAVED
        self._updated_at = datetime.utcnow()

    def with_scores(
        self,
        units: Sequence[InspectionUnit],
        overall_score: int,
        overall_rating: Rating,
        status: Optional[ReportStatus] = None
    ) -> "InspectionReport":
        """Return a copy carrying new scores, leaving this report untouched."""
        return InspectionReport(
            machine=self._machine,
            inspector=self._inspector,
            units=units,
            customer=self._customer,
            report_id=self._id,
            overall_score=overall_score,
            overall_rating=overall_rating,
            comments=self._comments,
            status=status or self._status,
            created_at=self._created_at,
            updated_at=datetime.utcnow()
        )

    def has_answered_checkpoints(self) -> bool:
        """Check if any checkpoint holds a recognized condition."""
        return any(
            checkpoint.is_answered
            for unit in self._units
            for checkpoint in unit.all_checkpoints()
        )

    def get_unanswered_checkpoint_names(self) -> List[str]:
        """Get names of checkpoints still waiting for a condition."""
        return [
            f"{unit.name} / {checkpoint.name}"
            for unit in self._units
            for checkpoint in unit.all_checkpoints()
            if not checkpoint.is_answered
        ]

    def is_saved(self) -> bool:
        """Check if report has been saved."""
        return self._status == ReportStatus.SAVED

    def _ensure_editable(self) -> None:
        """Reject changes to a saved report."""
        if self._status == ReportStatus.SAVED:
            raise ValueError("Cannot modify a saved report")

    def _get_unit(self, unit_index: int) -> InspectionUnit:
        """Get a unit by position."""
        if not (0 <= unit_index < len(self._units)):
            raise ValueError(f"Unit index {unit_index} is out of range")
        return self._units[unit_index]

    def _replace_unit(self, unit_index: int, unit: InspectionUnit) -> None:
        """Swap a unit and touch the update timestamp."""
        units = list(self._units)
        units[unit_index] = unit
        self._units = tuple(units)
        self._updated_at = datetime.utcnow()

    def _validate_units(self) -> None:
        """Validate units collection."""
        for unit in self._units:
            if not isinstance(unit, InspectionUnit):
                raise ValueError("All units must be InspectionUnit instances")

    def __eq__(self, other: object) -> bool:
        """Check equality based on report ID."""
        if not isinstance(other, InspectionReport):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        """Hash based on report ID."""
        return hash(self._id)

    def __str__(self) -> str:
        """String representation."""
        return f"InspectionReport({self._id}, {self._machine.name}, {self._status.value})"

    def __repr__(self) -> str:
        """Detailed string representation."""
        return (
            f"InspectionReport(id={self._id}, machine='{self._machine.name}', "
            f"inspector_id={self._inspector.inspector_id}, status={self._status.value}, "
            f"overall_score={self._overall_score}, overall_rating={self._overall_rating.value}, "
            f"units_count={len(self._units)}, created_at={self._created_at.isoformat()})"
        )
