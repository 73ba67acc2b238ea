"""Request/response schemas for report and scoring endpoints."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ....domain.entities.report import InspectionReport, ReportStatus
from ....domain.entities.unit import Checkpoint, InspectionUnit, SubUnit
from ....domain.value_objects.condition_summary import ConditionSummary
from ....domain.value_objects.rating import Rating
from ....domain.value_objects.report_metadata import CustomerInfo, InspectorContext, MachineInfo


# Checklist structure
class CheckpointSchema(BaseModel):
    """Checkpoint as sent by the client."""
    id: Optional[str] = Field(None, max_length=64, description="Client-side checkpoint identifier")
    name: str = Field(..., min_length=1, max_length=200, description="Checkpoint display name")
    condition: Optional[str] = Field(None, max_length=50, description="Good, Bad, Better, or empty when unanswered")
    remarks: str = Field("", max_length=1000, description="Free-text remarks")

    def to_domain(self) -> Checkpoint:
        """Convert to domain Checkpoint."""
        return Checkpoint(
            name=self.name,
            condition=self.condition or None,
            remarks=self.remarks.strip(),
            checkpoint_id=self.id
        )


class SubUnitSchema(BaseModel):
    """Sub-unit as sent by the client."""
    id: Optional[str] = Field(None, max_length=64)
    name: str = Field(..., min_length=1, max_length=200)
    checkpoints: List[CheckpointSchema] = Field(default_factory=list)

    def to_domain(self) -> SubUnit:
        """Convert to domain SubUnit."""
        return SubUnit(
            name=self.name,
            checkpoints=tuple(checkpoint.to_domain() for checkpoint in self.checkpoints),
            sub_unit_id=self.id
        )


class UnitSchema(BaseModel):
    """Unit as sent by the client, with direct checkpoints and/or sub-units."""
    id: Optional[str] = Field(None, max_length=64)
    name: str = Field(..., min_length=1, max_length=200)
    checkpoints: List[CheckpointSchema] = Field(default_factory=list)
    sub_units: List[SubUnitSchema] = Field(default_factory=list)

    def to_domain(self) -> InspectionUnit:
        """Convert to domain InspectionUnit."""
        return InspectionUnit(
            name=self.name,
            checkpoints=tuple(checkpoint.to_domain() for checkpoint in self.checkpoints),
            sub_units=tuple(sub_unit.to_domain() for sub_unit in self.sub_units),
            unit_id=self.id
        )


class CheckpointResponse(BaseModel):
    """Checkpoint with its recorded condition."""
    id: Optional[str]
    name: str
    condition: Optional[str]
    remarks: str
    is_answered: bool

    @classmethod
    def from_checkpoint(cls, checkpoint: Checkpoint) -> "CheckpointResponse":
        """Create from domain Checkpoint."""
        return cls(
            id=checkpoint.checkpoint_id,
            name=checkpoint.name,
            condition=checkpoint.condition,
            remarks=checkpoint.remarks,
            is_answered=checkpoint.is_answered
        )


class SubUnitResponse(BaseModel):
    """Sub-unit with its checkpoints."""
    id: Optional[str]
    name: str
    checkpoints: List[CheckpointResponse]


class UnitResponse(BaseModel):
    """Unit with its computed score."""
    id: Optional[str]
    name: str
    unit_score: int = Field(..., ge=0, le=100, description="Unit score percentage")
    unit_rating: Rating = Field(..., description="Rating band the unit score falls into")
    checkpoints: List[CheckpointResponse]
    sub_units: List[SubUnitResponse]

    @classmethod
    def from_unit(cls, unit: InspectionUnit) -> "UnitResponse":
        """Create from domain InspectionUnit."""
        return cls(
            id=unit.unit_id,
            name=unit.name,
            unit_score=unit.unit_score,
            unit_rating=Rating.from_score(unit.unit_score),
            checkpoints=[CheckpointResponse.from_checkpoint(cp) for cp in unit.checkpoints],
            sub_units=[
                SubUnitResponse(
                    id=sub_unit.sub_unit_id,
                    name=sub_unit.name,
                    checkpoints=[CheckpointResponse.from_checkpoint(cp) for cp in sub_unit.checkpoints]
                )
                for sub_unit in unit.sub_units
            ]
        )


class ConditionSummaryResponse(BaseModel):
    """Answered checkpoint counts per condition."""
    good: int
    bad: int
    better: int
    total: int

    @classmethod
    def from_summary(cls, summary: ConditionSummary) -> "ConditionSummaryResponse":
        """Create from domain ConditionSummary."""
        return cls(good=summary.good, bad=summary.bad, better=summary.better, total=summary.total)


# Report metadata
class MachineSchema(BaseModel):
    """Machine under inspection."""
    id: Optional[str] = Field(None, max_length=64)
    name: str = Field(..., min_length=1, max_length=200)
    serial_number: str = Field("", max_length=100)
    manufacturer: str = Field("", max_length=200)
    group: str = Field("", max_length=100)
    model: str = Field("", max_length=100)
    item: str = Field("", max_length=100)
    year: Optional[int] = Field(None, ge=1900, le=2100)

    def to_domain(self) -> MachineInfo:
        """Convert to domain MachineInfo."""
        return MachineInfo(
            name=self.name,
            machine_id=self.id,
            serial_number=self.serial_number,
            manufacturer=self.manufacturer,
            group=self.group,
            model=self.model,
            item=self.item,
            year=self.year
        )

    @classmethod
    def from_machine(cls, machine: MachineInfo) -> "MachineSchema":
        """Create from domain MachineInfo."""
        return cls(
            id=machine.machine_id,
            name=machine.name,
            serial_number=machine.serial_number,
            manufacturer=machine.manufacturer,
            group=machine.group,
            model=machine.model,
            item=machine.item,
            year=machine.year
        )


class CustomerSchema(BaseModel):
    """Customer details."""
    name: str = Field("", max_length=200)
    email: str = Field("", max_length=255)
    phone: str = Field("", max_length=50)
    location: str = Field("", max_length=200)

    def to_domain(self) -> CustomerInfo:
        """Convert to domain CustomerInfo."""
        return CustomerInfo(name=self.name, email=self.email, phone=self.phone, location=self.location)


class InspectorSchema(BaseModel):
    """Inspector owning the report."""
    id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=200)
    registration_id: str = Field("", max_length=64)
    role: str = Field("", max_length=50)

    def to_domain(self) -> InspectorContext:
        """Convert to domain InspectorContext."""
        return InspectorContext(
            inspector_id=self.id,
            name=self.name,
            registration_id=self.registration_id,
            role=self.role
        )


# Requests
class CreateReportRequest(BaseModel):
    """Request model for creating a draft report."""
    machine: MachineSchema
    inspector: InspectorSchema
    customer: Optional[CustomerSchema] = None
    units: List[UnitSchema] = Field(default_factory=list, description="Checklist units")
    comments: str = Field("", max_length=2000)


class CheckpointAddress(BaseModel):
    """Position of a checkpoint inside a report."""
    unit_index: int = Field(..., ge=0)
    sub_unit_index: Optional[int] = Field(None, ge=0, description="Set for checkpoints nested in a sub-unit")
    checkpoint_index: int = Field(..., ge=0)


class UpdateConditionRequest(CheckpointAddress):
    """Request model for recording a checkpoint condition."""
    condition: Optional[str] = Field(None, max_length=50, description="Good, Bad, Better, or empty to clear")


class UpdateRemarksRequest(CheckpointAddress):
    """Request model for recording checkpoint remarks."""
    remarks: str = Field("", max_length=1000)


class UpdateCommentsRequest(BaseModel):
    """Request model for report comments."""
    comments: str = Field("", max_length=2000)


class ScorePreviewRequest(BaseModel):
    """Request model for a stateless score calculation."""
    units: List[UnitSchema] = Field(default_factory=list)


# Responses
class ReportResponse(BaseModel):
    """Response model for report details."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    status: ReportStatus
    machine: MachineSchema
    inspector: InspectorSchema
    customer: CustomerSchema
    units: List[UnitResponse]
    overall_score: int = Field(..., ge=0, le=100)
    overall_rating: Rating
    comments: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_report(cls, report: InspectionReport) -> "ReportResponse":
        """Create from domain InspectionReport."""
        return cls(
            id=report.id,
            status=report.status,
            machine=MachineSchema.from_machine(report.machine),
            inspector=InspectorSchema(
                id=report.inspector.inspector_id,
                name=report.inspector.name,
                registration_id=report.inspector.registration_id,
                role=report.inspector.role
            ),
            customer=CustomerSchema(
                name=report.customer.name,
                email=report.customer.email,
                phone=report.customer.phone,
                location=report.customer.location
            ),
            units=[UnitResponse.from_unit(unit) for unit in report.units],
            overall_score=report.overall_score,
            overall_rating=report.overall_rating,
            comments=report.comments,
            created_at=report.created_at,
            updated_at=report.updated_at
        )


class ReportListResponse(BaseModel):
    """Response model for report list."""
    reports: List[ReportResponse]
    total: int


class ReportSummaryResponse(BaseModel):
    """Scores and condition counts of a report."""
    id: UUID
    status: ReportStatus
    overall_score: int
    overall_rating: Rating
    unit_scores: List[UnitResponse]
    conditions: ConditionSummaryResponse


class ScorePreviewResponse(BaseModel):
    """Response model for a stateless score calculation."""
    units: List[UnitResponse]
    overall_score: int
    overall_rating: Rating
    conditions: ConditionSummaryResponse


class RatingResponse(BaseModel):
    """Rating band of a score."""
    score: int
    rating: Rating
    description: str
