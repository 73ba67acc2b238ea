"""Report service implementing the machine inspection flow."""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict, List, Optional, Sequence, Tuple, Union, TYPE_CHECKING
from uuid import UUID

from src.machine_inspection.domain.entities.report import InspectionReport, ReportStatus
from src.machine_inspection.domain.entities.unit import InspectionUnit
from src.machine_inspection.domain.services import score_engine
from src.machine_inspection.domain.value_objects.condition import Condition
from src.machine_inspection.domain.value_objects.condition_summary import ConditionSummary
from src.machine_inspection.domain.value_objects.rating import Rating
from src.machine_inspection.domain.value_objects.report_metadata import (
    CustomerInfo,
    InspectorContext,
    MachineInfo
)
from src.machine_inspection.infrastructure.logging import (
    get_logger,
    log_business_rule_violation,
    log_score_calculation,
    log_with_extra
)

if TYPE_CHECKING:
    from src.machine_inspection.application.ports.repositories import ReportRepository


class ReportNotFoundError(LookupError):
    """Raised when a report ID does not match any stored report."""

    def __init__(self, report_id: UUID):
        super().__init__(f"Report with ID {report_id} not found")
        self.report_id = report_id


@dataclass(frozen=True)
class ScorePreview:
    """Scores computed for a set of units without storing anything."""

    units: Tuple[InspectionUnit, ...]
    overall_score: int
    overall_rating: Rating
    summary: ConditionSummary


class ReportLocks:
    """Per-report locks so that one report is never scored twice at once."""

    def __init__(self):
        self._locks: Dict[UUID, asyncio.Lock] = {}

    def get(self, report_id: UUID) -> asyncio.Lock:
        """Get the lock guarding a report, creating it on first use."""
        lock = self._locks.get(report_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[report_id] = lock
        return lock

    def discard(self, report_id: UUID) -> None:
        """Forget the lock of a deleted report."""
        self._locks.pop(report_id, None)


class ReportService:
    """Service for managing inspection reports and their scores."""

    def __init__(
        self,
        report_repository: "ReportRepository",
        report_locks: Optional[ReportLocks] = None,
        auto_recalculate: bool = True
    ):
        """Initialize report service with repository dependency.

        Args:
            report_repository: Persistence port for reports
            report_locks: Lock registry shared between service instances
            auto_recalculate: Recompute scores after every condition edit
                instead of waiting for an explicit calculate or save
        """
        self._report_repository = report_repository
        self._report_locks = report_locks or ReportLocks()
        self._auto_recalculate = auto_recalculate
        self._logger = get_logger(__name__)

    async def create_draft(
        self,
        machine: MachineInfo,
        inspector: InspectorContext,
        units: Sequence[InspectionUnit],
        customer: Optional[CustomerInfo] = None,
        comments: str = ""
    ) -> InspectionReport:
        """Create a new report in draft status.

        Args:
            machine: Machine under inspection
            inspector: Inspector owning the report
            units: Checklist units with their checkpoints
            customer: Optional customer details
            comments: Optional inspector comments

        Returns:
            Created report entity

        Raises:
            ValueError: If input validation fails
        """
        self._logger.info(f"Creating report for machine {machine.name} by inspector {inspector.inspector_id}")

        unit_names = [unit.name.strip() for unit in units]
        if len(unit_names) != len(set(unit_names)):
            log_business_rule_violation(
                self._logger,
                "duplicate_unit_names",
                f"Attempted to create report for {machine.name} with duplicate unit names",
                machine_name=machine.name,
                unit_names=unit_names
            )
            raise ValueError("Duplicate unit names found in report")

        report = InspectionReport(
            machine=machine,
            inspector=inspector,
            units=units,
            customer=customer,
            comments=comments,
            status=ReportStatus.DRAFT
        )

        if self._auto_recalculate and report.has_answered_checkpoints():
            report = score_engine.calculate_scores(report)

        saved_report = await self._report_repository.save(report)

        log_with_extra(
            self._logger,
            logging.INFO,
            f"Report created successfully for {machine.name}",
            report_id=str(saved_report.id),
            machine_name=machine.name,
            inspector_id=inspector.inspector_id,
            unit_count=len(saved_report.units),
            status=saved_report.status.value
        )

        return saved_report

    async def get_report(self, report_id: UUID) -> Optional[InspectionReport]:
        """Get report by ID, or None if not found."""
        return await self._report_repository.find_by_id(report_id)

    async def list_reports(
        self,
        status: Optional[ReportStatus] = None,
        inspector_id: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[InspectionReport]:
        """List reports, newest first, optionally filtered.

        Args:
            status: Only reports with this status
            inspector_id: Only reports owned by this inspector
            limit: Maximum number of reports to return

        Returns:
            List of report entities
        """
        if limit is not None and limit < 1:
            raise ValueError("Limit must be a positive integer")

        if inspector_id is not None:
            reports = await self._report_repository.find_by_inspector(inspector_id)
            if status is not None:
                reports = [report for report in reports if report.status == status]
        elif status is not None:
            reports = await self._report_repository.find_by_status(status)
        else:
            reports = await self._report_repository.find_all()

        if limit is not None:
            reports = reports[:limit]
        return reports

    async def update_checkpoint_condition(
        self,
        report_id: UUID,
        unit_index: int,
        checkpoint_index: int,
        condition: Union[Condition, str, None],
        sub_unit_index: Optional[int] = None
    ) -> InspectionReport:
        """Record a checkpoint condition, rescoring when auto-recalculation is on.

        Args:
            report_id: ID of the report to update
            unit_index: Position of the unit in the report
            checkpoint_index: Position of the checkpoint in the unit or sub-unit
            condition: New condition; empty clears the answer
            sub_unit_index: Position of the sub-unit, for nested checklists

        Returns:
            Updated report entity

        Raises:
            ReportNotFoundError: If the report does not exist
            ValueError: If the report is saved or an index is out of range
        """
        async with self._report_lock(report_id):
            report = await self._require_editable(report_id, "modify_saved_report")

            if condition and Condition.parse(condition) is None:
                log_business_rule_violation(
                    self._logger,
                    "unrecognized_condition",
                    f"Condition '{condition}' is not recognized and will be treated as unanswered",
                    report_id=str(report_id),
                    unit_index=unit_index,
                    checkpoint_index=checkpoint_index
                )

            report.set_checkpoint_condition(unit_index, checkpoint_index, condition, sub_unit_index)

            if self._auto_recalculate:
                report = self._score(report)

            return await self._report_repository.save(report)

    async def update_checkpoint_remarks(
        self,
        report_id: UUID,
        unit_index: int,
        checkpoint_index: int,
        remarks: str,
        sub_unit_index: Optional[int] = None
    ) -> InspectionReport:
        """Record remarks against a checkpoint. Scores are not affected."""
        async with self._report_lock(report_id):
            report = await self._require_editable(report_id, "modify_saved_report")
            report.set_checkpoint_remarks(unit_index, checkpoint_index, remarks, sub_unit_index)
            return await self._report_repository.save(report)

    async def update_comments(self, report_id: UUID, comments: str) -> InspectionReport:
        """Update the report-level inspector comments."""
        async with self._report_lock(report_id):
            report = await self._require_editable(report_id, "modify_saved_report")
            report.update_comments(comments)
            return await self._report_repository.save(report)

    async def calculate_scores(self, report_id: UUID) -> InspectionReport:
        """Recompute and store the scores of a report.

        Raises:
            ReportNotFoundError: If the report does not exist
            ValueError: If the report is already saved
        """
        async with self._report_lock(report_id):
            report = await self._require_editable(report_id, "rescore_saved_report")
            scored_report = self._score(report)
            return await self._report_repository.save(scored_report)

    async def get_summary(self, report_id: UUID) -> ConditionSummary:
        """Count the answered checkpoints of a report per condition."""
        report = await self._require_report(report_id)
        return score_engine.count_conditions(report)

    async def save_report(self, report_id: UUID) -> InspectionReport:
        """Run the final score calculation and mark the report as saved.

        Raises:
            ReportNotFoundError: If the report does not exist
            ValueError: If the report is already saved
        """
        self._logger.info(f"Saving report {report_id}")

        async with self._report_lock(report_id):
            report = await self._require_editable(report_id, "save_already_saved_report")

            unanswered = report.get_unanswered_checkpoint_names()
            if unanswered:
                log_with_extra(
                    self._logger,
                    logging.WARNING,
                    f"Report {report_id} saved with {len(unanswered)} unanswered checkpoints",
                    report_id=str(report_id),
                    unanswered_checkpoints=unanswered
                )

            final_report = self._score(report)
            final_report.mark_saved()
            saved_report = await self._report_repository.save(final_report)

        log_with_extra(
            self._logger,
            logging.INFO,
            f"Report {report_id} saved successfully",
            report_id=str(report_id),
            machine_name=saved_report.machine.name,
            inspector_id=saved_report.inspector.inspector_id,
            overall_score=saved_report.overall_score,
            overall_rating=saved_report.overall_rating.value
        )

        return saved_report

    async def delete_report(self, report_id: UUID) -> None:
        """Delete a report that has not been saved yet."""
        async with self._report_lock(report_id):
            await self._require_editable(report_id, "delete_saved_report")
            await self._report_repository.delete(report_id)
        self._report_locks.discard(report_id)
        self._logger.info(f"Report {report_id} deleted")

    def preview_scores(self, units: Sequence[InspectionUnit]) -> ScorePreview:
        """Score units without creating or storing a report.

        This is a utility method for preview calculations without saving.
        """
        scored_units = score_engine.score_units(units)
        overall_score = score_engine.compute_overall_score(scored_units)
        return ScorePreview(
            units=scored_units,
            overall_score=overall_score,
            overall_rating=score_engine.classify_rating(overall_score),
            summary=score_engine.count_conditions(scored_units)
        )

    def _score(self, report: InspectionReport) -> InspectionReport:
        """Run the score engine over a report and log the outcome."""
        scored_report = score_engine.calculate_scores(report)
        log_score_calculation(
            self._logger,
            str(scored_report.id),
            scored_report.overall_score,
            scored_report.overall_rating.value,
            unit_scores={unit.name: unit.unit_score for unit in scored_report.units},
            status=scored_report.status.value
        )
        return scored_report

    @asynccontextmanager
    async def _report_lock(self, report_id: UUID) -> AsyncIterator[None]:
        """Hold the lock of an existing report.

        Unknown IDs are rejected before a lock is created, and a report
        deleted while a caller waited has its lock dropped.
        """
        if not await self._report_repository.exists(report_id):
            self._logger.error(f"Report {report_id} not found")
            raise ReportNotFoundError(report_id)

        try:
            async with self._report_locks.get(report_id):
                yield
        except ReportNotFoundError:
            self._report_locks.discard(report_id)
            raise

    async def _require_report(self, report_id: UUID) -> InspectionReport:
        """Get a report or raise ReportNotFoundError."""
        report = await self._report_repository.find_by_id(report_id)
        if not report:
            self._logger.error(f"Report {report_id} not found")
            raise ReportNotFoundError(report_id)
        return report

    async def _require_editable(self, report_id: UUID, rule: str) -> InspectionReport:
        """Get a report that is still open for changes."""
        report = await self._require_report(report_id)
        if report.is_saved():
            log_business_rule_violation(
                self._logger,
                rule,
                f"Attempted to change saved report {report_id}",
                report_id=str(report_id),
                machine_name=report.machine.name
            )
            raise ValueError("Cannot modify a saved report")
        return report
