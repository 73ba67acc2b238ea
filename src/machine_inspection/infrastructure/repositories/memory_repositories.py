"""In-memory repository implementations for testing and development."""

from typing import Dict, List, Optional
from uuid import UUID

from src.machine_inspection.application.ports.repositories import ReportRepository
from src.machine_inspection.domain.entities.report import InspectionReport, ReportStatus


class InMemoryReportRepository(ReportRepository):
    """In-memory implementation of report repository."""

    def __init__(self):
        self._reports: Dict[UUID, InspectionReport] = {}

    async def save(self, report: InspectionReport) -> InspectionReport:
        """Save a report."""
        self._reports[report.id] = report
        return report

    async def find_by_id(self, report_id: UUID) -> Optional[InspectionReport]:
        """Find report by ID."""
        return self._reports.get(report_id)

    async def find_all(self, limit: Optional[int] = None) -> List[InspectionReport]:
        """Find all reports, most recent first."""
        reports = self._newest_first(self._reports.values())
        if limit is not None:
            return reports[:limit]
        return reports

    async def find_by_inspector(self, inspector_id: str) -> List[InspectionReport]:
        """Find all reports owned by an inspector."""
        return self._newest_first(
            report for report in self._reports.values()
            if report.inspector.inspector_id == inspector_id
        )

    async def find_by_status(self, status: ReportStatus) -> List[InspectionReport]:
        """Find all reports with a specific status."""
        return self._newest_first(
            report for report in self._reports.values()
            if report.status == status
        )

    async def delete(self, report_id: UUID) -> bool:
        """Delete a report."""
        if report_id in self._reports:
            del self._reports[report_id]
            return True
        return False

    async def exists(self, report_id: UUID) -> bool:
        """Check if a report exists."""
        return report_id in self._reports

    @staticmethod
    def _newest_first(reports) -> List[InspectionReport]:
        return sorted(reports, key=lambda report: report.created_at, reverse=True)
