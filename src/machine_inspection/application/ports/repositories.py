"""Port interfaces for repositories (Dependency Inversion Principle)."""

from abc import ABC, abstractmethod
from typing import List, Optional, TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from src.machine_inspection.domain.entities.report import InspectionReport, ReportStatus


class ReportRepository(ABC):
    """Port interface for inspection report persistence."""

    @abstractmethod
    async def save(self, report: "InspectionReport") -> "InspectionReport":
        """Save a report (create or replace)."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, report_id: UUID) -> Optional["InspectionReport"]:
        """Find report by ID."""
        raise NotImplementedError

    @abstractmethod
    async def find_all(self, limit: Optional[int] = None) -> List["InspectionReport"]:
        """Find all reports (ordered by created_at DESC)."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_inspector(self, inspector_id: str) -> List["InspectionReport"]:
        """Find all reports owned by an inspector."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_status(self, status: "ReportStatus") -> List["InspectionReport"]:
        """Find all reports with a specific status."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, report_id: UUID) -> bool:
        """Delete a report by ID."""
        raise NotImplementedError

    @abstractmethod
    async def exists(self, report_id: UUID) -> bool:
        """Check if a report exists."""
        raise NotImplementedError
