"""FastAPI dependencies for the machine inspection API."""

from typing import AsyncGenerator

from ...application.services.report_service import ReportService
from ...infrastructure.services import get_service_factory


async def get_report_service() -> AsyncGenerator[ReportService, None]:
    """Provide a report service for the duration of one request."""
    async with get_service_factory().get_report_service() as report_service:
        yield report_service
