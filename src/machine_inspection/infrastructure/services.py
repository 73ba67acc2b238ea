"""Dependency injection and service factory."""

from typing import AsyncGenerator, Optional
from contextlib import asynccontextmanager

from src.machine_inspection.application.ports.repositories import ReportRepository
from src.machine_inspection.application.services.report_service import ReportLocks, ReportService
from src.machine_inspection.infrastructure.logging import get_logger
from src.machine_inspection.infrastructure.repositories.memory_repositories import InMemoryReportRepository


logger = get_logger(__name__)


class ServiceFactory:
    """Factory for creating application services with proper dependencies."""

    def __init__(
        self,
        report_repository: Optional[ReportRepository] = None,
        auto_recalculate: bool = True
    ):
        # Shared across requests so reports and locks outlive one service instance
        self._report_repository = report_repository or InMemoryReportRepository()
        self._report_locks = ReportLocks()
        self._auto_recalculate = auto_recalculate
        self._initialized = False

    @property
    def report_repository(self) -> ReportRepository:
        """Get the report repository."""
        return self._report_repository

    async def initialize(self) -> None:
        """Initialize the service factory."""
        if not self._initialized:
            logger.info(
                "Service factory initialized",
                extra={
                    "repository": type(self._report_repository).__name__,
                    "auto_recalculate": self._auto_recalculate
                }
            )
            self._initialized = True

    async def shutdown(self) -> None:
        """Shutdown the service factory."""
        if self._initialized:
            logger.info("Service factory shut down")
            self._initialized = False

    @asynccontextmanager
    async def get_report_service(self) -> AsyncGenerator[ReportService, None]:
        """Get report service wired to the shared repository."""
        yield ReportService(
            report_repository=self._report_repository,
            report_locks=self._report_locks,
            auto_recalculate=self._auto_recalculate
        )


# Global service factory instance
_service_factory: Optional[ServiceFactory] = None


def get_service_factory() -> ServiceFactory:
    """Get the global service factory instance."""
    global _service_factory

    if _service_factory is None:
        from src.machine_inspection.presentation.api.config import get_settings

        _service_factory = ServiceFactory(auto_recalculate=get_settings().auto_recalculate)

    return _service_factory


async def initialize_services() -> None:
    """Initialize application services."""
    factory = get_service_factory()
    await factory.initialize()


async def shutdown_services() -> None:
    """Shutdown application services."""
    factory = get_service_factory()
    await factory.shutdown()
