"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends

from fault_tracker.config import get_settings
from fault_tracker.application.interfaces import FaultReportRepository, FileStorage
from fault_tracker.application.services import (
    AnalyticsService,
    FaultReportService,
    KeyedLock,
)
from fault_tracker.infrastructure.memory.fault_report_repository import InMemoryFaultReportRepository
from fault_tracker.infrastructure.storage.local_file_storage import LocalFileStorage


@lru_cache
def get_in_memory_repository() -> InMemoryFaultReportRepository:
    """Process-wide in-memory report store (the default backend)."""
    return InMemoryFaultReportRepository()


@lru_cache
def get_report_locks() -> KeyedLock:
    """Process-wide per-report locks shared by every FaultReportService."""
    return KeyedLock()


@lru_cache
def get_file_storage() -> FileStorage:
    settings = get_settings()
    return LocalFileStorage(upload_dir=settings.upload_dir)


async def get_fault_report_repository() -> AsyncGenerator[FaultReportRepository, None]:
    """Provides the configured report repository.

    ``memory`` yields the shared in-process store; ``sqlalchemy`` opens a
    session per request and commits it when the request succeeds.
    """
    settings = get_settings()
    if settings.repository_backend != "sqlalchemy":
        yield get_in_memory_repository()
        return

    from fault_tracker.infrastructure.database.session import session_scope
    from fault_tracker.infrastructure.database.repositories import SQLAlchemyFaultReportRepository

    async with session_scope() as session:
        yield SQLAlchemyFaultReportRepository(session)


def build_fault_report_service(repository: FaultReportRepository) -> FaultReportService:
    """Construct a FaultReportService from settings around the given repository."""
    settings = get_settings()
    return FaultReportService(
        repository=repository,
        file_storage=get_file_storage(),
        locks=get_report_locks(),
        max_upload_size_bytes=settings.max_upload_size_bytes,
        allowed_extensions=settings.allowed_attachment_extensions,
        max_attachments_per_report=settings.max_attachments_per_report,
    )


async def get_fault_report_service(
    repository: FaultReportRepository = Depends(get_fault_report_repository),
) -> AsyncGenerator[FaultReportService, None]:
    """Provides a FaultReportService with its repository, storage and locks wired up."""
    yield build_fault_report_service(repository)


async def get_analytics_service(
    repository: FaultReportRepository = Depends(get_fault_report_repository),
) -> AsyncGenerator[AnalyticsService, None]:
    """Provides an AnalyticsService reading from the configured repository."""
    settings = get_settings()
    yield AnalyticsService(repository, recent_limit=settings.recent_reports_limit)
