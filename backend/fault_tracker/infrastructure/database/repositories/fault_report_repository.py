"""Concrete repository implementation for FaultReport backed by SQLAlchemy."""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fault_tracker.application.interfaces import FaultReportRepository
from fault_tracker.domain.entities import FaultReport, ProcurementPriority, ReportStatus
from fault_tracker.domain.exceptions import DuplicateEntityError
from fault_tracker.infrastructure.database.models import FaultReportModel

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo on the way back; stored values are always UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SQLAlchemyFaultReportRepository(FaultReportRepository):
    """Implements the FaultReportRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: FaultReportModel) -> FaultReport:
        """Map ORM model → domain entity."""
        return FaultReport(
            id=model.id,
            title=model.title,
            description=model.description,
            priority=model.priority,
            department=model.department,
            location=model.location,
            reported_by=model.reported_by,
            status=ReportStatus(model.status),
            attachments=list(model.attachments or []),
            procurement_priority=(
                ProcurementPriority(model.procurement_priority)
                if model.procurement_priority
                else None
            ),
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )

    def _to_model(self, entity: FaultReport) -> FaultReportModel:
        """Map domain entity → ORM model (for creation)."""
        return FaultReportModel(
            id=entity.id,
            title=entity.title,
            description=entity.description,
            priority=entity.priority,
            department=entity.department,
            location=entity.location,
            reported_by=entity.reported_by,
            status=entity.status.value,
            procurement_priority=(
                entity.procurement_priority.value if entity.procurement_priority else None
            ),
            attachments=list(entity.attachments),
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def get_by_id(self, report_id: str) -> FaultReport | None:
        # Reload even if cached: another session may have committed since
        result = await self._session.get(FaultReportModel, report_id, populate_existing=True)
        return self._to_entity(result) if result else None

    async def get_all(self) -> list[FaultReport]:
        stmt = select(FaultReportModel).order_by(FaultReportModel.created_at.asc())
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, report: FaultReport) -> FaultReport:
        if await self._session.get(FaultReportModel, report.id) is not None:
            logger.critical("Fault report id collision detected: %s", report.id)
            raise DuplicateEntityError("FaultReport", "id", report.id)
        model = self._to_model(report)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, report: FaultReport) -> FaultReport | None:
        model = await self._session.get(FaultReportModel, report.id)
        if model is None:
            return None
        model.title = report.title
        model.description = report.description
        model.priority = report.priority
        model.department = report.department
        model.location = report.location
        model.reported_by = report.reported_by
        model.status = report.status.value
        model.procurement_priority = (
            report.procurement_priority.value if report.procurement_priority else None
        )
        # Assign a fresh list so the JSON column is flagged as changed
        model.attachments = list(report.attachments)
        model.updated_at = report.updated_at
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, report_id: str) -> bool:
        model = await self._session.get(FaultReportModel, report_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True

    async def is_attachment_linked(self, handle: str) -> bool:
        result = await self._session.execute(select(FaultReportModel.attachments))
        return any(handle in (attachments or []) for attachments in result.scalars().all())

    async def count(self) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(FaultReportModel)
        )
        return result.scalar_one()

    async def commit(self) -> None:
        await self._session.commit()
