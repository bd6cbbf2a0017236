"""SQLAlchemy ORM model for the FaultReport entity."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fault_tracker.infrastructure.database.base import Base


class FaultReportModel(Base):
    """ORM model — maps to the 'fault_reports' table, one row per report."""

    __tablename__ = "fault_reports"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    priority: Mapped[str] = mapped_column(String(20), nullable=False)
    department: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    reported_by: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    procurement_priority: Mapped[str | None] = mapped_column(String(20), nullable=True)
    # Ordered list of stored filenames
    attachments: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    # Maintained by the domain entity, not by an onupdate hook
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_fault_reports_status", "status"),
        Index("ix_fault_reports_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<FaultReportModel(id={self.id}, status='{self.status}', title='{self.title}')>"
