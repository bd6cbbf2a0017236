"""Pydantic DTOs (Data Transfer Objects) for the FaultReport feature."""

from datetime import datetime

from pydantic import BaseModel, Field

from fault_tracker.domain.entities import (
    ProcurementPriority,
    ReportPatch,
    ReportPriority,
    ReportStatus,
)


class FaultReportCreate(BaseModel):
    """Schema for submitting a new fault report.

    Status and attachments are not accepted here: new reports always start
    as ``pending`` and attachments arrive as uploaded files.
    """

    title: str = Field(..., min_length=1, examples=["Server Room AC Malfunction"])
    description: str = Field(
        ..., min_length=1, examples=["Air conditioning unit not working properly"],
    )
    priority: ReportPriority = Field(..., examples=["critical"])
    department: str | None = Field(None, examples=["IT"])
    location: str | None = Field(None, examples=["Server Room A"])
    reported_by: str | None = Field(None, examples=["John Doe"])


class FaultReportUpdate(BaseModel):
    """Schema for patching a report's descriptive fields — all fields optional.

    Unknown fields (including ``status`` and ``attachments``) are rejected.
    """

    title: str | None = Field(None, min_length=1)
    description: str | None = Field(None, min_length=1)
    priority: ReportPriority | None = None
    department: str | None = None
    location: str | None = None
    reported_by: str | None = None

    model_config = {"extra": "forbid"}

    def to_patch(self) -> ReportPatch:
        return ReportPatch(
            title=self.title,
            description=self.description,
            priority=self.priority.value if self.priority else None,
            department=self.department,
            location=self.location,
            reported_by=self.reported_by,
        )


class FaultReportStatusUpdate(BaseModel):
    """Schema for setting a report's status directly."""

    status: ReportStatus


class ProcurementRequestCreate(BaseModel):
    """Schema for submitting a procurement request on a report."""

    priority: ProcurementPriority = Field(..., examples=["24hrs"])


class FaultReportResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    title: str
    description: str
    priority: str
    department: str | None
    location: str | None
    reported_by: str | None
    status: ReportStatus
    attachments: list[str]
    procurement_priority: ProcurementPriority | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PaginatedFaultReportsResponse(BaseModel):
    """One page of fault reports with paging totals."""

    data: list[FaultReportResponse]
    total: int
    page: int
    limit: int
    total_pages: int

    model_config = {"from_attributes": True}


class JobCardResponse(BaseModel):
    """Result of issuing a job card to the workshop planner."""

    message: str
    report: FaultReportResponse


class ProcurementResponse(BaseModel):
    """Result of handing a report to the procurement manager."""

    message: str
    priority: ProcurementPriority
    report: FaultReportResponse
