"""Pydantic schemas for the analytics API responses."""

from pydantic import BaseModel

from .fault_report import FaultReportResponse


class StatusCountSchema(BaseModel):
    status: str
    count: int
    percentage: int

    model_config = {"from_attributes": True}


class PriorityCountSchema(BaseModel):
    priority: str
    count: int

    model_config = {"from_attributes": True}


class DepartmentCountSchema(BaseModel):
    department: str
    count: int

    model_config = {"from_attributes": True}


class TrendPointSchema(BaseModel):
    """Status counts for one calendar day."""
    date: str
    pending: int
    approved: int
    assigned: int
    rejected: int
    total: int

    model_config = {"from_attributes": True}


class DashboardSchema(BaseModel):
    """Full dashboard snapshot."""
    total_reports: int
    pending_reports: int
    approved_reports: int
    assigned_reports: int
    rejected_reports: int
    recent_reports: list[FaultReportResponse]
    status_distribution: list[StatusCountSchema]
    priority_breakdown: list[PriorityCountSchema]
    department_activity: list[DepartmentCountSchema]

    model_config = {"from_attributes": True}
