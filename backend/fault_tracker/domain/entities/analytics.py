"""Domain value objects for dashboard analytics."""

from dataclasses import dataclass, field

from .fault_report import FaultReport


@dataclass
class StatusCount:
    status: str
    count: int
    percentage: int


@dataclass
class PriorityCount:
    priority: str
    count: int


@dataclass
class DepartmentCount:
    department: str
    count: int


@dataclass
class TrendPoint:
    """Status counts for reports created on one calendar day (UTC)."""

    date: str  # ISO date, YYYY-MM-DD
    pending: int = 0
    approved: int = 0
    assigned: int = 0
    rejected: int = 0
    total: int = 0


@dataclass
class DashboardAnalytics:
    """Aggregate snapshot shown on the analytics dashboard."""

    total_reports: int
    pending_reports: int
    approved_reports: int
    assigned_reports: int
    rejected_reports: int
    recent_reports: list[FaultReport] = field(default_factory=list)
    status_distribution: list[StatusCount] = field(default_factory=list)
    priority_breakdown: list[PriorityCount] = field(default_factory=list)
    department_activity: list[DepartmentCount] = field(default_factory=list)
