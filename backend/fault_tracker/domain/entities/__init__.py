from .fault_report import (
    FaultReport,
    ProcurementPriority,
    ReportPatch,
    ReportPriority,
    ReportStatus,
)
from .report_query import PaginatedResult, ReportFilters
from .analytics import (
    DashboardAnalytics,
    DepartmentCount,
    PriorityCount,
    StatusCount,
    TrendPoint,
)

__all__ = [
    "FaultReport",
    "ProcurementPriority",
    "ReportPatch",
    "ReportPriority",
    "ReportStatus",
    "PaginatedResult",
    "ReportFilters",
    "DashboardAnalytics",
    "DepartmentCount",
    "PriorityCount",
    "StatusCount",
    "TrendPoint",
]
