from .fault_report import (
    FaultReportCreate,
    FaultReportUpdate,
    FaultReportStatusUpdate,
    FaultReportResponse,
    PaginatedFaultReportsResponse,
    ProcurementRequestCreate,
    JobCardResponse,
    ProcurementResponse,
)
from .analytics import (
    StatusCountSchema,
    PriorityCountSchema,
    DepartmentCountSchema,
    TrendPointSchema,
    DashboardSchema,
)

__all__ = [
    "FaultReportCreate",
    "FaultReportUpdate",
    "FaultReportStatusUpdate",
    "FaultReportResponse",
    "PaginatedFaultReportsResponse",
    "ProcurementRequestCreate",
    "JobCardResponse",
    "ProcurementResponse",
    "StatusCountSchema",
    "PriorityCountSchema",
    "DepartmentCountSchema",
    "TrendPointSchema",
    "DashboardSchema",
]
