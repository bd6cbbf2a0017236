from .fault_report_repository import SQLAlchemyFaultReportRepository

__all__ = [
    "SQLAlchemyFaultReportRepository",
]
