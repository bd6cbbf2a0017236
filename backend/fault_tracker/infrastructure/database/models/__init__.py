from .fault_report import FaultReportModel

__all__ = [
    "FaultReportModel",
]
