from .keyed_lock import KeyedLock
from .fault_report_service import AttachmentUpload, FaultReportService
from .analytics_service import AnalyticsService, TREND_PERIODS
from .sample_data import seed_sample_reports

__all__ = [
    "KeyedLock",
    "AttachmentUpload",
    "FaultReportService",
    "AnalyticsService",
    "TREND_PERIODS",
    "seed_sample_reports",
]
