from .fault_report_repository import FaultReportRepository
from .file_storage import FileStorage, StoredFile

__all__ = [
    "FaultReportRepository",
    "FileStorage",
    "StoredFile",
]
