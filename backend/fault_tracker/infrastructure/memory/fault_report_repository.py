"""In-process repository for FaultReport — the default, non-durable backend."""

import copy
import logging

from fault_tracker.application.interfaces import FaultReportRepository
from fault_tracker.domain.entities import FaultReport
from fault_tracker.domain.exceptions import DuplicateEntityError

logger = logging.getLogger(__name__)


class InMemoryFaultReportRepository(FaultReportRepository):
    """Implements the FaultReportRepository port with a dict keyed by report id.

    Entities are copied on the way in and out, so callers only ever change
    stored state through ``create``/``update``/``delete``. Every issued id is
    remembered to guarantee it is never handed out again after deletion.
    """

    def __init__(self) -> None:
        self._reports: dict[str, FaultReport] = {}
        self._issued_ids: set[str] = set()

    async def get_by_id(self, report_id: str) -> FaultReport | None:
        report = self._reports.get(report_id)
        return copy.deepcopy(report) if report else None

    async def get_all(self) -> list[FaultReport]:
        # dicts keep insertion order, which is creation order here
        return [copy.deepcopy(r) for r in self._reports.values()]

    async def create(self, report: FaultReport) -> FaultReport:
        if report.id in self._issued_ids:
            logger.critical("Fault report id collision detected: %s", report.id)
            raise DuplicateEntityError("FaultReport", "id", report.id)
        self._issued_ids.add(report.id)
        self._reports[report.id] = copy.deepcopy(report)
        return copy.deepcopy(report)

    async def update(self, report: FaultReport) -> FaultReport | None:
        if report.id not in self._reports:
            return None
        self._reports[report.id] = copy.deepcopy(report)
        return copy.deepcopy(report)

    async def delete(self, report_id: str) -> bool:
        return self._reports.pop(report_id, None) is not None

    async def is_attachment_linked(self, handle: str) -> bool:
        return any(r.has_attachment(handle) for r in self._reports.values())

    async def count(self) -> int:
        return len(self._reports)

    async def commit(self) -> None:
        # Changes are visible as soon as create/update/delete return
        return None
