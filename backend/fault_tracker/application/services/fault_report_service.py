"""Fault report service — the report store and its workflow actions.

Every read and write of a fault report goes through this service. Lookups
by id return ``None`` (or ``False``) for unknown reports; rule violations
raise domain exceptions before any state is changed.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from fault_tracker.application.interfaces import FaultReportRepository, FileStorage, StoredFile
from fault_tracker.application.schemas import FaultReportCreate, FaultReportUpdate
from fault_tracker.domain.entities import (
    FaultReport,
    PaginatedResult,
    ProcurementPriority,
    ReportFilters,
    ReportPatch,
    ReportStatus,
)
from fault_tracker.domain.entities.report_query import DEFAULT_SORT_BY
from fault_tracker.domain.exceptions import (
    AttachmentIntegrityError,
    AttachmentRejectedError,
    EntityNotFoundError,
    FileAccessDeniedError,
    InvalidStatusTransitionError,
    ReportValidationError,
)
from fault_tracker.infrastructure.logging.colored_logger import WorkflowLogger, WorkflowStage

from .keyed_lock import KeyedLock

logger = logging.getLogger(__name__)
wlog = WorkflowLogger("FaultReportService")

DEFAULT_ALLOWED_EXTENSIONS = (
    "jpeg", "jpg", "png", "gif", "pdf", "doc", "docx", "txt", "xlsx", "xls",
)

# Statuses a procurement request may start from
_PROCUREMENT_SOURCES = frozenset({ReportStatus.PENDING, ReportStatus.APPROVED})

_SORTABLE_FIELDS = frozenset(f.name for f in fields(FaultReport))


@dataclass
class AttachmentUpload:
    """Raw bytes of one uploaded attachment, before it is stored."""

    content: bytes
    filename: str


def _text(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _optional(value: str | None) -> str | None:
    """Normalise blank optional text to None."""
    if value is None or not value.strip():
        return None
    return value


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _sort_value(report: FaultReport, sort_by: str) -> Any:
    return _text(getattr(report, sort_by))


class FaultReportService:
    """Orchestrates fault report storage, attachments and status workflow.

    Depends on the repository and file storage ports (DI). Mutations on a
    single report are serialised through a shared ``KeyedLock``.
    """

    def __init__(
        self,
        repository: FaultReportRepository,
        file_storage: FileStorage,
        locks: KeyedLock | None = None,
        *,
        max_upload_size_bytes: int = 10 * 1024 * 1024,
        allowed_extensions: Sequence[str] = DEFAULT_ALLOWED_EXTENSIONS,
        max_attachments_per_report: int = 5,
    ):
        self._repository = repository
        self._storage = file_storage
        self._locks = locks if locks is not None else KeyedLock()
        self._max_upload_size_bytes = max_upload_size_bytes
        self._allowed_extensions = frozenset(e.lower().lstrip(".") for e in allowed_extensions)
        self._max_attachments = max_attachments_per_report

    # ── Queries ──────────────────────────────────────────────────────

    async def get_report(self, report_id: str) -> FaultReport | None:
        return await self._repository.get_by_id(report_id)

    async def list_reports(self, filters: ReportFilters | None = None) -> PaginatedResult[FaultReport]:
        """Filter, sort, then paginate the current report collection."""
        filters = filters or ReportFilters()
        reports = await self._repository.get_all()

        if filters.search:
            reports = [r for r in reports if r.matches_search(filters.search)]
        if ReportFilters.is_active(filters.status):
            reports = [r for r in reports if r.status.value == filters.status]
        if ReportFilters.is_active(filters.priority):
            reports = [r for r in reports if r.priority == filters.priority]
        if ReportFilters.is_active(filters.department):
            reports = [r for r in reports if r.department == filters.department]
        if filters.date_from is not None:
            date_from = _as_utc(filters.date_from)
            reports = [r for r in reports if r.created_at >= date_from]
        if filters.date_to is not None:
            date_to = _as_utc(filters.date_to)
            reports = [r for r in reports if r.created_at <= date_to]

        reports = self._sort(reports, filters.sort_by, descending=filters.sort_order == "desc")

        start = filters.offset
        return PaginatedResult(
            data=reports[start : start + filters.limit],
            total=len(reports),
            page=filters.page,
            limit=filters.limit,
        )

    @staticmethod
    def _sort(reports: list[FaultReport], sort_by: str, *, descending: bool) -> list[FaultReport]:
        """Stable sort; ties keep creation order and missing values go last."""
        if sort_by not in _SORTABLE_FIELDS:
            logger.debug("Unknown sort field '%s', falling back to %s", sort_by, DEFAULT_SORT_BY)
            sort_by = DEFAULT_SORT_BY

        present = [r for r in reports if getattr(r, sort_by) is not None]
        missing = [r for r in reports if getattr(r, sort_by) is None]
        present.sort(key=lambda r: _sort_value(r, sort_by), reverse=descending)
        return present + missing

    async def verify_file_access(self, handle: str) -> bool:
        """True iff some report currently links ``handle`` as an attachment."""
        return await self._repository.is_attachment_linked(handle)

    async def open_attachment(self, handle: str) -> Path:
        """Resolve a linked attachment to its stored path for download."""
        if not await self.verify_file_access(handle):
            raise FileAccessDeniedError(handle)
        if not self._storage.file_exists(handle):
            raise EntityNotFoundError("Attachment", handle)
        return self._storage.get_file_path(handle)

    # ── Creation ─────────────────────────────────────────────────────

    async def create_report(
        self,
        data: FaultReportCreate,
        uploads: Sequence[AttachmentUpload] = (),
    ) -> FaultReport:
        """Create a pending report, storing its uploaded attachments first.

        If anything fails after the first file is written, every file written
        so far is removed again before the error propagates.
        """
        title = self._require_text("title", data.title)
        description = self._require_text("description", data.description)
        if len(uploads) > self._max_attachments:
            raise AttachmentRejectedError(
                uploads[self._max_attachments].filename,
                f"at most {self._max_attachments} attachments per report",
            )
        for upload in uploads:
            self._check_upload(upload)

        stored: list[StoredFile] = []
        try:
            for upload in uploads:
                stored.append(await self._storage.store_file(upload.content, upload.filename))

            report = FaultReport(
                title=title,
                description=description,
                priority=_text(data.priority),
                department=_optional(data.department),
                location=_optional(data.location),
                reported_by=_optional(data.reported_by),
                attachments=[s.filename for s in stored],
            )
            created = await self._repository.create(report)
            await self._repository.commit()
        except Exception as exc:
            wlog.error(WorkflowStage.SUBMIT, f"Report creation failed, removing {len(stored)} file(s)", exc)
            await self._discard_files([s.filename for s in stored], keep_linked=False)
            raise

        wlog.event(
            WorkflowStage.SUBMIT, f"Report '{created.title}' submitted",
            id=created.id, priority=created.priority, attachments=len(created.attachments),
        )
        return created

    # ── Updates ──────────────────────────────────────────────────────

    async def update_report(self, report_id: str, data: FaultReportUpdate | ReportPatch) -> FaultReport | None:
        """Patch descriptive fields only; status and attachments are untouched."""
        patch = data.to_patch() if isinstance(data, FaultReportUpdate) else data
        if patch.title is not None:
            self._require_text("title", patch.title)
        if patch.description is not None:
            self._require_text("description", patch.description)

        async with self._locks.hold(report_id):
            report = await self._repository.get_by_id(report_id)
            if report is None:
                return None
            report.apply_patch(patch)
            return await self._save(report)

    async def set_status(self, report_id: str, status: ReportStatus | str) -> FaultReport | None:
        """Set the status without checking the transition."""
        target = self._parse_status(status)
        async with self._locks.hold(report_id):
            report = await self._repository.get_by_id(report_id)
            if report is None:
                return None
            previous = report.status
            report.change_status(target)
            updated = await self._save(report)

        wlog.event(WorkflowStage.STATUS, "Status changed", id=report_id, old=previous.value, new=target.value)
        return updated

    # ── Workflow actions ─────────────────────────────────────────────

    async def issue_job_card(self, report_id: str) -> FaultReport | None:
        """Hand a pending report to the workshop planner (pending → approved)."""
        async with self._locks.hold(report_id):
            report = await self._repository.get_by_id(report_id)
            if report is None:
                return None
            if report.status is not ReportStatus.PENDING:
                raise InvalidStatusTransitionError(
                    report_id, report.status.value, ReportStatus.APPROVED.value
                )
            report.change_status(ReportStatus.APPROVED)
            updated = await self._save(report)

        wlog.event(WorkflowStage.JOB_CARD, "Job card issued to workshop planner", id=report_id)
        return updated

    async def submit_procurement_request(
        self, report_id: str, priority: ProcurementPriority | str
    ) -> FaultReport | None:
        """Assign a report to the procurement manager and record the urgency tier."""
        try:
            tier = ProcurementPriority(priority)
        except ValueError:
            raise ReportValidationError(
                "priority", "must be one of '24hrs', '72hrs' or 'miscellaneous'"
            ) from None

        async with self._locks.hold(report_id):
            report = await self._repository.get_by_id(report_id)
            if report is None:
                return None
            if report.status not in _PROCUREMENT_SOURCES:
                raise InvalidStatusTransitionError(
                    report_id, report.status.value, ReportStatus.ASSIGNED.value
                )
            report.change_status(ReportStatus.ASSIGNED, procurement_priority=tier)
            updated = await self._save(report)

        wlog.event(WorkflowStage.PROCUREMENT, "Task assigned to procurement manager", id=report_id, tier=tier.value)
        return updated

    # ── Attachments ──────────────────────────────────────────────────

    async def add_attachment(self, report_id: str, handle: str) -> FaultReport | None:
        """Link an already-stored file to a report.

        A file belongs to exactly one report: handles that are missing from
        the store or already linked anywhere are refused.
        """
        if not self._storage.file_exists(handle):
            raise AttachmentIntegrityError(handle)

        async with self._locks.hold(report_id):
            report = await self._repository.get_by_id(report_id)
            if report is None:
                return None
            if await self._repository.is_attachment_linked(handle):
                raise AttachmentIntegrityError(handle, "is already attached to a report")
            report.add_attachment(handle)
            updated = await self._save(report)

        wlog.event(WorkflowStage.ATTACHMENT, "Attachment linked", id=report_id, file=handle)
        return updated

    async def upload_attachment(self, report_id: str, content: bytes, filename: str) -> FaultReport | None:
        """Store a new file and append it to the report's attachments."""
        upload = AttachmentUpload(content=content, filename=filename)
        self._check_upload(upload)
        if await self._repository.get_by_id(report_id) is None:
            return None

        stored = await self._storage.store_file(upload.content, upload.filename)
        wlog.event(WorkflowStage.UPLOAD, f"Stored '{filename}'", file=stored.filename, size=stored.file_size)
        try:
            updated = await self.add_attachment(report_id, stored.filename)
        except Exception:
            await self._discard_files([stored.filename], keep_linked=False)
            raise
        if updated is None:
            # Report was deleted while the file was being written
            await self._discard_files([stored.filename], keep_linked=False)
        return updated

    async def remove_attachment(self, report_id: str, handle: str) -> FaultReport | None:
        """Unlink ``handle`` from the report and delete the stored file."""
        async with self._locks.hold(report_id):
            report = await self._repository.get_by_id(report_id)
            if report is None:
                return None
            was_linked = report.has_attachment(handle)
            report.remove_attachment(handle)
            updated = await self._save(report)

        if was_linked:
            await self._discard_files([handle])
            wlog.event(WorkflowStage.ATTACHMENT, "Attachment removed", id=report_id, file=handle)
        return updated

    # ── Deletion ─────────────────────────────────────────────────────

    async def delete_report(self, report_id: str) -> bool:
        """Delete a report together with all of its attachment files.

        Files are removed only once the deletion is committed.
        """
        async with self._locks.hold(report_id):
            report = await self._repository.get_by_id(report_id)
            if report is None:
                return False
            deleted = await self._repository.delete(report_id)
            if deleted:
                await self._repository.commit()

        if deleted:
            await self._discard_files(report.attachments)
            wlog.event(WorkflowStage.DELETE, "Report deleted", id=report_id, files=len(report.attachments))
        return deleted

    # ── Helpers ──────────────────────────────────────────────────────

    async def _save(self, report: FaultReport) -> FaultReport | None:
        """Update and commit while the caller still holds the report's lock."""
        updated = await self._repository.update(report)
        if updated is not None:
            await self._repository.commit()
        return updated

    @staticmethod
    def _require_text(field_name: str, value: str) -> str:
        if value is None or not value.strip():
            raise ReportValidationError(field_name, "must not be empty")
        return value

    @staticmethod
    def _parse_status(status: ReportStatus | str) -> ReportStatus:
        try:
            return ReportStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in ReportStatus)
            raise ReportValidationError("status", f"must be one of: {allowed}") from None

    def _check_upload(self, upload: AttachmentUpload) -> None:
        """Enforce the attachment type and size rules."""
        extension = Path(upload.filename).suffix.lower().lstrip(".")
        if extension not in self._allowed_extensions:
            raise AttachmentRejectedError(
                upload.filename, "only images, PDFs and documents are allowed"
            )
        if len(upload.content) > self._max_upload_size_bytes:
            limit_mb = self._max_upload_size_bytes // (1024 * 1024)
            raise AttachmentRejectedError(upload.filename, f"larger than {limit_mb} MB")

    async def _discard_files(self, handles: Sequence[str], *, keep_linked: bool = True) -> None:
        """Delete stored files, logging (not raising) on failure.

        With ``keep_linked`` a file that some report still lists is left in
        place. Rollback paths pass ``False``: their links are being undone.
        """
        for handle in dict.fromkeys(handles):
            if keep_linked and await self._repository.is_attachment_linked(handle):
                logger.warning("Attachment file '%s' is still linked, not deleting it", handle)
                continue
            try:
                await self._storage.delete_file(handle)
            except OSError:
                logger.exception("Could not delete attachment file '%s'; it is now orphaned", handle)
