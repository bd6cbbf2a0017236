"""Unit tests for FaultReportService: lifecycle, workflow actions and attachment integrity."""

from pathlib import Path

import pytest

from fault_tracker.application.interfaces import FileStorage, StoredFile
from fault_tracker.application.schemas import FaultReportCreate, FaultReportUpdate
from fault_tracker.application.services import AttachmentUpload, FaultReportService
from fault_tracker.domain.entities import FaultReport, ProcurementPriority, ReportPatch, ReportStatus
from fault_tracker.domain.exceptions import (
    AttachmentIntegrityError,
    AttachmentRejectedError,
    EntityNotFoundError,
    FileAccessDeniedError,
    InvalidStatusTransitionError,
    ReportValidationError,
)
from fault_tracker.infrastructure.memory.fault_report_repository import InMemoryFaultReportRepository


# ── Fakes ────────────────────────────────────────────────────────────

class FakeFileStorage(FileStorage):
    """In-memory file store for testing."""

    def __init__(self):
        self.files: dict[str, bytes] = {}
        self._counter = 0

    async def store_file(self, content: bytes, filename: str) -> StoredFile:
        self._counter += 1
        handle = f"{self._counter}_{filename}"
        self.files[handle] = content
        return StoredFile(
            stored_path=f"/fake/{handle}",
            filename=handle,
            original_name=filename,
            file_size=len(content),
            mime_type="application/octet-stream",
        )

    async def delete_file(self, handle: str) -> bool:
        return self.files.pop(handle, None) is not None

    def file_exists(self, handle: str) -> bool:
        return handle in self.files

    def get_file_path(self, handle: str) -> Path:
        return Path("/fake") / handle


class FailingCreateRepository(InMemoryFaultReportRepository):
    """Repository whose create always fails, to exercise upload rollback."""

    async def create(self, report: FaultReport) -> FaultReport:
        raise RuntimeError("database unavailable")


# ── Fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def storage() -> FakeFileStorage:
    return FakeFileStorage()


@pytest.fixture
def repo() -> InMemoryFaultReportRepository:
    return InMemoryFaultReportRepository()


@pytest.fixture
def service(repo, storage) -> FaultReportService:
    return FaultReportService(repo, storage)


def _report_data(**overrides) -> FaultReportCreate:
    fields = {"title": "T", "description": "D", "priority": "high"}
    fields.update(overrides)
    return FaultReportCreate(**fields)


# ── Creation ─────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_create_report_defaults(service: FaultReportService):
    report = await service.create_report(_report_data())

    assert report.id
    assert report.status is ReportStatus.PENDING
    assert report.attachments == []
    assert report.priority == "high"
    assert report.department is None
    assert report.created_at == report.updated_at


@pytest.mark.asyncio
async def test_create_then_get_round_trip(service: FaultReportService):
    created = await service.create_report(
        _report_data(department="IT", location="Server Room A", reported_by="John Doe")
    )
    fetched = await service.get_report(created.id)
    assert fetched == created


@pytest.mark.asyncio
async def test_create_report_normalises_blank_optional_fields(service: FaultReportService):
    report = await service.create_report(_report_data(department="  ", location=""))
    assert report.department is None
    assert report.location is None


@pytest.mark.asyncio
async def test_create_report_rejects_blank_title(service: FaultReportService, repo):
    with pytest.raises(ReportValidationError) as exc_info:
        await service.create_report(_report_data(title="   "))
    assert exc_info.value.field == "title"
    assert await repo.count() == 0


@pytest.mark.asyncio
async def test_create_report_stores_uploads_in_order(service: FaultReportService, storage):
    uploads = [
        AttachmentUpload(content=b"photo", filename="leak.jpg"),
        AttachmentUpload(content=b"%PDF", filename="manual.pdf"),
    ]
    report = await service.create_report(_report_data(), uploads)

    assert len(report.attachments) == 2
    assert report.attachments[0].endswith("leak.jpg")
    assert report.attachments[1].endswith("manual.pdf")
    assert all(storage.file_exists(h) for h in report.attachments)


@pytest.mark.asyncio
async def test_create_report_rejects_disallowed_extension_before_writing(service, storage):
    uploads = [
        AttachmentUpload(content=b"ok", filename="ok.png"),
        AttachmentUpload(content=b"MZ", filename="virus.exe"),
    ]
    with pytest.raises(AttachmentRejectedError):
        await service.create_report(_report_data(), uploads)
    assert storage.files == {}


@pytest.mark.asyncio
async def test_create_report_rejects_too_many_attachments(service, storage):
    uploads = [AttachmentUpload(content=b"x", filename=f"f{i}.txt") for i in range(6)]
    with pytest.raises(AttachmentRejectedError):
        await service.create_report(_report_data(), uploads)
    assert storage.files == {}


@pytest.mark.asyncio
async def test_create_report_rejects_oversized_upload(repo, storage):
    service = FaultReportService(repo, storage, max_upload_size_bytes=4)
    with pytest.raises(AttachmentRejectedError):
        await service.create_report(
            _report_data(), [AttachmentUpload(content=b"12345", filename="big.txt")]
        )


@pytest.mark.asyncio
async def test_failed_creation_removes_written_files(storage):
    service = FaultReportService(FailingCreateRepository(), storage)
    uploads = [
        AttachmentUpload(content=b"a", filename="a.png"),
        AttachmentUpload(content=b"b", filename="b.png"),
    ]
    with pytest.raises(RuntimeError):
        await service.create_report(_report_data(), uploads)
    assert storage.files == {}


# ── Updates ──────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_update_report_patches_only_provided_fields(service: FaultReportService):
    created = await service.create_report(_report_data(department="IT"))
    updated = await service.update_report(created.id, FaultReportUpdate(title="New title"))

    assert updated.title == "New title"
    assert updated.description == "D"
    assert updated.department == "IT"
    assert updated.status is ReportStatus.PENDING
    assert updated.updated_at > created.updated_at
    assert updated.created_at == created.created_at


@pytest.mark.asyncio
async def test_update_report_accepts_domain_patch(service: FaultReportService):
    created = await service.create_report(_report_data())
    updated = await service.update_report(created.id, ReportPatch(location="Building C"))
    assert updated.location == "Building C"


@pytest.mark.asyncio
async def test_update_report_rejects_blank_description(service: FaultReportService):
    created = await service.create_report(_report_data())
    with pytest.raises(ReportValidationError):
        await service.update_report(created.id, ReportPatch(description=" "))
    assert (await service.get_report(created.id)).description == "D"


def test_update_schema_rejects_status_and_attachments():
    with pytest.raises(ValueError):
        FaultReportUpdate(status="approved")
    with pytest.raises(ValueError):
        FaultReportUpdate(attachments=["x.png"])


@pytest.mark.asyncio
async def test_unknown_id_returns_none(service: FaultReportService):
    assert await service.get_report("missing") is None
    assert await service.update_report("missing", FaultReportUpdate(title="x")) is None
    assert await service.set_status("missing", ReportStatus.APPROVED) is None
    assert await service.issue_job_card("missing") is None
    assert await service.submit_procurement_request("missing", "24hrs") is None
    assert await service.remove_attachment("missing", "x.png") is None
    assert await service.delete_report("missing") is False


# ── Status & workflow ────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_set_status_bumps_updated_at(service: FaultReportService):
    created = await service.create_report(_report_data())
    await service.set_status(created.id, "approved")
    fetched = await service.get_report(created.id)

    assert fetched.status is ReportStatus.APPROVED
    assert fetched.updated_at > created.updated_at


@pytest.mark.asyncio
async def test_set_status_does_not_guard_transitions(service: FaultReportService):
    created = await service.create_report(_report_data())
    await service.set_status(created.id, ReportStatus.REJECTED)
    reopened = await service.set_status(created.id, ReportStatus.PENDING)
    assert reopened.status is ReportStatus.PENDING


@pytest.mark.asyncio
async def test_set_status_rejects_unknown_value(service: FaultReportService):
    created = await service.create_report(_report_data())
    with pytest.raises(ReportValidationError):
        await service.set_status(created.id, "closed")


@pytest.mark.asyncio
async def test_issue_job_card_approves_pending_report(service: FaultReportService):
    created = await service.create_report(_report_data())
    report = await service.issue_job_card(created.id)
    assert report.status is ReportStatus.APPROVED


@pytest.mark.asyncio
async def test_issue_job_card_twice_is_rejected(service: FaultReportService):
    created = await service.create_report(_report_data())
    await service.issue_job_card(created.id)
    with pytest.raises(InvalidStatusTransitionError) as exc_info:
        await service.issue_job_card(created.id)
    assert exc_info.value.current == "approved"


@pytest.mark.asyncio
async def test_procurement_request_assigns_and_records_tier(service: FaultReportService):
    created = await service.create_report(_report_data())
    await service.issue_job_card(created.id)
    report = await service.submit_procurement_request(created.id, "72hrs")

    assert report.status is ReportStatus.ASSIGNED
    assert report.procurement_priority is ProcurementPriority.WITHIN_72_HOURS


@pytest.mark.asyncio
async def test_procurement_request_refused_for_rejected_report(service: FaultReportService):
    created = await service.create_report(_report_data())
    await service.set_status(created.id, ReportStatus.REJECTED)
    with pytest.raises(InvalidStatusTransitionError):
        await service.submit_procurement_request(created.id, "24hrs")


@pytest.mark.asyncio
async def test_procurement_request_rejects_unknown_tier(service: FaultReportService):
    created = await service.create_report(_report_data())
    with pytest.raises(ReportValidationError):
        await service.submit_procurement_request(created.id, "next-week")


# ── Attachments ──────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_add_attachment_requires_stored_file(service: FaultReportService):
    created = await service.create_report(_report_data())
    with pytest.raises(AttachmentIntegrityError):
        await service.add_attachment(created.id, "ghost.png")


@pytest.mark.asyncio
async def test_upload_attachment_appends_and_grants_access(service: FaultReportService):
    created = await service.create_report(_report_data())
    report = await service.upload_attachment(created.id, b"img", "photo.png")

    handle = report.attachments[-1]
    assert report.updated_at > created.updated_at
    assert await service.verify_file_access(handle) is True


@pytest.mark.asyncio
async def test_upload_attachment_to_missing_report_writes_nothing(service, storage):
    assert await service.upload_attachment("missing", b"img", "photo.png") is None
    assert storage.files == {}


@pytest.mark.asyncio
async def test_remove_attachment_deletes_file(service: FaultReportService, storage):
    created = await service.create_report(
        _report_data(), [AttachmentUpload(content=b"a", filename="a.png")]
    )
    handle = created.attachments[0]

    report = await service.remove_attachment(created.id, handle)

    assert report.attachments == []
    assert not storage.file_exists(handle)
    assert await service.verify_file_access(handle) is False


@pytest.mark.asyncio
async def test_remove_unlinked_attachment_leaves_other_files(service, storage):
    first = await service.create_report(
        _report_data(), [AttachmentUpload(content=b"a", filename="a.png")]
    )
    second = await service.create_report(_report_data())
    handle = first.attachments[0]

    await service.remove_attachment(second.id, handle)

    assert storage.file_exists(handle)
    assert await service.verify_file_access(handle) is True


@pytest.mark.asyncio
async def test_open_attachment_denies_unlinked_file(service: FaultReportService, storage):
    stored = await storage.store_file(b"secret", "secret.txt")
    with pytest.raises(FileAccessDeniedError):
        await service.open_attachment(stored.filename)


@pytest.mark.asyncio
async def test_open_attachment_reports_missing_file(service: FaultReportService, storage):
    created = await service.create_report(
        _report_data(), [AttachmentUpload(content=b"a", filename="a.png")]
    )
    handle = created.attachments[0]
    storage.files.pop(handle)
    with pytest.raises(EntityNotFoundError):
        await service.open_attachment(handle)


# ── Deletion ─────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_delete_report_cascades_to_files(service: FaultReportService, storage):
    created = await service.create_report(
        _report_data(),
        [
            AttachmentUpload(content=b"a", filename="a.png"),
            AttachmentUpload(content=b"b", filename="b.pdf"),
        ],
    )
    handles = list(created.attachments)

    assert await service.delete_report(created.id) is True

    assert await service.get_report(created.id) is None
    for handle in handles:
        assert not storage.file_exists(handle)
        assert await service.verify_file_access(handle) is False


@pytest.mark.asyncio
async def test_attachment_owned_by_another_report_cannot_be_linked(service, storage):
    owner = await service.create_report(
        _report_data(), [AttachmentUpload(content=b"doc", filename="doc.txt")]
    )
    other = await service.create_report(_report_data())
    handle = owner.attachments[0]

    with pytest.raises(AttachmentIntegrityError):
        await service.add_attachment(other.id, handle)

    await service.delete_report(owner.id)
    assert (await service.get_report(other.id)).attachments == []
    assert not storage.file_exists(handle)


@pytest.mark.asyncio
async def test_delete_keeps_files_still_linked_elsewhere(repo, service, storage):
    stored = await storage.store_file(b"shared", "shared.pdf")
    first = await repo.create(FaultReport(title="A", description="D", priority="low",
                                          attachments=[stored.filename]))
    second = await repo.create(FaultReport(title="B", description="D", priority="low",
                                           attachments=[stored.filename]))

    await service.delete_report(first.id)

    assert storage.file_exists(stored.filename)
    assert await service.verify_file_access(stored.filename) is True
    assert (await service.open_attachment(stored.filename)).name == stored.filename

    await service.remove_attachment(second.id, stored.filename)
    assert not storage.file_exists(stored.filename)
