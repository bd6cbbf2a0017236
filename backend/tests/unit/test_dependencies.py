"""Unit tests for service wiring in infrastructure.dependencies."""

import asyncio

import pytest

from fault_tracker.application.schemas import FaultReportCreate
from fault_tracker.domain.entities import FaultReport
from fault_tracker.infrastructure import dependencies
from fault_tracker.infrastructure.dependencies import build_fault_report_service, get_report_locks
from fault_tracker.infrastructure.memory.fault_report_repository import InMemoryFaultReportRepository
from fault_tracker.infrastructure.storage.local_file_storage import LocalFileStorage


class YieldingRepository(InMemoryFaultReportRepository):
    """Suspends after every read, the way a database round-trip would."""

    async def get_by_id(self, report_id: str) -> FaultReport | None:
        report = await super().get_by_id(report_id)
        await asyncio.sleep(0)
        return report


@pytest.fixture
def storage(tmp_path, monkeypatch) -> LocalFileStorage:
    storage = LocalFileStorage(str(tmp_path / "uploads"))
    monkeypatch.setattr(dependencies, "get_file_storage", lambda: storage)
    return storage


def test_services_share_the_process_wide_locks(storage):
    repo = InMemoryFaultReportRepository()

    first = build_fault_report_service(repo)
    second = build_fault_report_service(repo)

    assert first._locks is get_report_locks()
    assert second._locks is first._locks


@pytest.mark.asyncio
async def test_concurrent_requests_do_not_lose_attachments(storage):
    repo = YieldingRepository()
    report = await build_fault_report_service(repo).create_report(
        FaultReportCreate(title="T", description="D", priority="low")
    )

    # One service per request, as the FastAPI dependency builds them
    await asyncio.gather(
        *(
            build_fault_report_service(repo).upload_attachment(report.id, b"x", f"photo{i}.png")
            for i in range(6)
        )
    )

    stored = await repo.get_by_id(report.id)
    assert len(stored.attachments) == 6
    assert all(storage.file_exists(h) for h in stored.attachments)
