"""Demo fault reports seeded on startup when ``seed_sample_data`` is enabled."""

import logging

from fault_tracker.application.interfaces import FaultReportRepository
from fault_tracker.application.schemas import FaultReportCreate
from fault_tracker.domain.entities import ReportStatus

from .fault_report_service import FaultReportService

logger = logging.getLogger(__name__)

SAMPLE_REPORTS: list[tuple[dict[str, str], ReportStatus]] = [
    (
        {
            "title": "Server Room AC Malfunction",
            "description": "Air conditioning unit not working properly, temperature rising above safe levels",
            "priority": "critical",
            "department": "IT",
            "location": "Server Room A",
            "reported_by": "John Doe",
        },
        ReportStatus.PENDING,
    ),
    (
        {
            "title": "Printer Paper Jam",
            "description": "Office printer has recurring paper jams, affecting daily operations",
            "priority": "low",
            "department": "Administration",
            "location": "Office Floor 2",
            "reported_by": "Jane Smith",
        },
        ReportStatus.APPROVED,
    ),
    (
        {
            "title": "Network Connectivity Issues",
            "description": "Intermittent network outages in building C affecting productivity",
            "priority": "high",
            "department": "IT",
            "location": "Building C",
            "reported_by": "Mike Johnson",
        },
        ReportStatus.ASSIGNED,
    ),
    (
        {
            "title": "Broken Window in Conference Room",
            "description": "Large crack in conference room window, safety hazard",
            "priority": "medium",
            "department": "Facilities",
            "location": "Conference Room B",
            "reported_by": "Sarah Wilson",
        },
        ReportStatus.PENDING,
    ),
    (
        {
            "title": "Elevator Maintenance Required",
            "description": "Elevator making strange noises and moving slowly",
            "priority": "high",
            "department": "Maintenance",
            "location": "Main Building Elevator",
            "reported_by": "Tom Brown",
        },
        ReportStatus.APPROVED,
    ),
    (
        {
            "title": "Parking Lot Lighting",
            "description": "Several parking lot lights are not working, security concern",
            "priority": "medium",
            "department": "Security",
            "location": "Parking Lot A",
            "reported_by": "Lisa Davis",
        },
        ReportStatus.REJECTED,
    ),
]


async def seed_sample_reports(
    repository: FaultReportRepository, service: FaultReportService
) -> int:
    """Create the demo reports if the store is empty. Returns how many were added.

    Idempotent — safe to call on every startup.
    """
    if await repository.count() > 0:
        logger.debug("Fault reports already present, skipping sample data")
        return 0

    for fields, status in SAMPLE_REPORTS:
        report = await service.create_report(FaultReportCreate(**fields))
        if status is not ReportStatus.PENDING:
            await service.set_status(report.id, status)

    logger.info("Seeded %d sample fault reports", len(SAMPLE_REPORTS))
    return len(SAMPLE_REPORTS)
