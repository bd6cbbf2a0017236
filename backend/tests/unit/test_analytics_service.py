"""Unit tests for AnalyticsService aggregates."""

from datetime import date, datetime, timedelta, timezone

import pytest

from fault_tracker.application.services import AnalyticsService
from fault_tracker.application.services.analytics_service import _percentage
from fault_tracker.domain.entities import FaultReport, ReportStatus
from fault_tracker.infrastructure.memory.fault_report_repository import InMemoryFaultReportRepository

TODAY = date(2024, 6, 15)


def _at(day: date, hour: int = 12) -> datetime:
    return datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc)


@pytest.fixture
def repo() -> InMemoryFaultReportRepository:
    return InMemoryFaultReportRepository()


@pytest.fixture
def analytics(repo) -> AnalyticsService:
    return AnalyticsService(repo, today=lambda: TODAY)


async def _add(repo, status=ReportStatus.PENDING, priority="medium", department=None, created=None):
    report = FaultReport(
        title="T",
        description="D",
        priority=priority,
        department=department,
        status=status,
        created_at=created or _at(TODAY),
    )
    return await repo.create(report)


# ── Status distribution ──────────────────────────────────────────────

@pytest.mark.asyncio
async def test_status_distribution_on_empty_store(analytics):
    distribution = await analytics.status_distribution()

    assert [s.status for s in distribution] == ["pending", "approved", "assigned", "rejected"]
    assert all(s.count == 0 and s.percentage == 0 for s in distribution)


@pytest.mark.asyncio
async def test_status_distribution_percentages(repo, analytics):
    await _add(repo, ReportStatus.PENDING)
    await _add(repo, ReportStatus.PENDING)
    await _add(repo, ReportStatus.APPROVED)

    by_status = {s.status: s for s in await analytics.status_distribution()}

    assert by_status["pending"].count == 2
    assert by_status["pending"].percentage == 67
    assert by_status["approved"].percentage == 33
    assert by_status["assigned"].percentage == 0


@pytest.mark.asyncio
async def test_percentages_sum_close_to_hundred(repo, analytics):
    for status in (ReportStatus.PENDING, ReportStatus.APPROVED, ReportStatus.ASSIGNED,
                   ReportStatus.REJECTED, ReportStatus.PENDING, ReportStatus.PENDING):
        await _add(repo, status)

    distribution = await analytics.status_distribution()

    assert sum(s.count for s in distribution) == 6
    assert abs(sum(s.percentage for s in distribution) - 100) <= len(distribution)


@pytest.mark.asyncio
async def test_half_percent_rounds_up(repo, analytics):
    # 1 of 8 is 12.5 %
    await _add(repo, ReportStatus.APPROVED)
    for _ in range(7):
        await _add(repo, ReportStatus.PENDING)

    by_status = {s.status: s for s in await analytics.status_distribution()}
    assert by_status["approved"].percentage == 13


# ── Priority & department ────────────────────────────────────────────

@pytest.mark.asyncio
async def test_priority_breakdown_counts_present_priorities_only(repo, analytics):
    await _add(repo, priority="high")
    await _add(repo, priority="low")
    await _add(repo, priority="high")

    breakdown = await analytics.priority_breakdown()
    assert [(p.priority, p.count) for p in breakdown] == [("high", 2), ("low", 1)]


@pytest.mark.asyncio
async def test_department_activity_sorted_and_skips_missing(repo, analytics):
    await _add(repo, department="Facilities")
    await _add(repo, department="IT")
    await _add(repo, department="IT")
    await _add(repo, department=None)
    await _add(repo, department="Security")

    activity = await analytics.department_activity()

    assert [(d.department, d.count) for d in activity] == [
        ("IT", 2), ("Facilities", 1), ("Security", 1),
    ]


# ── Trends ───────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_trend_has_one_entry_per_day_oldest_first(analytics):
    trend = await analytics.trend_data("7d")

    assert len(trend) == 7
    assert trend[0].date == "2024-06-09"
    assert trend[-1].date == "2024-06-15"
    assert all(p.total == 0 for p in trend)


@pytest.mark.asyncio
async def test_trend_buckets_reports_by_creation_day(repo, analytics):
    await _add(repo, ReportStatus.PENDING, created=_at(TODAY))
    await _add(repo, ReportStatus.REJECTED, created=_at(TODAY))
    await _add(repo, ReportStatus.APPROVED, created=_at(TODAY - timedelta(days=2)))
    await _add(repo, ReportStatus.APPROVED, created=_at(TODAY - timedelta(days=30)))

    trend = {p.date: p for p in await analytics.trend_data("7d")}

    assert trend["2024-06-15"].pending == 1
    assert trend["2024-06-15"].rejected == 1
    assert trend["2024-06-15"].total == 2
    assert trend["2024-06-13"].approved == 1
    assert sum(p.total for p in trend.values()) == 3


@pytest.mark.asyncio
async def test_trend_periods(analytics):
    assert len(await analytics.trend_data("30d")) == 30
    assert len(await analytics.trend_data("90d")) == 90
    assert len(await analytics.trend_data("fortnight")) == 90


# ── Dashboard ────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_dashboard_totals_and_recent_reports(repo, analytics):
    for i in range(12):
        await _add(repo, created=_at(TODAY, hour=0) + timedelta(minutes=i))
    await _add(repo, ReportStatus.ASSIGNED, created=_at(TODAY, hour=1))

    dashboard = await analytics.dashboard()

    assert dashboard.total_reports == 13
    assert dashboard.pending_reports == 12
    assert dashboard.assigned_reports == 1
    assert dashboard.approved_reports == 0
    assert len(dashboard.recent_reports) == 10
    assert dashboard.recent_reports[0].status is ReportStatus.ASSIGNED
    created = [r.created_at for r in dashboard.recent_reports]
    assert created == sorted(created, reverse=True)


@pytest.mark.asyncio
async def test_dashboard_reflects_latest_changes(repo, analytics):
    report = await _add(repo)
    assert (await analytics.dashboard()).pending_reports == 1

    report.status = ReportStatus.APPROVED
    await repo.update(report)

    dashboard = await analytics.dashboard()
    assert dashboard.pending_reports == 0
    assert dashboard.approved_reports == 1


@pytest.mark.parametrize(
    ("count", "total", "expected"),
    [(0, 0, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (7, 8, 88), (1, 200, 1), (1, 6, 17)],
)
def test_percentage_matches_ratio_then_scale_rounding(count, total, expected):
    assert _percentage(count, total) == expected
