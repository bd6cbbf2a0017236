"""Analytics service — dashboard aggregates computed from the live report collection."""

import logging
import math
from collections import Counter
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta, timezone

from fault_tracker.application.interfaces import FaultReportRepository
from fault_tracker.domain.entities import (
    DashboardAnalytics,
    DepartmentCount,
    FaultReport,
    PriorityCount,
    ReportStatus,
    StatusCount,
    TrendPoint,
)

logger = logging.getLogger(__name__)

TREND_PERIODS: dict[str, int] = {"7d": 7, "30d": 30, "90d": 90}
_FALLBACK_PERIOD_DAYS = 90


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _percentage(count: int, total: int) -> int:
    """Percentage rounded half-up to a whole number; 0 for an empty collection."""
    if total == 0:
        return 0
    return math.floor(count / total * 100 + 0.5)


class AnalyticsService:
    """Read-only aggregation over every report in the repository.

    Nothing is cached: each call re-reads the repository, so results always
    reflect the latest mutation.
    """

    def __init__(
        self,
        repository: FaultReportRepository,
        today: Callable[[], date] = _utc_today,
        recent_limit: int = 10,
    ):
        self._repository = repository
        self._today = today
        self._recent_limit = recent_limit

    async def status_distribution(self) -> list[StatusCount]:
        return self._status_distribution(await self._repository.get_all())

    async def priority_breakdown(self) -> list[PriorityCount]:
        return self._priority_breakdown(await self._repository.get_all())

    async def department_activity(self) -> list[DepartmentCount]:
        return self._department_activity(await self._repository.get_all())

    async def trend_data(self, period: str = "7d") -> list[TrendPoint]:
        """Daily status counts for the last N calendar days, oldest first.

        ``period`` is ``7d``, ``30d`` or ``90d``; anything else covers 90 days.
        """
        days = TREND_PERIODS.get(period)
        if days is None:
            logger.debug("Unknown trend period '%s', using %d days", period, _FALLBACK_PERIOD_DAYS)
            days = _FALLBACK_PERIOD_DAYS

        today = self._today()
        start = today - timedelta(days=days - 1)
        buckets = {
            start + timedelta(days=offset): TrendPoint(date=(start + timedelta(days=offset)).isoformat())
            for offset in range(days)
        }

        for report in await self._repository.get_all():
            point = buckets.get(report.created_at.astimezone(timezone.utc).date())
            if point is None:
                continue
            setattr(point, report.status.value, getattr(point, report.status.value) + 1)
            point.total += 1

        return list(buckets.values())

    async def dashboard(self) -> DashboardAnalytics:
        reports = await self._repository.get_all()
        counts = Counter(r.status for r in reports)

        recent = sorted(reports, key=lambda r: r.created_at, reverse=True)[: self._recent_limit]

        return DashboardAnalytics(
            total_reports=len(reports),
            pending_reports=counts[ReportStatus.PENDING],
            approved_reports=counts[ReportStatus.APPROVED],
            assigned_reports=counts[ReportStatus.ASSIGNED],
            rejected_reports=counts[ReportStatus.REJECTED],
            recent_reports=recent,
            status_distribution=self._status_distribution(reports),
            priority_breakdown=self._priority_breakdown(reports),
            department_activity=self._department_activity(reports),
        )

    # ── Aggregation helpers ──────────────────────────────────────────

    @staticmethod
    def _status_distribution(reports: list[FaultReport]) -> list[StatusCount]:
        counts = Counter(r.status for r in reports)
        total = len(reports)
        return [
            StatusCount(
                status=status.value,
                count=counts[status],
                percentage=_percentage(counts[status], total),
            )
            for status in ReportStatus
        ]

    @staticmethod
    def _priority_breakdown(reports: Iterable[FaultReport]) -> list[PriorityCount]:
        # Counter keeps first-occurrence order
        counts = Counter(r.priority for r in reports)
        return [PriorityCount(priority=p, count=c) for p, c in counts.items()]

    @staticmethod
    def _department_activity(reports: Iterable[FaultReport]) -> list[DepartmentCount]:
        counts = Counter(r.department for r in reports if r.department)
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [DepartmentCount(department=d, count=c) for d, c in ranked]
