"""Analytics endpoints — dashboard aggregates over all fault reports."""

from fastapi import APIRouter, Depends, Query

from fault_tracker.application.schemas import (
    DashboardSchema,
    DepartmentCountSchema,
    PriorityCountSchema,
    StatusCountSchema,
    TrendPointSchema,
)
from fault_tracker.application.services import AnalyticsService
from fault_tracker.infrastructure.dependencies import get_analytics_service

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/dashboard", response_model=DashboardSchema)
async def get_dashboard(
    service: AnalyticsService = Depends(get_analytics_service),
) -> DashboardSchema:
    """Totals per status, the ten most recent reports and all breakdowns."""
    dashboard = await service.dashboard()
    return DashboardSchema.model_validate(dashboard, from_attributes=True)


@router.get("/status-distribution", response_model=list[StatusCountSchema])
async def get_status_distribution(
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[StatusCountSchema]:
    items = await service.status_distribution()
    return [StatusCountSchema.model_validate(i, from_attributes=True) for i in items]


@router.get("/priority-breakdown", response_model=list[PriorityCountSchema])
async def get_priority_breakdown(
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[PriorityCountSchema]:
    items = await service.priority_breakdown()
    return [PriorityCountSchema.model_validate(i, from_attributes=True) for i in items]


@router.get("/department-activity", response_model=list[DepartmentCountSchema])
async def get_department_activity(
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[DepartmentCountSchema]:
    items = await service.department_activity()
    return [DepartmentCountSchema.model_validate(i, from_attributes=True) for i in items]


@router.get("/trends", response_model=list[TrendPointSchema])
async def get_trends(
    period: str = Query("7d", pattern="^(7d|30d|90d)$", description="7d, 30d or 90d"),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[TrendPointSchema]:
    """Daily status counts for the requested period, oldest day first."""
    items = await service.trend_data(period)
    return [TrendPointSchema.model_validate(i, from_attributes=True) for i in items]
