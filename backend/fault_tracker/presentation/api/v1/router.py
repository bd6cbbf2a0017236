"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from fault_tracker.presentation.api.v1.endpoints.health import router as health_router
from fault_tracker.presentation.api.v1.endpoints.fault_reports import router as fault_reports_router
from fault_tracker.presentation.api.v1.endpoints.files import router as files_router
from fault_tracker.presentation.api.v1.endpoints.analytics import router as analytics_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(fault_reports_router)
router.include_router(files_router)
router.include_router(analytics_router)
