"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fault_tracker.config import get_settings
from fault_tracker.application.services import seed_sample_reports
from fault_tracker.infrastructure.dependencies import (
    build_fault_report_service,
    get_in_memory_repository,
)
from fault_tracker.infrastructure.logging.log_config import setup_logging
from fault_tracker.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


async def _init_database() -> None:
    """Create the fault_reports table when the SQLAlchemy backend is selected."""
    from fault_tracker.infrastructure.database import Base, engine

    settings = get_settings()
    if settings.database_url.startswith("sqlite:///"):
        db_path = Path(settings.database_url.removeprefix("sqlite:///"))
        db_path.parent.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready at %s", settings.database_url)


async def _seed_sample_data() -> None:
    """Seed the demo reports into the configured store if it is empty."""
    settings = get_settings()
    try:
        if settings.repository_backend == "sqlalchemy":
            from fault_tracker.infrastructure.database.session import session_scope
            from fault_tracker.infrastructure.database.repositories import (
                SQLAlchemyFaultReportRepository,
            )

            async with session_scope() as session:
                repository = SQLAlchemyFaultReportRepository(session)
                await seed_sample_reports(repository, build_fault_report_service(repository))
        else:
            repository = get_in_memory_repository()
            await seed_sample_reports(repository, build_fault_report_service(repository))
    except Exception as exc:
        logger.warning("Could not seed sample fault reports: %s", exc)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — prepare storage and optionally seed demo data."""
    settings = get_settings()
    setup_logging()

    # 1. Ensure upload directory exists
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    # 2. Create tables for the durable backend
    if settings.repository_backend == "sqlalchemy":
        await _init_database()

    # 3. Demo data
    if settings.seed_sample_data:
        await _seed_sample_data()

    logger.info(
        "Fault report tracker started (backend=%s, uploads=%s)",
        settings.repository_backend,
        settings.upload_dir,
    )

    yield

    if settings.repository_backend == "sqlalchemy":
        from fault_tracker.infrastructure.database import engine

        await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "fault_tracker.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
