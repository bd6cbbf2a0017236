"""Logging setup for the fault tracker.

Each log category (SQL, HTTP client, uvicorn, report workflow) has its own
level in Settings, so chatty third-party loggers can be turned down while
the workflow trace stays visible.

Call ``setup_logging()`` once, from the application lifespan.
"""

import logging
import sys

from fault_tracker.config import Settings, get_settings

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_DATE_FORMAT = "%H:%M:%S"

# Settings field → logger names it controls
_CATEGORIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("log_level_sql", ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite")),
    ("log_level_http", ("httpx", "httpcore", "python_multipart")),
    ("log_level_uvicorn", ("uvicorn", "uvicorn.access", "uvicorn.error")),
    ("log_level_workflow", ("FaultReportService", "fault_tracker.application.services")),
)


def setup_logging(settings: Settings | None = None) -> None:
    """Apply the root level, a fallback stderr handler and per-category levels."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    if not root.handlers:
        # uvicorn installs its own handlers; scripts and tests may not
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
        root.addHandler(handler)

    applied = {}
    for field_name, logger_names in _CATEGORIES:
        level_name = getattr(settings, field_name, "INFO")
        for name in logger_names:
            logging.getLogger(name).setLevel(_parse_level(level_name))
        applied[field_name.removeprefix("log_level_")] = level_name

    logging.getLogger(__name__).debug(
        "Logging configured: root=%s %s",
        settings.log_level,
        " ".join(f"{k}={v}" for k, v in applied.items()),
    )


def _parse_level(raw: str) -> int:
    """Map a level name to its logging constant; unknown names mean INFO."""
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO
