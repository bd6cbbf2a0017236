import json
import logging
from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_config_logger = logging.getLogger(__name__)

_SETTINGS_FILE = Path("data/settings.json")
_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)
_RUNTIME_KEYS = frozenset({
    "seed_sample_data",
    "recent_reports_limit",
})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Fault Report Tracker API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Report persistence: "memory" keeps reports in-process, "sqlalchemy" uses database_url
    repository_backend: str = "memory"
    database_url: str = "sqlite:///data/fault_reports.db"

    # Attachment upload & storage
    upload_dir: str = "uploads"
    max_upload_size_mb: int = 10
    max_attachments_per_report: int = 5
    allowed_attachment_extensions: list[str] = [
        "jpeg", "jpg", "png", "gif", "pdf", "doc", "docx", "txt", "xlsx", "xls",
    ]

    # Analytics
    recent_reports_limit: int = 10

    # Seed the six demo reports on startup when the store is empty
    seed_sample_data: bool = False

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine SQL statements
    log_level_http: str = "WARNING"          # httpx / httpcore
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_workflow: str = "INFO"         # FaultReportService lifecycle trace

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    def model_post_init(self, __context: object) -> None:
        """Merge runtime overrides from data/settings.json into settings."""
        if _SETTINGS_FILE.exists():
            try:
                overrides = json.loads(_SETTINGS_FILE.read_text("utf-8"))
                for key in _RUNTIME_KEYS:
                    if key in overrides and isinstance(overrides[key], type(getattr(self, key))):
                        object.__setattr__(self, key, overrides[key])
            except Exception as exc:
                _config_logger.warning("Could not load settings overrides: %s", exc)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
