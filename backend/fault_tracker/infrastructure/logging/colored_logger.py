"""Colored workflow logger — ANSI-colored console trace of the report lifecycle.

Each lifecycle stage gets its own color and icon so a report can be
followed from submission to hand-off in the terminal:

    🟢 Green   — Submission / Upload
    🔵 Blue    — Status changes
    🟡 Yellow  — Job card issuance
    🟣 Magenta — Procurement requests
    🟠 Cyan    — Attachment changes
    🔴 Red     — Deletion / failures
"""

import logging
from typing import Any

Stage = tuple[str, str, str]


class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"


class WorkflowStage:
    """Lifecycle stages as (label, color, icon)."""

    SUBMIT: Stage = ("SUBMIT", _Colors.GREEN, "📝")
    UPLOAD: Stage = ("UPLOAD", _Colors.GREEN, "📁")
    STATUS: Stage = ("STATUS", _Colors.BLUE, "🔁")
    JOB_CARD: Stage = ("JOB_CARD", _Colors.YELLOW, "🛠️")
    PROCUREMENT: Stage = ("PROCUREMENT", _Colors.MAGENTA, "📦")
    ATTACHMENT: Stage = ("ATTACHMENT", _Colors.CYAN, "📎")
    DELETE: Stage = ("DELETE", _Colors.RED, "🗑️")


def _context(fields: dict[str, Any]) -> str:
    if not fields:
        return ""
    joined = " | ".join(f"{k}={v}" for k, v in fields.items())
    return f" {_Colors.GRAY}({joined}){_Colors.RESET}"


class WorkflowLogger:
    """Color-coded logger for fault report lifecycle events.

    Usage:
        wlog = WorkflowLogger("FaultReportService")
        wlog.event(WorkflowStage.SUBMIT, "Report submitted", id=report.id)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def event(self, stage: Stage, message: str, **fields: Any) -> None:
        """Log a completed lifecycle step at INFO."""
        if not self._logger.isEnabledFor(logging.INFO):
            return
        label, color, icon = stage
        self._logger.info(
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}{_context(fields)}"
        )

    def error(self, stage: Stage, message: str, error: Exception | None = None) -> None:
        """Log a failed lifecycle step in red at ERROR."""
        label = stage[0]
        line = f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} {_Colors.RED}{message}{_Colors.RESET}"
        if error is not None:
            line += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(line)
