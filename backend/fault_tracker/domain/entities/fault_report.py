"""Domain entities for fault reports — pure Python business objects, no framework dependencies."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from uuid import uuid4

_ONE_MICROSECOND = timedelta(microseconds=1)


class ReportStatus(str, Enum):
    """Lifecycle states of a fault report."""

    PENDING = "pending"
    APPROVED = "approved"
    ASSIGNED = "assigned"
    REJECTED = "rejected"


class ReportPriority(str, Enum):
    """Conventional report priorities accepted at intake."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ProcurementPriority(str, Enum):
    """Urgency tier of a procurement request — distinct from the report priority."""

    WITHIN_24_HOURS = "24hrs"
    WITHIN_72_HOURS = "72hrs"
    MISCELLANEOUS = "miscellaneous"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ReportPatch:
    """Partial update of a report's descriptive fields.

    Only fields that are not ``None`` are applied. Status, attachments,
    identifiers and timestamps are deliberately absent: they change only
    through their dedicated operations.
    """

    title: str | None = None
    description: str | None = None
    priority: str | None = None
    department: str | None = None
    location: str | None = None
    reported_by: str | None = None

    def provided(self) -> dict[str, str]:
        """Return the fields that were actually set on this patch."""
        return {
            name: value
            for name, value in (
                ("title", self.title),
                ("description", self.description),
                ("priority", self.priority),
                ("department", self.department),
                ("location", self.location),
                ("reported_by", self.reported_by),
            )
            if value is not None
        }


@dataclass
class FaultReport:
    """Core domain entity: a submitted facility/IT fault and its triage state."""

    title: str
    description: str
    priority: str
    department: str | None = None
    location: str | None = None
    reported_by: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    status: ReportStatus = ReportStatus.PENDING
    attachments: list[str] = field(default_factory=list)
    procurement_priority: ProcurementPriority | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.updated_at is None:
            self.updated_at = self.created_at

    # ── Mutations ───────────────────────────────────────────────────

    def apply_patch(self, patch: ReportPatch) -> None:
        """Apply the provided descriptive fields and refresh updated_at."""
        for name, value in patch.provided().items():
            setattr(self, name, value)
        self.touch()

    def change_status(
        self,
        status: ReportStatus,
        procurement_priority: ProcurementPriority | None = None,
    ) -> None:
        self.status = status
        if procurement_priority is not None:
            self.procurement_priority = procurement_priority
        self.touch()

    def add_attachment(self, handle: str) -> None:
        self.attachments = [*self.attachments, handle]
        self.touch()

    def remove_attachment(self, handle: str) -> None:
        """Drop every occurrence of ``handle`` from the attachment list."""
        self.attachments = [a for a in self.attachments if a != handle]
        self.touch()

    def has_attachment(self, handle: str) -> bool:
        return handle in self.attachments

    def touch(self) -> None:
        """Refresh updated_at, keeping it strictly increasing for this report."""
        now = _utcnow()
        if self.updated_at is not None and now <= self.updated_at:
            now = self.updated_at + _ONE_MICROSECOND
        self.updated_at = now

    # ── Search helpers ──────────────────────────────────────────────

    def matches_search(self, term: str) -> bool:
        """Case-insensitive substring match over title, description, reporter and department."""
        needle = term.lower()
        haystacks = (self.title, self.description, self.reported_by, self.department)
        return any(h is not None and needle in h.lower() for h in haystacks)
