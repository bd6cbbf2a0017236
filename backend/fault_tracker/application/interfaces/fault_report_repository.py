"""Abstract repository interface (port) for FaultReport persistence."""

from abc import ABC, abstractmethod

from fault_tracker.domain.entities import FaultReport


class FaultReportRepository(ABC):
    """Port for fault report persistence — implemented in the infrastructure layer.

    Implementations return copies: mutating a returned entity never changes
    stored state until it is passed back to ``update``.
    """

    @abstractmethod
    async def get_by_id(self, report_id: str) -> FaultReport | None:
        """Retrieve a single report by its ID."""
        ...

    @abstractmethod
    async def get_all(self) -> list[FaultReport]:
        """Retrieve every report in creation order (oldest first)."""
        ...

    @abstractmethod
    async def create(self, report: FaultReport) -> FaultReport:
        """Persist a new report. Raises DuplicateEntityError on an id collision."""
        ...

    @abstractmethod
    async def update(self, report: FaultReport) -> FaultReport | None:
        """Replace the stored report with the same ID. Returns None if it no longer exists."""
        ...

    @abstractmethod
    async def delete(self, report_id: str) -> bool:
        """Delete a report. Returns True if deleted, False if not found."""
        ...

    @abstractmethod
    async def is_attachment_linked(self, handle: str) -> bool:
        """True if any report lists ``handle`` among its attachments."""
        ...

    @abstractmethod
    async def count(self) -> int:
        """Return the total number of reports."""
        ...

    @abstractmethod
    async def commit(self) -> None:
        """Make every change since the last commit durable and visible to other sessions."""
        ...
