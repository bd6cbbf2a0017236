"""Abstract interface (port) for attachment file storage."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass
class StoredFile:
    """Result of storing a single file.

    ``filename`` is the opaque handle kept in a report's attachment list.
    """

    stored_path: str
    filename: str
    original_name: str
    file_size: int
    mime_type: str


class FileStorage(ABC):
    """Port for storing attachment bytes — implemented in the infrastructure layer."""

    @abstractmethod
    async def store_file(self, content: bytes, filename: str) -> StoredFile:
        """Write ``content`` and return the stored file with its new handle."""
        ...

    @abstractmethod
    async def delete_file(self, handle: str) -> bool:
        """Delete a stored file. Returns True if deleted, False if not found."""
        ...

    @abstractmethod
    def file_exists(self, handle: str) -> bool:
        """Check whether a handle refers to a stored file."""
        ...

    @abstractmethod
    def get_file_path(self, handle: str) -> Path:
        """Resolve a handle to its location on disk."""
        ...
