"""Local filesystem storage for report attachments.

Storage layout:
    <upload_dir>/<stem>_<YYYYMMDD_HHmmss>_<token>.<ext>

The stored filename is the attachment handle. Handles are always bare
filenames; anything containing a path component is refused.
"""

import logging
import mimetypes
import re
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

from fault_tracker.application.interfaces import FileStorage, StoredFile

logger = logging.getLogger(__name__)


def _datetime_stamp() -> str:
    """Return a UTC datetime stamp suitable for filenames: YYYYMMDD_HHmmss."""
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def _sanitise(name: str, max_len: int = 80) -> str:
    """Replace non-word characters with underscores and truncate."""
    return re.sub(r"[^\w\-]", "_", name)[:max_len].strip("_") or "unnamed"


def is_safe_handle(handle: str) -> bool:
    """A handle must be a plain filename with no directory component."""
    if not handle or handle in (".", ".."):
        return False
    return Path(handle).name == handle and "/" not in handle and "\\" not in handle


class LocalFileStorage(FileStorage):
    """Infrastructure adapter storing attachments in a single upload directory."""

    def __init__(self, upload_dir: str):
        self._upload_dir = Path(upload_dir)
        self._upload_dir.mkdir(parents=True, exist_ok=True)

    async def store_file(self, content: bytes, filename: str) -> StoredFile:
        """Store an uploaded attachment and return its handle.

        The filename is augmented with a UTC datetime stamp and a short random
        token so concurrent uploads of the same name never collide:
        ``<stem>_<YYYYMMDD_HHmmss>_<token>.<ext>``.
        """
        original = Path(filename).name or "unnamed"
        stem = Path(original).stem
        suffix = Path(original).suffix.lower()
        stamped_name = f"{_sanitise(stem)}_{_datetime_stamp()}_{uuid4().hex[:8]}{suffix}"

        dest_path = self._upload_dir / stamped_name
        dest_path.write_bytes(content)

        mime_type = mimetypes.guess_type(original)[0] or "application/octet-stream"

        logger.info("Stored attachment: %s (%d bytes)", dest_path, len(content))

        return StoredFile(
            stored_path=str(dest_path),
            filename=stamped_name,
            original_name=original,
            file_size=len(content),
            mime_type=mime_type,
        )

    def get_file_path(self, handle: str) -> Path:
        """Return the path of a stored attachment.

        Raises ValueError for handles that would escape the upload directory.
        """
        if not is_safe_handle(handle):
            raise ValueError(f"Invalid attachment handle: {handle!r}")
        return self._upload_dir / handle

    def file_exists(self, handle: str) -> bool:
        """Check if a stored attachment exists."""
        if not is_safe_handle(handle):
            return False
        return self.get_file_path(handle).is_file()

    async def delete_file(self, handle: str) -> bool:
        """Delete a stored attachment from disk.

        Returns True if successfully deleted, False if not found.
        """
        if not self.file_exists(handle):
            return False

        self.get_file_path(handle).unlink(missing_ok=True)
        logger.info("Deleted attachment from disk: %s", handle)
        return True
