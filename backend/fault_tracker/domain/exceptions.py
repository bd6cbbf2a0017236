"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(Exception):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class ReportValidationError(Exception):
    """Raised when report input is rejected before any state is changed."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class InvalidStatusTransitionError(Exception):
    """Raised when a workflow action is not allowed from the report's current status."""

    def __init__(self, report_id: str, current: str, target: str):
        self.report_id = report_id
        self.current = current
        self.target = target
        super().__init__(
            f"Fault report '{report_id}' cannot move from '{current}' to '{target}'"
        )


class AttachmentIntegrityError(Exception):
    """Raised when an attachment handle cannot be linked to a report.

    Either the file is not in the file store or another link already owns it.
    """

    def __init__(self, handle: str, reason: str = "does not exist in the file store"):
        self.handle = handle
        self.reason = reason
        super().__init__(f"Attachment '{handle}' {reason}")


class AttachmentRejectedError(Exception):
    """Raised when an uploaded file violates the attachment rules (type, size, count)."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"Attachment '{filename}' rejected: {reason}")


class FileAccessDeniedError(Exception):
    """Raised when a file is requested that no report links to.

    The message never says whether the file exists on disk.
    """

    def __init__(self, handle: str):
        self.handle = handle
        super().__init__("Access to the requested file is not permitted")
