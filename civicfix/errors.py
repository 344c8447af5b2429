"""Error taxonomy for the complaint lifecycle.

Client-input faults derive from ``ValidationError`` and are raised before any
storage I/O. Backend faults are translated at the adapter boundary into
``AttachmentError`` or ``RepositoryError`` subclasses.
"""

from __future__ import annotations


class ComplaintError(Exception):
    """Base class for every error raised by the complaint core."""


# ── Client-input faults ───────────────────────────────────

class ValidationError(ComplaintError):
    pass


class MissingFieldError(ValidationError):
    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}")


class InvalidStatusError(ValidationError):
    def __init__(self, status: str, message: str | None = None):
        self.status = status
        super().__init__(message or f"Unrecognized status: {status!r}")


class InvalidTransitionError(InvalidStatusError):
    def __init__(self, current: str, requested: str):
        self.current = current
        super().__init__(requested, f"Cannot move complaint from {current!r} to {requested!r}")


class EmptyUpdateError(ValidationError):
    def __init__(self):
        super().__init__("No fields to update")


class AttachmentRejectedError(ValidationError):
    def __init__(self, message: str, too_large: bool = False):
        self.too_large = too_large
        super().__init__(message)


# ── Lookup ────────────────────────────────────────────────

class NotFoundError(ComplaintError):
    def __init__(self, complaint_id: str):
        self.complaint_id = complaint_id
        super().__init__(f"Complaint not found: {complaint_id}")


# ── Attachment backend faults ─────────────────────────────

class AttachmentError(ComplaintError):
    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(message)


class AttachmentWriteError(AttachmentError):
    pass


class AttachmentDeleteError(AttachmentError):
    pass


# ── Record backend faults ─────────────────────────────────

class RepositoryError(ComplaintError):
    pass


class UnknownFieldError(RepositoryError):
    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__(f"Unknown complaint fields: {', '.join(sorted(fields))}")
