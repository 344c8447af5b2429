"""Pydantic request/response schemas."""

from civicfix.schemas.complaint import (
    AttachmentUpload,
    ComplaintCreate,
    ComplaintDeletion,
    ComplaintRead,
    ComplaintStatus,
    ComplaintUpdate,
)

__all__ = [
    "AttachmentUpload",
    "ComplaintCreate", "ComplaintUpdate", "ComplaintRead", "ComplaintDeletion",
    "ComplaintStatus",
]
