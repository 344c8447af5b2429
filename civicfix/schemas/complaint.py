from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, field_validator


class ComplaintStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    COMPLETED = "completed"


class AttachmentUpload(BaseModel):
    """Raw image bytes plus the metadata the client sent with them."""

    data: bytes
    filename: str = ""
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.data)


class ComplaintCreate(BaseModel):
    location: str = ""
    description: str = ""
    contact: str | None = None
    image: AttachmentUpload | None = None


class ComplaintUpdate(BaseModel):
    status: str | None = None
    assigned_to: str | None = None
    after_image: AttachmentUpload | None = None


class ComplaintRead(BaseModel):
    id: str
    location: str
    description: str
    contact: str | None = None
    status: ComplaintStatus
    assigned_to: str | None = None
    before_image_url: str
    after_image_url: str | None = None
    submitted_at: datetime
    completed_at: datetime | None = None

    model_config = {"from_attributes": True}

    @field_validator("submitted_at", "completed_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        # SQLite hands back naive datetimes; every stored timestamp is UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ComplaintDeletion(BaseModel):
    complaint: ComplaintRead
    released: list[str] = []
    failed: list[str] = []

    @property
    def cleanup_complete(self) -> bool:
        return not self.failed
