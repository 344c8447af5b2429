"""Complaint lifecycle service: create, update and delete orchestration.

Ordering rules:
- attachment durability precedes any record that references it;
- on delete the record goes first, then owned attachments are released
  best-effort (each failure is collected and logged, never raised).
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable

from civicfix.config import LifecycleConfig, UploadConfig
from civicfix.errors import AttachmentDeleteError, MissingFieldError
from civicfix.models.base import utcnow
from civicfix.repositories.base import ComplaintRepository
from civicfix.schemas.complaint import (
    AttachmentUpload,
    ComplaintCreate,
    ComplaintDeletion,
    ComplaintRead,
    ComplaintUpdate,
)
from civicfix.services.transition_policy import UpdateIntent, check_transition, plan, validate
from civicfix.services.upload_check import check_upload
from civicfix.storage.base import AttachmentRef, AttachmentRole, AttachmentStore

logger = logging.getLogger(__name__)


class ComplaintLifecycleService:

    def __init__(
        self,
        repository: ComplaintRepository,
        attachments: AttachmentStore,
        uploads: UploadConfig | None = None,
        lifecycle: LifecycleConfig | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = repository
        self.attachments = attachments
        self.uploads = uploads or UploadConfig()
        self.lifecycle = lifecycle or LifecycleConfig()
        self._clock = clock

    async def list_all(self) -> list[ComplaintRead]:
        return await self.repository.list_all()

    async def get(self, complaint_id: str) -> ComplaintRead:
        return await self.repository.get(complaint_id)

    async def create(self, intent: ComplaintCreate) -> ComplaintRead:
        location = (intent.location or "").strip()
        description = (intent.description or "").strip()
        missing = [
            name for name, present in (
                ("location", bool(location)),
                ("description", bool(description)),
                ("image", intent.image is not None),
            )
            if not present
        ]
        if missing:
            raise MissingFieldError(missing)
        await check_upload(intent.image, self.uploads)

        ref = await self._upload(intent.image, "before")
        try:
            complaint = await self.repository.insert({
                "location": location,
                "description": description,
                "contact": (intent.contact or "").strip() or None,
                "before_image_url": ref.url,
            })
        except Exception:
            logger.error("Insert failed after upload; attachment %s is orphaned", ref.key)
            raise
        logger.info("Complaint %s created at %r", complaint.id, complaint.location)
        return complaint

    async def update(self, complaint_id: str, intent: ComplaintUpdate) -> ComplaintRead:
        strict = self.lifecycle.strict_transitions
        has_after_image = intent.after_image is not None
        requested = UpdateIntent(status=intent.status, assigned_to=intent.assigned_to)
        # Reject bad intents before the repository or the store sees them
        status = validate(requested, has_after_image=has_after_image)
        if has_after_image:
            await check_upload(intent.after_image, self.uploads)

        existing = None
        if strict:
            existing = await self.repository.get(complaint_id)
            if status is not None:
                check_transition(existing.status, status)

        ref: AttachmentRef | None = None
        if has_after_image:
            ref = await self._upload(intent.after_image, "after")

        fields = plan(
            existing,
            replace(requested, after_image_url=ref.url if ref else None),
            now=self._clock(),
            strict=strict,
        )
        try:
            complaint = await self.repository.update_fields(complaint_id, fields)
        except Exception:
            if ref is not None:
                logger.error("Update of %s failed after upload; attachment %s is orphaned",
                             complaint_id, ref.key)
            raise
        logger.info("Complaint %s updated: %s", complaint_id, ", ".join(sorted(fields)))
        return complaint

    async def delete(self, complaint_id: str) -> ComplaintDeletion:
        complaint = await self.repository.delete(complaint_id)

        released: list[str] = []
        failed: list[str] = []
        for url in (complaint.before_image_url, complaint.after_image_url):
            if not url:
                continue
            try:
                await self.attachments.delete(url)
                released.append(url)
            except AttachmentDeleteError as e:
                logger.warning("Could not release attachment %s of complaint %s: %s",
                               e.key, complaint_id, e)
                failed.append(url)

        logger.info("Complaint %s deleted (%d attachments released, %d failed)",
                    complaint_id, len(released), len(failed))
        return ComplaintDeletion(complaint=complaint, released=released, failed=failed)

    async def _upload(self, upload: AttachmentUpload, role: AttachmentRole) -> AttachmentRef:
        return await self.attachments.put(
            upload.data,
            upload.filename,
            upload.content_type,
            role,
        )
