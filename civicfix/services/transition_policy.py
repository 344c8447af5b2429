"""Transition policy: turns an update intent into the field map to persist.

Pure decision logic. No storage I/O happens here; an after-image reference
must already be durable by the time it is passed in.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from civicfix.errors import EmptyUpdateError, InvalidStatusError, InvalidTransitionError
from civicfix.models.base import utcnow
from civicfix.schemas.complaint import ComplaintRead, ComplaintStatus

PENDING = ComplaintStatus.PENDING
ASSIGNED = ComplaintStatus.ASSIGNED
COMPLETED = ComplaintStatus.COMPLETED

# Only enforced in strict mode; the default machine accepts any recognized status
TRANSITIONS: dict[ComplaintStatus, frozenset[ComplaintStatus]] = {
    PENDING: frozenset({PENDING, ASSIGNED, COMPLETED}),
    ASSIGNED: frozenset({ASSIGNED, COMPLETED}),
    COMPLETED: frozenset({COMPLETED}),
}


@dataclass(frozen=True)
class UpdateIntent:
    status: str | None = None
    assigned_to: str | None = None
    after_image_url: str | None = None

    def is_empty(self) -> bool:
        return not (self.status or self.assigned_to or self.after_image_url)


def parse_status(value: str) -> ComplaintStatus:
    try:
        return ComplaintStatus(value.strip().lower())
    except ValueError:
        raise InvalidStatusError(value) from None


def can_transition(current: ComplaintStatus, requested: ComplaintStatus) -> bool:
    return requested in TRANSITIONS.get(current, frozenset())


def check_transition(current: ComplaintStatus, requested: ComplaintStatus) -> None:
    if not can_transition(current, requested):
        raise InvalidTransitionError(current.value, requested.value)


def validate(intent: UpdateIntent, has_after_image: bool = False) -> ComplaintStatus | None:
    """Reject an intent up front, before any upload; returns the parsed status.

    ``has_after_image`` covers an after-image that is not uploaded yet, so
    ``intent.after_image_url`` may still be unset.
    """
    if intent.is_empty() and not has_after_image:
        raise EmptyUpdateError()
    return parse_status(intent.status) if intent.status else None


def plan(
    existing: ComplaintRead | None,
    intent: UpdateIntent,
    now: datetime | None = None,
    strict: bool = False,
) -> dict[str, Any]:
    """Validate ``intent`` and return the column -> value map to write.

    ``completed`` stamps ``completed_at`` on every call, so a repeated
    completion re-stamps it. Any other status clears it.
    """
    status = validate(intent)

    fields: dict[str, Any] = {}

    if status is not None:
        if strict and existing is not None:
            check_transition(existing.status, status)
        fields["status"] = status
        fields["completed_at"] = (now or utcnow()) if status is COMPLETED else None

    if intent.assigned_to:
        fields["assigned_to"] = intent.assigned_to

    if intent.after_image_url:
        fields["after_image_url"] = intent.after_image_url

    return fields
