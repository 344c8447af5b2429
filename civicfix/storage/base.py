"""Attachment store interface and object-key helpers."""

from __future__ import annotations

import re
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal

AttachmentRole = Literal["before", "after"]

DEFAULT_EXTENSION = "jpg"
_EXTENSION_RE = re.compile(r"^[a-z0-9]{1,10}$")


@dataclass(frozen=True)
class AttachmentRef:
    key: str
    url: str

    def __str__(self) -> str:
        return self.url


def extension_for(original_name: str | None) -> str:
    """Lower-cased suffix after the final dot, or ``jpg`` if there is none."""
    if original_name and "." in original_name:
        ext = original_name.rsplit(".", 1)[1].strip().lower()
        if _EXTENSION_RE.match(ext):
            return ext
    return DEFAULT_EXTENSION


def generate_key(role: AttachmentRole, original_name: str | None) -> str:
    """``{role}-{epoch_millis}-{random}.{ext}``; unique without a central sequence."""
    timestamp = int(time.time() * 1000)
    token = secrets.token_hex(6)
    return f"{role}-{timestamp}-{token}.{extension_for(original_name)}"


def key_from_ref(ref: AttachmentRef | str) -> str:
    """Object key is whatever follows the final path separator of the reference."""
    if isinstance(ref, AttachmentRef):
        return ref.key
    return ref.strip().rstrip("/").rsplit("/", 1)[-1]


class AttachmentStore(ABC):
    """Persists binary attachments and hands back publicly resolvable references."""

    @abstractmethod
    async def put(
        self, payload: bytes, original_name: str, content_type: str, role: AttachmentRole,
    ) -> AttachmentRef:
        """Store ``payload`` under a fresh key. Raises AttachmentWriteError."""
        ...

    @abstractmethod
    async def delete(self, ref: AttachmentRef | str) -> None:
        """Remove the object; absent keys are not an error. Raises AttachmentDeleteError."""
        ...

    @abstractmethod
    def url_for(self, key: str) -> str:
        ...
