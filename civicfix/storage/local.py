"""Local-disk attachment store for the server deployment.

Objects live flat under ``base_dir`` and are served by the web process at
``{public_prefix}/{key}``.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from civicfix.errors import AttachmentDeleteError, AttachmentWriteError
from civicfix.storage.base import AttachmentRef, AttachmentRole, AttachmentStore, generate_key, key_from_ref

logger = logging.getLogger(__name__)


class LocalAttachmentStore(AttachmentStore):

    def __init__(self, base_dir: str | Path, public_prefix: str = "/images"):
        self.base_dir = Path(base_dir)
        self.public_prefix = public_prefix.rstrip("/")

    def url_for(self, key: str) -> str:
        return f"{self.public_prefix}/{key}"

    def path_for(self, key: str) -> Path:
        if key in ("", ".", "..") or "/" in key or os.sep in key:
            raise ValueError(f"Invalid attachment key: {key!r}")
        return self.base_dir / key

    def _write_sync(self, key: str, payload: bytes) -> Path:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        target = self.path_for(key)
        # Write to a temp file in the same directory, then rename into place
        fd, tmp_name = tempfile.mkstemp(dir=self.base_dir, prefix=".upload-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return target

    async def put(
        self, payload: bytes, original_name: str, content_type: str, role: AttachmentRole,
    ) -> AttachmentRef:
        key = generate_key(role, original_name)
        try:
            await asyncio.to_thread(self._write_sync, key, payload)
        except OSError as e:
            raise AttachmentWriteError(key, f"Failed to write {key}: {e}") from e
        logger.debug("Stored %s (%d bytes, %s)", key, len(payload), content_type)
        return AttachmentRef(key=key, url=self.url_for(key))

    async def delete(self, ref: AttachmentRef | str) -> None:
        key = key_from_ref(ref)
        try:
            path = self.path_for(key)
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except (OSError, ValueError) as e:
            raise AttachmentDeleteError(key, f"Failed to delete {key!r}: {e}") from e

    async def read(self, key: str) -> bytes:
        """Read a stored object back; raises FileNotFoundError if absent."""
        return await asyncio.to_thread(self.path_for(key).read_bytes)
