"""Size and type checks for uploaded images. No decoding or resizing."""

from __future__ import annotations

import asyncio
import io

from PIL import Image, UnidentifiedImageError

from civicfix.config import UploadConfig
from civicfix.errors import AttachmentRejectedError
from civicfix.schemas.complaint import AttachmentUpload


def sniff_image_format(data: bytes) -> str | None:
    """Return Pillow's format name (``JPEG``, ``PNG``...) from the header, or None."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.format
    except (UnidentifiedImageError, OSError):
        return None


async def check_upload(upload: AttachmentUpload, config: UploadConfig) -> None:
    if not upload.data:
        raise AttachmentRejectedError("Uploaded image is empty")
    if upload.size > config.max_bytes:
        raise AttachmentRejectedError(
            f"Image is {upload.size} bytes; limit is {config.max_bytes}", too_large=True,
        )
    content_type = (upload.content_type or "").split(";", 1)[0].strip().lower()
    if content_type not in config.allowed_content_types:
        raise AttachmentRejectedError(f"Unsupported image type: {content_type or 'unknown'}")
    if config.verify_image_content:
        fmt = await asyncio.to_thread(sniff_image_format, upload.data)
        if fmt is None:
            raise AttachmentRejectedError("Uploaded file is not a recognizable image")
