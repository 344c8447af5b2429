import io

import pytest
from PIL import Image

from civicfix.config import UploadConfig
from civicfix.errors import AttachmentRejectedError
from civicfix.schemas import AttachmentUpload
from civicfix.services.upload_check import check_upload, sniff_image_format


def _png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), color=(255, 0, 0)).save(buf, format="PNG")
    return buf.getvalue()


def test_sniff_image_format(jpeg_bytes):
    assert sniff_image_format(jpeg_bytes) == "JPEG"
    assert sniff_image_format(_png_bytes()) == "PNG"
    assert sniff_image_format(b"hello world") is None


async def test_accepts_valid_upload(photo):
    await check_upload(photo, UploadConfig())


async def test_content_type_parameters_ignored():
    upload = AttachmentUpload(data=_png_bytes(), filename="a.png", content_type="image/PNG; charset=binary")
    await check_upload(upload, UploadConfig())


async def test_rejects_empty_payload():
    with pytest.raises(AttachmentRejectedError):
        await check_upload(AttachmentUpload(data=b"", filename="a.jpg", content_type="image/jpeg"), UploadConfig())


async def test_rejects_oversized(photo):
    with pytest.raises(AttachmentRejectedError) as exc:
        await check_upload(photo, UploadConfig(max_bytes=photo.size - 1))
    assert exc.value.too_large


async def test_content_sniffing_can_be_disabled():
    upload = AttachmentUpload(data=b"not really an image", filename="a.jpg", content_type="image/jpeg")
    await check_upload(upload, UploadConfig(verify_image_content=False))
    with pytest.raises(AttachmentRejectedError):
        await check_upload(upload, UploadConfig())
