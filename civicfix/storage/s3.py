"""S3-compatible attachment store (AWS S3 on the server, R2 on the edge)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from civicfix.errors import AttachmentDeleteError, AttachmentWriteError
from civicfix.storage.base import AttachmentRef, AttachmentRole, AttachmentStore, generate_key, key_from_ref

logger = logging.getLogger(__name__)

# S3 answers DeleteObject with 204 for missing keys; some compatible stores 404 instead
_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


def create_s3_client(
    endpoint_url: str | None = None,
    region: str | None = None,
    access_key_id: str | None = None,
    secret_access_key: str | None = None,
) -> Any:
    import boto3

    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        region_name=region,
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
    )


class S3AttachmentStore(AttachmentStore):
    """Stores attachments as objects in ``bucket`` via an injected boto3 client."""

    def __init__(self, client: Any, bucket: str, public_base_url: str | None = None):
        self.client = client
        self.bucket = bucket
        self.public_base_url = (public_base_url or f"https://{bucket}.s3.amazonaws.com").rstrip("/")

    def url_for(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    async def put(
        self, payload: bytes, original_name: str, content_type: str, role: AttachmentRole,
    ) -> AttachmentRef:
        key = generate_key(role, original_name)
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=payload,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise AttachmentWriteError(key, f"Failed to upload {key} to {self.bucket}: {e}") from e
        logger.debug("Uploaded %s to bucket %s", key, self.bucket)
        return AttachmentRef(key=key, url=self.url_for(key))

    async def delete(self, ref: AttachmentRef | str) -> None:
        key = key_from_ref(ref)
        if not key:
            raise AttachmentDeleteError(key, "Empty attachment key")
        try:
            await asyncio.to_thread(self.client.delete_object, Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _MISSING_CODES:
                return
            raise AttachmentDeleteError(key, f"Failed to delete {key} from {self.bucket}: {e}") from e
        except BotoCoreError as e:
            raise AttachmentDeleteError(key, f"Failed to delete {key} from {self.bucket}: {e}") from e

