"""Attachment stores: local disk and S3-compatible buckets."""

from civicfix.storage.base import (
    AttachmentRef,
    AttachmentRole,
    AttachmentStore,
    extension_for,
    generate_key,
    key_from_ref,
)
from civicfix.storage.local import LocalAttachmentStore
from civicfix.storage.s3 import S3AttachmentStore, create_s3_client

__all__ = [
    "AttachmentRef", "AttachmentRole", "AttachmentStore",
    "LocalAttachmentStore", "S3AttachmentStore", "create_s3_client",
    "extension_for", "generate_key", "key_from_ref",
]
