"""Moving multipart uploads into object storage."""

from __future__ import annotations

import hashlib
import logging
from pathlib import PurePath
from typing import TYPE_CHECKING
from uuid import uuid4

from litestar.exceptions import ValidationException

from vidshare.lib.storage.base import StoredFile

if TYPE_CHECKING:
    from litestar.datastructures import UploadFile

    from vidshare.lib.storage.base import StorageBackend

logger = logging.getLogger(__name__)

# kind -> (accepted content-type prefix, human label)
MEDIA_KINDS: dict[str, tuple[str, str]] = {
    "videos": ("video/", "Video file"),
    "thumbnails": ("image/", "Thumbnail"),
}


def build_media_key(kind: str, data: bytes, filename: str | None) -> str:
    """``<kind>/<hash prefix>/<random><ext>``; the random part keeps re-uploads distinct."""
    suffix = PurePath(filename or "").suffix.lower()
    if not suffix[1:].isalnum():
        suffix = ""
    digest = hashlib.sha256(data).hexdigest()
    return f"{kind}/{digest[:2]}/{uuid4().hex}{suffix}"


async def store_upload(backend: StorageBackend, upload: UploadFile, kind: str) -> StoredFile:
    """Validate an upload against its media kind and put it in storage."""
    prefix, label = MEDIA_KINDS[kind]
    content_type = upload.content_type or "application/octet-stream"
    if not content_type.startswith(prefix):
        raise ValidationException(f"{label} has an unsupported content type: {content_type}")

    data = await upload.read()
    if not data:
        raise ValidationException(f"{label} is empty")

    key = build_media_key(kind, data, upload.filename)
    stored = await backend.put(key, data, content_type)
    logger.info("Stored %s upload %s (%d bytes)", kind, key, stored.size)
    return stored


async def discard(backend: StorageBackend, *keys: str | None) -> None:
    """Best-effort removal of objects whose database write never happened or was undone."""
    for key in keys:
        if not key:
            continue
        try:
            await backend.delete(key)
        except Exception:
            logger.warning("Could not remove stored object %s", key, exc_info=True)
