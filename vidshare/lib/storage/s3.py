"""S3-compatible media store (requires ``pip install vidshare[s3]``).

Video and thumbnail URLs are written into database rows, so every URL this
backend hands out is permanent: a ``public_url`` (CDN) when configured,
otherwise the bucket's own address. The bucket or CDN must allow public reads.
"""

from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING, Any

try:
    import aioboto3
    from botocore.exceptions import ClientError
except ImportError as exc:
    raise ImportError(
        "S3 storage backend requires aioboto3. Install it with: pip install vidshare[s3]"
    ) from exc

from vidshare.lib.storage.base import StoredFile
from vidshare.lib.storage.uploads import MEDIA_KINDS

if TYPE_CHECKING:
    from vidshare.config import S3Config

logger = logging.getLogger(__name__)


def media_object_headers(key: str, content_type: str, max_age: int) -> dict[str, Any]:
    """``put_object`` headers for a media key.

    Media keys end in a random component and are never rewritten, so players
    and CDNs may cache them forever. Anything else is revalidated.
    """
    headers: dict[str, Any] = {"ContentType": content_type}
    if key.split("/", 1)[0] in MEDIA_KINDS:
        headers["CacheControl"] = f"public, max-age={max_age}, immutable"
        headers["ContentDisposition"] = "inline"
    else:
        headers["CacheControl"] = "no-cache"
    return headers


class S3StorageBackend:
    """Stores uploads in one bucket, optionally under a key prefix."""

    def __init__(self, config: S3Config, session: aioboto3.Session | None = None) -> None:
        if not config.bucket:
            raise ValueError("S3 storage needs a bucket name")
        self._config = config
        self._session = session or aioboto3.Session()

    def _client(self):
        kwargs: dict[str, Any] = {"region_name": self._config.region}
        if self._config.endpoint_url:
            kwargs["endpoint_url"] = self._config.endpoint_url
        if self._config.access_key_id:
            kwargs["aws_access_key_id"] = self._config.access_key_id
            kwargs["aws_secret_access_key"] = self._config.secret_access_key
        return self._session.client("s3", **kwargs)

    def _object_key(self, key: str) -> str:
        prefix = self._config.prefix.strip("/")
        return f"{prefix}/{key}" if prefix else key

    async def put(self, key: str, data: bytes, content_type: str) -> StoredFile:
        digest = hashlib.sha256(data).hexdigest()
        params = media_object_headers(key, content_type, self._config.cache_max_age)
        if self._config.acl:
            params["ACL"] = self._config.acl

        async with self._client() as s3:
            await s3.put_object(
                Bucket=self._config.bucket,
                Key=self._object_key(key),
                Body=data,
                Metadata={"sha256": digest},
                **params,
            )

        return StoredFile(
            key=key,
            url=await self.get_url(key),
            content_type=content_type,
            size=len(data),
            content_hash=digest,
        )

    async def get(self, key: str) -> bytes:
        async with self._client() as s3:
            response = await s3.get_object(Bucket=self._config.bucket, Key=self._object_key(key))
            async with response["Body"] as body:
                return await body.read()

    async def delete(self, key: str) -> None:
        # DeleteObject succeeds for keys that are already gone
        async with self._client() as s3:
            await s3.delete_object(Bucket=self._config.bucket, Key=self._object_key(key))
        logger.debug("Deleted s3://%s/%s", self._config.bucket, self._object_key(key))

    async def exists(self, key: str) -> bool:
        async with self._client() as s3:
            try:
                await s3.head_object(Bucket=self._config.bucket, Key=self._object_key(key))
            except ClientError as exc:
                if exc.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                    return False
                raise
        return True

    async def get_url(self, key: str) -> str:
        object_key = self._object_key(key)
        if self._config.public_url:
            return f"{self._config.public_url.rstrip('/')}/{object_key}"
        if self._config.endpoint_url:
            return f"{self._config.endpoint_url.rstrip('/')}/{self._config.bucket}/{object_key}"
        return f"https://{self._config.bucket}.s3.{self._config.region}.amazonaws.com/{object_key}"
