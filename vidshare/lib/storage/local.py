"""Filesystem storage backend used in development and tests."""

from __future__ import annotations

import asyncio
import hashlib
from pathlib import Path

from vidshare.lib.storage.base import StoredFile


class LocalStorageBackend:
    """Write objects under ``base_path`` and serve them from ``url_prefix``."""

    def __init__(self, base_path: Path, url_prefix: str = "/media") -> None:
        self._base_path = base_path
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def base_path(self) -> Path:
        return self._base_path

    async def put(self, key: str, data: bytes, content_type: str) -> StoredFile:
        path = self._key_to_path(key)
        await asyncio.to_thread(self._write_file, path, data)
        return StoredFile(
            key=key,
            url=self._build_url(key),
            content_type=content_type,
            size=len(data),
            content_hash=hashlib.sha256(data).hexdigest(),
        )

    async def get(self, key: str) -> bytes:
        return await asyncio.to_thread(self._key_to_path(key).read_bytes)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._key_to_path(key).unlink, missing_ok=True)

    async def exists(self, key: str) -> bool:
        return await asyncio.to_thread(self._key_to_path(key).exists)

    async def get_url(self, key: str) -> str:
        return self._build_url(key)

    def _key_to_path(self, key: str) -> Path:
        path = (self._base_path / key).resolve()
        # Keys come from our own key builder, but never let one escape the root
        if not path.is_relative_to(self._base_path.resolve()):
            raise ValueError(f"Storage key escapes base path: {key!r}")
        return path

    def _build_url(self, key: str) -> str:
        return f"{self._url_prefix}/{key}"

    @staticmethod
    def _write_file(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
