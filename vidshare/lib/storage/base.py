"""Storage backend protocol and the record returned by uploads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass
class StoredFile:
    key: str
    url: str
    content_type: str
    size: int
    content_hash: str


@runtime_checkable
class StorageBackend(Protocol):
    """Object store for uploaded media. The API only ever calls into it."""

    async def put(self, key: str, data: bytes, content_type: str) -> StoredFile:
        ...

    async def get(self, key: str) -> bytes:
        ...

    async def delete(self, key: str) -> None:
        ...

    async def exists(self, key: str) -> bool:
        ...

    async def get_url(self, key: str) -> str:
        ...
