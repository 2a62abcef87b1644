"""Registry of named storage backends built lazily from config."""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import TYPE_CHECKING

from vidshare.lib.storage.local import LocalStorageBackend

if TYPE_CHECKING:
    from vidshare.config import StorageConfig, StoreConfig
    from vidshare.lib.storage.base import StorageBackend


class StorageManager:
    def __init__(self, config: StorageConfig) -> None:
        self._config = config
        self._backends: dict[str, StorageBackend] = {}

    @property
    def config(self) -> StorageConfig:
        return self._config

    async def get(self, name: str | None = None) -> StorageBackend:
        """Return the backend for *name* (default store when omitted)."""
        name = name or self._config.default
        if name not in self._backends:
            store_cfg = self._config.stores.get(name)
            if store_cfg is None:
                raise KeyError(f"Unknown storage store: {name!r}")
            self._backends[name] = create_storage_backend(store_cfg)
        return self._backends[name]

    def local_mounts(self) -> dict[str, Path]:
        """URL prefix -> directory for every local store (served by the app)."""
        return {
            cfg.url_prefix: Path(cfg.local_path)
            for cfg in self._config.stores.values()
            if cfg.backend == "local"
        }

    async def close(self) -> None:
        for backend in self._backends.values():
            close = getattr(backend, "close", None)
            if close is not None:
                await close()
        self._backends.clear()


def create_storage_backend(config: StoreConfig) -> StorageBackend:
    backend_type = config.backend

    if backend_type == "local":
        return LocalStorageBackend(base_path=Path(config.local_path), url_prefix=config.url_prefix)

    if backend_type == "s3":
        from vidshare.lib.storage.s3 import S3StorageBackend

        return S3StorageBackend(config.s3)

    # Dynamic import: "module:ClassName"
    if ":" in backend_type:
        module_path, _, class_name = backend_type.partition(":")
        if not module_path or not class_name or ":" in class_name:
            raise ValueError(f"Invalid backend spec '{backend_type}': expected 'module:ClassName'")
        module = importlib.import_module(module_path)
        return getattr(module, class_name)(config)

    raise ValueError(
        f"Unknown storage backend '{backend_type}'. "
        "Use 'local', 's3', or 'module:ClassName'."
    )
