"""Object storage for uploaded media."""

from vidshare.lib.storage.base import StorageBackend, StoredFile
from vidshare.lib.storage.local import LocalStorageBackend
from vidshare.lib.storage.manager import StorageManager
from vidshare.lib.storage.uploads import discard, store_upload

__all__ = ["LocalStorageBackend", "StorageBackend", "StorageManager", "StoredFile", "discard", "store_upload"]
