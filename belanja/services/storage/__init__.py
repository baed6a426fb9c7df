"""
Storage Services Package

Provides the blob backend interface, its implementations, and the record
store that owns the persisted shopping log.
"""

from belanja.services.storage.interface import (
    BlobStoreInterface,
    ConnectionError,
    CorruptDataError,
    StorageError,
)
from belanja.services.storage.memory import InMemoryBlobStore
from belanja.services.storage.json_file import JsonFileBlobStore
from belanja.services.storage.google_sheets import (
    GoogleSheetsBlobStore,
    GoogleSheetsClient,
)
from belanja.services.storage.record_store import DEFAULT_STORAGE_KEY, RecordStore

__all__ = [
    # Interface
    "BlobStoreInterface",
    # Exceptions
    "ConnectionError",
    "CorruptDataError",
    "StorageError",
    # Backends
    "GoogleSheetsBlobStore",
    "GoogleSheetsClient",
    "InMemoryBlobStore",
    "JsonFileBlobStore",
    # Record store
    "DEFAULT_STORAGE_KEY",
    "RecordStore",
]
