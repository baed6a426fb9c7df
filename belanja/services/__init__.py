"""Services package."""

from belanja.services.storage import (
    BlobStoreInterface,
    ConnectionError,
    CorruptDataError,
    GoogleSheetsBlobStore,
    GoogleSheetsClient,
    InMemoryBlobStore,
    JsonFileBlobStore,
    RecordStore,
    StorageError,
)

__all__ = [
    "BlobStoreInterface",
    "ConnectionError",
    "CorruptDataError",
    "GoogleSheetsBlobStore",
    "GoogleSheetsClient",
    "InMemoryBlobStore",
    "JsonFileBlobStore",
    "RecordStore",
    "StorageError",
]
