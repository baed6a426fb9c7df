"""
Abstract Storage Interface

DESIGN DECISION: The shopping log lives in ONE blob under ONE key.
The backend only has to store strings by key. This allows us to:
1. Keep the same layout as the mobile app's key-value storage
2. Use in-memory storage for testing
3. Swap local files for Google Sheets without touching the record store

The interface is intentionally tiny - the record store does all
parsing, merging and serialization itself.
"""

from abc import ABC, abstractmethod
from typing import Optional


class BlobStoreInterface(ABC):
    """
    Abstract interface for a key-value blob backend.

    Any storage implementation (memory, files, Google Sheets, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read the blob stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored string, or None if nothing is stored under the key

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> bool:
        """
        Replace the blob stored under a key.

        The write must be all-or-nothing: after a failure the
        previous value is still in place.

        Args:
            key: The storage key
            value: The full new value

        Returns:
            True if written, False if the backend refused the write

        Raises:
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """A stored blob exists but is not a valid record list."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
