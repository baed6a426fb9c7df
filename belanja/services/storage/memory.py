"""In-process blob backend, used for tests and the `memory` storage setting."""

from typing import Optional

from belanja.services.storage.interface import BlobStoreInterface


class InMemoryBlobStore(BlobStoreInterface):
    """Keeps blobs in a dict. Contents are lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._blobs: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    async def set(self, key: str, value: str) -> bool:
        self._blobs[key] = value
        return True
