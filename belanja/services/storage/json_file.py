"""
Local File Storage Implementation

Each key is stored as its own file in a data directory. Writes go to a
temporary file in the same directory which then replaces the target,
so a crash mid-write leaves the previous blob intact.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog

from belanja.services.storage.interface import BlobStoreInterface, StorageError


logger = structlog.get_logger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileBlobStore(BlobStoreInterface):
    """
    File-per-key blob backend.

    The blob under key `DAFTAR_BELANJA` lives in `<data_dir>/DAFTAR_BELANJA.json`.
    """

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)

    def path_for(self, key: str) -> Path:
        """File path holding the blob for a key."""
        if not _SAFE_KEY.match(key) or key.startswith("."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    async def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    async def set(self, key: str, value: str) -> bool:
        path = self.path_for(key)
        tmp_name = None
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir, prefix=f".{key}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("temp_file_cleanup_failed", path=tmp_name)

        logger.debug("blob_written", path=str(path), size=len(value))
        return True
