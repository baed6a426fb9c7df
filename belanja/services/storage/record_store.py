"""
Record Store

The record store owns the shopping log. It is the only component that
reads or writes the persisted blob.

DESIGN DECISION: Every mutation is a read-modify-write of the ENTIRE
collection. There are no partial writes: either the new blob replaces
the old one or the old one stays.

READ POLICY:
- `load_all` is lenient. A missing blob is an empty log, and a blob that
  cannot be parsed is logged and shown as an empty log, so the app stays
  usable.
- Mutations read strictly. If the blob cannot be parsed, `upsert` and
  `delete_*` raise instead of overwriting data we could not read.
"""

import json
import time
from typing import Callable, Iterable, Optional

import pydantic
import structlog

from belanja.audit import AuditLogger
from belanja.models.record import Record
from belanja.services.storage.interface import (
    BlobStoreInterface,
    CorruptDataError,
    StorageError,
)


DEFAULT_STORAGE_KEY = "DAFTAR_BELANJA"

logger = structlog.get_logger(__name__)


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class RecordStore:
    """
    Load, save and delete records against a blob backend.

    Records are kept in insertion order. An edit keeps the record's
    position; a new record is appended.
    """

    def __init__(
        self,
        backend: BlobStoreInterface,
        storage_key: str = DEFAULT_STORAGE_KEY,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize the store.

        Args:
            backend: Blob backend holding the serialized collection
            storage_key: Key of the blob
            audit_logger: Where read failures are reported
            clock: Millisecond wall clock used for new ids (for tests)
        """
        self._backend = backend
        self._key = storage_key
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock or _epoch_millis
        self._last_issued_id = 0
        self._max_seen_id = 0

    @property
    def storage_key(self) -> str:
        return self._key

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def load_all(self) -> list[Record]:
        """
        Load every stored record in insertion order.

        Never raises on a bad blob or failed read: both are logged
        and reported as an empty collection.
        """
        try:
            records = await self._read()
        except StorageError as e:
            self._audit_logger.log_storage_read_failed(
                storage_key=self._key,
                error_message=str(e),
            )
            return []

        self._remember_ids(records)
        self._audit_logger.log_collection_loaded(len(records), self._key)
        return records

    async def get(self, record_id: int) -> Optional[Record]:
        """Find a record by id, or None."""
        for record in await self.load_all():
            if record.id == record_id:
                return record
        return None

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def upsert(self, record: Record) -> bool:
        """
        Save a record.

        Replaces the record with the same id in place, or appends it.

        Returns:
            True if an existing record was replaced, False if appended

        Raises:
            StorageError: If the blob cannot be read or written.
                          Nothing was changed in that case.
        """
        records = await self._read()

        replaced = False
        for idx, existing in enumerate(records):
            if existing.id == record.id:
                records[idx] = record
                replaced = True
                break
        if not replaced:
            records.append(record)

        await self._write(records)
        self._remember_ids([record])
        return replaced

    async def delete_one(self, record_id: int) -> int:
        """Delete a single record. Unknown ids are ignored."""
        return await self.delete_many({record_id})

    async def delete_many(self, record_ids: Iterable[int]) -> int:
        """
        Delete every record whose id is in `record_ids`.

        Unknown ids are ignored. If nothing matches, nothing is written.

        Returns:
            Number of records removed

        Raises:
            StorageError: If the blob cannot be read or written
        """
        ids = set(record_ids)
        if not ids:
            return 0

        records = await self._read()
        remaining = [record for record in records if record.id not in ids]
        removed = len(records) - len(remaining)

        if removed:
            await self._write(remaining)
        return removed

    def next_id(self) -> int:
        """
        Issue a fresh record id.

        Ids come from the millisecond clock but are always strictly
        greater than every id issued or loaded in this session, so two
        saves within the same tick still get distinct, increasing ids.
        """
        candidate = max(
            self._clock(),
            self._last_issued_id + 1,
            self._max_seen_id + 1,
        )
        self._last_issued_id = candidate
        return candidate

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    async def _read(self) -> list[Record]:
        """Strict read. Raises CorruptDataError if the blob is not a record list."""
        raw = await self._backend.get(self._key)
        if raw is None:
            return []

        try:
            rows = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Stored data under {self._key} is not JSON: {e}") from e

        if not isinstance(rows, list):
            raise CorruptDataError(
                f"Stored data under {self._key} is a {type(rows).__name__}, expected a list"
            )

        try:
            return [Record.from_storage(row) for row in rows]
        except pydantic.ValidationError as e:
            raise CorruptDataError(
                f"Stored data under {self._key} has an invalid record: {e}"
            ) from e

    async def _write(self, records: list[Record]) -> None:
        payload = json.dumps(
            [record.to_storage_dict() for record in records],
            ensure_ascii=False,
        )
        if not await self._backend.set(self._key, payload):
            raise StorageError(f"Backend refused write for {self._key}")
        logger.debug("collection_written", storage_key=self._key, record_count=len(records))

    def _remember_ids(self, records: list[Record]) -> None:
        for record in records:
            if record.id > self._max_seen_id:
                self._max_seen_id = record.id
