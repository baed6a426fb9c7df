"""
Shared fixtures for Daftar Belanja tests.

No test touches the network or a real spreadsheet. Storage runs against
an in-memory backend whose reads and writes can be made to fail.
"""

import json
from typing import Optional

import pytest

from belanja.config import AppSettings
from belanja.models.record import Record
from belanja.services.storage import (
    DEFAULT_STORAGE_KEY,
    InMemoryBlobStore,
    RecordStore,
    StorageError,
)


# 2024-05-01T00:00:00Z in epoch milliseconds
CLOCK_START = 1_714_521_600_000


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = CLOCK_START):
        self.now = now

    def __call__(self) -> int:
        return self.now


class FlakyBlobStore(InMemoryBlobStore):
    """In-memory backend with switchable failures and a write counter."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        super().__init__(initial)
        self.fail_reads = False
        self.fail_writes = False
        self.refuse_writes = False
        self.writes = 0

    async def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StorageError("backend offline")
        return await super().get(key)

    async def set(self, key: str, value: str) -> bool:
        if self.fail_writes:
            raise StorageError("disk full")
        if self.refuse_writes:
            return False
        self.writes += 1
        return await super().set(key, value)

    def seed(self, rows: list[dict], key: str = DEFAULT_STORAGE_KEY) -> None:
        self._blobs[key] = json.dumps(rows)

    def raw(self, key: str = DEFAULT_STORAGE_KEY) -> Optional[str]:
        return self._blobs.get(key)


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(
        page_size=20,
        default_unit="pcs",
        future_date_tolerance_days=1,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> FlakyBlobStore:
    return FlakyBlobStore()


@pytest.fixture
def store(backend, clock) -> RecordStore:
    return RecordStore(backend, clock=clock)


@pytest.fixture
def make_record():
    """Factory for valid records with sensible defaults."""

    def _make(
        record_id: int,
        date: str = "2024-05-01",
        name: str = "Milk",
        total_price: int = 15000,
        quantity: int = 0,
        unit: str = "pcs",
    ) -> Record:
        return Record(
            id=record_id,
            date=date,
            name=name,
            total_price=total_price,
            quantity=quantity,
            unit=unit,
        )

    return _make
