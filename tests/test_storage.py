"""Tests for the record store and the blob backends."""

import json
from unittest.mock import Mock

import pytest

from belanja.services.storage import (
    DEFAULT_STORAGE_KEY,
    CorruptDataError,
    GoogleSheetsBlobStore,
    JsonFileBlobStore,
    RecordStore,
    StorageError,
)


def _row(record_id, date="2024-05-01", name="Milk", total=15000, qty=0, unit="pcs"):
    return {
        "id": record_id,
        "date": date,
        "namaBarang": name,
        "hargaTotal": total,
        "jumlah": qty,
        "satuan": unit,
        "hargaSatuan": total / qty if qty else 0,
    }


class TestRecordStoreReads:
    """Tests for RecordStore.load_all and get."""

    @pytest.mark.asyncio
    async def test_missing_blob_is_empty(self, store):
        """Test an empty backend yields an empty collection."""
        assert await store.load_all() == []

    @pytest.mark.asyncio
    async def test_loads_in_insertion_order(self, backend, store):
        """Test records come back in persisted order, not sorted."""
        backend.seed([_row(3, "2024-05-03"), _row(1, "2024-05-01"), _row(2, "2024-05-02")])
        records = await store.load_all()
        assert [r.id for r in records] == [3, 1, 2]

    @pytest.mark.asyncio
    async def test_keeps_rows_with_invalid_dates(self, backend, store):
        """Test unparseable dates stay in the unfiltered collection."""
        backend.seed([_row(1), _row(2, date="bogus")])
        records = await store.load_all()
        assert len(records) == 2
        assert records[1].parsed_date is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw",
        ["{not json", '{"id": 1}', '[{"id": 1, "date": "2024-05-01", "namaBarang": "x", "hargaTotal": -1}]'],
    )
    async def test_corrupt_blob_loads_as_empty(self, backend, store, raw):
        """Test an unparseable blob is treated as an empty collection."""
        backend._blobs[DEFAULT_STORAGE_KEY] = raw
        assert await store.load_all() == []

    @pytest.mark.asyncio
    async def test_read_failure_loads_as_empty(self, backend, store):
        """Test a backend read error degrades to an empty collection."""
        backend.seed([_row(1)])
        backend.fail_reads = True
        assert await store.load_all() == []

    @pytest.mark.asyncio
    async def test_long_stored_name_does_not_hide_log(self, backend, store, make_record):
        """Test a row with a very long name loads and the log stays writable."""
        backend.seed([_row(1), _row(2, name="x" * 201, unit="u" * 31, qty=1)])
        records = await store.load_all()
        assert [r.id for r in records] == [1, 2]
        assert len(records[1].name) == 201

        await store.upsert(make_record(3))
        assert [r.id for r in await store.load_all()] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_get_by_id(self, backend, store):
        """Test looking up a single record."""
        backend.seed([_row(1), _row(2, name="Roti")])
        record = await store.get(2)
        assert record is not None
        assert record.name == "Roti"
        assert await store.get(99) is None


class TestRecordStoreMutations:
    """Tests for RecordStore.upsert and delete."""

    @pytest.mark.asyncio
    async def test_upsert_round_trip(self, store, make_record):
        """Test a saved record loads back equal in all fields."""
        record = make_record(1, name="Milk", total_price=15000, quantity=0)
        await store.upsert(record)

        records = await store.load_all()
        assert records == [record]
        assert records[0].unit_price is None

    @pytest.mark.asyncio
    async def test_upsert_appends_new_records(self, store, make_record):
        """Test new ids are appended at the end."""
        assert await store.upsert(make_record(1)) is False
        assert await store.upsert(make_record(2)) is False
        assert [r.id for r in await store.load_all()] == [1, 2]

    @pytest.mark.asyncio
    async def test_upsert_replaces_in_place(self, store, make_record):
        """Test an edit keeps the record's position."""
        for record_id in (1, 2, 3):
            await store.upsert(make_record(record_id))

        edited = make_record(2, name="Roti", total_price=9000)
        assert await store.upsert(edited) is True

        records = await store.load_all()
        assert [r.id for r in records] == [1, 2, 3]
        assert records[1] == edited
        assert sum(1 for r in records if r.id == 2) == 1

    @pytest.mark.asyncio
    async def test_persisted_layout(self, backend, store, make_record):
        """Test the blob is a JSON array with the original field names."""
        await store.upsert(make_record(1, name="Apel", total_price=15000, quantity=2, unit="kg"))
        rows = json.loads(backend.raw())
        assert rows == [_row(1, name="Apel", total=15000, qty=2, unit="kg")]

    @pytest.mark.asyncio
    async def test_upsert_refuses_to_overwrite_corrupt_blob(self, backend, store, make_record):
        """Test a save never replaces data it could not read."""
        backend._blobs[DEFAULT_STORAGE_KEY] = "{not json"
        with pytest.raises(CorruptDataError):
            await store.upsert(make_record(1))
        assert backend.raw() == "{not json"

    @pytest.mark.asyncio
    async def test_upsert_write_failure(self, backend, store, make_record):
        """Test a failed write raises and leaves the blob unchanged."""
        await store.upsert(make_record(1))
        before = backend.raw()

        backend.fail_writes = True
        with pytest.raises(StorageError):
            await store.upsert(make_record(2))
        assert backend.raw() == before

    @pytest.mark.asyncio
    async def test_upsert_refused_write(self, backend, store, make_record):
        """Test a backend returning False counts as a failure."""
        backend.refuse_writes = True
        with pytest.raises(StorageError, match="refused"):
            await store.upsert(make_record(1))

    @pytest.mark.asyncio
    async def test_delete_many(self, store, make_record):
        """Test batch delete removes matches and reports the count."""
        for record_id in (1, 2, 3, 4):
            await store.upsert(make_record(record_id))

        removed = await store.delete_many({2, 4, 99})
        assert removed == 2
        assert [r.id for r in await store.load_all()] == [1, 3]

    @pytest.mark.asyncio
    async def test_delete_unknown_id_is_noop(self, backend, store, make_record):
        """Test deleting a missing id neither fails nor writes."""
        await store.upsert(make_record(1))
        writes = backend.writes

        assert await store.delete_one(99) == 0
        assert await store.delete_many([]) == 0
        assert backend.writes == writes

    @pytest.mark.asyncio
    async def test_delete_one(self, store, make_record):
        """Test single delete."""
        await store.upsert(make_record(1))
        await store.upsert(make_record(2))
        assert await store.delete_one(1) == 1
        assert [r.id for r in await store.load_all()] == [2]

    @pytest.mark.asyncio
    async def test_delete_write_failure(self, backend, store, make_record):
        """Test a failed delete leaves every record in place."""
        await store.upsert(make_record(1))
        backend.fail_writes = True
        with pytest.raises(StorageError):
            await store.delete_many({1})
        backend.fail_writes = False
        assert [r.id for r in await store.load_all()] == [1]


class TestNextId:
    """Tests for RecordStore.next_id."""

    def test_uses_clock(self, store, clock):
        """Test ids come from the millisecond clock."""
        assert store.next_id() == clock.now

    def test_same_tick_still_increases(self, store, clock):
        """Test two ids in the same clock tick are distinct and ordered."""
        first = store.next_id()
        second = store.next_id()
        assert second == first + 1

    def test_clock_going_backwards(self, store, clock):
        """Test ids keep increasing if the wall clock jumps back."""
        first = store.next_id()
        clock.now -= 60_000
        assert store.next_id() > first

    @pytest.mark.asyncio
    async def test_stays_above_loaded_ids(self, backend, store, clock):
        """Test new ids never collide with stored ones."""
        backend.seed([_row(clock.now + 500)])
        await store.load_all()
        assert store.next_id() == clock.now + 501


class TestJsonFileBlobStore:
    """Tests for the file-per-key backend."""

    @pytest.mark.asyncio
    async def test_missing_key(self, tmp_path):
        """Test a key with no file reads as None."""
        assert await JsonFileBlobStore(tmp_path).get(DEFAULT_STORAGE_KEY) is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, tmp_path):
        """Test a written blob reads back and no temp files remain."""
        backend = JsonFileBlobStore(tmp_path / "data")
        assert await backend.set(DEFAULT_STORAGE_KEY, '[{"a": "é"}]') is True
        assert await backend.get(DEFAULT_STORAGE_KEY) == '[{"a": "é"}]'
        assert sorted(p.name for p in (tmp_path / "data").iterdir()) == [
            "DAFTAR_BELANJA.json"
        ]

    @pytest.mark.asyncio
    async def test_rejects_path_like_keys(self, tmp_path):
        """Test keys cannot escape the data directory."""
        with pytest.raises(StorageError):
            await JsonFileBlobStore(tmp_path).set("../evil", "[]")

    @pytest.mark.asyncio
    async def test_record_store_on_files(self, tmp_path, make_record):
        """Test the record store persists across instances."""
        record = make_record(1, name="Gula", total_price=17500)
        await RecordStore(JsonFileBlobStore(tmp_path)).upsert(record)
        assert await RecordStore(JsonFileBlobStore(tmp_path)).load_all() == [record]


class TestGoogleSheetsBlobStore:
    """Tests for the Google Sheets backend with a mocked worksheet."""

    def _store(self, keys, value="[]"):
        sheet = Mock()
        sheet.col_values.return_value = keys
        sheet.cell.return_value = Mock(value=value)
        client = Mock()
        client.get_storage_sheet.return_value = sheet
        return GoogleSheetsBlobStore(client), sheet

    @pytest.mark.asyncio
    async def test_get_existing_key(self):
        """Test reading the value next to a key."""
        backend, sheet = self._store(["key", "OTHER", DEFAULT_STORAGE_KEY], value="[1]")
        assert await backend.get(DEFAULT_STORAGE_KEY) == "[1]"
        sheet.cell.assert_called_once_with(3, 2)

    @pytest.mark.asyncio
    async def test_get_missing_key(self):
        """Test a key without a row reads as None."""
        backend, _ = self._store(["key"])
        assert await backend.get(DEFAULT_STORAGE_KEY) is None

    @pytest.mark.asyncio
    async def test_set_existing_key_updates_cell(self):
        """Test overwriting a key updates its value cell."""
        backend, sheet = self._store(["key", DEFAULT_STORAGE_KEY])
        assert await backend.set(DEFAULT_STORAGE_KEY, "[2]") is True
        sheet.update_cell.assert_called_once_with(2, 2, "[2]")
        sheet.append_row.assert_not_called()

    @pytest.mark.asyncio
    async def test_set_new_key_appends_row(self):
        """Test the first write for a key adds a row."""
        backend, sheet = self._store(["key"])
        await backend.set(DEFAULT_STORAGE_KEY, "[]")
        sheet.append_row.assert_called_once_with(
            [DEFAULT_STORAGE_KEY, "[]"], value_input_option="RAW"
        )

    @pytest.mark.asyncio
    async def test_api_errors_become_storage_errors(self):
        """Test gspread failures surface as StorageError."""
        backend, sheet = self._store(["key", DEFAULT_STORAGE_KEY])
        sheet.update_cell.side_effect = RuntimeError("quota exceeded")
        with pytest.raises(StorageError, match="quota exceeded"):
            await backend.set(DEFAULT_STORAGE_KEY, "[]")
