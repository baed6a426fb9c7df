"""
Main Orchestrator for Daftar Belanja

This module ties the components together and defines the two flows the
UI drives:
1. Entry form (raw fields -> validate -> assign id -> save)
2. Shopping list (load -> filter -> paginate -> group, selection, bulk delete)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is persisted unless validation passed
- A failed save or delete leaves every piece of state as it was
- The selection never refers to deleted records
- Every mutation is audited

The UI calls `ShoppingListFlow.refresh()` whenever the list becomes
visible again. There are no timers or background reloads.
"""

from datetime import date, datetime
from typing import Any, Optional, Union
from uuid import UUID

import structlog

from belanja.audit import AuditLogger, create_correlation_id
from belanja.config import Settings, get_settings
from belanja.models.record import Record
from belanja.queries import (
    DateRange,
    ListQueryExecutor,
    ListResult,
    Paginator,
)
from belanja.selection import GroupSelectionState, SelectionSet
from belanja.services.storage import (
    BlobStoreInterface,
    GoogleSheetsBlobStore,
    GoogleSheetsClient,
    InMemoryBlobStore,
    JsonFileBlobStore,
    RecordStore,
    StorageError,
)
from belanja.validation import RecordValidator, ValidationError, ValidationIssue


LIST_TITLE = "Daftar Belanja"

logger = structlog.get_logger(__name__)


class RecordFormFlow:
    """
    Orchestrates the entry form.

    Flow:
    1. Validate → Parse amounts, build a Record (abort on any error)
    2. Identify → Fresh id for new records, same id for edits
    3. Save → Upsert into the store
    4. Audit → Log the save (or the failure)
    """

    def __init__(
        self,
        store: RecordStore,
        validator: Optional[RecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._validator = validator or RecordValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self.last_warnings: list[ValidationIssue] = []

    async def load_for_edit(self, record_id: int) -> Optional[Record]:
        """Fetch a record to prefill the form."""
        return await self._store.get(record_id)

    async def save(
        self,
        *,
        date: Union[date, datetime, str],
        name: str,
        total_price: Any,
        quantity: Any = 0,
        unit: Optional[str] = None,
        record_id: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> Record:
        """
        Validate and persist a record.

        Pass `record_id` to edit an existing record; omit it to create one.
        Non-blocking warnings of a successful save end up in `last_warnings`;
        any failure leaves it empty.

        Raises:
            ValidationError: Bad input. Nothing was persisted.
            StorageError: The write failed. Nothing was persisted.
        """
        self.last_warnings = []
        correlation_id = correlation_id or create_correlation_id()
        is_update = record_id is not None
        new_id = record_id if is_update else self._store.next_id()

        try:
            record = self._validator.build(
                record_id=new_id,
                date=date,
                name=name,
                total_price=total_price,
                quantity=quantity,
                unit=unit,
            )
        except ValidationError as e:
            self._audit_logger.log_validation_failed(
                issues=e.to_dicts(),
                correlation_id=correlation_id,
            )
            raise

        warnings = self._validator.check_warnings(record)

        try:
            replaced = await self._store.upsert(record)
        except StorageError as e:
            self._audit_logger.log_save_failed(
                record_id=record.id,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

        if is_update and not replaced:
            # The record was deleted elsewhere; saving re-creates it
            logger.warning("edited_record_missing", record_id=record.id)

        self.last_warnings = warnings
        self._audit_logger.log_record_saved(
            record_id=record.id,
            name=record.name,
            total_price=record.total_price,
            is_update=replaced,
            correlation_id=correlation_id,
        )
        return record


class ShoppingListFlow:
    """
    State behind the shopping list screen.

    Holds a snapshot of the collection (replaced wholesale by `refresh`),
    the active date range, the paginator and the selection.
    """

    def __init__(
        self,
        store: RecordStore,
        page_size: Optional[int] = None,
        executor: Optional[ListQueryExecutor] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._executor = executor or ListQueryExecutor()
        self._audit_logger = audit_logger or AuditLogger()
        self._paginator = Paginator(page_size or get_settings().app.page_size)
        self._selection = SelectionSet()
        self._date_range = DateRange()
        self._records: list[Record] = []

    @property
    def records(self) -> list[Record]:
        return list(self._records)

    @property
    def date_range(self) -> DateRange:
        return self._date_range

    @property
    def paginator(self) -> Paginator:
        return self._paginator

    @property
    def selection(self) -> SelectionSet:
        return self._selection

    @property
    def title(self) -> str:
        """Screen title: '<n> dipilih' in selection mode."""
        if self._selection.active:
            return f"{self._selection.count} dipilih"
        return LIST_TITLE

    # -------------------------------------------------------------------------
    # Loading and filtering
    # -------------------------------------------------------------------------

    async def refresh(self) -> list[Record]:
        """
        Reload the whole collection, replacing the previous snapshot.

        Selected ids whose records disappeared are dropped.
        """
        self._records = await self._store.load_all()

        gone = self._selection.selected - {record.id for record in self._records}
        if gone:
            self._selection.forget(gone)

        return self.records

    def set_date_range(
        self,
        date_from: Optional[Union[date, datetime]] = None,
        date_to: Optional[Union[date, datetime]] = None,
    ) -> None:
        """Change the filter. Pagination restarts if the bounds changed."""
        new_range = DateRange(date_from=date_from, date_to=date_to)
        if new_range != self._date_range:
            self._date_range = new_range
            self._paginator.reset()

    def clear_date_range(self) -> None:
        self.set_date_range(None, None)

    def view(self) -> ListResult:
        """
        Compute what the list shows right now.

        Materializing the view settles any pending `load_more`.
        """
        result = self._executor.execute(self._records, self._date_range, self._paginator)
        self._paginator.settle()
        return result

    def load_more(self) -> bool:
        """Reveal the next page. Returns False if nothing changed."""
        filtered_count = len(self._executor.ordered(self._records, self._date_range))
        return self._paginator.advance(filtered_count)

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def begin_selection(self, record_id: int) -> None:
        """Long-press on a record."""
        self._selection.enter(record_id)

    def toggle(self, record_id: int) -> None:
        """Tap on a record. Ignored outside selection mode."""
        if self._selection.active:
            self._selection.toggle(record_id)

    def group_state(self, date_key: str) -> GroupSelectionState:
        return self._selection.group_state(self._group_member_ids(date_key))

    def toggle_group(self, date_key: str) -> None:
        """
        Tap on a group checkbox.

        Covers the records of that date that are currently loaded; a day
        cut by the page boundary only toggles its visible part.
        """
        if self._selection.active:
            self._selection.toggle_group(self._group_member_ids(date_key))

    def exit_selection(self) -> None:
        self._selection.exit()

    # -------------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------------

    async def delete_selected(self, correlation_id: Optional[UUID] = None) -> int:
        """
        Delete every selected record, then leave selection mode.

        Raises:
            StorageError: The delete failed. Records and selection are unchanged.
        """
        ids = sorted(self._selection.selected)
        if not ids:
            return 0

        removed = await self._delete(ids, correlation_id)
        self._selection.exit()
        await self.refresh()
        return removed

    async def delete_record(
        self,
        record_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> int:
        """Delete one record; it is also dropped from the selection."""
        removed = await self._delete([record_id], correlation_id)
        self._selection.forget([record_id])
        await self.refresh()
        return removed

    async def _delete(self, ids: list[int], correlation_id: Optional[UUID]) -> int:
        correlation_id = correlation_id or create_correlation_id()
        try:
            removed = await self._store.delete_many(ids)
        except StorageError as e:
            self._audit_logger.log_delete_failed(
                record_ids=ids,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise

        self._audit_logger.log_records_deleted(
            record_ids=ids,
            removed=removed,
            correlation_id=correlation_id,
        )
        return removed

    def _group_member_ids(self, date_key: str) -> list[int]:
        visible = self._executor.visible_records(
            self._records, self._date_range, self._paginator
        )
        return [record.id for record in visible if record.date == date_key]


def create_backend(settings: Settings) -> BlobStoreInterface:
    """Build the blob backend selected in configuration."""
    storage = settings.storage
    if storage.backend == "memory":
        return InMemoryBlobStore()
    if storage.backend == "google_sheets":
        return GoogleSheetsBlobStore(GoogleSheetsClient(settings.google_sheets))
    return JsonFileBlobStore(storage.data_dir)


def create_app_components(
    settings: Optional[Settings] = None,
    backend: Optional[BlobStoreInterface] = None,
) -> tuple[RecordFormFlow, ShoppingListFlow, RecordStore]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use (defaults to the cached settings)
        backend: Blob backend override, e.g. an in-memory store for tests

    Returns:
        (record_form_flow, shopping_list_flow, record_store)
    """
    settings = settings or get_settings()
    audit_logger = AuditLogger()

    store = RecordStore(
        backend or create_backend(settings),
        storage_key=settings.storage.storage_key,
        audit_logger=audit_logger,
    )

    app_settings = settings.app
    form_flow = RecordFormFlow(
        store,
        validator=RecordValidator(app_settings),
        audit_logger=audit_logger,
    )
    list_flow = ShoppingListFlow(
        store,
        page_size=app_settings.page_size,
        audit_logger=audit_logger,
    )

    return form_flow, list_flow, store
