"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets can back the blob store because:
1. Users can see (and back up) their data directly in Sheets
2. No database setup required
3. Data survives reinstalling the app

The worksheet holds one row per key: column A is the key, column B the
JSON blob. A single cell holds at most 50,000 characters, which is
plenty for a personal shopping log but not unbounded.

TRADEOFFS:
- Each read/write is a network round trip
- A cell update is atomic, so the blob is never half-written
- The gspread client is synchronous; calls block the event loop briefly
"""

from typing import Optional

import gspread
import structlog
from google.oauth2.service_account import Credentials

from belanja.config import GoogleSheetsSettings, get_settings
from belanja.services.storage.interface import (
    BlobStoreInterface,
    ConnectionError,
    StorageError,
)


logger = structlog.get_logger(__name__)

STORAGE_COLUMNS = ["key", "value"]
KEY_COLUMN = 1
VALUE_COLUMN = 2


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and locating the storage worksheet.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_storage_sheet(self) -> gspread.Worksheet:
        """Get or create the key/value worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.storage_sheet_name)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=self._settings.storage_sheet_name,
                rows=100,
                cols=len(STORAGE_COLUMNS),
            )
            sheet.append_row(STORAGE_COLUMNS)
        return sheet


class GoogleSheetsBlobStore(BlobStoreInterface):
    """
    Google Sheets implementation of the blob backend.

    Keys are looked up in column A (the header row is skipped).
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _find_row(self, sheet: gspread.Worksheet, key: str) -> Optional[int]:
        """1-based row number holding `key`, or None."""
        keys = sheet.col_values(KEY_COLUMN)
        for idx, value in enumerate(keys[1:], start=2):  # Row 1 is the header
            if value == key:
                return idx
        return None

    async def get(self, key: str) -> Optional[str]:
        """Read the blob for a key."""
        try:
            sheet = self._client.get_storage_sheet()
            row = self._find_row(sheet, key)
            if row is None:
                return None
            return sheet.cell(row, VALUE_COLUMN).value
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read {key}: {e}")

    async def set(self, key: str, value: str) -> bool:
        """Write the blob for a key, adding its row on first write."""
        try:
            sheet = self._client.get_storage_sheet()
            row = self._find_row(sheet, key)
            if row is None:
                sheet.append_row([key, value], value_input_option="RAW")
            else:
                sheet.update_cell(row, VALUE_COLUMN, value)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write {key}: {e}")

        logger.debug("blob_written", backend="google_sheets", key=key, size=len(value))
        return True
