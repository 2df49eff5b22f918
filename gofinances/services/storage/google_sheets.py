"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as a remote durable backend because:
1. Users can view their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (we're fine for personal use)
- No transactions (the ledger rewrites a whole partition per append)
- Every lookup scans the key column (we filter in Python)

Each key is one or more rows: [key, value, updated_at]. The implementation follows
the abstract interface, so nothing above this module knows about Sheets.
"""

from datetime import datetime, timezone
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from gofinances.config import GoogleSheetsSettings, get_settings
from gofinances.services.storage.interface import (
    ConnectionError,
    KeyValueStoreInterface,
    PersistenceError,
)


# Column layout of the store sheet
STORE_COLUMNS = [
    "key",
    "value",
    "updated_at",
]

# Google Sheets rejects cells longer than this
CELL_CHAR_LIMIT = 50_000

# Chunk length used when a value spills over into continuation rows
CHUNK_SIZE = 45_000


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
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

    def get_store_sheet(self) -> gspread.Worksheet:
        """Get or create the key-value worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.store_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.store_sheet_name,
                rows=1000,
                cols=len(STORE_COLUMNS),
            )
            sheet.append_row(STORE_COLUMNS)
        return sheet


class GoogleSheetsKeyValueStore(KeyValueStoreInterface):
    """
    Google Sheets implementation of the key-value store.

    A cell holds at most CELL_CHAR_LIMIT characters, so a long value (a
    user's whole ledger) is split into chunks: the first lives in the
    row named after the key, the rest in continuation rows "<key>#1",
    "<key>#2", ... and get() joins them back in order.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @staticmethod
    def _split(value: str) -> list[str]:
        chunks = [value[i:i + CHUNK_SIZE] for i in range(0, len(value), CHUNK_SIZE)]
        return chunks or [""]

    @staticmethod
    def _row_key(key: str, part: int) -> str:
        return key if part == 0 else f"{key}#{part}"

    def _find_parts(self, sheet: gspread.Worksheet, key: str) -> dict[int, tuple[int, str]]:
        """
        Map chunk number -> (1-based row index, chunk) for a key.

        The header row is skipped.
        """
        prefix = f"{key}#"
        parts = {}
        for idx, row in enumerate(sheet.get_all_values()[1:], start=2):
            if not row:
                continue
            if row[0] == key:
                part = 0
            elif row[0].startswith(prefix) and row[0][len(prefix):].isdigit():
                part = int(row[0][len(prefix):])
            else:
                continue
            parts[part] = (idx, row[1] if len(row) > 1 else "")
        return parts

    async def get(self, key: str) -> Optional[str]:
        """Read a value from the store sheet, joining its chunks."""
        try:
            sheet = self._client.get_store_sheet()
            parts = self._find_parts(sheet, key)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to read key {key}: {e}")

        if 0 not in parts:
            return None

        chunks = []
        part = 0
        while part in parts:
            chunks.append(parts[part][1])
            part += 1
        return "".join(chunks)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def set(self, key: str, value: str) -> bool:
        """
        Insert or overwrite a key.

        Existing rows are updated in place, missing chunks are appended
        and chunks left over from a longer previous value are deleted.
        """
        try:
            sheet = self._client.get_store_sheet()
            existing = self._find_parts(sheet, key)
            updated_at = datetime.now(timezone.utc).isoformat()
            chunks = self._split(value)

            new_rows = []
            for part, chunk in enumerate(chunks):
                if part in existing:
                    idx, _ = existing[part]
                    sheet.update_cell(idx, 2, chunk)
                    sheet.update_cell(idx, 3, updated_at)
                else:
                    new_rows.append([self._row_key(key, part), chunk, updated_at])
            if new_rows:
                sheet.append_rows(new_rows, value_input_option="RAW")

            # Bottom-up so earlier deletions do not shift later indices
            stale = sorted(
                (idx for part, (idx, _) in existing.items() if part >= len(chunks)),
                reverse=True,
            )
            for idx in stale:
                sheet.delete_rows(idx)
            return True
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to write key {key}: {e}")

    async def remove(self, key: str) -> bool:
        """Delete every row holding a key or one of its chunks."""
        try:
            sheet = self._client.get_store_sheet()
            parts = self._find_parts(sheet, key)
            for idx in sorted((idx for idx, _ in parts.values()), reverse=True):
                sheet.delete_rows(idx)
            return 0 in parts
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to remove key {key}: {e}")
