"""
Google Sheets Remote Store

DESIGN DECISION: Google Sheets is the remote document store because:
1. Users can inspect and export their own data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

Each collection is one worksheet. User-scoped collections carry the
owner's uid in the first column, which plays the role of the
users/{userId}/... path prefix. Embedded lists (ledger entries) are
JSON-serialized into a single cell.

TRADEOFFS:
- Not suitable for high-volume data (fine for personal finance)
- No transactions; every write touches exactly one row
- Filtering happens in Python after reading the sheet
"""

import json
from typing import Callable, Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import Retrying, stop_after_attempt, wait_exponential

from foco_finance.config import GoogleSheetsSettings, get_settings
from foco_finance.log import get_logger
from foco_finance.models.ledger import Ledger, LedgerEntry, PublicLedger
from foco_finance.models.transaction import Transaction
from foco_finance.services.storage.interface import (
    ConnectionError,
    DuplicateError,
    RemoteStoreInterface,
    StorageError,
)


logger = get_logger(__name__)


# Column mappings, one worksheet per collection
TRANSACTION_COLUMNS = [
    "user_id",
    "id",
    "date",
    "type",
    "value",
    "category",
    "note",
    "person",
    "is_pj_salary",
]

LEDGER_COLUMNS = [
    "user_id",
    "id",
    "title",
    "friend_name",
    "public_slug",
    "public_read_enabled",
    "entries_json",
]

PUBLIC_LEDGER_COLUMNS = [
    "public_slug",
    "owner_id",
    "id",
    "title",
    "friend_name",
    "public_read_enabled",
    "entries_json",
]


def _cell(row: list, index: int) -> str:
    """Row value or "" when the sheet trimmed trailing empty cells."""
    try:
        return row[index] or ""
    except IndexError:
        return ""


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and lazily creates the collection worksheets.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication. Attempts are
        bounded by GOOGLE_SHEETS_CONNECT_ATTEMPTS (default 1, no retry).
        """
        if self._client is None:
            for attempt in Retrying(
                stop=stop_after_attempt(self._settings.connect_attempts),
                wait=wait_exponential(multiplier=1, min=2, max=10),
                reraise=True,
            ):
                with attempt:
                    self._client = self._authorize()
        return self._client

    def _authorize(self) -> gspread.Client:
        try:
            scopes = [
                "https://www.googleapis.com/auth/spreadsheets",
                "https://www.googleapis.com/auth/drive",
            ]
            credentials = Credentials.from_service_account_file(
                self._settings.credentials_path,
                scopes=scopes,
            )
            return gspread.authorize(credentials)
        except FileNotFoundError:
            raise ConnectionError(
                f"Google credentials file not found: {self._settings.credentials_path}"
            )
        except Exception as e:
            raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

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

    def _get_or_create(self, title: str, columns: list[str]) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_transactions_sheet(self) -> gspread.Worksheet:
        return self._get_or_create(self._settings.transactions_sheet_name, TRANSACTION_COLUMNS)

    def get_ledgers_sheet(self) -> gspread.Worksheet:
        return self._get_or_create(self._settings.ledgers_sheet_name, LEDGER_COLUMNS)

    def get_public_ledgers_sheet(self) -> gspread.Worksheet:
        return self._get_or_create(
            self._settings.public_ledgers_sheet_name, PUBLIC_LEDGER_COLUMNS
        )


class GoogleSheetsRemoteStore(RemoteStoreInterface):
    """
    Google Sheets implementation of the remote document store.

    One document per row. Upserts locate the row by key and rewrite it
    in place; new documents are appended.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    # -- row conversion ----------------------------------------------------------

    @staticmethod
    def _transaction_to_row(user_id: str, tx: Transaction) -> list:
        return [
            user_id,
            tx.id,
            tx.date,
            tx.type.value,
            str(tx.value),
            tx.category,
            tx.note or "",
            tx.person or "",
            str(tx.is_pj_salary),
        ]

    @staticmethod
    def _row_to_transaction(row: list) -> Transaction:
        return Transaction(
            id=_cell(row, 1),
            date=_cell(row, 2),
            type=_cell(row, 3),
            value=_cell(row, 4),
            category=_cell(row, 5),
            note=_cell(row, 6) or None,
            person=_cell(row, 7) or None,
            is_pj_salary=_cell(row, 8).lower() == "true",
        )

    @staticmethod
    def _entries_to_json(ledger: Ledger) -> str:
        return json.dumps(
            [entry.to_document() for entry in ledger.entries],
            ensure_ascii=False,
        )

    @staticmethod
    def _json_to_entries(raw: str) -> list[LedgerEntry]:
        if not raw:
            return []
        return [LedgerEntry.from_document(item) for item in json.loads(raw)]

    def _ledger_to_row(self, user_id: str, ledger: Ledger) -> list:
        return [
            user_id,
            ledger.id,
            ledger.title,
            ledger.friend_name,
            ledger.public_slug,
            str(ledger.public_read_enabled),
            self._entries_to_json(ledger),
        ]

    def _row_to_ledger(self, row: list) -> Ledger:
        return Ledger(
            id=_cell(row, 1),
            title=_cell(row, 2),
            friend_name=_cell(row, 3),
            public_slug=_cell(row, 4),
            public_read_enabled=_cell(row, 5).lower() == "true",
            entries=self._json_to_entries(_cell(row, 6)),
        )

    def _public_to_row(self, ledger: PublicLedger) -> list:
        return [
            ledger.public_slug,
            ledger.owner_id,
            ledger.id,
            ledger.title,
            ledger.friend_name,
            str(ledger.public_read_enabled),
            self._entries_to_json(ledger),
        ]

    def _row_to_public(self, row: list) -> PublicLedger:
        return PublicLedger(
            public_slug=_cell(row, 0),
            owner_id=_cell(row, 1),
            id=_cell(row, 2),
            title=_cell(row, 3),
            friend_name=_cell(row, 4),
            public_read_enabled=_cell(row, 5).lower() == "true",
            entries=self._json_to_entries(_cell(row, 6)),
        )

    # -- generic row helpers -------------------------------------------------------

    @staticmethod
    def _find_row(sheet: gspread.Worksheet, matches: Callable[[list], bool]) -> Optional[int]:
        """1-based sheet row index of the first data row that matches."""
        for idx, row in enumerate(sheet.get_all_values()[1:], start=2):
            if row and matches(row):
                return idx
        return None

    def _upsert(self, sheet: gspread.Worksheet, row: list, matches: Callable[[list], bool]) -> None:
        idx = self._find_row(sheet, matches)
        if idx is None:
            sheet.append_row(row, value_input_option="RAW")
        else:
            sheet.update(range_name=f"A{idx}", values=[row], value_input_option="RAW")

    def _delete(self, sheet: gspread.Worksheet, matches: Callable[[list], bool]) -> bool:
        idx = self._find_row(sheet, matches)
        if idx is None:
            return False
        sheet.delete_rows(idx)
        return True

    def _read(self, sheet: gspread.Worksheet, user_id: str, convert: Callable[[list], object]) -> list:
        documents = []
        for row in sheet.get_all_values()[1:]:
            if not row or _cell(row, 0) != user_id:
                continue
            try:
                documents.append(convert(row))
            except (ValueError, TypeError) as e:
                # Hand-edited rows can be broken; skip them rather than fail the list
                logger.warning(
                    "malformed_row_skipped",
                    sheet=sheet.title,
                    document_id=_cell(row, 1),
                    error=str(e),
                )
        return documents

    # -- transactions ----------------------------------------------------------------

    async def list_transactions(self, user_id: str) -> list[Transaction]:
        try:
            sheet = self._client.get_transactions_sheet()
            return self._read(sheet, user_id, self._row_to_transaction)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list transactions: {e}")

    async def save_transaction(self, user_id: str, transaction: Transaction) -> None:
        try:
            sheet = self._client.get_transactions_sheet()
            self._upsert(
                sheet,
                self._transaction_to_row(user_id, transaction),
                lambda row: row[0] == user_id and _cell(row, 1) == transaction.id,
            )
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save transaction: {e}")

    async def delete_transaction(self, user_id: str, transaction_id: str) -> bool:
        try:
            sheet = self._client.get_transactions_sheet()
            return self._delete(
                sheet,
                lambda row: row[0] == user_id and _cell(row, 1) == transaction_id,
            )
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete transaction: {e}")

    # -- ledgers ------------------------------------------------------------------------

    async def list_ledgers(self, user_id: str) -> list[Ledger]:
        try:
            sheet = self._client.get_ledgers_sheet()
            return self._read(sheet, user_id, self._row_to_ledger)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list ledgers: {e}")

    async def save_ledger(self, user_id: str, ledger: Ledger) -> None:
        try:
            sheet = self._client.get_ledgers_sheet()
            self._upsert(
                sheet,
                self._ledger_to_row(user_id, ledger),
                lambda row: row[0] == user_id and _cell(row, 1) == ledger.id,
            )
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save ledger: {e}")

    async def delete_ledger(self, user_id: str, ledger_id: str) -> bool:
        try:
            sheet = self._client.get_ledgers_sheet()
            return self._delete(
                sheet,
                lambda row: row[0] == user_id and _cell(row, 1) == ledger_id,
            )
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete ledger: {e}")

    # -- public ledgers ---------------------------------------------------------------

    async def get_public_ledger(self, slug: str) -> Optional[PublicLedger]:
        try:
            sheet = self._client.get_public_ledgers_sheet()
            for row in sheet.get_all_values()[1:]:
                if row and row[0] == slug:
                    return self._row_to_public(row)
            return None
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to get public ledger: {e}")

    async def save_public_ledger(self, ledger: PublicLedger) -> None:
        try:
            sheet = self._client.get_public_ledgers_sheet()
            idx = self._find_row(sheet, lambda row: row[0] == ledger.public_slug)
            row = self._public_to_row(ledger)
            if idx is None:
                sheet.append_row(row, value_input_option="RAW")
                return
            existing = sheet.row_values(idx)
            if _cell(existing, 1) != ledger.owner_id or _cell(existing, 2) != ledger.id:
                raise DuplicateError(f"Public slug already in use: {ledger.public_slug}")
            sheet.update(range_name=f"A{idx}", values=[row], value_input_option="RAW")
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save public ledger: {e}")

    async def delete_public_ledger(self, slug: str, owner_id: str) -> bool:
        try:
            sheet = self._client.get_public_ledgers_sheet()
            return self._delete(
                sheet,
                lambda row: row[0] == slug and _cell(row, 1) == owner_id,
            )
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete public ledger: {e}")
