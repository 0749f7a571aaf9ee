"""Google Sheets backend (gspread)

Authenticates with a service account; share the spreadsheet with the
service account's email address.
"""

import logging
from contextlib import contextmanager
from typing import List, Optional

import gspread
from gspread.exceptions import APIError, SpreadsheetNotFound, WorksheetNotFound
from gspread.utils import rowcol_to_a1
from gspread.worksheet import Worksheet

from errors import StoreUnavailable
from .backends import Rows, TabularBackend

logger = logging.getLogger(__name__)


class GoogleSheetsBackend(TabularBackend):
    """Workbook backed by one Google spreadsheet; sheets are worksheets"""

    def __init__(self, spreadsheet_id: str, service_account_file: Optional[str] = None):
        super().__init__()
        self.spreadsheet_id = spreadsheet_id
        try:
            if service_account_file:
                client = gspread.service_account(filename=service_account_file)
            else:
                client = gspread.service_account()
            self.spreadsheet = client.open_by_key(spreadsheet_id)
        except (SpreadsheetNotFound, APIError, OSError) as e:
            raise StoreUnavailable(spreadsheet_id, f"Cannot open spreadsheet {spreadsheet_id}: {e}") from e
        logger.info(f"Opened spreadsheet {spreadsheet_id}")

    @contextmanager
    def _api_call(self, sheet: str):
        """Translate gspread and transport failures into StoreUnavailable"""
        try:
            yield
        except (APIError, OSError) as e:
            logger.error(f"Google Sheets call on '{sheet}' failed: {e}")
            raise StoreUnavailable(sheet, f"Google Sheets call on '{sheet}' failed: {e}") from e

    def _worksheet(self, sheet: str) -> Optional[Worksheet]:
        try:
            return self.spreadsheet.worksheet(sheet)
        except WorksheetNotFound:
            return None

    def _require(self, sheet: str) -> Worksheet:
        worksheet = self._worksheet(sheet)
        if worksheet is None:
            raise StoreUnavailable(sheet)
        return worksheet

    def read_rows(self, sheet: str) -> Optional[Rows]:
        with self._api_call(sheet):
            worksheet = self._worksheet(sheet)
            if worksheet is None:
                return None
            return [[str(cell) for cell in row] for row in worksheet.get_all_values()]

    def create_sheet(self, sheet: str, rows: Rows) -> None:
        with self.lock, self._api_call(sheet):
            if self._worksheet(sheet) is not None:
                return
            width = max((len(row) for row in rows), default=1)
            worksheet = self.spreadsheet.add_worksheet(
                title=sheet, rows=max(len(rows), 100), cols=max(width, 4)
            )
            if rows:
                worksheet.append_rows(rows, value_input_option="RAW")
            logger.info(f"Created worksheet '{sheet}'")

    def update_row(self, sheet: str, index: int, values: List[str]) -> None:
        with self.lock, self._api_call(sheet):
            row_number = index + 1
            end_cell = rowcol_to_a1(row_number, len(values))
            self._require(sheet).update(range_name=f"A{row_number}:{end_cell}", values=[values])

    def append_row(self, sheet: str, values: List[str]) -> None:
        with self.lock, self._api_call(sheet):
            self._require(sheet).append_row(values, value_input_option="RAW")

    def delete_row(self, sheet: str, index: int) -> None:
        with self.lock, self._api_call(sheet):
            self._require(sheet).delete_rows(index + 1)
