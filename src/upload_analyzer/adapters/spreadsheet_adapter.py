import io
import struct
import zipfile
from datetime import date, datetime, time
from typing import Any, List

import xlrd
from xlrd.compdoc import CompDocError
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from upload_analyzer.canonical.table import RawTable, RowRecord
from upload_analyzer.observability.logger import log_event
from upload_analyzer.standards.analysis_thresholds import SAMPLE_SIZE
from upload_analyzer.utils.exceptions import (
    EmptySheetError,
    EmptyWorkbookError,
    NoColumnsError,
    WorkbookReadError,
)


def cell_to_text(value: Any) -> str:
    """
    Coerce a workbook cell to the string form used across the analyzer.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


# ------------------------------------------------------------------
# Workbook readers (first sheet only)
# ------------------------------------------------------------------
def _read_xlsx_grid(content: bytes) -> List[List[str]]:
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise WorkbookReadError(f"Could not open Excel workbook: {e}") from e

    try:
        if not workbook.sheetnames:
            raise EmptyWorkbookError("Excel file contains no sheets")
        worksheet = workbook[workbook.sheetnames[0]]
        return [
            [cell_to_text(value) for value in row]
            for row in worksheet.iter_rows(values_only=True)
        ]
    finally:
        workbook.close()


def _xls_cell_to_text(cell, datemode: int) -> str:
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return ""
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return cell_to_text(bool(cell.value))
    if cell.ctype == xlrd.XL_CELL_DATE:
        return cell_to_text(xlrd.xldate_as_datetime(cell.value, datemode))
    if cell.ctype == xlrd.XL_CELL_ERROR:
        return xlrd.error_text_from_code.get(cell.value, "")
    return cell_to_text(cell.value)


def _read_xls_grid(content: bytes) -> List[List[str]]:
    try:
        workbook = xlrd.open_workbook(file_contents=content)
    except (xlrd.XLRDError, CompDocError, struct.error, IndexError) as e:
        raise WorkbookReadError(f"Could not open Excel workbook: {e}") from e

    if workbook.nsheets == 0:
        raise EmptyWorkbookError("Excel file contains no sheets")
    sheet = workbook.sheet_by_index(0)
    return [
        [_xls_cell_to_text(cell, workbook.datemode) for cell in sheet.row(r)]
        for r in range(sheet.nrows)
    ]


_GRID_READERS = {
    "xlsx": _read_xlsx_grid,
    "xls": _read_xls_grid,
}


# ------------------------------------------------------------------
# Spreadsheet Adapter
# ------------------------------------------------------------------
class SpreadsheetAdapter:
    """
    Excel row parser (first sheet).
    Responsibilities:
    - Read the first sheet as a grid of strings
    - Take row 0 as headers, dropping blank header cells
    - Bounded (sampled) and full parsing

    Blank header cells are removed, not replaced, so data cells keep their
    raw position: with a blank middle header the columns after it shift.
    """

    def __init__(self, sample_size: int = SAMPLE_SIZE, workbook_format: str = "xlsx"):
        key = (workbook_format or "").lower()
        if key not in _GRID_READERS:
            raise ValueError(f"Unsupported workbook format: {workbook_format}")
        if sample_size < 0:
            raise ValueError("sample_size must be >= 0")
        self.sample_size = sample_size
        self.workbook_format = key

    # --------------------------------------------------
    # REQUIRED BY ROUTER
    # --------------------------------------------------
    def parse_bounded(self, content: bytes) -> RawTable:
        grid = self._read_grid(content)
        headers = self._parse_header(grid)
        data = grid[1:]
        rows = [self._build_row(headers, values) for values in data[: self.sample_size]]
        log_event("SPREADSHEET_PARSED", {
            "mode": "bounded",
            "format": self.workbook_format,
            "columns": len(headers),
            "sampled_rows": len(rows),
            "total_rows": len(data),
        })
        return RawTable(
            headers=tuple(headers),
            rows=tuple(rows),
            total_rows=len(data),
            source_format=self.workbook_format,
        )

    def parse_full(self, content: bytes) -> RawTable:
        grid = self._read_grid(content)
        headers = self._parse_header(grid)
        rows = [self._build_row(headers, values) for values in grid[1:]]
        log_event("SPREADSHEET_PARSED", {
            "mode": "full",
            "format": self.workbook_format,
            "columns": len(headers),
            "total_rows": len(rows),
        })
        return RawTable(
            headers=tuple(headers),
            rows=tuple(rows),
            total_rows=len(rows),
            source_format=self.workbook_format,
        )

    # --------------------------------------------------
    # Internal helpers
    # --------------------------------------------------
    def _read_grid(self, content: bytes) -> List[List[str]]:
        grid = _GRID_READERS[self.workbook_format](content)
        # Trim blank rows around the used range; interior blank rows stay
        filled = [idx for idx, row in enumerate(grid) if any(cell.strip() for cell in row)]
        if not filled:
            raise EmptySheetError("Excel sheet is empty")
        return grid[filled[0]: filled[-1] + 1]

    def _parse_header(self, grid: List[List[str]]) -> List[str]:
        headers = [h.strip() for h in grid[0]]
        headers = [h for h in headers if h]
        if not headers:
            raise NoColumnsError("Could not identify any columns in the sheet")
        return headers

    def _build_row(self, headers: List[str], values: List[str]) -> RowRecord:
        cells = [
            values[idx].strip() if idx < len(values) else ""
            for idx in range(len(headers))
        ]
        return RowRecord(headers, cells)
