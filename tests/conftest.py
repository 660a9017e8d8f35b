"""
Pytest Configuration and Fixtures
==================================
Shared fixtures for the upload analyzer test suite.
"""

import io
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

import pytest
import xlwt
from openpyxl import Workbook

from upload_analyzer.input.uploaded_file import UploadedFile


# =============================================================================
# FILE BUILDERS
# =============================================================================

def build_xlsx(rows: Sequence[Sequence[Any]], extra_sheets: Optional[Dict[str, List[list]]] = None) -> bytes:
    """Build an in-memory .xlsx whose first sheet holds `rows`."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Data"
    for row in rows:
        sheet.append(list(row))
    for title, sheet_rows in (extra_sheets or {}).items():
        extra = workbook.create_sheet(title)
        for row in sheet_rows:
            extra.append(list(row))
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def build_xls(rows: Sequence[Sequence[Any]]) -> bytes:
    """Build an in-memory legacy .xls (BIFF8) whose only sheet holds `rows`."""
    workbook = xlwt.Workbook()
    sheet = workbook.add_sheet("Data")
    date_style = xlwt.easyxf(num_format_str="YYYY-MM-DD")
    for r, row in enumerate(rows):
        for c, value in enumerate(row):
            if value is None:
                continue
            if isinstance(value, (date, datetime)):
                sheet.write(r, c, value, date_style)
            else:
                sheet.write(r, c, value)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def make_csv():
    """Factory: CSV text -> UploadedFile."""
    def _make(text: str, name: str = "data.csv", content_type: Optional[str] = "text/csv") -> UploadedFile:
        return UploadedFile(name=name, content=text.encode("utf-8"), content_type=content_type)
    return _make


@pytest.fixture
def make_xlsx():
    """Factory: rows -> UploadedFile holding an .xlsx workbook."""
    def _make(rows, name: str = "data.xlsx", extra_sheets=None) -> UploadedFile:
        return UploadedFile(
            name=name,
            content=build_xlsx(rows, extra_sheets=extra_sheets),
            content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
    return _make


@pytest.fixture
def customers_csv() -> str:
    return (
        "id,name,email,phone,active,signup\n"
        "1,Ana,ana@example.com,(11) 98765-4321,sim,2024-01-15\n"
        "2,Bruno,bruno@example.com,+5511912345678,não,2024-02-20\n"
        "3,Carla,carla@example.org,11 3456-7890,yes,2024-03-05\n"
        "4,Diego,diego@example.net,555-1234,no,2024-04-10\n"
    )


# =============================================================================
# PERSISTENCE FAKES
# =============================================================================

class RecordingSink:
    """In-memory DatasetSink that records every call."""

    def __init__(self, fail_on_save_rows: bool = False):
        self.fail_on_save_rows = fail_on_save_rows
        self.datasets: Dict[str, Dict[str, Any]] = {}
        self.statuses: List[str] = []
        self.columns = []
        self.row_batches: List[tuple] = []
        self.logs: List[tuple] = []

    def create_dataset(self, name, file_name, file_size, total_rows, total_columns, description=None):
        dataset_id = f"ds-{len(self.datasets) + 1}"
        self.datasets[dataset_id] = {
            "name": name,
            "file_name": file_name,
            "file_size": file_size,
            "total_rows": total_rows,
            "total_columns": total_columns,
            "description": description,
            "status": "pending",
        }
        return dataset_id

    def update_status(self, dataset_id, status):
        self.datasets[dataset_id]["status"] = status
        self.statuses.append(status)

    def update_totals(self, dataset_id, total_rows, total_columns):
        self.datasets[dataset_id]["total_rows"] = total_rows
        self.datasets[dataset_id]["total_columns"] = total_columns

    def save_columns(self, dataset_id, columns):
        self.columns = list(columns)

    def save_rows(self, dataset_id, rows, start_index):
        if self.fail_on_save_rows:
            raise RuntimeError("database unavailable")
        self.row_batches.append((start_index, list(rows)))

    def log(self, dataset_id, level, message, details=None):
        self.logs.append((level, message))


@pytest.fixture
def recording_sink():
    return RecordingSink()
