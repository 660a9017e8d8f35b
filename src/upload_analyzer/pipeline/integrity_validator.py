from typing import Any, List, Mapping, Sequence

from upload_analyzer.canonical.field import ColumnReport
from upload_analyzer.canonical.table import RowRecord
from upload_analyzer.standards.analysis_thresholds import (
    EMPTY_MARKERS,
    SPARSE_ROW_THRESHOLD,
)


def _row_values(row: Mapping[str, Any]) -> List[Any]:
    if isinstance(row, RowRecord):
        return list(row.values_list)
    return list(row.values())


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    return str(value).strip() in EMPTY_MARKERS


def find_duplicate_headers(column_reports: Sequence[ColumnReport]) -> List[str]:
    """
    Names occurring more than once, in first-seen order.
    """
    seen = set()
    duplicates: List[str] = []
    for report in column_reports:
        if report.name in seen and report.name not in duplicates:
            duplicates.append(report.name)
        seen.add(report.name)
    return duplicates


def validate_data_integrity(
    column_reports: Sequence[ColumnReport],
    rows: Sequence[Mapping[str, Any]],
    sparse_threshold: float = SPARSE_ROW_THRESHOLD,
) -> List[str]:
    """
    Structural checks independent of type inference.

    - one issue listing every duplicated header name
    - one issue per row whose empty-field ratio exceeds sparse_threshold
      (row numbers are 1-based and count the header row)

    NEVER mutates its inputs.
    """
    issues: List[str] = []

    duplicates = find_duplicate_headers(column_reports)
    if duplicates:
        issues.append(f"Duplicate columns found: {', '.join(duplicates)}")

    for index, row in enumerate(rows):
        values = _row_values(row)
        total_fields = len(values)
        if total_fields == 0:
            continue

        empty_count = sum(1 for v in values if _is_empty(v))
        if empty_count / total_fields > sparse_threshold:
            issues.append(
                f"Row {index + 2} has too many empty fields "
                f"({empty_count}/{total_fields})"
            )

    return issues
