"""
Tests for structural integrity checks
======================================
"""

from upload_analyzer.canonical.field import ColumnReport, TypeTag
from upload_analyzer.canonical.table import RowRecord
from upload_analyzer.pipeline.integrity_validator import (
    find_duplicate_headers,
    validate_data_integrity,
)


def _reports(*names):
    return [ColumnReport(name=n, index=i, suggested_type=TypeTag.TEXT, confidence=1.0) for i, n in enumerate(names)]


def test_duplicate_headers_reported_once():
    reports = _reports("Name", "Email", "Name", "Name")

    issues = validate_data_integrity(reports, [])

    assert issues == ["Duplicate columns found: Name"]


def test_several_duplicates_in_first_seen_order():
    reports = _reports("b", "a", "b", "a", "c")
    assert find_duplicate_headers(reports) == ["b", "a"]


def test_sparse_rows_exceeding_half():
    headers = ["a", "b", "c", "d", "e", "f"]
    reports = _reports(*headers)
    rows = [
        RowRecord(headers, ["1", "", "", "", "", "6"]),     # 4/6 empty
        RowRecord(headers, ["1", "2", "3", "4", "", ""]),   # 2/6 empty
        RowRecord(headers, ["1", "2", "3", "", "", ""]),    # exactly half
    ]

    issues = validate_data_integrity(reports, rows)

    assert issues == ["Row 2 has too many empty fields (4/6)"]


def test_null_markers_count_as_empty():
    headers = ["a", "b", "c"]
    rows = [RowRecord(headers, ["x", "null", "undefined"])]

    issues = validate_data_integrity(_reports(*headers), rows)

    assert issues == ["Row 2 has too many empty fields (2/3)"]


def test_plain_dict_rows_are_accepted():
    rows = [{"a": "", "b": None}, {"a": "1", "b": "2"}]

    issues = validate_data_integrity(_reports("a", "b"), rows)

    assert issues == ["Row 2 has too many empty fields (2/2)"]


def test_inputs_are_not_mutated():
    headers = ["a", "b"]
    reports = _reports(*headers)
    rows = [RowRecord(headers, ["", ""])]
    before = [r.to_dict() for r in rows]

    validate_data_integrity(reports, rows)

    assert [r.to_dict() for r in rows] == before
    assert [r.name for r in reports] == headers


def test_clean_table_has_no_issues():
    headers = ["a", "b"]
    rows = [RowRecord(headers, ["1", "2"])]
    assert validate_data_integrity(_reports(*headers), rows) == []
