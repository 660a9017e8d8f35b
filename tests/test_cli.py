"""
Tests for the command line entry point
=======================================
"""

import json

import pytest

from upload_analyzer.cli import main


@pytest.fixture
def csv_file(tmp_path, customers_csv):
    path = tmp_path / "customers.csv"
    path.write_text(customers_csv, encoding="utf-8")
    return path


def test_preview_writes_analysis(tmp_path, csv_file, capsys):
    out = tmp_path / "artifacts"

    main(["--file", str(csv_file), "--output-dir", str(out)])

    analysis = json.loads((out / "analysis.json").read_text(encoding="utf-8"))
    assert analysis["file_name"] == "customers.csv"
    assert analysis["mode"] == "preview"
    assert "rows" not in analysis
    assert "[STATUS] pending_adjustment" in capsys.readouterr().out


def test_full_mode_with_rows(tmp_path, csv_file):
    out = tmp_path / "artifacts"

    main(["--file", str(csv_file), "--output-dir", str(out), "--mode", "full", "--include-rows"])

    analysis = json.loads((out / "analysis.json").read_text(encoding="utf-8"))
    assert analysis["mode"] == "full"
    assert len(analysis["rows"]) == 4


def test_commit_with_adjustments(tmp_path, csv_file):
    out = tmp_path / "artifacts"
    adjustments = tmp_path / "adjustments.json"
    adjustments.write_text(json.dumps([
        {"column_index": 1, "column_name": "name", "data_type": "text", "is_required": True},
    ]), encoding="utf-8")

    main([
        "--file", str(csv_file),
        "--output-dir", str(out),
        "--commit",
        "--adjustments", str(adjustments),
        "--name", "Customers",
    ])

    (dataset_dir,) = list((out / "datasets").iterdir())
    dataset = json.loads((dataset_dir / "dataset.json").read_text(encoding="utf-8"))
    assert dataset["status"] == "confirmed"
    assert dataset["name"] == "Customers"


def test_clean_output_dir(tmp_path, csv_file):
    out = tmp_path / "artifacts"
    out.mkdir()
    (out / "stale.txt").write_text("old", encoding="utf-8")

    main(["--file", str(csv_file), "--output-dir", str(out), "--clean-output-dir"])

    assert sorted(p.name for p in out.iterdir()) == ["analysis.json"]


def test_unsupported_file_exits_with_error(tmp_path, capsys):
    path = tmp_path / "notes.txt"
    path.write_text("hello", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main(["--file", str(path), "--output-dir", str(tmp_path / "out")])

    assert exc.value.code == 1
    assert "UnsupportedFormatError" in capsys.readouterr().out


def test_invalid_adjustment_type_exits_with_error(tmp_path, csv_file):
    adjustments = tmp_path / "adjustments.json"
    adjustments.write_text(json.dumps([{"column_index": 0, "data_type": "currency"}]), encoding="utf-8")

    with pytest.raises(SystemExit):
        main([
            "--file", str(csv_file),
            "--output-dir", str(tmp_path / "out"),
            "--commit",
            "--adjustments", str(adjustments),
        ])
