import json
import os
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Protocol, Sequence

from upload_analyzer.canonical.field import ColumnDefinition
from upload_analyzer.canonical.table import RowRecord
from upload_analyzer.standards.analysis_thresholds import ROW_BATCH_SIZE


class DatasetSink(Protocol):
    """
    Persistence boundary for analyzed datasets.
    The analyzer calls into storage only through these methods.
    """

    def create_dataset(
        self,
        name: str,
        file_name: str,
        file_size: int,
        total_rows: int,
        total_columns: int,
        description: Optional[str] = None,
    ) -> str:
        ...

    def update_status(self, dataset_id: str, status: str) -> None:
        ...

    def update_totals(self, dataset_id: str, total_rows: int, total_columns: int) -> None:
        ...

    def save_columns(self, dataset_id: str, columns: Sequence[ColumnDefinition]) -> None:
        ...

    def save_rows(self, dataset_id: str, rows: Sequence[Dict[str, str]], start_index: int) -> None:
        ...

    def log(
        self,
        dataset_id: str,
        level: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        ...


def iter_row_batches(
    rows: Sequence[RowRecord],
    batch_size: int = ROW_BATCH_SIZE,
) -> Iterator[List[Dict[str, str]]]:
    """
    Yield plain-dict row batches of at most batch_size rows.
    """
    if batch_size <= 0:
        raise ValueError("batch_size must be > 0")
    for start in range(0, len(rows), batch_size):
        yield [row.to_dict() for row in rows[start:start + batch_size]]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class FileDatasetSink:
    """
    DatasetSink writing one directory per dataset.

    Layout:
    <root>/<dataset_id>/dataset.json
    <root>/<dataset_id>/columns.json
    <root>/<dataset_id>/rows.jsonl
    <root>/<dataset_id>/logs.jsonl
    """

    def __init__(self, root_dir: str):
        self.root_dir = root_dir
        os.makedirs(root_dir, exist_ok=True)

    def _path(self, dataset_id: str, name: str) -> str:
        return os.path.join(self.root_dir, dataset_id, name)

    def _read_dataset(self, dataset_id: str) -> Dict[str, Any]:
        with open(self._path(dataset_id, "dataset.json"), "r", encoding="utf-8") as f:
            return json.load(f)

    def _write_dataset(self, dataset_id: str, record: Dict[str, Any]) -> None:
        with open(self._path(dataset_id, "dataset.json"), "w", encoding="utf-8") as f:
            json.dump(record, f, indent=2)

    def _append_jsonl(self, dataset_id: str, name: str, records: Sequence[Dict[str, Any]]) -> None:
        with open(self._path(dataset_id, name), "a", encoding="utf-8") as f:
            for record in records:
                f.write(json.dumps(record, ensure_ascii=False) + "\n")

    def create_dataset(
        self,
        name: str,
        file_name: str,
        file_size: int,
        total_rows: int,
        total_columns: int,
        description: Optional[str] = None,
    ) -> str:
        dataset_id = str(uuid.uuid4())
        os.makedirs(os.path.join(self.root_dir, dataset_id), exist_ok=True)
        self._write_dataset(dataset_id, {
            "id": dataset_id,
            "name": name,
            "description": description,
            "file_name": file_name,
            "file_size": file_size,
            "total_rows": total_rows,
            "total_columns": total_columns,
            "status": "pending",
            "created_at": _now(),
            "updated_at": _now(),
        })
        return dataset_id

    def update_status(self, dataset_id: str, status: str) -> None:
        record = self._read_dataset(dataset_id)
        record["status"] = status
        record["updated_at"] = _now()
        self._write_dataset(dataset_id, record)

    def update_totals(self, dataset_id: str, total_rows: int, total_columns: int) -> None:
        record = self._read_dataset(dataset_id)
        record["total_rows"] = total_rows
        record["total_columns"] = total_columns
        record["updated_at"] = _now()
        self._write_dataset(dataset_id, record)

    def save_columns(self, dataset_id: str, columns: Sequence[ColumnDefinition]) -> None:
        with open(self._path(dataset_id, "columns.json"), "w", encoding="utf-8") as f:
            json.dump([c.to_dict() for c in columns], f, indent=2, ensure_ascii=False)

    def save_rows(self, dataset_id: str, rows: Sequence[Dict[str, str]], start_index: int) -> None:
        self._append_jsonl(dataset_id, "rows.jsonl", [
            {"row_index": start_index + offset, "data": row}
            for offset, row in enumerate(rows)
        ])

    def log(
        self,
        dataset_id: str,
        level: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._append_jsonl(dataset_id, "logs.jsonl", [{
            "level": level,
            "message": message,
            "details": details,
            "created_at": _now(),
        }])
