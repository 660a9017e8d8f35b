from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from upload_analyzer.canonical.field import ColumnReport
from upload_analyzer.canonical.table import RowRecord
from upload_analyzer.standards.analysis_thresholds import ADJUSTMENT_CONFIDENCE


def needs_adjustment(
    column_reports: Tuple[ColumnReport, ...],
    threshold: float = ADJUSTMENT_CONFIDENCE,
) -> bool:
    """
    True when any column needs a human look before confirming:
    confidence below the adjustment threshold, or any reported issue.
    """
    return any(
        report.confidence < threshold or len(report.issues) > 0
        for report in column_reports
    )


@dataclass(frozen=True)
class AnalysisResult:
    """
    Artifact handed to the persistence layer after analysing one upload.

    Lifecycle:
    Adapter -> RawTable -> Column Analyzer -> Integrity Validator -> AnalysisResult

    In preview mode `rows` holds only the sampled rows while total_rows
    reflects the whole file. In full mode `rows` holds every parsed row.
    """
    headers: Tuple[str, ...]
    column_reports: Tuple[ColumnReport, ...]
    sample_rows: Tuple[RowRecord, ...]
    total_rows: int
    total_columns: int
    rows: Tuple[RowRecord, ...] = ()
    integrity_issues: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    source_format: Optional[str] = None
    file_name: Optional[str] = None
    mode: str = "preview"
    adjustment_threshold: float = field(default=ADJUSTMENT_CONFIDENCE, compare=False)

    @property
    def needs_adjustment(self) -> bool:
        return needs_adjustment(self.column_reports, self.adjustment_threshold)

    def get_column(self, name: str) -> Optional[ColumnReport]:
        """
        Retrieve the first column report with the given name.
        """
        for report in self.column_reports:
            if report.name == name:
                return report
        return None

    def to_dict(self, include_rows: bool = False) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "file_name": self.file_name,
            "source_format": self.source_format,
            "mode": self.mode,
            "headers": list(self.headers),
            "columns": [r.to_dict() for r in self.column_reports],
            "sample_rows": [row.to_dict() for row in self.sample_rows],
            "needs_adjustment": self.needs_adjustment,
            "total_rows": self.total_rows,
            "total_columns": self.total_columns,
            "integrity_issues": list(self.integrity_issues),
            "warnings": list(self.warnings),
        }
        if include_rows:
            payload["rows"] = [row.to_dict() for row in self.rows]
        return payload
