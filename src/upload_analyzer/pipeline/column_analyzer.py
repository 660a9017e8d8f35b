from typing import List, Sequence

from upload_analyzer.canonical.field import ColumnReport
from upload_analyzer.canonical.table import RowRecord
from upload_analyzer.inference.type_inference import classify_values
from upload_analyzer.standards.analysis_thresholds import (
    MIN_CONFIDENCE,
    REVIEW_CONFIDENCE,
    SAMPLE_VALUES_LIMIT,
)


def _distinct_in_order(values: Sequence[str]) -> List[str]:
    seen = set()
    distinct = []
    for v in values:
        if v not in seen:
            seen.add(v)
            distinct.append(v)
    return distinct


def analyze_column(
    name: str,
    index: int,
    rows: Sequence[RowRecord],
    min_confidence: float = MIN_CONFIDENCE,
    review_confidence: float = REVIEW_CONFIDENCE,
    sample_values_limit: int = SAMPLE_VALUES_LIMIT,
) -> ColumnReport:
    """
    Build the report for the column at `index`.
    Blank / whitespace-only / missing cells count as nulls.
    """
    non_empty = []
    for row in rows:
        value = row.value_at(index)
        if value is None:
            continue
        value = str(value).strip()
        if value:
            non_empty.append(value)

    inference = classify_values(
        non_empty,
        min_confidence=min_confidence,
        review_confidence=review_confidence,
    )
    distinct = _distinct_in_order(non_empty)

    return ColumnReport(
        name=name,
        index=index,
        suggested_type=inference.type,
        confidence=inference.confidence,
        sample_values=tuple(distinct[:sample_values_limit]),
        null_count=len(rows) - len(non_empty),
        unique_count=len(distinct),
        issues=tuple(inference.issues),
    )


def analyze_columns(
    headers: Sequence[str],
    rows: Sequence[RowRecord],
    min_confidence: float = MIN_CONFIDENCE,
    review_confidence: float = REVIEW_CONFIDENCE,
    sample_values_limit: int = SAMPLE_VALUES_LIMIT,
) -> List[ColumnReport]:
    """
    One ColumnReport per header, in header order.
    """
    return [
        analyze_column(
            name,
            index,
            rows,
            min_confidence=min_confidence,
            review_confidence=review_confidence,
            sample_values_limit=sample_values_limit,
        )
        for index, name in enumerate(headers)
    ]
