from typing import Dict, List, Optional, Sequence

from upload_analyzer.canonical.field import (
    ColumnDefinition,
    ColumnReport,
    DataTypeAdjustment,
)


def build_column_definitions(
    column_reports: Sequence[ColumnReport],
    adjustments: Optional[Sequence[DataTypeAdjustment]] = None,
) -> List[ColumnDefinition]:
    """
    Merge user type adjustments into the analyzed columns.

    Adjustments are matched by column index; a column without one keeps
    its suggested type and is not required.
    """
    by_index: Dict[int, DataTypeAdjustment] = {}
    for adjustment in adjustments or []:
        if not 0 <= adjustment.column_index < len(column_reports):
            raise ValueError(
                f"Adjustment for column index {adjustment.column_index} is out of range "
                f"(0..{len(column_reports) - 1})"
            )
        by_index[adjustment.column_index] = adjustment

    definitions: List[ColumnDefinition] = []
    for report in column_reports:
        adjustment = by_index.get(report.index)
        definitions.append(
            ColumnDefinition(
                name=report.name,
                index=report.index,
                data_type=adjustment.data_type if adjustment else report.suggested_type,
                is_required=adjustment.is_required if adjustment else False,
                sample_values=list(report.sample_values),
            )
        )
    return definitions
