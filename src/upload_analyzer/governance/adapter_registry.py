from upload_analyzer.adapters.csv_adapter import CSVAdapter
from upload_analyzer.adapters.spreadsheet_adapter import SpreadsheetAdapter
from upload_analyzer.standards.analysis_thresholds import SAMPLE_SIZE
from upload_analyzer.utils.exceptions import UnsupportedFormatError


class AdapterRegistry:
    """
    Maps detected input formats to row parser implementations.
    Every adapter exposes parse_bounded(content) and parse_full(content).
    """

    _REGISTRY = {
        "CSV": CSVAdapter,
        "XLSX": SpreadsheetAdapter,
        "XLS": SpreadsheetAdapter,
    }

    @classmethod
    def get_adapter(cls, format_name: str):
        if not format_name:
            raise ValueError("Format name must not be empty")

        key = format_name.upper()

        if key not in cls._REGISTRY:
            raise UnsupportedFormatError(
                f"No adapter registered for format: {format_name}"
            )

        return cls._REGISTRY[key]

    @classmethod
    def build(cls, format_name: str, sample_size: int = SAMPLE_SIZE):
        adapter_cls = cls.get_adapter(format_name)
        if adapter_cls is SpreadsheetAdapter:
            return adapter_cls(sample_size=sample_size, workbook_format=format_name.lower())
        return adapter_cls(sample_size=sample_size)
