import json
from typing import Any, Dict

from upload_analyzer.canonical.schema import AnalysisResult


class AnalysisJSONExporter:
    """
    Exports an AnalysisResult to JSON.
    """

    def __init__(self, result: AnalysisResult, include_rows: bool = False):
        self.result = result
        self.include_rows = include_rows

    def export(self) -> Dict[str, Any]:
        """
        Return result as JSON-serializable object.
        """
        return self.result.to_dict(include_rows=self.include_rows)

    def export_to_string(self, indent: int = 2) -> str:
        return json.dumps(self.export(), indent=indent, ensure_ascii=False)

    def export_to_file(self, file_path: str, indent: int = 2):
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(self.export(), f, indent=indent, ensure_ascii=False)
