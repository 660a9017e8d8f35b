import json
import os
from typing import Dict

import yaml

from upload_analyzer.canonical.field import DataTypeAdjustment
from upload_analyzer.config import AnalyzerSettings
from upload_analyzer.input.uploaded_file import UploadedFile
from upload_analyzer.outputs.analysis_json_exporter import AnalysisJSONExporter
from upload_analyzer.outputs.dataset_sink import FileDatasetSink
from upload_analyzer.router import analyze, analyze_full, commit, next_status


class ConfigExecutor:
    """
    Runs an analysis described by a YAML configuration.

    Example:
        source:
          file_path: data/customers.csv
        mode: full            # preview | full | commit
        output_dir: outputs
        settings:
          sample_size: 200
        adjustments:
          - column_index: 2
            data_type: phone
            is_required: true
    """

    VALID_MODES = {"preview", "full", "commit"}

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.config = self._load_config()

    # ------------------------------------------
    # Load YAML
    # ------------------------------------------
    def _load_config(self) -> Dict:
        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ValueError(f"Config file must contain a mapping: {self.config_path}")

        mode = str(config.get("mode", "preview")).lower()
        if mode not in self.VALID_MODES:
            raise ValueError(
                f"Invalid mode '{mode}'. Allowed values: {sorted(self.VALID_MODES)}"
            )
        config["mode"] = mode

        file_path = (config.get("source") or {}).get("file_path")
        if not file_path:
            raise ValueError("Config is missing source.file_path")
        return config

    # ------------------------------------------
    # Build run inputs
    # ------------------------------------------
    def _resolve_path(self, path: str) -> str:
        if os.path.isabs(path):
            return path
        base = os.path.dirname(os.path.abspath(self.config_path))
        return os.path.join(base, path)

    def _build_settings(self) -> AnalyzerSettings:
        return AnalyzerSettings.from_dict(self.config.get("settings"))

    def _build_adjustments(self):
        return [
            DataTypeAdjustment.from_dict(item)
            for item in self.config.get("adjustments") or []
        ]

    # ------------------------------------------
    # Execute
    # ------------------------------------------
    def execute(self) -> Dict:
        source = self.config["source"]
        upload = UploadedFile.from_path(
            self._resolve_path(source["file_path"]),
            content_type=source.get("content_type"),
        )
        settings = self._build_settings()
        mode = self.config["mode"]
        output_dir = self._resolve_path(self.config.get("output_dir", "outputs"))
        os.makedirs(output_dir, exist_ok=True)

        if mode == "preview":
            result = analyze(upload, settings)
        else:
            result = analyze_full(upload, settings)

        summary = {
            "file_name": upload.name,
            "mode": mode,
            "status": next_status(result),
            "needs_adjustment": result.needs_adjustment,
            "total_rows": result.total_rows,
            "total_columns": result.total_columns,
        }

        if mode == "commit":
            sink = FileDatasetSink(os.path.join(output_dir, "datasets"))
            summary["dataset_id"] = commit(
                upload,
                sink,
                adjustments=self._build_adjustments(),
                settings=settings,
                name=self.config.get("name"),
                description=self.config.get("description"),
            )

        self._save_outputs(result, summary, output_dir)
        return summary

    # ------------------------------------------
    # Save Outputs
    # ------------------------------------------
    def _save_outputs(self, result, summary: Dict, output_dir: str):
        stem = os.path.splitext(result.file_name or "analysis")[0]

        AnalysisJSONExporter(result).export_to_file(
            os.path.join(output_dir, f"{stem}.analysis.json")
        )
        with open(os.path.join(output_dir, f"{stem}.summary.json"), "w", encoding="utf-8") as f:
            json.dump(summary, f, indent=2)
