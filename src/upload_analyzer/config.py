import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

import yaml

from upload_analyzer.standards import analysis_thresholds as t

ENV_PREFIX = "UPLOAD_ANALYZER_"


@dataclass(frozen=True)
class AnalyzerSettings:
    """
    Tunable thresholds for one analysis run.
    Defaults come from standards.analysis_thresholds.
    """
    sample_size: int = t.SAMPLE_SIZE
    preview_rows: int = t.PREVIEW_ROWS
    sample_values_limit: int = t.SAMPLE_VALUES_LIMIT
    min_confidence: float = t.MIN_CONFIDENCE
    review_confidence: float = t.REVIEW_CONFIDENCE
    adjustment_confidence: float = t.ADJUSTMENT_CONFIDENCE
    sparse_row_threshold: float = t.SPARSE_ROW_THRESHOLD
    max_file_size: int = t.MAX_FILE_SIZE
    row_batch_size: int = t.ROW_BATCH_SIZE

    def __post_init__(self):
        for name in ("sample_size", "preview_rows", "sample_values_limit"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        if self.row_batch_size <= 0:
            raise ValueError("row_batch_size must be > 0")
        for name in (
            "min_confidence",
            "review_confidence",
            "adjustment_confidence",
            "sparse_row_threshold",
        ):
            value = getattr(self, name)
            if not 0 <= value <= 1:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]]) -> "AnalyzerSettings":
        return cls().merge(payload)

    def merge(self, payload: Optional[Dict[str, Any]]) -> "AnalyzerSettings":
        """
        Return a copy with the given keys overridden.
        Unknown keys are rejected.
        """
        if not payload:
            return self
        known = {f.name: f.type for f in fields(self)}
        unknown = sorted(set(payload) - set(known))
        if unknown:
            raise ValueError(
                f"Unknown analyzer settings: {unknown}. Allowed: {sorted(known)}"
            )
        coerced = {key: _coerce(getattr(self, key), value) for key, value in payload.items()}
        return replace(self, **coerced)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _coerce(default: Any, value: Any) -> Any:
    if isinstance(default, float):
        return float(value)
    if isinstance(default, int):
        return int(value)
    return value


def load_settings(config_path: str) -> AnalyzerSettings:
    """
    Read settings from a YAML file.
    Accepts either a flat mapping or one nested under `settings`.
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    if "settings" in data:
        data = data.get("settings") or {}
    return AnalyzerSettings.from_dict(data)


def settings_from_env(
    base: Optional[AnalyzerSettings] = None,
    environ: Optional[Dict[str, str]] = None,
) -> AnalyzerSettings:
    """
    Apply UPLOAD_ANALYZER_<FIELD> environment overrides.
    """
    base = base or AnalyzerSettings()
    environ = os.environ if environ is None else environ
    overrides = {}
    for f in fields(base):
        raw = environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is not None and raw.strip() != "":
            overrides[f.name] = raw.strip()
    return base.merge(overrides)
