"""
Tests for analyzer settings
============================
"""

import pytest

from upload_analyzer.config import AnalyzerSettings, load_settings, settings_from_env


def test_defaults():
    settings = AnalyzerSettings()
    assert settings.sample_size == 100
    assert settings.preview_rows == 5
    assert settings.min_confidence == 0.7
    assert settings.review_confidence == 0.9
    assert settings.adjustment_confidence == 0.8
    assert settings.sparse_row_threshold == 0.5


def test_merge_coerces_types():
    settings = AnalyzerSettings().merge({"sample_size": "250", "min_confidence": "0.6"})
    assert settings.sample_size == 250
    assert settings.min_confidence == 0.6


def test_unknown_key_rejected():
    with pytest.raises(ValueError, match="Unknown analyzer settings"):
        AnalyzerSettings.from_dict({"sample_sise": 10})


@pytest.mark.parametrize("payload", [
    {"min_confidence": 1.5},
    {"sample_size": -1},
    {"row_batch_size": 0},
])
def test_invalid_values_rejected(payload):
    with pytest.raises(ValueError):
        AnalyzerSettings.from_dict(payload)


def test_load_flat_yaml(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("sample_size: 20\npreview_rows: 3\n", encoding="utf-8")

    settings = load_settings(str(path))

    assert settings.sample_size == 20
    assert settings.preview_rows == 3


def test_load_nested_yaml(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text("mode: full\nsettings:\n  sparse_row_threshold: 0.25\n", encoding="utf-8")

    assert load_settings(str(path)).sparse_row_threshold == 0.25


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(str(tmp_path / "nope.yaml"))


def test_env_overrides():
    environ = {
        "UPLOAD_ANALYZER_SAMPLE_SIZE": "42",
        "UPLOAD_ANALYZER_REVIEW_CONFIDENCE": "0.95",
        "UPLOAD_ANALYZER_PREVIEW_ROWS": "  ",
        "UNRELATED": "x",
    }

    settings = settings_from_env(environ=environ)

    assert settings.sample_size == 42
    assert settings.review_confidence == 0.95
    assert settings.preview_rows == 5


def test_env_applies_on_top_of_base():
    base = AnalyzerSettings(sample_size=7, preview_rows=2)
    settings = settings_from_env(base, environ={"UPLOAD_ANALYZER_PREVIEW_ROWS": "4"})
    assert (settings.sample_size, settings.preview_rows) == (7, 4)
