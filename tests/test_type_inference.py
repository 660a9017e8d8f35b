"""
Tests for column type classification
=====================================
"""

import pytest

from upload_analyzer.canonical.field import TypeTag
from upload_analyzer.inference.type_inference import (
    classify_values,
    parse_datetime,
    score_candidates,
)


class TestClassifyValues:

    def test_integers_and_decimals_are_numbers(self):
        result = classify_values(["1", "-2", "3.5", "40"])
        assert result.type == TypeTag.NUMBER
        assert result.confidence == 1.0
        assert result.issues == []

    def test_no_values_is_empty_text_column(self):
        result = classify_values(["", "   ", None])
        assert result.type == TypeTag.TEXT
        assert result.confidence == 1.0
        assert result.issues == ["Empty column"]

    def test_free_text_falls_back_with_low_confidence_issue(self):
        result = classify_values(["Ana", "Bruno", "Carla"])
        assert result.type == TypeTag.TEXT
        assert result.confidence == 1.0
        assert result.issues == ["Low confidence for automatic type detection"]

    def test_iso_dates_beat_phone_on_tie(self):
        # "2024-01-15" also passes the phone check once hyphens are removed
        result = classify_values(["2024-01-15", "2024-02-20", "2023-12-31"])
        assert result.type == TypeTag.DATE
        assert result.confidence == 1.0

    def test_slash_dates(self):
        result = classify_values(["15/01/2024", "20/02/2024"])
        assert result.type == TypeTag.DATE

    def test_emails(self):
        result = classify_values(["ana@example.com", "b.silva@mail.org"])
        assert result.type == TypeTag.EMAIL

    def test_phones_with_formatting(self):
        result = classify_values(["(11) 98765-4321", "+5511912345678", "555-1234"])
        assert result.type == TypeTag.PHONE
        assert result.confidence == 1.0

    def test_booleans_are_case_insensitive(self):
        result = classify_values(["Sim", "NÃO", "true", "No"])
        assert result.type == TypeTag.BOOLEAN

    def test_zero_one_column_is_number_not_boolean(self):
        result = classify_values(["0", "1", "1", "0"])
        assert result.type == TypeTag.NUMBER

    def test_confidence_at_floor_keeps_type_with_review_note(self):
        values = [str(i) for i in range(1, 8)] + ["a", "b", "c"]
        result = classify_values(values)
        assert result.type == TypeTag.NUMBER
        assert result.confidence == pytest.approx(0.7)
        assert result.issues == ["Confidence 70% for type number"]

    def test_confidence_below_floor_is_text(self):
        values = [str(i) for i in range(1, 7)] + ["a", "b", "c", "d"]
        result = classify_values(values)
        assert result.type == TypeTag.TEXT
        assert result.issues == ["Low confidence for automatic type detection"]

    def test_confidence_at_review_level_has_no_note(self):
        values = [str(i) for i in range(1, 10)] + ["a"]
        result = classify_values(values)
        assert result.type == TypeTag.NUMBER
        assert result.issues == []

    @pytest.mark.parametrize("values", [
        ["١٢٣", "٤٥٦", "٧٨٩"],
        ["１２３", "４５６", "７８９"],
    ])
    def test_non_ascii_digits_are_not_numbers_or_phones(self, values):
        result = classify_values(values)
        assert result.type == TypeTag.TEXT
        assert result.issues == ["Low confidence for automatic type detection"]

    def test_custom_thresholds(self):
        values = ["1", "2", "x", "y"]
        result = classify_values(values, min_confidence=0.5, review_confidence=0.6)
        assert result.type == TypeTag.NUMBER
        assert result.issues == ["Confidence 50% for type number"]


class TestHelpers:

    def test_score_candidates_keeps_evaluation_order(self):
        tags = [tag for tag, _ in score_candidates(["1"])]
        assert tags == [TypeTag.NUMBER, TypeTag.DATE, TypeTag.EMAIL, TypeTag.PHONE, TypeTag.BOOLEAN]

    def test_score_candidates_empty(self):
        assert all(score == 0.0 for _, score in score_candidates([]))

    @pytest.mark.parametrize("value", ["2024-01-15", "2024-01-15T10:30:00Z", "15/01/2024", "Jan 15 2024"])
    def test_parse_datetime_accepts(self, value):
        assert parse_datetime(value) is not None

    @pytest.mark.parametrize("value", ["", "hello", "31/31/2024", "ana@example.com"])
    def test_parse_datetime_rejects(self, value):
        assert parse_datetime(value) is None
