"""
Unit tests for the parse-or-default coercion helpers.

Run: pytest tests/unit/test_coercion.py -v
"""

import pytest

from src.ielts.coercion import (
    as_list,
    as_mapping,
    canonical_boolean_value,
    parse_leading_int,
    pick,
    to_bool,
    to_int,
    to_non_empty_str,
    to_optional_int,
    to_str,
)
from src.ielts.questions import create_question


class TestAsMapping:
    def test_dict_passes_through(self):
        record = {"a": 1}
        assert as_mapping(record) is record

    def test_json_object_string(self):
        assert as_mapping('{"sections": []}') == {"sections": []}

    @pytest.mark.parametrize("value", ["[1, 2]", "nope", "", 12, None, ["a"]])
    def test_non_records(self, value):
        assert as_mapping(value) is None

    def test_model_dumped_by_alias(self):
        record = as_mapping(create_question())
        assert "correctAnswer" in record

    def test_as_list(self):
        assert as_list(("a", "b")) == ["a", "b"]
        assert as_list("ab") is None


class TestPick:
    def test_camel_case_first(self):
        assert pick({"maxAttempts": 2, "max_attempts": 5}, "maxAttempts") == 2

    def test_snake_case_fallback(self):
        assert pick({"max_attempts": 5}, "maxAttempts") == 5

    def test_missing_record(self):
        assert pick(None, "anything") is None


class TestScalars:
    # ========================================
    # Strings
    # ========================================

    def test_to_str(self):
        assert to_str("x") == "x"
        assert to_str(7) == "7"
        assert to_str(True) == ""
        assert to_str(None, "fallback") == "fallback"

    def test_to_non_empty_str(self):
        assert to_non_empty_str("  ", "new") == "new"
        assert to_non_empty_str("id-1", "new") == "id-1"

    def test_integer_too_long_to_render(self):
        assert to_str(10**5000, "fallback") == "fallback"
        assert to_non_empty_str(10**5000, "new") == "new"

    # ========================================
    # Booleans
    # ========================================

    @pytest.mark.parametrize("value,expected", [(True, True), ("false", False), (" TRUE ", True), ("yes", None), (1, None)])
    def test_to_bool(self, value, expected):
        default = object()
        result = to_bool(value, default)
        assert result is (default if expected is None else expected)

    # ========================================
    # Integers
    # ========================================

    @pytest.mark.parametrize(
        "value,expected",
        [(5, 5), ("12", 12), (" 8 ", 8), (9.9, 9), ("9.9", 60), (float("inf"), 60), (False, 60), (0, 60)],
    )
    def test_to_int_with_minimum(self, value, expected):
        assert to_int(value, 60, minimum=1) == expected

    def test_to_int_maximum(self):
        assert to_int(500, 3, maximum=100) == 3

    def test_to_optional_int(self):
        assert to_optional_int("4", minimum=1) == 4
        assert to_optional_int(0, minimum=1) is None
        assert to_optional_int(None) is None

    @pytest.mark.parametrize(
        "value",
        [10**5000, "9" * 5000, 2**31, -(2**31) - 1, 1e300],
        ids=["huge_int", "huge_digit_string", "above_int32", "below_int32", "huge_float"],
    )
    def test_integers_outside_int32_use_default(self, value):
        assert to_int(value, 60) == 60
        assert to_optional_int(value) is None

    def test_int32_bounds_accepted(self):
        assert to_int(2**31 - 1, 0) == 2**31 - 1
        assert to_int(-(2**31), 0) == -(2**31)


class TestParseLeadingInt:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2", 2),
            ("2abc", 2),
            (" 3", 3),
            ("-1", -1),
            ("+4", 4),
            ("abc", None),
            ("", None),
            (None, None),
        ],
    )
    def test_leading_digits(self, value, expected):
        assert parse_leading_int(value) == expected

    def test_digits_too_long_to_parse(self):
        assert parse_leading_int("9" * 5000) is None
        assert parse_leading_int("99999999999999999999") == 99999999999999999999


class TestCanonicalBooleanValue:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Not Given", "not_given"),
            ("not   given", "not_given"),
            ("NOT-GIVEN", "not_given"),
            ("True", "true"),
            (False, "false"),
            ("Partly True", "partly_true"),
            ("   ", None),
            (3, None),
        ],
    )
    def test_canonical(self, value, expected):
        assert canonical_boolean_value(value) == expected
