"""
Tests for utils/strings.py and utils/formatting.py
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.formatting import format_label, format_value
from utils.strings import normalize_whitespace, safe_float


# ── safe_float ───────────────────────────────────────────────────────────────

class TestSafeFloat:
    @pytest.mark.parametrize("val,expected", [
        (1200, 1200.0),
        (12.5, 12.5),
        ("400", 400.0),
        ("$1,200.50", 1200.5),
        ("  -40 ", -40.0),
    ])
    def test_parses(self, val, expected):
        assert safe_float(val) == expected

    @pytest.mark.parametrize("val", [None, "", "abc", [], {}, True, False,
                                     float("nan"), float("inf"), "inf"])
    def test_falls_back_to_default(self, val):
        assert safe_float(val) == 0.0

    def test_custom_default(self):
        assert safe_float("n/a", default=-1.0) == -1.0


def test_normalize_whitespace():
    assert normalize_whitespace("  Car \t\n Insurance  ") == "Car Insurance"
    assert normalize_whitespace("") == ""


# ── format_value / format_label ──────────────────────────────────────────────

class TestFormatValue:
    @pytest.mark.parametrize("value,expected", [
        (1200, "1200"),
        (1200.0, "1200"),
        (12.5, "12.5"),
        (0.125, "0.12"),
        (-40, "-40"),
        (0, "0"),
        (-0.001, "0"),
        (None, "0"),
    ])
    def test_values(self, value, expected):
        assert format_value(value) == expected


class TestFormatLabel:
    def test_title_and_value(self):
        assert format_label("Rent", 1200) == "Rent (1200)"

    def test_empty_title(self):
        assert format_label("", 0) == " (0)"

    def test_negative_value(self):
        assert format_label("Refund", -40.5) == "Refund (-40.5)"
