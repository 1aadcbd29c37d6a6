"""
Tests for lenient number parsing.
"""

import math

import pytest

from zootech_analysis.utils.number_utils import parse_lenient_number, is_numeric_value, is_missing_value


@pytest.mark.unit
class TestParseLenientNumber:
    """Test the shared number grammar."""

    @pytest.mark.parametrize("raw,expected", [
        ("10", 10.0),
        ("10,5", 10.5),
        ("10.5", 10.5),
        ("-3,25", -3.25),
        ("+7", 7.0),
        ("1.234,56", 1234.56),
        ("1,234.56", 1234.56),
        ("450,5 kg", 450.5),
        ("85%", 85.0),
        ("  12  ", 12.0),
        (".5", 0.5),
        ("1e3", 1000.0),
        (3, 3.0),
        (2.5, 2.5),
    ])
    def test_parses(self, raw, expected):
        """Accepted formats."""
        assert parse_lenient_number(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "kg 450", True, False, float('nan'), float('inf'), [1]])
    def test_absent(self, raw):
        """Unparsable values are absent."""
        assert parse_lenient_number(raw) is None

    def test_strict_rejects_trailing_text(self):
        """Strict mode requires the whole string to be numeric."""
        assert parse_lenient_number("12 animais", strict=True) is None
        assert parse_lenient_number("12,5", strict=True) == 12.5

    def test_is_numeric_value_is_strict_by_default(self):
        """is_numeric_value uses the strict grammar unless told otherwise."""
        assert is_numeric_value("450")
        assert not is_numeric_value("450 kg")
        assert is_numeric_value("450 kg", strict=False)


@pytest.mark.unit
class TestIsMissingValue:
    """Test missing-value detection."""

    @pytest.mark.parametrize("raw", [None, "", "  ", "null", "NULL", "undefined", math.nan])
    def test_missing(self, raw):
        """Empty cells and exporter placeholders are missing."""
        assert is_missing_value(raw)

    @pytest.mark.parametrize("raw", [0, "0", "abc", "n/a", 1.5])
    def test_present(self, raw):
        """Anything else is present, even if not numeric."""
        assert not is_missing_value(raw)
