"""
Unit tests for formatting module.
"""

from rentestimate.utils.formatting import format_rent, format_rent_range


class TestFormatRent:
    """Tests for format_rent function."""

    def test_standard(self):
        assert format_rent(1480) == "£1,480 pcm"

    def test_float(self):
        assert format_rent(1480.0) == "£1,480 pcm"

    def test_none(self):
        assert format_rent(None) == "-"


class TestFormatRentRange:
    """Tests for format_rent_range function."""

    def test_range(self):
        assert format_rent_range(1270, 1690) == "£1,270 - £1,690 pcm"

    def test_same_bounds(self):
        assert format_rent_range(1500, 1500) == "£1,500 pcm"

    def test_missing(self):
        assert format_rent_range(None, None) == "-"
        assert format_rent_range(None, 1690) == "£1,690 pcm"
