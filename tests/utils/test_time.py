"""
Tests for clock-time utilities.

Record times are integer seconds since midnight; configuration may use
HH:MM:SS strings.
"""

import pytest

from nbbo_app.utils.time import format_clock, in_window, parse_clock


class TestParseClock:
    """Test parse_clock function."""

    def test_integer_passthrough(self):
        """Integers are already seconds."""
        assert parse_clock(34200) == 34200

    def test_hms_string(self):
        """HH:MM:SS strings convert to seconds."""
        assert parse_clock("09:30:00") == 34200
        assert parse_clock("16:00:00") == 57600

    def test_hm_string(self):
        """Seconds are optional."""
        assert parse_clock("9:30") == 34200

    def test_digit_string(self):
        """Numeric strings are taken as seconds."""
        assert parse_clock("34200") == 34200

    @pytest.mark.parametrize("value", ["", "9:61:00", "ten", "24:00:00", -1, 86400, True])
    def test_invalid_values(self, value):
        """Anything that is not a time of day raises ValueError."""
        with pytest.raises(ValueError):
            parse_clock(value)


class TestFormatClock:
    """Test format_clock function."""

    def test_round_trip(self):
        """Formatting inverts parsing."""
        assert format_clock(34200) == "09:30:00"
        assert parse_clock(format_clock(45296)) == 45296


class TestWindowHelpers:
    """Test window helpers."""

    def test_in_window_inclusive(self):
        """Both window bounds are inside."""
        assert in_window(100, 100, 200)
        assert in_window(200, 100, 200)
        assert not in_window(99, 100, 200)
        assert not in_window(201, 100, 200)
