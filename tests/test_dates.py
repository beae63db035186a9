"""Tests for calendar key functions."""

import pytest
from datetime import date

from src.dates import (
    add_days,
    compare_keys,
    date_key_for_day,
    format_key,
    is_today,
    offset_from_today,
    parse_key,
    step_week,
    today_key,
    week_anchor_key,
)


# 2024-06-14 is a Friday
FRIDAY = date(2024, 6, 14)


class TestFormatAndParse:
    """Tests for converting between dates and keys."""

    def test_format_zero_pads(self):
        assert format_key(date(2024, 3, 5)) == "2024-03-05"

    def test_parse_key(self):
        assert parse_key("2024-06-10") == date(2024, 6, 10)

    def test_round_trip(self):
        """Test format(parse(k)) == k for keys the module produces."""
        for offset in range(0, 800, 13):
            key = add_days("2023-01-01", offset)
            assert format_key(parse_key(key)) == key

    @pytest.mark.parametrize("bad", ["2024-06", "2024/06/10", "abcd-ef-gh", "2024-13-01", ""])
    def test_parse_rejects_malformed_keys(self, bad):
        with pytest.raises(ValueError):
            parse_key(bad)


class TestArithmetic:
    """Tests for day arithmetic."""

    def test_add_days_carries_month_and_year(self):
        assert add_days("2024-02-28", 1) == "2024-02-29"
        assert add_days("2024-03-01", -1) == "2024-02-29"
        assert add_days("2024-12-31", 1) == "2025-01-01"

    def test_add_days_inverse(self):
        """Test add_days(add_days(k, n), -n) == k."""
        for n in (-400, -31, -7, -1, 0, 1, 6, 30, 365):
            assert add_days(add_days("2024-06-10", n), -n) == "2024-06-10"

    def test_step_week(self):
        assert step_week("2024-06-10", 1) == "2024-06-17"
        assert step_week("2024-06-10", -1) == "2024-06-03"

    def test_date_key_for_day(self):
        assert date_key_for_day("2024-06-28", 5) == "2024-07-03"

    def test_compare_keys(self):
        assert compare_keys("2024-06-10", "2024-06-11") == -1
        assert compare_keys("2024-06-11", "2024-06-11") == 0
        assert compare_keys("2025-01-01", "2024-12-31") == 1


class TestToday:
    """Tests for functions relative to today."""

    def test_today_key_uses_given_date(self):
        assert today_key(FRIDAY) == "2024-06-14"
        assert week_anchor_key(FRIDAY) == "2024-06-14"

    def test_today_key_defaults_to_local_date(self):
        assert today_key() == format_key(date.today())
        assert is_today(today_key()) is True

    def test_is_today(self):
        assert is_today("2024-06-14", FRIDAY) is True
        assert is_today("2024-06-13", FRIDAY) is False

    def test_offset_for_today_is_zero(self):
        assert offset_from_today("friday", FRIDAY) == 0

    def test_offset_moves_forward(self):
        assert offset_from_today("saturday", FRIDAY) == 1
        assert offset_from_today("monday", FRIDAY) == 3

    def test_offset_wraps_instead_of_going_negative(self):
        """Test that yesterday's weekday is six days ahead, not -1."""
        assert offset_from_today("thursday", FRIDAY) == 6

    def test_offset_accepts_any_case(self):
        assert offset_from_today(" Sunday ", FRIDAY) == 2

    def test_offset_rejects_unknown_label(self):
        with pytest.raises(ValueError):
            offset_from_today("funday", FRIDAY)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
