"""
Tests for period arithmetic and the fixed week calendar.

Run: pytest tests/test_periods.py -v
"""

import pytest

from labpulse.config import MAX_WEEK, WEEK_RANGES
from labpulse.errors import InvalidRange
from labpulse.periods import (
    Window,
    enumerate_months,
    is_single_period,
    month_to_week_range,
    period_key,
    previous_period,
    week_to_month,
)


class TestWeekCalendar:
    """The month/week table must be self-consistent."""

    # --- Happy Path Tests ---

    def test_every_week_maps_back_to_its_month(self):
        """Each week in a month's range belongs to that month."""
        for month in range(1, 13):
            start, end = month_to_week_range(month)
            for week in range(start, end + 1):
                assert week_to_month(week) == month

    def test_ranges_partition_weeks_1_to_53(self):
        """Ranges are contiguous and cover every week exactly once."""
        covered = []
        for month in range(1, 13):
            start, end = WEEK_RANGES[month]
            covered.extend(range(start, end + 1))
        assert covered == list(range(1, MAX_WEEK + 1))

    def test_known_boundaries(self):
        """Spot-check the fixed table."""
        assert month_to_week_range(1) == (1, 4)
        assert month_to_week_range(3) == (9, 13)
        assert month_to_week_range(12) == (49, 53)
        assert week_to_month(13) == 3
        assert week_to_month(14) == 4
        assert week_to_month(53) == 12

    # --- Edge Cases ---

    @pytest.mark.parametrize("week", [0, 54, -1])
    def test_week_out_of_range(self, week):
        """Weeks outside 1-53 are rejected."""
        with pytest.raises(InvalidRange):
            week_to_month(week)

    @pytest.mark.parametrize("month", [0, 13])
    def test_month_out_of_range(self, month):
        with pytest.raises(InvalidRange):
            month_to_week_range(month)


class TestPreviousPeriod:

    def test_mid_year(self):
        assert previous_period(2024, 7) == (2024, 6)

    def test_january_wraps_to_december(self):
        """January's previous period is December of the prior year."""
        assert previous_period(2024, 1) == (2023, 12)

    def test_invalid_month(self):
        with pytest.raises(InvalidRange):
            previous_period(2024, 0)


class TestEnumerateMonths:

    def test_within_year(self):
        assert enumerate_months(2024, 1, 2024, 3) == [(2024, 1), (2024, 2), (2024, 3)]

    def test_across_year_boundary(self):
        """Windows may span a year end."""
        assert enumerate_months(2023, 11, 2024, 2) == [
            (2023, 11), (2023, 12), (2024, 1), (2024, 2),
        ]

    def test_single_month(self):
        assert enumerate_months(2024, 5, 2024, 5) == [(2024, 5)]

    def test_start_after_end_rejected(self):
        """A reversed window is an InvalidRange, not an empty list."""
        with pytest.raises(InvalidRange):
            enumerate_months(2024, 4, 2024, 3)

    def test_period_key_orders_periods(self):
        assert period_key(2023, 12) < period_key(2024, 1)
        assert period_key(2024, 7) == 202407


class TestWindow:

    def test_single_window(self):
        window = Window.single(2024, 3)
        assert window.is_single
        assert window.month_count == 1
        assert str(window) == "2024-03"

    def test_multi_month_window(self):
        window = Window(2024, 1, 2024, 3)
        assert not window.is_single
        assert window.month_count == 3
        assert window.key_bounds == (202401, 202403)
        assert str(window) == "2024-01..2024-03"

    def test_invalid_window_raises(self):
        """Construction validates the window."""
        with pytest.raises(InvalidRange):
            Window(2024, 5, 2024, 1)

    def test_is_single_period(self):
        assert is_single_period(2024, 2, 2024, 2)
        assert not is_single_period(2023, 2, 2024, 2)
