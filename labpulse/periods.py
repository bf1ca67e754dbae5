"""
Period arithmetic: (year, month) and (year, week) conversions and
reporting windows.

The week calendar is the fixed table in config.WEEK_RANGES, not the
ISO calendar. Every component converts through this module.
"""

from bisect import bisect_left
from dataclasses import dataclass

from .config import MAX_WEEK, WEEK_MONTH_THRESHOLDS, WEEK_RANGES
from .errors import InvalidRange


def _check_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise InvalidRange(f"Month {month} out of range (must be 1-12)")


def period_key(year: int, month: int) -> int:
    """Sortable integer key for a (year, month) pair, e.g. 202407."""
    return year * 100 + month


def previous_period(year: int, month: int) -> tuple[int, int]:
    """Return the (year, month) immediately before the given one."""
    _check_month(month)
    if month == 1:
        return year - 1, 12
    return year, month - 1


def month_to_week_range(month: int) -> tuple[int, int]:
    """Return the inclusive (start_week, end_week) assigned to a month."""
    _check_month(month)
    return WEEK_RANGES[month]


def week_to_month(week_number: int) -> int:
    """Return the month a week number belongs to."""
    if not 1 <= week_number <= MAX_WEEK:
        raise InvalidRange(f"Week {week_number} out of range (must be 1-{MAX_WEEK})")
    return bisect_left(WEEK_MONTH_THRESHOLDS, week_number) + 1


def enumerate_months(
    start_year: int,
    start_month: int,
    end_year: int,
    end_month: int,
) -> list[tuple[int, int]]:
    """List every (year, month) from start to end inclusive, oldest first.

    Raises InvalidRange if the start period is after the end period.
    """
    _check_month(start_month)
    _check_month(end_month)
    if period_key(start_year, start_month) > period_key(end_year, end_month):
        raise InvalidRange(
            f"Start {start_year}-{start_month:02d} is after end {end_year}-{end_month:02d}"
        )

    months = []
    year, month = start_year, start_month
    while (year, month) <= (end_year, end_month):
        months.append((year, month))
        month += 1
        if month > 12:
            month = 1
            year += 1
    return months


def is_single_period(
    start_year: int,
    start_month: int,
    end_year: int,
    end_month: int,
) -> bool:
    """True iff the window covers exactly one month."""
    return start_year == end_year and start_month == end_month


@dataclass(frozen=True)
class Window:
    """Inclusive reporting window from (start_year, start_month) to
    (end_year, end_month). Validated on construction."""

    start_year: int
    start_month: int
    end_year: int
    end_month: int

    def __post_init__(self):
        # Raises InvalidRange for a malformed window
        enumerate_months(self.start_year, self.start_month, self.end_year, self.end_month)

    @classmethod
    def single(cls, year: int, month: int) -> "Window":
        return cls(year, month, year, month)

    @property
    def start(self) -> tuple[int, int]:
        return self.start_year, self.start_month

    @property
    def end(self) -> tuple[int, int]:
        return self.end_year, self.end_month

    @property
    def is_single(self) -> bool:
        return is_single_period(self.start_year, self.start_month, self.end_year, self.end_month)

    @property
    def months(self) -> list[tuple[int, int]]:
        return enumerate_months(self.start_year, self.start_month, self.end_year, self.end_month)

    @property
    def month_count(self) -> int:
        return len(self.months)

    @property
    def key_bounds(self) -> tuple[int, int]:
        return period_key(*self.start), period_key(*self.end)

    def __str__(self) -> str:
        if self.is_single:
            return f"{self.start_year}-{self.start_month:02d}"
        return (
            f"{self.start_year}-{self.start_month:02d}"
            f"..{self.end_year}-{self.end_month:02d}"
        )
