"""
KPI computation functions. Pure functions with no side effects.

Provides revenue-relative percentages, null-aware sums and means, and the
rounding rule used for rolled-up counts.
"""

import logging
import math

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def is_missing(value) -> bool:
    """True for None and NaN."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def round_half_away_from_zero(value):
    """Round to the nearest integer, halves away from zero (2.5 -> 3).

    Accepts a scalar or a pandas/numpy array. Python's round() rounds
    halves to even, which would make 22.5 weekly cases roll up to 22.
    """
    return np.sign(value) * np.floor(np.abs(value) + 0.5)


def percent_of_revenue(numerator: float | None, revenue: float | None) -> float | None:
    """Return numerator as a percentage of revenue.

    None if either input is missing or revenue is not positive.
    """
    if is_missing(numerator) or is_missing(revenue):
        return None
    if revenue <= 0:
        return None
    return (numerator / revenue) * 100


def column_sum(values: pd.Series) -> float | None:
    """SQL-style SUM: nulls ignored, None when nothing is present."""
    if values.empty or values.notna().sum() == 0:
        return None
    return float(values.sum(skipna=True))


def column_mean(values: pd.Series) -> float | None:
    """SQL-style AVG: nulls ignored, None when nothing is present."""
    if values.empty or values.notna().sum() == 0:
        return None
    return float(values.mean(skipna=True))


def completeness_pct(present_rows: int, month_count: int, tables: int = 2) -> float:
    """Share of expected monthly rows present: one row per table per month."""
    expected = month_count * tables
    if expected == 0:
        return 0.0
    return (present_rows / expected) * 100
