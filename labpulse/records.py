"""
Per-office record views: previous-period comparisons, weekly drill-down,
and the operations view with derived backlog and overtime.
"""

import logging

import pandas as pd

from .config import CLINIC_BACKLOG_COLUMNS, LAB_BACKLOG_COLUMNS
from .periods import month_to_week_range, previous_period
from .store import MetricsStore

logger = logging.getLogger(__name__)

_GETTERS = {
    "monthly_financials": "get_monthly_financial",
    "monthly_ops": "get_monthly_ops",
    "monthly_volume": "get_monthly_volume",
    "notes_actions": "get_note",
}


def get_previous_month(
    store: MetricsStore,
    table: str,
    office_id: int,
    year: int,
    month: int,
) -> dict | None:
    """The office's row in `table` for the month before (year, month)."""
    if table not in _GETTERS:
        raise ValueError(f"No previous-period lookup for table '{table}'")
    prev_year, prev_month = previous_period(year, month)
    return getattr(store, _GETTERS[table])(office_id, prev_year, prev_month)


def get_weekly_volume_records(
    store: MetricsStore,
    office_id: int,
    year: int,
    month: int,
) -> pd.DataFrame:
    """Weekly volume rows inside the month's week range, ordered by week."""
    week_range = month_to_week_range(month)
    weekly = store.list_weekly_volume(office_id=office_id, year=year, week_range=week_range)
    return weekly.sort_values("week_number").reset_index(drop=True)


def derive_backlog_case_count(weekly: pd.DataFrame) -> int | None:
    """Average weekly backlog (lab + clinic counters), truncated to an int.

    A week with any missing backlog counter has no total and is left out of
    the average. None when no week has a complete set of counters.
    """
    if weekly.empty:
        return None
    counters = weekly[LAB_BACKLOG_COLUMNS + CLINIC_BACKLOG_COLUMNS].apply(
        pd.to_numeric, errors="coerce"
    ).dropna()
    if counters.empty:
        return None
    return int(counters.sum(axis=1).mean())


def get_operations_view(
    store: MetricsStore,
    office_id: int,
    year: int,
    month: int,
) -> dict | None:
    """Operations data for one office-month.

    Staffing fields come from monthly_ops; backlog_case_count is derived
    from the month's weekly volume and overtime_value from the financial
    row's overtime_exp. Returns None when every field is missing.
    """
    with store.exclusive():
        ops = store.get_monthly_ops(office_id, year, month) or {}
        financial = store.get_monthly_financial(office_id, year, month) or {}
        weekly = get_weekly_volume_records(store, office_id, year, month)

    view = {
        "backlog_case_count": derive_backlog_case_count(weekly),
        "overtime_value": financial.get("overtime_exp"),
        "current_staff": ops.get("current_staff"),
        "required_staff": ops.get("required_staff"),
        "staffing_trend": ops.get("staffing_trend"),
    }
    if all(value is None for value in view.values()):
        logger.debug("No operations data for office %s %d-%02d", office_id, year, month)
        return None
    return view
