"""
Dashboard-ready output functions.

These are the primary entry points for a dashboard front end. Each
function returns plain dicts or DataFrames suitable for rendering office
cards, tables, and period pickers.
"""

import logging

import pandas as pd

from .config import MONTHLY_TABLES
from .kpis import column_mean, column_sum, is_missing, percent_of_revenue, round_half_away_from_zero
from .periods import Window
from .store import MetricsStore

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    "office_id",
    "office_name",
    "model",
    "dfo",
    "latest_year",
    "latest_month",
    "revenue",
    "lab_exp_percent",
    "personnel_percent",
    "overtime_percent",
    "backlog_count",
    "has_financial",
    "has_operations",
    "has_volume",
    "has_notes",
]

_FINANCIAL_FIELDS = ["revenue", "lab_exp_with_outside", "personnel_exp", "overtime_exp"]


def _empty_summary(office: dict) -> dict:
    summary = {name: None for name in SUMMARY_COLUMNS}
    summary.update({
        "office_id": office["office_id"],
        "office_name": office.get("office_name"),
        "model": office.get("model"),
        "dfo": office.get("dfo"),
        "has_financial": False,
        "has_operations": False,
        "has_volume": False,
        "has_notes": False,
    })
    return summary


def _clean(value) -> float | None:
    return None if is_missing(value) else float(value)


def financial_presence(
    revenue: float | None,
    lab_exp: float | None,
    personnel_exp: float | None,
    overtime_exp: float | None,
) -> tuple[tuple[float | None, ...], bool]:
    """Decide whether an office counts as having financial data.

    Only leading subsets of (revenue, lab, personnel, overtime) count:
    all four, the first three, the first two, or revenue alone. Any other
    combination (e.g. revenue and personnel without lab) is reported as no
    financial data, and its values are dropped.

    Returns ((revenue, lab, personnel, overtime), has_financial).
    """
    fields = (revenue, lab_exp, personnel_exp, overtime_exp)
    present = [v is not None for v in fields]

    if not present[0]:
        return (None, None, None, None), False

    # Leading run of present values followed only by missing ones
    leading = present.index(False) if False in present else len(present)
    if any(present[leading:]):
        return (None, None, None, None), False
    return fields, True


def _financial_values(rows: pd.DataFrame, single: bool) -> tuple[float | None, ...]:
    if rows.empty:
        return None, None, None, None
    if single:
        row = rows.iloc[0]
        return tuple(_clean(row[f]) for f in _FINANCIAL_FIELDS)
    return tuple(column_sum(rows[f]) for f in _FINANCIAL_FIELDS)


def _backlog(rows: pd.DataFrame, single: bool) -> tuple[int | None, bool]:
    if rows.empty:
        return None, False
    if single:
        value = rows.iloc[0]["backlog_case_count"]
        if is_missing(value):
            return None, False
        return int(value), True
    avg = column_mean(rows["backlog_case_count"])
    if avg is None:
        return None, False
    return int(round_half_away_from_zero(avg)), True


def _summarise_office(
    office: dict,
    frames: dict[str, pd.DataFrame],
    window: Window,
    store: MetricsStore,
) -> dict:
    office_id = office["office_id"]
    rows = {name: frame[frame["office_id"] == office_id] for name, frame in frames.items()}
    single = window.is_single
    summary = _empty_summary(office)

    (revenue, lab_exp, personnel_exp, overtime_exp), has_financial = financial_presence(
        *_financial_values(rows["monthly_financials"], single)
    )
    summary["revenue"] = revenue
    summary["has_financial"] = has_financial

    # Percentages only make sense for a single month
    calc_percentages = single
    if calc_percentages:
        summary["lab_exp_percent"] = percent_of_revenue(lab_exp, revenue)
        summary["personnel_percent"] = percent_of_revenue(personnel_exp, revenue)
        summary["overtime_percent"] = percent_of_revenue(overtime_exp, revenue)

    summary["backlog_count"], summary["has_operations"] = _backlog(rows["monthly_ops"], single)
    summary["has_volume"] = not rows["monthly_volume"].empty
    summary["has_notes"] = not rows["notes_actions"].empty

    latest = store.latest_period(office_id)
    if latest is not None:
        summary["latest_year"], summary["latest_month"] = latest

    return summary


def get_dashboard_summary(store: MetricsStore, window: Window) -> list[dict]:
    """One summary per office for the window, in ascending office_id order.

    Offices without any data still appear, with None values and every
    has_* flag False. latest_year / latest_month look at the office's whole
    history, not just the window.

    Returns
    -------
    List of dicts with keys:
        office_id, office_name, model, dfo, latest_year, latest_month,
        revenue, lab_exp_percent, personnel_percent, overtime_percent,
        backlog_count, has_financial, has_operations, has_volume, has_notes
    """
    with store.exclusive():
        offices = sorted(store.list_offices(), key=lambda o: o["office_id"])
        frames = {
            table: store.list_monthly(table, start=window.start, end=window.end)
            for table in MONTHLY_TABLES
        }

        summaries = []
        for office in offices:
            try:
                summaries.append(_summarise_office(office, frames, window, store))
            except (TypeError, ValueError, ZeroDivisionError) as e:
                logger.warning("Could not summarise office %s: %s", office["office_id"], e)
                summaries.append(_empty_summary(office))

    logger.info("Built dashboard summary for %d offices over %s", len(summaries), window)
    return summaries


def summaries_to_frame(summaries: list[dict]) -> pd.DataFrame:
    """Tabular view of get_dashboard_summary output."""
    return pd.DataFrame(summaries, columns=SUMMARY_COLUMNS)


def get_available_periods(store: MetricsStore) -> list[tuple[int, int]]:
    """Distinct (year, month) pairs with any monthly data, newest first."""
    periods: set[tuple[int, int]] = set()
    with store.exclusive():
        frames = [store.list_monthly(table) for table in MONTHLY_TABLES]
    for frame in frames:
        if frame.empty:
            continue
        periods.update(
            (int(year), int(month)) for year, month in zip(frame["year"], frame["month"])
        )
    return sorted(periods, reverse=True)
