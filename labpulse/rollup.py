"""
Weekly-to-monthly volume rollup.

Monthly volume rows are fully recomputable from weekly_volume: each
counter is the rounded mean over the weeks of the month's canonical
range, and the three totals are derived from the rounded counters.
Re-running the rollup on unchanged weekly data rewrites identical rows.
"""

import logging

import pandas as pd

from .config import (
    CLINIC_BACKLOG_COLUMNS,
    LAB_BACKLOG_COLUMNS,
    UNIT_COLUMNS,
    VOLUME_COUNTER_COLUMNS,
    VOLUME_DERIVED_COLUMNS,
)
from .kpis import round_half_away_from_zero
from .periods import month_to_week_range, week_to_month
from .store import MetricsStore

logger = logging.getLogger(__name__)

GROUP_KEYS = ["office_id", "year", "month"]
MONTHLY_VOLUME_COLUMNS = GROUP_KEYS + VOLUME_COUNTER_COLUMNS + VOLUME_DERIVED_COLUMNS


def summarise_weekly_to_monthly(df_weekly: pd.DataFrame) -> pd.DataFrame:
    """Aggregate weekly_volume rows to monthly_volume grain.

    Rules
    -----
    - Weeks are assigned to months with week_to_month; only weeks inside
      the month's canonical range are averaged.
    - A present week with a missing counter counts as 0 for that counter;
      absent weeks are simply not part of the mean.
    - Means are rounded half away from zero.
    - backlog_in_lab / backlog_in_clinic / total_weekly_units are sums of
      the rounded lab, clinic and unit counters.

    Parameters
    ----------
    df_weekly : weekly_volume DataFrame with office_id, year, week_number
                and the 20 counter columns (missing columns read as 0).

    Returns
    -------
    DataFrame with one row per (office_id, year, month), integer counters.
    """
    if df_weekly.empty:
        logger.warning("Empty weekly DataFrame, returning empty monthly summary")
        return pd.DataFrame(columns=MONTHLY_VOLUME_COLUMNS)

    df = df_weekly.copy()
    for col in VOLUME_COUNTER_COLUMNS:
        if col not in df.columns:
            df[col] = 0
    df[VOLUME_COUNTER_COLUMNS] = (
        df[VOLUME_COUNTER_COLUMNS].apply(pd.to_numeric, errors="coerce").fillna(0)
    )

    df["month"] = df["week_number"].astype(int).map(week_to_month)
    bounds = df["month"].map(month_to_week_range)
    in_range = [
        start <= week <= end
        for week, (start, end) in zip(df["week_number"].astype(int), bounds)
    ]
    df = df[in_range]

    result = df.groupby(GROUP_KEYS)[VOLUME_COUNTER_COLUMNS].mean().reset_index()
    result[VOLUME_COUNTER_COLUMNS] = (
        round_half_away_from_zero(result[VOLUME_COUNTER_COLUMNS]).astype(int)
    )

    result["backlog_in_lab"] = result[LAB_BACKLOG_COLUMNS].sum(axis=1)
    result["backlog_in_clinic"] = result[CLINIC_BACKLOG_COLUMNS].sum(axis=1)
    result["total_weekly_units"] = result[UNIT_COLUMNS].sum(axis=1)

    logger.info("Summarised %d weekly rows to %d monthly rows", len(df), len(result))
    return result[MONTHLY_VOLUME_COLUMNS]


def rollup_weekly_volume(
    store: MetricsStore,
    office_id: int | None = None,
    year: int | None = None,
) -> int:
    """Recompute monthly_volume from weekly_volume and upsert the results.

    Scope to one office and/or year by passing office_id / year; by default
    every month with weekly data is recomputed. The store is held exclusively
    for the whole run.

    Returns the number of monthly rows written.
    """
    with store.exclusive():
        weekly = store.list_weekly_volume(office_id=office_id, year=year)
        monthly = summarise_weekly_to_monthly(weekly)

        written = 0
        for row in monthly.to_dict("records"):
            values = {col: int(row[col]) for col in VOLUME_COUNTER_COLUMNS + VOLUME_DERIVED_COLUMNS}
            store.upsert_monthly_volume(
                int(row["office_id"]), int(row["year"]), int(row["month"]), **values
            )
            written += 1

    logger.info("Rolled up %d monthly volume rows", written)
    return written
