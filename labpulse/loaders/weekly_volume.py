"""
Loader for bulk weekly production volume.

Expected headers (normalised to snake case): office_id, year, week_number
and the 20 counters in config.VOLUME_COUNTER_COLUMNS. A month column may be
present but is ignored; the month is always derived from the week number.

Weeks already in the store are skipped, never overwritten. After the rows
are inserted the monthly rollup is recomputed.
"""

import logging

import pandas as pd

from ..config import MAX_WEEK, VOLUME_COUNTER_COLUMNS
from ..rollup import rollup_weekly_volume
from ..store import MetricsStore
from .utils import ImportSummary, display_filename, log_import, normalise_columns, safe_int

logger = logging.getLogger(__name__)


def validate_weekly_row(row: dict) -> tuple[dict | None, str | None]:
    """Validate one parsed row; returns (weekly_row, None) or (None, reason)."""
    office_id = safe_int(row.get("office_id"))
    if office_id is None:
        return None, "Missing or invalid office ID"
    year = safe_int(row.get("year"))
    if year is None:
        return None, "Missing or invalid year"
    week_number = safe_int(row.get("week_number"))
    if week_number is None:
        return None, "Missing or invalid week number"
    if not 1 <= week_number <= MAX_WEEK:
        return None, f"Invalid week number {week_number} (must be 1-{MAX_WEEK})"

    weekly = {"office_id": office_id, "year": year, "week_number": week_number}
    for col in VOLUME_COUNTER_COLUMNS:
        count = safe_int(row.get(col))
        weekly[col] = count if count is not None else 0
    return weekly, None


def import_weekly_volume(
    store: MetricsStore,
    frame: pd.DataFrame,
    filename: str | None = None,
) -> ImportSummary:
    """Insert new weekly rows and recompute monthly volume.

    rows_inserted counts weekly rows written; rows_updated counts monthly
    rows rewritten by the rollup.
    """
    df = normalise_columns(frame)
    summary = ImportSummary(filename=display_filename(filename))
    duplicates = 0

    with store.exclusive():
        known_offices = {office["office_id"] for office in store.list_offices()}

        for idx, row in enumerate(df.to_dict("records")):
            sheet_row = idx + 2
            summary.rows_processed += 1

            weekly, reason = validate_weekly_row(row)
            if weekly is None:
                summary.warn(sheet_row, reason)
                continue
            if weekly["office_id"] not in known_offices:
                summary.warn(sheet_row, f"Unknown office {weekly['office_id']}")
                continue

            if store.insert_weekly_volume(weekly):
                summary.rows_inserted += 1
            else:
                duplicates += 1
                summary.rows_skipped += 1

        summary.rows_updated = rollup_weekly_volume(store)

    log_import(store, "weekly_volume", summary)
    logger.info(
        "Imported weekly volume: %d processed, %d inserted, %d duplicate weeks skipped, "
        "%d monthly rows recomputed",
        summary.rows_processed, summary.rows_inserted, duplicates, summary.rows_updated,
    )
    return summary
