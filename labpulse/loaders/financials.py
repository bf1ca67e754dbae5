"""
Loader for bulk monthly financials.

Expected headers (normalised to snake case): office_id, year, month and the
financial fields in config.FINANCIAL_INPUT_COLUMNS. An outside_lab_spend
column, if present, is ignored: the value is always recomputed as
lab_exp_with_outside - lab_exp_no_outside.
"""

import logging

import pandas as pd

from ..config import FINANCIAL_INPUT_COLUMNS
from ..store import MetricsStore
from .utils import ImportSummary, display_filename, log_import, normalise_columns, safe_float, safe_int

logger = logging.getLogger(__name__)


def validate_financial_row(row: dict) -> tuple[tuple[int, int, int] | None, dict, str | None]:
    """Validate one parsed row.

    Returns ((office_id, year, month), values, None) for a good row, or
    (None, {}, reason) for a rejected one. Missing amounts default to 0.
    """
    office_id = safe_int(row.get("office_id"))
    if office_id is None:
        return None, {}, "Missing or invalid office_id"
    year = safe_int(row.get("year"))
    if year is None:
        return None, {}, "Missing or invalid year"
    month = safe_int(row.get("month"))
    if month is None:
        return None, {}, "Missing or invalid month"
    if not 1 <= month <= 12:
        return None, {}, f"Invalid month {month} (must be 1-12)"

    values = {}
    for col in FINANCIAL_INPUT_COLUMNS:
        amount = safe_float(row.get(col))
        values[col] = amount if amount is not None else 0.0
    values["outside_lab_spend"] = values["lab_exp_with_outside"] - values["lab_exp_no_outside"]
    return (office_id, year, month), values, None


def import_financials(
    store: MetricsStore,
    frame: pd.DataFrame,
    filename: str | None = None,
) -> ImportSummary:
    """Upsert monthly financial rows from a parsed sheet (last write wins)."""
    df = normalise_columns(frame)
    summary = ImportSummary(filename=display_filename(filename))

    with store.exclusive():
        known_offices = {office["office_id"] for office in store.list_offices()}

        for idx, row in enumerate(df.to_dict("records")):
            sheet_row = idx + 2
            summary.rows_processed += 1

            key, values, reason = validate_financial_row(row)
            if key is None:
                summary.warn(sheet_row, reason)
                continue
            if key[0] not in known_offices:
                summary.warn(sheet_row, f"Unknown office {key[0]}")
                continue

            # The store recomputes outside_lab_spend itself
            values.pop("outside_lab_spend")
            if store.upsert_monthly_financial(*key, **values) == "inserted":
                summary.rows_inserted += 1
            else:
                summary.rows_updated += 1

    log_import(store, "bulk_financials", summary)
    logger.info(
        "Imported financials: %d processed, %d inserted, %d updated, %d skipped",
        summary.rows_processed, summary.rows_inserted, summary.rows_updated, summary.rows_skipped,
    )
    return summary
