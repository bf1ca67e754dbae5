"""
Loader for the office list.

Expected headers (normalised to snake case): office_id, office_name, model,
address, phone, managing_dentist, dfo, standardization_status.
"""

import logging

import pandas as pd

from ..config import OFFICE_COLUMNS, OFFICE_MODELS
from ..store import MetricsStore
from .utils import ImportSummary, display_filename, log_import, normalise_columns, safe_int

logger = logging.getLogger(__name__)


def _optional_text(val) -> str | None:
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return None
    text = str(val).strip()
    return text or None


def import_offices(
    store: MetricsStore,
    frame: pd.DataFrame,
    filename: str | None = None,
) -> ImportSummary:
    """Upsert offices from a parsed office list.

    Rows with an invalid office id, an empty name, or a model other than
    PO / PLLC are skipped with a warning.
    """
    df = normalise_columns(frame)
    summary = ImportSummary(filename=display_filename(filename))

    with store.exclusive():
        for idx, row in enumerate(df.to_dict("records")):
            sheet_row = idx + 2
            summary.rows_processed += 1

            office_id = safe_int(row.get("office_id"))
            if office_id is None:
                summary.warn(sheet_row, "Invalid office ID")
                continue

            office_name = _optional_text(row.get("office_name"))
            if office_name is None:
                summary.warn(sheet_row, "Missing office name")
                continue

            model = (_optional_text(row.get("model")) or "").upper()
            if model not in OFFICE_MODELS:
                summary.warn(sheet_row, f"Invalid model '{model}' (must be PO or PLLC)")
                continue

            office = {name: _optional_text(row.get(name)) for name in OFFICE_COLUMNS}
            office.update({"office_id": office_id, "office_name": office_name, "model": model})

            if store.upsert_office(office) == "inserted":
                summary.rows_inserted += 1
            else:
                summary.rows_updated += 1

    log_import(store, "offices", summary)
    logger.info(
        "Imported offices: %d processed, %d inserted, %d updated, %d skipped",
        summary.rows_processed, summary.rows_inserted, summary.rows_updated, summary.rows_skipped,
    )
    return summary
