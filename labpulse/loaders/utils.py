"""
Shared utilities for bulk import: header normalisation, cell coercion,
import summaries and best-effort import logging.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import PureWindowsPath
from typing import Any

import pandas as pd

from ..errors import StoreError
from ..store import MetricsStore

logger = logging.getLogger(__name__)


@dataclass
class ImportSummary:
    """Outcome of one bulk import."""

    filename: str | None
    rows_processed: int = 0
    rows_inserted: int = 0
    rows_updated: int = 0
    rows_skipped: int = 0
    warnings: list[str] = field(default_factory=list)

    def warn(self, sheet_row: int, message: str) -> None:
        self.warnings.append(f"Row {sheet_row}: {message}")
        self.rows_skipped += 1
        logger.warning("Row %d: %s", sheet_row, message)


def to_snake_case(name: str) -> str:
    """Convert a column name to snake_case.

    Handles spaces, parentheses, slashes, and percent signs.
    """
    s = str(name).strip()
    # Replace common symbols
    s = s.replace("%", "pct").replace("/", "_per_").replace("(", "").replace(")", "")
    s = s.replace("-", "_").replace(".", "_")
    # CamelCase to snake_case
    s = re.sub(r"([a-z])([A-Z])", r"\1_\2", s)
    # Collapse whitespace and special chars to underscores
    s = re.sub(r"[^a-zA-Z0-9]+", "_", s)
    s = s.lower().strip("_")
    s = re.sub(r"_+", "_", s)
    return s


def normalise_columns(frame: pd.DataFrame) -> pd.DataFrame:
    """Copy of frame with snake_case headers ("Office ID" -> "office_id")."""
    df = frame.copy()
    df.columns = [to_snake_case(c) for c in df.columns]
    return df


def safe_float(val: Any) -> float | None:
    """Coerce a cell to float, returning None for blanks and non-numeric values."""
    if val is None:
        return None
    if isinstance(val, bool):
        return 1.0 if val else 0.0
    if isinstance(val, str):
        val = val.strip().replace(",", "")
        # Skip formula strings and empty cells
        if val.startswith("=") or not val:
            return None
        try:
            result = float(val)
        except ValueError:
            return None
    else:
        try:
            result = float(val)
        except (ValueError, TypeError):
            return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(val: Any) -> int | None:
    """Coerce a cell to int (fractions truncated), None when not numeric."""
    result = safe_float(val)
    if result is None:
        return None
    return int(result)


def display_filename(path: str | None) -> str | None:
    """Basename of a Windows or POSIX path."""
    if not path:
        return path
    return PureWindowsPath(path).name


def log_import(store: MetricsStore, import_type: str, summary: ImportSummary) -> None:
    """Record the import in import_log. Failures are logged, never raised."""
    try:
        store.log_import(
            import_type,
            summary.filename,
            summary.rows_processed,
            summary.rows_inserted,
            summary.rows_updated,
            summary.warnings,
        )
    except StoreError:
        logger.exception("Could not write import log for %s", summary.filename)
