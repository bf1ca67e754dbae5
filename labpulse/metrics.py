"""
Metric resolution: one nullable value per office for a named metric over
a reporting window.

The aggregation strategy comes from config.METRIC_REGISTRY and depends on
whether the window is a single month or spans several:

    revenue                     exact value  | SUM over months
    lab/personnel expense %     exact ratio  | undefined (None)
    weekly units, backlogs      AVG          | AVG
    data_completeness           present rows / (months * 2) * 100

Unknown metric names resolve to None for every office. Missing rows and
zero revenue degrade to None for that office only; store failures propagate.
"""

import logging

import pandas as pd

from .config import COMPLETENESS_TABLES, METRIC_REGISTRY
from .errors import InvalidMetric
from .kpis import column_mean, column_sum, completeness_pct, is_missing, percent_of_revenue
from .periods import Window
from .store import MetricsStore

logger = logging.getLogger(__name__)


def get_metric_definition(metric: str, strict: bool = False) -> dict | None:
    """Registry entry for a metric.

    Unknown names return None, or raise InvalidMetric when strict is True.
    """
    if not isinstance(metric, str):
        raise InvalidMetric(f"Metric name must be a string, got {type(metric).__name__}")
    definition = METRIC_REGISTRY.get(metric)
    if definition is None and strict:
        raise InvalidMetric(f"Unknown metric '{metric}'")
    return definition


def available_metrics() -> list[str]:
    """Metric names for UI dropdowns, in registry order."""
    return list(METRIC_REGISTRY)


def _exact(rows: pd.DataFrame, column: str) -> float | None:
    if rows.empty:
        return None
    value = rows.iloc[0][column]
    return None if is_missing(value) else float(value)


def _percent(rows: pd.DataFrame, column: str) -> float | None:
    if rows.empty:
        return None
    row = rows.iloc[0]
    return percent_of_revenue(row[column], row["revenue"])


def _office_rows(frame: pd.DataFrame, office_id: int) -> pd.DataFrame:
    return frame[frame["office_id"] == office_id]


def _resolve_for_office(
    strategy: str,
    definition: dict,
    frames: dict[str, pd.DataFrame],
    office_id: int,
    window: Window,
) -> float | None:
    if strategy == "completeness":
        present = sum(len(_office_rows(frames[t], office_id)) for t in COMPLETENESS_TABLES)
        return completeness_pct(present, window.month_count, len(COMPLETENESS_TABLES))

    rows = _office_rows(frames[definition["table"]], office_id)
    column = definition["column"]

    if strategy == "exact":
        return _exact(rows, column)
    if strategy == "percent":
        return _percent(rows, column)
    if strategy == "sum":
        return column_sum(rows[column])
    if strategy == "avg":
        return column_mean(rows[column])

    logger.warning("Unhandled aggregation strategy '%s'", strategy)
    return None


def resolve_metric(
    store: MetricsStore,
    metric: str,
    window: Window,
    offices: list[dict] | None = None,
) -> dict[int, float | None]:
    """Return {office_id: value} for every office, in office_id order.

    Parameters
    ----------
    store : MetricsStore to read from.
    metric : One of config.METRIC_REGISTRY; anything else yields None values.
    window : Reporting window. Single-month windows use exact stored values,
             multi-month windows aggregate across the months in range.
    offices : Office list already read by the caller under the same lock;
              read from the store when omitted.
    """
    definition = get_metric_definition(metric)

    # One lock for the whole request so every read sees the same data
    with store.exclusive():
        if offices is None:
            offices = store.list_offices()

        if definition is None:
            logger.info("Unknown metric '%s', every office resolves to None", metric)
            return {office["office_id"]: None for office in offices}

        strategy = definition["single"] if window.is_single else definition["multi"]
        if strategy is None:
            logger.debug("Metric '%s' is undefined for window %s", metric, window)
            return {office["office_id"]: None for office in offices}

        tables = COMPLETENESS_TABLES if strategy == "completeness" else (definition["table"],)
        frames = {
            table: store.list_monthly(table, start=window.start, end=window.end)
            for table in tables
        }

    values: dict[int, float | None] = {}
    for office in offices:
        office_id = office["office_id"]
        try:
            values[office_id] = _resolve_for_office(strategy, definition, frames, office_id, window)
        except (TypeError, ValueError, ZeroDivisionError) as e:
            logger.warning("Could not resolve %s for office %s: %s", metric, office_id, e)
            values[office_id] = None

    resolved = sum(v is not None for v in values.values())
    logger.info("Resolved %s over %s: %d/%d offices with values", metric, window, resolved, len(values))
    return values
