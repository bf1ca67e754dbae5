"""
Office rankings: metric values per office for display. Sorting and paging
are left to the consumer.
"""

import logging

import pandas as pd

from .metrics import resolve_metric
from .periods import Window
from .store import MetricsStore

logger = logging.getLogger(__name__)

RANKING_COLUMNS = ["office_id", "office_name", "address", "dfo", "value"]


def get_office_rankings(store: MetricsStore, metric: str, window: Window) -> list[dict]:
    """One {office_id, office_name, address, dfo, value} entry per office,
    in office_id order. value is None where the metric cannot be computed,
    and for every office when the metric name is unknown."""
    with store.exclusive():
        offices = store.list_offices()
        values = resolve_metric(store, metric, window, offices=offices)

    rankings = []
    for office in offices:
        rankings.append({
            "office_id": office["office_id"],
            "office_name": office.get("office_name"),
            "address": office.get("address"),
            "dfo": office.get("dfo"),
            "value": values.get(office["office_id"]),
        })

    logger.info("Built %s rankings for %d offices over %s", metric, len(rankings), window)
    return rankings


def rankings_to_frame(rankings: list[dict]) -> pd.DataFrame:
    """Tabular view of get_office_rankings output."""
    return pd.DataFrame(rankings, columns=RANKING_COLUMNS)
