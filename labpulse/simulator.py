"""
Simulated data generator for the LabPulse dashboard.

Generates realistic lab-office data: an office list, weekly production
volume, monthly financials and staffing, notes and weekly submission flags.
All values are synthetic; no real operational data is used.
"""

import logging

import numpy as np
import pandas as pd

from .config import (
    CLINIC_BACKLOG_COLUMNS,
    LAB_BACKLOG_COLUMNS,
    MONTH_NAMES,
    UNIT_COLUMNS,
)
from .loaders import import_financials, import_offices, import_weekly_volume
from .periods import week_to_month
from .store import MetricsStore

logger = logging.getLogger(__name__)

SEED = 42

# ---------------------------------------------------------------------------
# Typical office parameters (realistic ranges)
# ---------------------------------------------------------------------------
_OFFICES = [
    (101, "Albertville, AL", "PO", "Dana Whitfield"),
    (102, "Birmingham, AL", "PLLC", "Dana Whitfield"),
    (103, "Huntsville, AL", "PO", "Dana Whitfield"),
    (204, "Macon, GA", "PLLC", "Marcus Oyelaran"),
    (205, "Savannah, GA", "PO", "Marcus Oyelaran"),
    (306, "Knoxville, TN", "PO", "Priya Raman"),
    (307, "Chattanooga, TN", "PLLC", "Priya Raman"),
    (408, "Greenville, SC", "PO", "Priya Raman"),
]

# Mean weekly count per counter; Poisson noise is added around these
_COUNTER_MEANS = {
    "lab_setups": 14, "lab_fixed_cases": 6, "lab_over_denture": 3,
    "lab_processes": 9, "lab_finishes": 8,
    "clinic_wax_tryin": 7, "clinic_delivery": 9, "clinic_outside_lab": 2, "clinic_on_hold": 3,
    "immediate_units": 10, "economy_units": 6, "economy_plus_units": 5,
    "premium_units": 4, "ultimate_units": 2, "repair_units": 5, "reline_units": 3,
    "partial_units": 4, "retry_units": 1, "remake_units": 1, "bite_block_units": 2,
}

_MONTHLY_REVENUE = {"budget": 210_000, "std": 28_000}
_EXPENSE_SHARES = {
    "lab_exp_no_outside": (0.14, 0.02),
    "teeth_supplies": (0.03, 0.005),
    "lab_supplies": (0.02, 0.004),
    "lab_hub": (0.01, 0.003),
    "lss_expense": (0.008, 0.002),
    "personnel_exp": (0.16, 0.025),
    "overtime_exp": (0.012, 0.004),
    "bonus_exp": (0.006, 0.003),
}

_NOTES = [
    "Lab tech out two days; setups delayed.",
    "New scanner installed, delivery backlog clearing.",
    "Outside lab used for three ultimate cases.",
    "Staffing stable, overtime trending down.",
]


def _rng(seed: int | None) -> np.random.Generator:
    return np.random.default_rng(SEED if seed is None else seed)


def generate_offices() -> pd.DataFrame:
    """Simulated office list with the headers of the office import sheet."""
    rows = []
    for office_id, name, model, dfo in _OFFICES:
        rows.append({
            "Office ID": office_id,
            "Office Name": name,
            "Model": model,
            "Address": f"{100 + office_id} Main St, {name}",
            "Phone": f"(555) 010-{office_id:04d}",
            "Managing Dentist": None,
            "DFO": dfo,
            "Standardization Status": "standardized" if model == "PO" else "in_progress",
        })
    return pd.DataFrame(rows)


def generate_weekly_volume(
    year: int = 2026,
    n_weeks: int = 30,
    seed: int | None = None,
) -> pd.DataFrame:
    """Simulated weekly production counts for every office, weeks 1..n_weeks.

    Each office gets a multiplier so rankings spread out.
    """
    rng = _rng(seed)
    rows = []
    for office_id, *_ in _OFFICES:
        scale = rng.uniform(0.6, 1.5)
        for week in range(1, n_weeks + 1):
            row = {
                "office_id": office_id,
                "year": year,
                "month": week_to_month(week),
                "week_number": week,
            }
            for col in LAB_BACKLOG_COLUMNS + CLINIC_BACKLOG_COLUMNS + UNIT_COLUMNS:
                row[col] = int(rng.poisson(_COUNTER_MEANS[col] * scale))
            rows.append(row)
    return pd.DataFrame(rows)


def generate_monthly_financials(
    year: int = 2026,
    n_months: int = 7,
    seed: int | None = None,
) -> pd.DataFrame:
    """Simulated monthly financials; a few office-months are left out so the
    completeness metric has something to report."""
    rng = _rng(seed)
    rows = []
    for office_id, *_ in _OFFICES:
        for month in range(1, n_months + 1):
            if rng.random() < 0.08:
                continue
            revenue = max(rng.normal(_MONTHLY_REVENUE["budget"], _MONTHLY_REVENUE["std"]), 50_000)
            row = {"office_id": office_id, "year": year, "month": month, "revenue": round(revenue, 2)}
            for col, (share, std) in _EXPENSE_SHARES.items():
                row[col] = round(revenue * max(rng.normal(share, std), 0), 2)
            outside = revenue * max(rng.normal(0.025, 0.01), 0)
            row["lab_exp_with_outside"] = round(row["lab_exp_no_outside"] + outside, 2)
            rows.append(row)
    return pd.DataFrame(rows)


def generate_submissions(
    year: int = 2026,
    n_weeks: int = 34,
    seed: int | None = None,
) -> pd.DataFrame:
    """Simulated weekly submission flags; each office has its own reliability."""
    rng = _rng(seed)
    rows = []
    for office_id, *_ in _OFFICES:
        reliability = rng.uniform(0.6, 0.98)
        for week in range(1, n_weeks + 1):
            rows.append({
                "office_id": office_id,
                "year": year,
                "week_number": week,
                "submitted": bool(rng.random() < reliability),
            })
    return pd.DataFrame(rows)


def seed_store(
    store: MetricsStore,
    year: int = 2026,
    n_months: int = 7,
    seed: int | None = None,
) -> dict[str, int]:
    """Load a full synthetic dataset into the store through the bulk loaders.

    Returns row counts per table after seeding.
    """
    rng = _rng(seed)
    last_week = max(w for w in range(1, 54) if week_to_month(w) <= n_months)

    import_offices(store, generate_offices(), "simulated_offices.xlsx")
    import_financials(store, generate_monthly_financials(year, n_months, seed), "simulated_financials.xlsx")
    import_weekly_volume(store, generate_weekly_volume(year, last_week, seed), "simulated_weekly.xlsx")

    with store.exclusive():
        for office_id, *_ in _OFFICES:
            for month in range(1, n_months + 1):
                store.upsert_monthly_ops(
                    office_id, year, month,
                    backlog_case_count=int(rng.integers(15, 130)),
                    current_staff=float(rng.integers(6, 14)),
                    required_staff=float(rng.integers(8, 14)),
                    staffing_trend=round(float(rng.normal(0, 0.5)), 2),
                )
                if rng.random() < 0.3:
                    note = f"{MONTH_NAMES[month - 1]}: {_NOTES[int(rng.integers(len(_NOTES)))]}"
                    store.upsert_note(office_id, year, month, note)

        # Flags run a few weeks past the production data, as pre-filled trackers do
        for row in generate_submissions(year, last_week + 4, seed).to_dict("records"):
            store.upsert_submission(row["office_id"], row["year"], row["week_number"], row["submitted"])

    counts = store.table_counts()
    logger.info("Seeded simulated dataset: %s", counts)
    return counts
