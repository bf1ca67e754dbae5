"""
Configuration: metric registry, week calendar, column groups, constants.

METRIC_REGISTRY maps each ranking metric name to its source table,
aggregation strategy per window type, and display unit.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Store location, override with LABPULSE_DATABASE_URL
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent.parent

DATABASE_URL = os.getenv(
    "LABPULSE_DATABASE_URL",
    f"sqlite:///{DATA_DIR / 'labpulse.db'}",
)
LOG_LEVEL = os.getenv("LABPULSE_LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# Week calendar
# ---------------------------------------------------------------------------
# Fixed 53-week partition, not proportional to calendar days. This is the
# only copy of the table; use labpulse.periods rather than re-deriving it.
WEEK_RANGES: dict[int, tuple[int, int]] = {
    1: (1, 4),
    2: (5, 8),
    3: (9, 13),
    4: (14, 17),
    5: (18, 22),
    6: (23, 26),
    7: (27, 30),
    8: (31, 35),
    9: (36, 39),
    10: (40, 43),
    11: (44, 48),
    12: (49, 53),
}

# Upper-bound week for months 1..11; anything above falls in month 12
WEEK_MONTH_THRESHOLDS: list[int] = [4, 8, 13, 17, 22, 26, 30, 35, 39, 43, 48]

MAX_WEEK = 53

# ---------------------------------------------------------------------------
# Column groups
# ---------------------------------------------------------------------------
LAB_BACKLOG_COLUMNS = [
    "lab_setups",
    "lab_fixed_cases",
    "lab_over_denture",
    "lab_processes",
    "lab_finishes",
]

CLINIC_BACKLOG_COLUMNS = [
    "clinic_wax_tryin",
    "clinic_delivery",
    "clinic_outside_lab",
    "clinic_on_hold",
]

UNIT_COLUMNS = [
    "immediate_units",
    "economy_units",
    "economy_plus_units",
    "premium_units",
    "ultimate_units",
    "repair_units",
    "reline_units",
    "partial_units",
    "retry_units",
    "remake_units",
    "bite_block_units",
]

# The 20 production counters shared by weekly and monthly volume
VOLUME_COUNTER_COLUMNS = LAB_BACKLOG_COLUMNS + CLINIC_BACKLOG_COLUMNS + UNIT_COLUMNS

VOLUME_DERIVED_COLUMNS = ["backlog_in_lab", "backlog_in_clinic", "total_weekly_units"]

FINANCIAL_COLUMNS = [
    "revenue",
    "lab_exp_no_outside",
    "lab_exp_with_outside",
    "outside_lab_spend",
    "teeth_supplies",
    "lab_supplies",
    "lab_hub",
    "lss_expense",
    "personnel_exp",
    "overtime_exp",
    "bonus_exp",
]

# Accepted from bulk import; outside_lab_spend is always derived
FINANCIAL_INPUT_COLUMNS = [c for c in FINANCIAL_COLUMNS if c != "outside_lab_spend"]

OPS_COLUMNS = [
    "backlog_case_count",
    "overtime_value",
    "current_staff",
    "required_staff",
    "staffing_trend",
]

OFFICE_COLUMNS = [
    "office_id",
    "office_name",
    "model",
    "address",
    "phone",
    "managing_dentist",
    "dfo",
    "standardization_status",
]

OFFICE_MODELS = ("PO", "PLLC")

# Tables keyed by (office_id, year, month)
MONTHLY_TABLES = (
    "monthly_financials",
    "monthly_ops",
    "monthly_volume",
    "notes_actions",
)

# ---------------------------------------------------------------------------
# Metric Registry
# ---------------------------------------------------------------------------
# single / multi: "exact", "sum", "avg", "percent", "completeness" or None
# (None = undefined for that window type, always resolves to None)
METRIC_REGISTRY: dict[str, dict] = {
    "revenue": {
        "table": "monthly_financials",
        "column": "revenue",
        "single": "exact",
        "multi": "sum",
        "unit": "USD",
        "label": "Revenue",
    },
    "lab_expense_percent": {
        "table": "monthly_financials",
        "column": "lab_exp_with_outside",
        "single": "percent",
        "multi": None,
        "unit": "%",
        "label": "Lab Expense %",
    },
    "personnel_expense_percent": {
        "table": "monthly_financials",
        "column": "personnel_exp",
        "single": "percent",
        "multi": None,
        "unit": "%",
        "label": "Personnel Expense %",
    },
    "total_weekly_units": {
        "table": "monthly_volume",
        "column": "total_weekly_units",
        "single": "avg",
        "multi": "avg",
        "unit": "units",
        "label": "Weekly Units",
    },
    "backlog_in_lab": {
        "table": "monthly_volume",
        "column": "backlog_in_lab",
        "single": "avg",
        "multi": "avg",
        "unit": "cases",
        "label": "Backlog in Lab",
    },
    "backlog_in_clinic": {
        "table": "monthly_volume",
        "column": "backlog_in_clinic",
        "single": "avg",
        "multi": "avg",
        "unit": "cases",
        "label": "Backlog in Clinic",
    },
    "data_completeness": {
        "table": None,
        "column": None,
        "single": "completeness",
        "multi": "completeness",
        "unit": "%",
        "label": "Data Completeness",
    },
}

# Tables counted towards data_completeness (expected one row per month each)
COMPLETENESS_TABLES = ("monthly_financials", "monthly_volume")

# ---------------------------------------------------------------------------
# Alert thresholds (value strictly above the level triggers it)
# ---------------------------------------------------------------------------
ALERT_THRESHOLDS: dict[str, dict] = {
    "lab_exp_percent": {"warning": 20.0, "critical": 25.0, "label": "Lab expenses", "unit": "%"},
    "personnel_percent": {"warning": 15.0, "critical": 20.0, "label": "Personnel", "unit": "%"},
    "backlog_count": {"warning": 50, "critical": 100, "label": "Backlog", "unit": "cases"},
}

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
RECENT_SUBMISSION_LIMIT = 10
MONTH_NAMES = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]
