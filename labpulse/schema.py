"""
Table declarations for the LabPulse store.

Every table is declared once here with SQLAlchemy Core; rows are decoded
generically with row_to_dict, so there is no per-table mapping code.
"""

from sqlalchemy import (
    CheckConstraint,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)

from .config import (
    CLINIC_BACKLOG_COLUMNS,
    FINANCIAL_COLUMNS,
    LAB_BACKLOG_COLUMNS,
    UNIT_COLUMNS,
    VOLUME_DERIVED_COLUMNS,
)

metadata = MetaData()


def _office_fk() -> Column:
    return Column(
        "office_id",
        Integer,
        ForeignKey("offices.office_id", ondelete="CASCADE"),
        nullable=False,
    )


def _counter_columns(names: list[str]) -> list[Column]:
    return [Column(name, Integer, nullable=False, server_default="0") for name in names]


def _timestamps() -> list[Column]:
    return [
        Column("created_at", DateTime, server_default=func.current_timestamp()),
        Column("updated_at", DateTime, server_default=func.current_timestamp()),
    ]


offices = Table(
    "offices",
    metadata,
    Column("office_id", Integer, primary_key=True, autoincrement=False),
    Column("office_name", String(255), nullable=False),
    Column("model", String(8), nullable=False),
    Column("address", Text),
    Column("phone", String(64)),
    Column("managing_dentist", String(255)),
    Column("dfo", String(255)),
    Column("standardization_status", String(64)),
    *_timestamps(),
    CheckConstraint("model IN ('PO', 'PLLC')", name="ck_offices_model"),
)

monthly_financials = Table(
    "monthly_financials",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _office_fk(),
    Column("year", Integer, nullable=False),
    Column("month", Integer, nullable=False),
    *[
        Column(name, Float, nullable=False, server_default="0")
        if name in ("lab_hub", "lss_expense")
        else Column(name, Float)
        for name in FINANCIAL_COLUMNS
    ],
    *_timestamps(),
    UniqueConstraint("office_id", "year", "month", name="uq_financials_period"),
    CheckConstraint("month BETWEEN 1 AND 12", name="ck_financials_month"),
)

monthly_ops = Table(
    "monthly_ops",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _office_fk(),
    Column("year", Integer, nullable=False),
    Column("month", Integer, nullable=False),
    Column("backlog_case_count", Integer),
    Column("overtime_value", Float),
    Column("current_staff", Float),
    Column("required_staff", Float),
    Column("staffing_trend", Float),
    *_timestamps(),
    UniqueConstraint("office_id", "year", "month", name="uq_ops_period"),
    CheckConstraint("month BETWEEN 1 AND 12", name="ck_ops_month"),
)

monthly_volume = Table(
    "monthly_volume",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _office_fk(),
    Column("year", Integer, nullable=False),
    Column("month", Integer, nullable=False),
    *_counter_columns(VOLUME_DERIVED_COLUMNS[:2]),
    *_counter_columns(LAB_BACKLOG_COLUMNS + CLINIC_BACKLOG_COLUMNS + UNIT_COLUMNS),
    *_counter_columns(VOLUME_DERIVED_COLUMNS[2:]),
    *_timestamps(),
    UniqueConstraint("office_id", "year", "month", name="uq_volume_period"),
    CheckConstraint("month BETWEEN 1 AND 12", name="ck_volume_month"),
)

weekly_volume = Table(
    "weekly_volume",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _office_fk(),
    Column("year", Integer, nullable=False),
    Column("week_number", Integer, nullable=False),
    # Nullable here: a present week with a missing counter rolls up as 0
    *[Column(name, Integer) for name in LAB_BACKLOG_COLUMNS + CLINIC_BACKLOG_COLUMNS + UNIT_COLUMNS],
    Column("created_at", DateTime, server_default=func.current_timestamp()),
    UniqueConstraint("office_id", "year", "week_number", name="uq_weekly_period"),
    CheckConstraint("week_number BETWEEN 1 AND 53", name="ck_weekly_week"),
)

notes_actions = Table(
    "notes_actions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _office_fk(),
    Column("year", Integer, nullable=False),
    Column("month", Integer, nullable=False),
    Column("note_text", Text),
    *_timestamps(),
    UniqueConstraint("office_id", "year", "month", name="uq_notes_period"),
    CheckConstraint("month BETWEEN 1 AND 12", name="ck_notes_month"),
)

submission_compliance = Table(
    "submission_compliance",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _office_fk(),
    Column("year", Integer, nullable=False),
    Column("week_number", Integer, nullable=False),
    Column("submitted", Boolean, nullable=False),
    UniqueConstraint("office_id", "year", "week_number", name="uq_compliance_period"),
    CheckConstraint("week_number BETWEEN 1 AND 53", name="ck_compliance_week"),
)

import_log = Table(
    "import_log",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("import_type", String(64), nullable=False),
    Column("filename", String(255)),
    Column("rows_processed", Integer),
    Column("rows_inserted", Integer),
    Column("rows_updated", Integer),
    Column("warnings", Text),
    Column("imported_at", DateTime, server_default=func.current_timestamp()),
)

TABLES: dict[str, Table] = {table.name: table for table in metadata.sorted_tables}


def row_to_dict(row) -> dict:
    """Decode a SQLAlchemy result row into a plain dict."""
    return dict(row._mapping)
