"""
Tests for the weekly-to-monthly volume rollup.

Run: pytest tests/test_rollup.py -v
"""

import pandas as pd

from labpulse.kpis import round_half_away_from_zero
from labpulse.rollup import MONTHLY_VOLUME_COLUMNS, rollup_weekly_volume, summarise_weekly_to_monthly

from .conftest import weekly_row


class TestSummariseWeeklyToMonthly:

    # --- Happy Path Tests ---

    def test_mean_of_weeks(self):
        """lab_setups [10, 20, 30, 40] in January's weeks rolls up to 25."""
        df = pd.DataFrame([
            weekly_row(1, 2024, week, lab_setups=value)
            for week, value in zip(range(1, 5), [10, 20, 30, 40])
        ])
        result = summarise_weekly_to_monthly(df)

        assert len(result) == 1
        row = result.iloc[0]
        assert row["month"] == 1
        assert row["lab_setups"] == 25
        assert row["backlog_in_lab"] == 25

    def test_halves_round_away_from_zero(self):
        """22.5 rounds to 23, not 22."""
        df = pd.DataFrame([
            weekly_row(1, 2024, 1, clinic_delivery=22),
            weekly_row(1, 2024, 2, clinic_delivery=23),
        ])
        result = summarise_weekly_to_monthly(df)
        assert result.iloc[0]["clinic_delivery"] == 23

    def test_derived_totals_sum_rounded_counters(self):
        df = pd.DataFrame([
            weekly_row(1, 2024, 5, lab_setups=3, lab_finishes=1, clinic_on_hold=2,
                       premium_units=4, repair_units=5),
        ])
        row = summarise_weekly_to_monthly(df).iloc[0]
        assert row["month"] == 2
        assert row["backlog_in_lab"] == 4
        assert row["backlog_in_clinic"] == 2
        assert row["total_weekly_units"] == 9

    def test_missing_counter_counts_as_zero(self):
        """A present week with a null counter contributes 0 to the mean."""
        rows = [weekly_row(1, 2024, 1, lab_setups=10), weekly_row(1, 2024, 2)]
        rows[1]["lab_setups"] = None
        result = summarise_weekly_to_monthly(pd.DataFrame(rows))
        assert result.iloc[0]["lab_setups"] == 5

    def test_groups_by_office_and_month(self):
        df = pd.DataFrame([
            weekly_row(1, 2024, 1, lab_setups=4),
            weekly_row(1, 2024, 9, lab_setups=8),
            weekly_row(2, 2024, 1, lab_setups=6),
        ])
        result = summarise_weekly_to_monthly(df)
        assert list(zip(result["office_id"], result["month"])) == [(1, 1), (1, 3), (2, 1)]

    # --- Edge Cases ---

    def test_empty_input(self):
        result = summarise_weekly_to_monthly(pd.DataFrame())
        assert result.empty
        assert list(result.columns) == MONTHLY_VOLUME_COLUMNS

    def test_rounding_helper(self):
        assert round_half_away_from_zero(2.5) == 3
        assert round_half_away_from_zero(-2.5) == -3
        assert round_half_away_from_zero(2.4) == 2


class TestRollupWeeklyVolume:

    def test_writes_monthly_rows(self, seeded_store):
        for week, value in zip(range(1, 5), [10, 20, 30, 40]):
            seeded_store.insert_weekly_volume(weekly_row(1, 2024, week, lab_setups=value))

        written = rollup_weekly_volume(seeded_store)

        assert written == 1
        monthly = seeded_store.get_monthly_volume(1, 2024, 1)
        assert monthly["lab_setups"] == 25
        assert monthly["backlog_in_lab"] == 25

    def test_idempotent(self, seeded_store):
        """Running the rollup twice on unchanged data leaves the same rows."""
        for week in range(1, 10):
            seeded_store.insert_weekly_volume(
                weekly_row(2, 2024, week, lab_setups=week, economy_units=week * 2)
            )

        rollup_weekly_volume(seeded_store)
        first = seeded_store.list_monthly("monthly_volume").drop(columns=["created_at", "updated_at"])
        rollup_weekly_volume(seeded_store)
        second = seeded_store.list_monthly("monthly_volume").drop(columns=["created_at", "updated_at"])

        pd.testing.assert_frame_equal(first, second)

    def test_scoped_to_office(self, seeded_store):
        seeded_store.insert_weekly_volume(weekly_row(1, 2024, 1, lab_setups=1))
        seeded_store.insert_weekly_volume(weekly_row(2, 2024, 1, lab_setups=1))

        assert rollup_weekly_volume(seeded_store, office_id=2) == 1
        assert seeded_store.get_monthly_volume(1, 2024, 1) is None

    def test_no_weekly_data(self, seeded_store):
        assert rollup_weekly_volume(seeded_store) == 0
