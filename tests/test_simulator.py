"""
Tests for the simulated demo dataset.

Run: pytest tests/test_simulator.py -v
"""

import pandas as pd

from labpulse.dashboard import get_dashboard_summary
from labpulse.periods import Window
from labpulse.simulator import generate_weekly_volume, seed_store


class TestGenerators:

    def test_weekly_volume_reproducible(self):
        first = generate_weekly_volume(2026, 8)
        second = generate_weekly_volume(2026, 8)
        pd.testing.assert_frame_equal(first, second)

    def test_weekly_months_follow_calendar(self):
        weekly = generate_weekly_volume(2026, 13)
        assert set(weekly.loc[weekly["week_number"] == 13, "month"]) == {3}


class TestSeedStore:

    def test_seeds_every_table(self, store):
        counts = seed_store(store, year=2026, n_months=3)

        assert counts["offices"] == 8
        assert counts["weekly_volume"] == 8 * 13
        assert counts["monthly_volume"] == 8 * 3
        assert counts["monthly_ops"] == 8 * 3
        assert counts["submission_compliance"] == 8 * 17
        assert counts["import_log"] == 3

    def test_seeded_store_summarises(self, store):
        seed_store(store, year=2026, n_months=2)
        summaries = get_dashboard_summary(store, Window(2026, 1, 2026, 2))
        assert len(summaries) == 8
        assert all(s["has_volume"] for s in summaries)
        assert all(s["has_operations"] for s in summaries)
        assert all(s["lab_exp_percent"] is None for s in summaries)
