"""
Tests for office rankings.

Run: pytest tests/test_rankings.py -v
"""

from labpulse.periods import Window
from labpulse.rankings import RANKING_COLUMNS, get_office_rankings, rankings_to_frame

from .conftest import WriterDuringRead, financial_values


class TestOfficeRankings:

    def test_entries_carry_office_details(self, seeded_store):
        seeded_store.upsert_monthly_financial(2, 2024, 1, **financial_values(revenue=5000.0))

        rankings = get_office_rankings(seeded_store, "revenue", Window.single(2024, 1))

        assert [r["office_id"] for r in rankings] == [1, 2, 3]
        assert rankings[1] == {
            "office_id": 2,
            "office_name": "Birmingham",
            "address": "2 Main St",
            "dfo": "Dana",
            "value": 5000.0,
        }
        assert rankings[0]["value"] is None

    def test_unknown_metric_every_value_none(self, seeded_store):
        seeded_store.upsert_monthly_financial(1, 2024, 1, **financial_values())
        rankings = get_office_rankings(seeded_store, "not_a_metric", Window.single(2024, 1))
        assert len(rankings) == 3
        assert all(r["value"] is None for r in rankings)

    def test_frame_is_unsorted(self, seeded_store):
        """Sorting is left to the consumer."""
        seeded_store.upsert_monthly_financial(1, 2024, 1, **financial_values(revenue=1.0))
        seeded_store.upsert_monthly_financial(3, 2024, 1, **financial_values(revenue=9.0))

        frame = rankings_to_frame(get_office_rankings(seeded_store, "revenue", Window.single(2024, 1)))
        assert list(frame.columns) == RANKING_COLUMNS
        assert list(frame["office_id"]) == [1, 2, 3]


class TestRankingSnapshot:

    def test_writer_waits_until_rankings_return(self, seeded_store):
        """An import started mid-request cannot change the rankings being built."""
        seeded_store.upsert_monthly_financial(1, 2024, 1, **financial_values(revenue=10.0))

        def add_office(store):
            store.upsert_office({"office_id": 4, "office_name": "Savannah", "model": "PO"})
            store.upsert_monthly_financial(4, 2024, 1, **financial_values(revenue=99.0))

        writer = WriterDuringRead(seeded_store, "list_monthly", add_office)
        rankings = get_office_rankings(seeded_store, "revenue", Window.single(2024, 1))

        assert writer.finished_mid_request is False
        assert [(r["office_id"], r["value"]) for r in rankings] == [(1, 10.0), (2, None), (3, None)]
        assert writer.join() is True

    def test_office_added_later_is_ranked_with_its_value(self, seeded_store):
        def add_office(store):
            store.upsert_office({"office_id": 4, "office_name": "Savannah", "model": "PO"})
            store.upsert_monthly_financial(4, 2024, 1, **financial_values(revenue=99.0))

        writer = WriterDuringRead(seeded_store, "list_monthly", add_office)
        get_office_rankings(seeded_store, "revenue", Window.single(2024, 1))
        writer.join()

        rankings = get_office_rankings(seeded_store, "revenue", Window.single(2024, 1))
        assert rankings[-1]["office_id"] == 4
        assert rankings[-1]["value"] == 99.0
