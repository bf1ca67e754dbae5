"""
Tests for alert generation and data status.

Run: pytest tests/test_alerts.py -v
"""

import pytest

from labpulse.alerts import classify_threshold, generate_alerts, get_data_status


def _summary(**overrides):
    summary = {
        "lab_exp_percent": None,
        "personnel_percent": None,
        "backlog_count": None,
        "has_financial": True,
        "has_operations": True,
        "has_volume": True,
    }
    summary.update(overrides)
    return summary


class TestClassifyThreshold:

    @pytest.mark.parametrize("value,expected", [
        (None, None),
        (10.0, None),
        (20.0, None),
        (20.1, "warning"),
        (25.0, "warning"),
        (25.1, "critical"),
    ])
    def test_strictly_above(self, value, expected):
        """Levels trigger only when the value is strictly above them."""
        assert classify_threshold(value, 20.0, 25.0) == expected


class TestGenerateAlerts:

    def test_no_data_is_single_info_alert(self):
        summary = _summary(has_financial=False, has_operations=False, has_volume=False,
                           lab_exp_percent=40.0)
        assert generate_alerts(summary) == [
            {"severity": "info", "message": "No data entered for this period"}
        ]

    def test_lab_expense_critical(self):
        alerts = generate_alerts(_summary(lab_exp_percent=27.0))
        assert alerts == [{"severity": "critical", "message": "Lab expenses at 27.0% (>25.0% critical)"}]

    def test_personnel_warning_and_backlog(self):
        alerts = generate_alerts(_summary(personnel_percent=16.5, backlog_count=120))
        assert [a["severity"] for a in alerts] == ["warning", "critical"]
        assert alerts[1]["message"] == "Backlog at 120 cases (>100 cases critical)"

    def test_within_limits(self):
        assert generate_alerts(_summary(lab_exp_percent=12.0, personnel_percent=10.0,
                                        backlog_count=20)) == []


class TestDataStatus:

    def test_complete(self):
        assert get_data_status(_summary()) == "complete"

    def test_partial(self):
        assert get_data_status(_summary(has_operations=False)) == "partial"

    def test_none(self):
        assert get_data_status(_summary(has_financial=False, has_operations=False,
                                        has_volume=False)) == "none"
