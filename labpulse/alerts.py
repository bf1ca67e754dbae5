"""
Alert and data-status classification for office summaries.
"""

from .config import ALERT_THRESHOLDS


def classify_threshold(
    value: float | None,
    warning: float,
    critical: float,
) -> str | None:
    """Return 'critical', 'warning', or None.

    Logic
    -----
    critical if value > critical
    warning  if value > warning
    None     otherwise, or when value is missing
    """
    if value is None:
        return None
    if value > critical:
        return "critical"
    if value > warning:
        return "warning"
    return None


def _format(value: float, unit: str) -> str:
    if unit == "%":
        return f"{value:.1f}%"
    return f"{value:g} {unit}"


def generate_alerts(summary: dict) -> list[dict]:
    """Alerts for one dashboard summary as [{"severity", "message"}].

    An office with no financial, operations or volume data gets a single
    'info' alert and nothing else.
    """
    if not (summary.get("has_financial") or summary.get("has_operations") or summary.get("has_volume")):
        return [{"severity": "info", "message": "No data entered for this period"}]

    alerts = []
    for field, levels in ALERT_THRESHOLDS.items():
        value = summary.get(field)
        severity = classify_threshold(value, levels["warning"], levels["critical"])
        if severity is None:
            continue
        limit = levels[severity]
        alerts.append({
            "severity": severity,
            "message": (
                f"{levels['label']} at {_format(value, levels['unit'])} "
                f"(>{_format(limit, levels['unit'])} {severity})"
            ),
        })
    return alerts


def get_data_status(summary: dict) -> str:
    """'complete' when financial, operations and volume data are all present,
    'partial' when some are, 'none' otherwise."""
    count = sum(
        bool(summary.get(flag))
        for flag in ("has_financial", "has_operations", "has_volume")
    )
    if count == 3:
        return "complete"
    if count > 0:
        return "partial"
    return "none"
