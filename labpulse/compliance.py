"""
Submission compliance analysis over an office's weekly submitted flags.
"""

import logging
from typing import Callable, Sequence

from .config import RECENT_SUBMISSION_LIMIT
from .store import MetricsStore

logger = logging.getLogger(__name__)


def current_streak(flags: Sequence[bool]) -> int:
    """Consecutive submitted weeks counting back from the most recent."""
    streak = 0
    for submitted in reversed(flags):
        if not submitted:
            break
        streak += 1
    return streak


def longest_streak(flags: Sequence[bool]) -> int:
    """Longest run of consecutive submitted weeks anywhere in the series."""
    longest = 0
    run = 0
    for submitted in flags:
        if submitted:
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return longest


def recent_submissions(
    submissions: Sequence[tuple[int, int, bool]],
    has_volume: Callable[[int, int], bool],
    limit: int = RECENT_SUBMISSION_LIMIT,
) -> list[bool]:
    """Flags of the latest `limit` weeks that have weekly production data,
    oldest first.

    Weeks without corroborating volume data (e.g. flags pre-filled for
    future weeks) are skipped rather than counted.
    """
    recent = []
    for year, week_number, submitted in reversed(submissions):
        if not has_volume(year, week_number):
            continue
        recent.append(submitted)
        if len(recent) >= limit:
            break
    recent.reverse()
    return recent


def analyse_submissions(
    submissions: Sequence[tuple[int, int, bool]],
    has_volume: Callable[[int, int], bool],
    limit: int = RECENT_SUBMISSION_LIMIT,
) -> dict | None:
    """Compliance metrics for one office's chronological submission series.

    Parameters
    ----------
    submissions : (year, week_number, submitted) tuples, oldest first.
    has_volume : Callable(year, week_number) telling whether weekly
                 production data exists for that week.

    Returns
    -------
    Dict with total_weeks, submitted_weeks, compliance_rate, current_streak,
    longest_streak, recent_submissions; None for an empty series.
    """
    if not submissions:
        return None

    flags = [bool(submitted) for _, _, submitted in submissions]
    total_weeks = len(flags)
    submitted_weeks = sum(flags)

    return {
        "total_weeks": total_weeks,
        "submitted_weeks": submitted_weeks,
        "compliance_rate": (submitted_weeks / total_weeks) * 100,
        "current_streak": current_streak(flags),
        "longest_streak": longest_streak(flags),
        "recent_submissions": recent_submissions(submissions, has_volume, limit),
    }


def get_compliance_report(store: MetricsStore) -> list[dict]:
    """Compliance metrics for every office with a submission history.

    Offices with no submissions are left out. Output is in office_id order;
    each entry also carries office_id, office_name and dfo.
    """
    report = []
    with store.exclusive():
        for office in sorted(store.list_offices(), key=lambda o: o["office_id"]):
            office_id = office["office_id"]
            submissions = store.list_submission_compliance(office_id)

            metrics = analyse_submissions(
                submissions,
                lambda year, week, oid=office_id: store.has_weekly_volume(oid, year, week),
            )
            if metrics is None:
                continue

            report.append({
                "office_id": office_id,
                "office_name": office.get("office_name"),
                "dfo": office.get("dfo"),
                **metrics,
            })

    logger.info("Built compliance report for %d offices", len(report))
    return report
