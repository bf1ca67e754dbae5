"""
LabPulse: end-to-end metrics pipeline.

Opens the store, optionally seeds it with simulated data or recomputes the
monthly volume rollup, and prints dashboard-ready outputs for a window.

Usage:
    python main.py --demo
    python main.py --year 2026 --month 3 --end-month 6
    python main.py --rollup
"""

import argparse
import logging

from labpulse.alerts import generate_alerts, get_data_status
from labpulse.compliance import get_compliance_report
from labpulse.config import DATABASE_URL, LOG_LEVEL
from labpulse.dashboard import get_available_periods, get_dashboard_summary, summaries_to_frame
from labpulse.errors import LabPulseError
from labpulse.metrics import available_metrics
from labpulse.periods import Window
from labpulse.rankings import get_office_rankings, rankings_to_frame
from labpulse.rollup import rollup_weekly_volume
from labpulse.simulator import seed_store
from labpulse.store import SqlStore

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the LabPulse metrics pipeline.")
    parser.add_argument("--database-url", default=DATABASE_URL)
    parser.add_argument("--demo", action="store_true",
                        help="Use an in-memory store seeded with simulated data")
    parser.add_argument("--year", type=int, help="Window start year (default: latest period)")
    parser.add_argument("--month", type=int, help="Window start month (default: latest period)")
    parser.add_argument("--end-year", type=int, help="Window end year (default: start year)")
    parser.add_argument("--end-month", type=int, help="Window end month (default: start month)")
    parser.add_argument("--metric", default="revenue", choices=available_metrics())
    parser.add_argument("--rollup", action="store_true",
                        help="Recompute monthly volume from weekly data before reporting "
                             "(overwrites directly entered monthly volume)")
    return parser.parse_args(argv)


def _resolve_window(args: argparse.Namespace, periods: list[tuple[int, int]]) -> Window | None:
    if args.year is not None and args.month is not None:
        start_year, start_month = args.year, args.month
    elif periods:
        start_year, start_month = periods[0]
    else:
        return None
    end_year = args.end_year if args.end_year is not None else start_year
    end_month = args.end_month if args.end_month is not None else start_month
    return Window(start_year, start_month, end_year, end_month)


def main(argv=None) -> None:
    """Run the pipeline and print dashboard outputs."""
    args = parse_args(argv)

    print("=" * 70)
    print("  LABPULSE: Dental Lab Metrics Dashboard")
    print("  Metrics Pipeline")
    print("=" * 70)
    print()

    # ------------------------------------------------------------------
    # 1. Open store
    # ------------------------------------------------------------------
    print("[ 1 ] OPENING STORE")
    print("-" * 40)

    store = SqlStore("sqlite://" if args.demo else args.database_url)
    if args.demo:
        counts = seed_store(store)
        print(f"\nSeeded simulated data: {counts}")

    # ------------------------------------------------------------------
    # 2. Rollup
    # ------------------------------------------------------------------
    print("\n")
    print("[ 2 ] WEEKLY TO MONTHLY ROLLUP")
    print("-" * 40)

    if args.rollup:
        written = rollup_weekly_volume(store)
        print(f"\nmonthly_volume rows recomputed: {written}")
    else:
        print("\nSkipped (monthly volume is recomputed on weekly import; pass --rollup to force)")

    periods = get_available_periods(store)
    print(f"Available periods: {[f'{y}-{m:02d}' for y, m in periods]}")

    try:
        window = _resolve_window(args, periods)
    except LabPulseError as e:
        logger.error("Invalid window: %s", e)
        raise SystemExit(2) from e

    if window is None:
        print("\nNo data in store; nothing to report.")
        store.dispose()
        return

    # ------------------------------------------------------------------
    # 3. Dashboard outputs
    # ------------------------------------------------------------------
    print("\n")
    print(f"[ 3 ] DASHBOARD OUTPUTS: {window}")
    print("-" * 40)

    summaries = get_dashboard_summary(store, window)
    frame = summaries_to_frame(summaries)
    print(f"\nOffice summaries: {len(frame)} offices")
    if not frame.empty:
        print(frame[[
            "office_id", "office_name", "revenue", "lab_exp_percent",
            "personnel_percent", "backlog_count", "has_financial", "has_volume",
        ]].to_string(index=False))

    print("\nAlerts:")
    for summary in summaries:
        status = get_data_status(summary)
        for alert in generate_alerts(summary):
            print(f"  {summary['office_id']:>5} | {status:8s} | {alert['severity']:8s} | {alert['message']}")

    print(f"\nRankings by {args.metric}:")
    rankings = rankings_to_frame(get_office_rankings(store, args.metric, window))
    if not rankings.empty:
        print(rankings.sort_values("value", ascending=False, na_position="last").to_string(index=False))

    # ------------------------------------------------------------------
    # 4. Compliance
    # ------------------------------------------------------------------
    print("\n")
    print("[ 4 ] SUBMISSION COMPLIANCE")
    print("-" * 40)

    for entry in get_compliance_report(store):
        recent = "".join("Y" if flag else "." for flag in entry["recent_submissions"])
        print(
            f"  {entry['office_id']:>5} | {entry['office_name'] or '':20s} | "
            f"{entry['submitted_weeks']:>3}/{entry['total_weeks']:<3} "
            f"({entry['compliance_rate']:5.1f}%) | streak {entry['current_streak']:>2} "
            f"(best {entry['longest_streak']:>2}) | {recent}"
        )

    store.dispose()
    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)


if __name__ == "__main__":
    main()
