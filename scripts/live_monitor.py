"""
Console live-monitoring loop over the shared record store.

Usage:
    python scripts/live_monitor.py
    python scripts/live_monitor.py --search tower --on-site --interval 5
    python scripts/live_monitor.py --dashboard
"""

from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path


def _setup_django() -> None:
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
    import django

    django.setup()


def _print_table(view, record_filter) -> None:
    rows = view.rows(record_filter)
    print(f"\n[{view.clock.now_utc():%H:%M:%S} UTC] {len(rows)} record(s)")
    if view.controller.last_error:
        print(f"  refresh failed: {view.controller.last_error}")
    for row in rows:
        r = row.record
        flag = "!" if row.suspicious else " "
        print(
            f" {flag} {r.record_id:>6}  {r.subject_name[:22]:<22} "
            f"{r.subject_role.value:<10} {r.location_name[:18]:<18} "
            f"{r.status.value:<11} {row.remaining_text:>8}"
        )


def _print_dashboard(view) -> None:
    from core.time.access_window import format_duration

    stats = view.stats()
    print(f"\n[{view.clock.now_utc():%H:%M:%S} UTC] dashboard")
    if view.controller.last_error:
        print(f"  refresh failed: {view.controller.last_error}")
    print(
        f"  entries today {stats.total_entries_today}  "
        f"staff on site {stats.active_on_site_count}  "
        f"alerts {stats.alert_count}  "
        f"avg visit {format_duration(stats.avg_visit_duration)}"
    )
    for r in view.recent():
        print(f"   {r.subject_name[:22]:<22} {r.location_name[:18]:<18} {r.status.value}")


def _watch(view, interval: float, render) -> None:
    with view:
        try:
            while True:
                time.sleep(interval)
                render()
        except KeyboardInterrupt:
            print("\nstopping")


def run(args: argparse.Namespace) -> None:
    from adapters.django_api import build_dashboard_view, build_live_monitoring_view
    from core.http_api.contracts import parse_role, parse_status
    from projections.premise import RecordFilter

    if args.dashboard:
        view = build_dashboard_view(interval_seconds=args.interval)
        _watch(view, view.poller.interval_seconds, lambda: _print_dashboard(view))
        return

    record_filter = RecordFilter(
        search=args.search,
        location=args.location,
        role=parse_role(args.role),
        status=parse_status(args.status),
        on_site=args.on_site,
    )
    view = build_live_monitoring_view(interval_seconds=args.interval, limit=args.limit)
    _watch(view, view.poller.interval_seconds, lambda: _print_table(view, record_filter))


def main() -> None:
    parser = argparse.ArgumentParser(description="Print the live access table on every poll.")
    parser.add_argument("--search", default="")
    parser.add_argument("--location", default="")
    parser.add_argument("--role", default=None)
    parser.add_argument("--status", default=None)
    parser.add_argument("--on-site", action="store_true")
    parser.add_argument("--interval", type=float, default=None)
    parser.add_argument("--limit", type=int, default=None)
    parser.add_argument("--dashboard", action="store_true",
                        help="print dashboard figures instead of the live table")
    args = parser.parse_args()

    _setup_django()
    run(args)


if __name__ == "__main__":
    main()
