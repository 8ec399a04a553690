# main_cli.py
from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from datetime import datetime, timedelta

from dateutil import parser as dparser
from dateutil import tz

from grid_scheduler.config import DEFAULT_CONFIG
from grid_scheduler.domain.models import DateRange
from grid_scheduler.io_layer.json_reader import read_meetings
from grid_scheduler.io_layer.paths import InputPaths
from grid_scheduler.layout.grid_layout import layout_day
from grid_scheduler.reporting.report import (
    build_attendee_summary,
    build_conflict_table,
    build_layout_table,
    build_overview,
    build_slot_table,
    build_suggestion_table,
)
from grid_scheduler.search.alternatives import suggest_resolutions
from grid_scheduler.search.slot_search import search_candidate_slots
from grid_scheduler.validation.errors import ScheduleError
from grid_scheduler.validation.validator import check_meeting_request, summarize, validate_pool


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Meeting grid layout, conflict detection and slot search")
    p.add_argument("--meetings", required=True, help="meeting records (JSON array)")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    lay = sub.add_parser("layout", help="lay out one day on the 15-minute grid")
    lay.add_argument("--date", required=True, help="YYYY-MM-DD")
    lay.add_argument("--unit-height", type=float, default=1.0, help="height of one grid unit")
    lay.add_argument("--header-offset", type=float, default=0.0, help="offset added to every top")

    con = sub.add_parser("conflicts", help="conflicts and resolution suggestions for one meeting")
    con.add_argument("--meeting-id", type=int, required=True)

    sug = sub.add_parser("suggest", help="search open slots")
    sug.add_argument("--duration", type=int, required=True, help="minutes")
    sug.add_argument("--attendees", nargs="*", default=[], help="required attendees")
    sug.add_argument("--start", help="first date (default: today)")
    sug.add_argument("--end", help="last date (default: start + 6 days)")
    sug.add_argument("--include-weekends", action="store_true")
    sug.add_argument("--max", type=int, default=DEFAULT_CONFIG.search.max_candidates, help="max slots")

    sub.add_parser("report", help="overview, conflicts and attendee load")
    return p.parse_args(argv)


def _parse_day(value: str):
    return dparser.isoparse(value).date()


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    cfg = DEFAULT_CONFIG

    try:
        meetings = read_meetings(InputPaths(meetings_file=args.meetings))
    except (OSError, ValueError) as e:
        print(f"[ERROR] {e}")
        return 1

    try:
        # out-of-window records are still drawn; the layout flags them
        warnings = validate_pool(meetings, cfg, check_window=args.command != "layout")
        for w in warnings:
            print(f"[WARN] {w.message}")
    except ScheduleError as e:
        print(f"[ERROR] {e.message}")
        return 1

    try:
        if args.command == "layout":
            layout = layout_day(meetings, _parse_day(args.date), args.unit_height, args.header_offset)
            for w in layout.warnings:
                print(f"[WARN] {w.message}")
            df = build_layout_table(layout)
            print("(no meetings)" if df.empty else df.to_string(index=False))
            return 0

        if args.command == "conflicts":
            target = next((m for m in meetings if m.id == args.meeting_id), None)
            if target is None:
                print(f"[ERROR] Meeting {args.meeting_id} not found")
                return 1
            check = check_meeting_request(target, meetings, cfg)
            high, medium = summarize(check)
            print(f"[RESULT] meeting {target.id}: {high} high, {medium} medium")
            for c in check.conflicts:
                shared = ", ".join(sorted(c.shared_mandatory)) or "-"
                print(f"  {c.severity:<6} #{c.other.id} {c.other.start_time}-{c.other.end_time} "
                      f"overlap={c.overlap_minutes}min shared={shared}")
            for w in check.warnings:
                print(f"[WARN] {w.message}")
            if check.conflicts:
                suggestions = build_suggestion_table(suggest_resolutions(target, meetings, cfg))
                if not suggestions.empty:
                    print(suggestions.to_string(index=False))
            return 0

        if args.command == "suggest":
            if args.start:
                start = _parse_day(args.start)
            else:
                start = datetime.now(tz=tz.gettz(cfg.timezone_name)).date()
            end = _parse_day(args.end) if args.end else start + timedelta(days=6)
            search_cfg = replace(
                cfg,
                search=replace(cfg.search, skip_weekends=not args.include_weekends, max_candidates=args.max),
            )
            slots = search_candidate_slots(
                args.duration, args.attendees, DateRange(start=start, end=end), meetings, search_cfg
            )
            if not slots:
                print("[RESULT] no open slots found")
                return 2
            print(build_slot_table(slots).to_string(index=False))
            return 0

        # report
        print(build_overview(meetings).to_string(index=False))
        conflicts = build_conflict_table(meetings)
        print()
        print("(no conflicts)" if conflicts.empty else conflicts.to_string(index=False))
        print()
        attendees = build_attendee_summary(meetings)
        print("(no attendees)" if attendees.empty else attendees.to_string(index=False))
        return 0
    except ScheduleError as e:
        print(f"[ERROR] {e.message}")
        return 1
    except ValueError as e:
        # bad --date / --start / --end
        print(f"[ERROR] {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
