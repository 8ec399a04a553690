# grid_scheduler/search/alternatives.py
from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta
from typing import Iterable, List

from grid_scheduler.config import AppConfig, DEFAULT_CONFIG
from grid_scheduler.conflicts.detector import HIGH, detect_conflicts
from grid_scheduler.domain.models import CandidateSlot, DateRange, Meeting, Suggestion
from grid_scheduler.domain.timegrid import duration_minutes, minutes_to_time, time_to_minutes
from grid_scheduler.search.slot_search import iter_dates

logger = logging.getLogger(__name__)

RESCHEDULE = "reschedule"
REMOVE_ATTENDEE = "remove_attendee"
SHORTEN_DURATION = "shorten_duration"


def _working_day_slots(meeting: Meeting, day, cfg: AppConfig) -> List[Meeting]:
    """The meeting moved to every grid start on `day` that still ends inside working hours."""
    length = duration_minutes(meeting.start_time, meeting.end_time)
    win_start = time_to_minutes(cfg.working_window.start)
    win_end = time_to_minutes(cfg.working_window.end)
    out: List[Meeting] = []
    for start in range(win_start, win_end, cfg.grid_minutes):
        if start + length > win_end:
            break
        out.append(replace(
            meeting,
            day=day,
            start_time=minutes_to_time(start),
            end_time=minutes_to_time(start + length),
        ))
    return out


def _is_free(moved: Meeting, pool: List[Meeting]) -> bool:
    return not any(c.severity == HIGH for c in detect_conflicts(moved, pool))


def suggest_alternatives(
    meeting: Meeting,
    pool: Iterable[Meeting],
    cfg: AppConfig = DEFAULT_CONFIG,
) -> List[CandidateSlot]:
    """
    Reschedule options for a conflicting meeting, keeping its duration.

    Unlike slot search this only avoids mandatory-attendee clashes. Same-day
    slots score by closeness to the original start; when fewer than
    `min_alternatives` are found the next working days are tried as well.
    """
    pool = [m for m in pool if m.id != meeting.id]
    original = time_to_minutes(meeting.start_time)

    slots: List[CandidateSlot] = []
    for moved in _working_day_slots(meeting, meeting.day, cfg):
        if moved.start_time == meeting.start_time or not _is_free(moved, pool):
            continue
        diff = abs(time_to_minutes(moved.start_time) - original)
        slots.append(CandidateSlot(
            day=moved.day,
            start_time=moved.start_time,
            end_time=moved.end_time,
            score=max(20.0, 100.0 - diff / 5),
            reason=f"Same day, {diff} minutes from the original start",
        ))

    if len(slots) < cfg.search.min_alternatives and cfg.search.lookahead_days > 0:
        following = DateRange(
            start=meeting.day + timedelta(days=1),
            end=meeting.day + timedelta(days=cfg.search.lookahead_days),
        )
        for d in iter_dates(following, cfg.search.skip_weekends):
            offset = (d - meeting.day).days
            found = 0
            for moved in _working_day_slots(meeting, d, cfg):
                if found >= cfg.search.min_alternatives:
                    break
                if not _is_free(moved, pool):
                    continue
                found += 1
                slots.append(CandidateSlot(
                    day=d,
                    start_time=moved.start_time,
                    end_time=moved.end_time,
                    score=float(max(50, 90 - offset * 10)),
                    reason=f"Moved {offset} day(s) later",
                ))

    logger.debug("meeting %s: %d reschedule alternatives", meeting.id, len(slots))
    slots.sort(key=lambda s: (-s.score, s.day, time_to_minutes(s.start_time)))
    return slots[:cfg.search.max_candidates]


def suggest_resolutions(
    meeting: Meeting,
    pool: Iterable[Meeting],
    cfg: AppConfig = DEFAULT_CONFIG,
) -> List[Suggestion]:
    """
    Ways out of the meeting's current conflicts, most feasible first.

    Reschedule options carry their slot score as feasibility. Dropping the
    optional attendees who are busy in a conflicting meeting and trimming a
    long meeting follow at fixed feasibilities. Empty when nothing conflicts.
    """
    pool = list(pool)
    conflicts = detect_conflicts(meeting, pool)
    if not conflicts:
        return []

    out: List[Suggestion] = [
        Suggestion(
            kind=RESCHEDULE,
            description=f"Reschedule to {s.day.isoformat()} {s.start_time}-{s.end_time} ({s.reason})",
            feasibility=s.score,
            slot=s,
        )
        for s in suggest_alternatives(meeting, pool, cfg)
    ]

    busy = frozenset().union(*(meeting.optional_attendees & c.other.all_attendees for c in conflicts))
    if busy:
        out.append(Suggestion(
            kind=REMOVE_ATTENDEE,
            description=f"Remove {len(busy)} optional attendee(s) with conflicts: {', '.join(sorted(busy))}",
            feasibility=cfg.search.remove_optional_score,
            remove_attendees=busy,
        ))

    length = duration_minutes(meeting.start_time, meeting.end_time)
    floor = cfg.search.shorten_floor_minutes
    if length > floor:
        shorter = max(floor, length - cfg.search.shorten_step_minutes)
        out.append(Suggestion(
            kind=SHORTEN_DURATION,
            description=f"Reduce meeting duration by {length - shorter} minutes to {shorter}",
            feasibility=cfg.search.shorten_score,
            new_duration=shorter,
        ))

    # stable sort keeps the reschedule ranking among equal feasibilities
    out.sort(key=lambda s: -s.feasibility)
    logger.debug("meeting %s: %d conflicts, %d suggestions", meeting.id, len(conflicts), len(out))
    return out
