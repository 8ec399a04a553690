# grid_scheduler/search/slot_search.py
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, Iterable, Iterator, List, Set, Tuple

from dateutil.rrule import DAILY, FR, MO, TH, TU, WE, rrule

from grid_scheduler.config import AppConfig, DEFAULT_CONFIG, ExplorationWindow
from grid_scheduler.domain.models import CandidateSlot, DateRange, Meeting, attendee_set
from grid_scheduler.domain.timegrid import minutes_to_time, overlaps, time_to_minutes
from grid_scheduler.validation.errors import DurationTooShort, OutsideWorkingHours

logger = logging.getLogger(__name__)

WEEKDAYS = (MO, TU, WE, TH, FR)

Span = Tuple[int, int, Meeting]


def iter_dates(date_range: DateRange, skip_weekends: bool) -> Iterator[date]:
    rule = rrule(
        DAILY,
        dtstart=datetime.combine(date_range.start, datetime.min.time()),
        until=datetime.combine(date_range.end, datetime.min.time()),
        byweekday=WEEKDAYS if skip_weekends else None,
    )
    for dt in rule:
        yield dt.date()


def meetings_by_day(meetings: Iterable[Meeting]) -> Dict[date, List[Span]]:
    by: Dict[date, List[Span]] = {}
    for m in meetings:
        by.setdefault(m.day, []).append((time_to_minutes(m.start_time), time_to_minutes(m.end_time), m))
    for d in by:
        by[d].sort(key=lambda x: (x[0], x[2].id))
    return by


def window_bounds(window: ExplorationWindow, cfg: AppConfig) -> Tuple[int, int]:
    start = time_to_minutes(window.start)
    end = time_to_minutes(window.end)
    if start < time_to_minutes(cfg.working_window.start) or end > time_to_minutes(cfg.working_window.end):
        raise OutsideWorkingHours(
            f"Exploration window {window.label} ({window.start}-{window.end}) "
            f"is outside working hours {cfg.working_window.start}-{cfg.working_window.end}"
        )
    return start, end


def _tight_attendees(
    start: int,
    end: int,
    day_spans: List[Span],
    required: Set[str],
    buffer_minutes: int,
) -> Set[str]:
    """Required attendees with a mandatory meeting less than the buffer away from [start, end)."""
    tight: Set[str] = set()
    for m_start, m_end, m in day_spans:
        near_before = m_end <= start < m_end + buffer_minutes
        near_after = m_start - buffer_minutes < end <= m_start
        if near_before or near_after:
            tight |= required & m.mandatory_attendees
    return tight


def search_candidate_slots(
    duration: int,
    required_attendees: Iterable[str],
    date_range: DateRange,
    meetings: Iterable[Meeting],
    cfg: AppConfig = DEFAULT_CONFIG,
) -> List[CandidateSlot]:
    """
    Ranked shortlist of open slots of `duration` minutes.

    Heuristic, not an optimal solver: each exploration window is scanned in
    `step_minutes` steps and any time overlap with an existing meeting on that
    date disqualifies a slot, whoever attends it. Surviving slots score their
    window's base score, less `buffer_penalty` when a required attendee would
    have no recommended gap to a neighbouring mandatory meeting.
    """
    if duration < cfg.min_duration_minutes:
        raise DurationTooShort(f"Requested duration {duration} is below {cfg.min_duration_minutes} minutes")

    required = set(attendee_set(required_attendees))
    windows = [(w, *window_bounds(w, cfg)) for w in cfg.search.windows]
    by_day = meetings_by_day(meetings)

    slots: List[CandidateSlot] = []
    for d in iter_dates(date_range, cfg.search.skip_weekends):
        day_spans = by_day.get(d, [])

        for window, win_start, win_end in windows:
            for start in range(win_start, win_end, cfg.search.step_minutes):
                end = start + duration
                if end > win_end:
                    break
                if any(overlaps(start, end, s, e) for s, e, _ in day_spans):
                    continue

                score = window.base_score
                reason = window.reason
                tight = _tight_attendees(start, end, day_spans, required, cfg.buffer_minutes)
                if tight:
                    score -= cfg.search.buffer_penalty
                    reason = (
                        f"{reason}; less than {cfg.buffer_minutes} minutes buffer for "
                        f"{', '.join(sorted(tight))}"
                    )

                slots.append(CandidateSlot(
                    day=d,
                    start_time=minutes_to_time(start),
                    end_time=minutes_to_time(end),
                    score=float(max(0, min(100, score))),
                    reason=reason,
                ))

    logger.debug("slot search over %d day(s): %d open slots", date_range.days, len(slots))

    slots.sort(key=lambda s: (-s.score, s.day, time_to_minutes(s.start_time)))
    return slots[:cfg.search.max_candidates]
