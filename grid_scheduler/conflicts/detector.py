# grid_scheduler/conflicts/detector.py
from __future__ import annotations

import logging
from typing import Iterable, List, Set

from grid_scheduler.domain.models import BufferWarning, Conflict, Meeting
from grid_scheduler.domain.timegrid import overlap_minutes, overlaps, time_to_minutes

logger = logging.getLogger(__name__)

HIGH = "high"
MEDIUM = "medium"
LOW = "low"

_SEVERITY_RANK = {LOW: 0, MEDIUM: 1, HIGH: 2}


def _span(m: Meeting):
    return time_to_minutes(m.start_time), time_to_minutes(m.end_time)


def classify(shared_mandatory: Iterable[str]) -> str:
    # only the time overlap and the mandatory intersection matter
    return HIGH if shared_mandatory else MEDIUM


def detect_conflicts(candidate: Meeting, pool: Iterable[Meeting]) -> List[Conflict]:
    """
    Conflicts of `candidate` against same-day meetings of `pool` (itself excluded).

    Every time overlap produces an entry: "high" when the two meetings share a
    mandatory attendee, "medium" otherwise. A mandatory attendee who is merely
    optional on the other side does not count as shared.
    """
    c_start, c_end = _span(candidate)

    others = [m for m in pool if m.day == candidate.day and m.id != candidate.id]
    others.sort(key=lambda m: (time_to_minutes(m.start_time), m.id))

    out: List[Conflict] = []
    for other in others:
        o_start, o_end = _span(other)
        if not overlaps(c_start, c_end, o_start, o_end):
            continue
        shared = candidate.mandatory_attendees & other.mandatory_attendees
        out.append(Conflict(
            meeting=candidate,
            other=other,
            shared_mandatory=frozenset(shared),
            severity=classify(shared),
            overlap_minutes=overlap_minutes(c_start, c_end, o_start, o_end),
        ))
    return out


def find_all_conflicts(meetings: Iterable[Meeting]) -> List[Conflict]:
    """Every conflicting pair in the set, reported once (earlier meeting first)."""
    ordered = sorted(meetings, key=lambda m: (m.day, time_to_minutes(m.start_time), m.id))
    spans = [_span(m) for m in ordered]

    out: List[Conflict] = []
    for i, a in enumerate(ordered):
        a_start, a_end = spans[i]
        for j in range(i + 1, len(ordered)):
            b = ordered[j]
            if b.day != a.day:
                break
            b_start, b_end = spans[j]
            if b_start >= a_end:
                # sorted by start: nothing later can overlap `a`
                break
            shared = a.mandatory_attendees & b.mandatory_attendees
            out.append(Conflict(
                meeting=a,
                other=b,
                shared_mandatory=frozenset(shared),
                severity=classify(shared),
                overlap_minutes=overlap_minutes(a_start, a_end, b_start, b_end),
            ))
    logger.debug("found %d conflicting pairs among %d meetings", len(out), len(ordered))
    return out


def overall_severity(conflicts: Iterable[Conflict]) -> str:
    worst = LOW
    for c in conflicts:
        if _SEVERITY_RANK[c.severity] > _SEVERITY_RANK[worst]:
            worst = c.severity
    return worst


def conflict_rate(meetings: Iterable[Meeting]) -> float:
    """Fraction of meetings with at least one high conflict inside the set (reporting only)."""
    meetings = list(meetings)
    if not meetings:
        return 0.0
    involved: Set[int] = set()
    for c in find_all_conflicts(meetings):
        if c.severity == HIGH:
            involved.add(c.meeting.id)
            involved.add(c.other.id)
    return len(involved) / len(meetings)


def check_buffer_violations(
    candidate: Meeting,
    pool: Iterable[Meeting],
    buffer_minutes: int = 10,
) -> List[BufferWarning]:
    """
    Advisory check: same-day meetings sharing a mandatory attendee that sit less
    than `buffer_minutes` before or after the candidate without overlapping it.
    Callers may warn on these but must not block on them.
    """
    c_start, c_end = _span(candidate)
    out: List[BufferWarning] = []
    for other in pool:
        if other.day != candidate.day or other.id == candidate.id:
            continue
        shared = candidate.mandatory_attendees & other.mandatory_attendees
        if not shared:
            continue
        o_start, o_end = _span(other)
        if c_end + buffer_minutes > o_start and c_end <= o_start:
            gap = o_start - c_end
        elif o_end + buffer_minutes > c_start and o_end <= c_start:
            gap = c_start - o_end
        else:
            continue
        out.append(BufferWarning(meeting=candidate, other=other, attendees=frozenset(shared), gap_minutes=gap))
    out.sort(key=lambda b: (time_to_minutes(b.other.start_time), b.other.id))
    return out
