# grid_scheduler/reporting/report.py
from __future__ import annotations

from typing import Dict, List

import pandas as pd

from grid_scheduler.conflicts.detector import HIGH, conflict_rate, find_all_conflicts
from grid_scheduler.domain.models import CandidateSlot, DayLayout, Meeting, Suggestion
from grid_scheduler.domain.timegrid import duration_minutes, time_to_minutes


def _names(names) -> str:
    return ", ".join(sorted(names))


def build_meeting_table(meetings: List[Meeting]) -> pd.DataFrame:
    rows = []
    for m in meetings:
        rows.append(dict(
            id=m.id,
            meeting_date=m.day.isoformat(),
            start_time=m.start_time,
            end_time=m.end_time,
            duration_min=duration_minutes(m.start_time, m.end_time),
            category=m.category,
            status=m.status,
            title=m.title,
            mandatory=_names(m.mandatory_attendees),
            optional=_names(m.optional_attendees),
        ))
    df = pd.DataFrame(rows)
    if not df.empty:
        df = df.sort_values(["meeting_date", "start_time", "id"]).reset_index(drop=True)
    return df


def build_layout_table(layout: DayLayout) -> pd.DataFrame:
    out_of_grid = {w.meeting_id for w in layout.warnings}
    rows = []
    for p in layout.positioned:
        rows.append(dict(
            id=p.meeting.id,
            start_time=p.meeting.start_time,
            end_time=p.meeting.end_time,
            category=p.meeting.category,
            top=p.top,
            height=p.height,
            left=round(p.left, 2),
            width=round(p.width, 2),
            cluster=p.cluster_id,
            cluster_size=p.cluster_size,
            out_of_grid=p.meeting.id in out_of_grid,
        ))
    return pd.DataFrame(rows)


def build_conflict_table(meetings: List[Meeting]) -> pd.DataFrame:
    rows = []
    for c in find_all_conflicts(meetings):
        rows.append(dict(
            meeting_date=c.meeting.day.isoformat(),
            meeting_id=c.meeting.id,
            meeting_time=f"{c.meeting.start_time}-{c.meeting.end_time}",
            other_id=c.other.id,
            other_time=f"{c.other.start_time}-{c.other.end_time}",
            severity=c.severity,
            overlap_min=c.overlap_minutes,
            shared_mandatory=_names(c.shared_mandatory),
        ))
    return pd.DataFrame(rows)


def build_attendee_summary(meetings: List[Meeting]) -> pd.DataFrame:
    counts: Dict[str, Dict[str, int]] = {}

    def entry(name: str) -> Dict[str, int]:
        return counts.setdefault(name, dict(total=0, mandatory=0, high_conflicts=0))

    for m in meetings:
        for name in m.all_attendees | m.mandatory_attendees:
            d = entry(name)
            d["total"] += 1
            if name in m.mandatory_attendees:
                d["mandatory"] += 1

    for c in find_all_conflicts(meetings):
        if c.severity != HIGH:
            continue
        for name in c.shared_mandatory:
            entry(name)["high_conflicts"] += 1

    rows = []
    for name, d in counts.items():
        rows.append(dict(
            attendee=name,
            total_meetings=d["total"],
            mandatory_meetings=d["mandatory"],
            high_conflicts=d["high_conflicts"],
        ))
    df = pd.DataFrame(rows, columns=["attendee", "total_meetings", "mandatory_meetings", "high_conflicts"])
    if not df.empty:
        df = df.sort_values(["total_meetings", "attendee"], ascending=[False, True]).reset_index(drop=True)
    return df


def build_slot_table(slots: List[CandidateSlot]) -> pd.DataFrame:
    rows = [dict(
        meeting_date=s.day.isoformat(),
        start_time=s.start_time,
        end_time=s.end_time,
        score=round(s.score, 1),
        reason=s.reason,
    ) for s in slots]
    return pd.DataFrame(rows, columns=["meeting_date", "start_time", "end_time", "score", "reason"])


def build_suggestion_table(suggestions: List[Suggestion]) -> pd.DataFrame:
    rows = [dict(
        kind=s.kind,
        feasibility=round(s.feasibility, 1),
        description=s.description,
    ) for s in suggestions]
    return pd.DataFrame(rows, columns=["kind", "feasibility", "description"])


def _peak_hour(meetings: List[Meeting]) -> str:
    if not meetings:
        return ""
    hours = pd.Series([time_to_minutes(m.start_time) // 60 for m in meetings])
    counts = hours.value_counts()
    # earliest hour wins a tie
    peak = int(counts[counts == counts.max()].index.min())
    return f"{peak:02d}:00-{peak + 1:02d}:00"


def build_overview(meetings: List[Meeting]) -> pd.DataFrame:
    n = len(meetings)
    row = dict(
        meetings=n,
        confirmed=sum(1 for m in meetings if m.status == "confirmed"),
        tentative=sum(1 for m in meetings if m.status == "tentative"),
        conflict_rate=round(conflict_rate(meetings), 4),
        peak_hour=_peak_hour(meetings),
        avg_mandatory=round(sum(len(m.mandatory_attendees) for m in meetings) / n, 2) if n else 0.0,
    )
    return pd.DataFrame([row])
