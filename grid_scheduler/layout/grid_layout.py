# grid_scheduler/layout/grid_layout.py
from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from grid_scheduler.config import DEFAULT_CONFIG
from grid_scheduler.domain.models import DayLayout, Meeting, PositionedMeeting
from grid_scheduler.domain.timegrid import TimeGrid, overlaps, time_to_minutes
from grid_scheduler.validation.errors import TimeOutOfGridBounds

logger = logging.getLogger(__name__)


class _DisjointSet:
    def __init__(self, n: int):
        self.parent = list(range(n))
        self.rank = [0] * n

    def find(self, i: int) -> int:
        root = i
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[i] != root:
            self.parent[i], i = root, self.parent[i]
        return root

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return
        if self.rank[ra] < self.rank[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        if self.rank[ra] == self.rank[rb]:
            self.rank[ra] += 1


def layout_day(
    meetings: Iterable[Meeting],
    day: date,
    unit_height: float = 1.0,
    header_offset: float = 0.0,
    grid: Optional[TimeGrid] = None,
) -> DayLayout:
    """
    Place one day's meetings on the 15-minute grid.

    `top`/`height` are grid units scaled by `unit_height` (plus `header_offset`
    for `top`), so the caller decides the pixel mapping. Meetings connected by a
    chain of overlapping grid rows form one cluster and split the column width
    evenly, in (top, id) order. Output keeps the input order and is identical
    across calls.
    """
    grid = grid or TimeGrid.from_config(DEFAULT_CONFIG)
    todays = [m for m in meetings if m.day == day]
    n = len(todays)

    spans = [(time_to_minutes(m.start_time), time_to_minutes(m.end_time)) for m in todays]

    slots: List[Tuple[int, int]] = []
    tops: List[float] = []
    heights: List[float] = []
    warnings: List[TimeOutOfGridBounds] = []
    for m, (start, end) in zip(todays, spans):
        start_slot = grid.slot_index(start)
        end_slot = max(grid.end_slot_index(end), start_slot + 1)
        slots.append((start_slot, end_slot))
        tops.append(start_slot * unit_height + header_offset)
        heights.append((end_slot - start_slot) * unit_height)
        if not grid.is_within_window(start, end):
            w = TimeOutOfGridBounds(
                message=f"Meeting {m.id} ({m.start_time}-{m.end_time}) lies outside the visible grid",
                meeting_id=m.id,
            )
            logger.warning(w.message)
            warnings.append(w)

    order = sorted(range(n), key=lambda i: (tops[i], todays[i].id))

    # connected components over the quantized rows, so separate clusters never share a row
    ds = _DisjointSet(n)
    for a in range(n):
        for b in range(a + 1, n):
            if overlaps(slots[a][0], slots[a][1], slots[b][0], slots[b][1]):
                ds.union(a, b)

    # insertion order follows `order`, so clusters are numbered top-down
    members: Dict[int, List[int]] = {}
    for i in order:
        members.setdefault(ds.find(i), []).append(i)

    positioned: List[Optional[PositionedMeeting]] = [None] * n
    for cluster_id, group in enumerate(members.values()):
        width = 100.0 / len(group)
        for column, i in enumerate(group):
            positioned[i] = PositionedMeeting(
                meeting=todays[i],
                top=tops[i],
                height=heights[i],
                width=width,
                left=column * width,
                cluster_id=cluster_id,
                cluster_size=len(group),
            )

    logger.debug("laid out %d meetings on %s in %d clusters", n, day.isoformat(), len(members))
    return DayLayout(day=day, positioned=[p for p in positioned if p is not None], warnings=warnings)


def layout_days(
    meetings: Iterable[Meeting],
    days: Iterable[date],
    unit_height: float = 1.0,
    header_offset: float = 0.0,
    grid: Optional[TimeGrid] = None,
) -> Dict[date, DayLayout]:
    """Week view: one independent layout per requested date."""
    meetings = list(meetings)
    return {d: layout_day(meetings, d, unit_height, header_offset, grid) for d in days}
