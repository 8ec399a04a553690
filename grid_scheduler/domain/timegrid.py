# grid_scheduler/domain/timegrid.py
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import time
from typing import List

from grid_scheduler.validation.errors import InvalidFormat, NonPositiveDuration, OutOfRange

_HHMM = re.compile(r"^([0-9]{2}):([0-9]{2})$")

MINUTES_PER_DAY = 24 * 60


def time_to_minutes(t: str) -> int:
    """'HH:MM' -> minutes since midnight."""
    m = _HHMM.match(str(t).strip()) if t is not None else None
    if not m:
        raise InvalidFormat(f"Time must be HH:MM: {t!r}")
    hh = int(m.group(1))
    mm = int(m.group(2))
    if not (0 <= hh <= 23 and 0 <= mm <= 59):
        raise InvalidFormat(f"Time out of range: {t!r}")
    return hh * 60 + mm


def minutes_to_time(m: int) -> str:
    # no clamping / wrapping
    if not (0 <= m < MINUTES_PER_DAY):
        raise OutOfRange(f"Minute offset outside a single day: {m}")
    return f"{m // 60:02d}:{m % 60:02d}"


def overlaps(s1: int, e1: int, s2: int, e2: int) -> bool:
    # half-open intervals; touching endpoints do not overlap
    return s1 < e2 and s2 < e1


def time_ranges_overlap(start1: str, end1: str, start2: str, end2: str) -> bool:
    return overlaps(
        time_to_minutes(start1), time_to_minutes(end1),
        time_to_minutes(start2), time_to_minutes(end2),
    )


def overlap_minutes(s1: int, e1: int, s2: int, e2: int) -> int:
    return max(0, min(e1, e2) - max(s1, s2))


def duration_minutes(start: str, end: str) -> int:
    d = time_to_minutes(end) - time_to_minutes(start)
    if d <= 0:
        raise NonPositiveDuration(f"End time {end} must be after start time {start}")
    return d


@dataclass(frozen=True)
class TimeGrid:
    """Fixed-resolution grid (15-minute units) over the working window."""
    day_start_minutes: int = 8 * 60
    day_end_minutes: int = 20 * 60
    unit_minutes: int = 15

    @classmethod
    def from_config(cls, cfg) -> "TimeGrid":
        return cls(
            day_start_minutes=time_to_minutes(cfg.working_window.start),
            day_end_minutes=time_to_minutes(cfg.working_window.end),
            unit_minutes=cfg.grid_minutes,
        )

    @property
    def rows(self) -> int:
        """Row labels including the closing boundary (08:00..20:00 -> 49)."""
        return (self.day_end_minutes - self.day_start_minutes) // self.unit_minutes + 1

    def slot_index(self, minutes: int) -> int:
        """Grid unit containing `minutes`; negative before the window start."""
        return (minutes - self.day_start_minutes) // self.unit_minutes

    def end_slot_index(self, minutes: int) -> int:
        """First grid boundary at or after `minutes`."""
        return -((self.day_start_minutes - minutes) // self.unit_minutes)

    def slot_to_time(self, slot: int) -> time:
        minutes = self.day_start_minutes + slot * self.unit_minutes
        return time(minutes // 60, minutes % 60)

    def row_labels(self) -> List[str]:
        return [minutes_to_time(self.day_start_minutes + i * self.unit_minutes) for i in range(self.rows)]

    def is_within_window(self, start: int, end: int) -> bool:
        return start >= self.day_start_minutes and end <= self.day_end_minutes

    def is_aligned(self, minutes: int) -> bool:
        return (minutes - self.day_start_minutes) % self.unit_minutes == 0
