# grid_scheduler/domain/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, FrozenSet, Iterable, List, Optional

from grid_scheduler.validation.errors import InvalidDateRange, TimeOutOfGridBounds


def attendee_set(names: Optional[Iterable[str]]) -> FrozenSet[str]:
    """Normalize an attendee list into a set of stripped, non-empty names."""
    if not names:
        return frozenset()
    return frozenset(n.strip() for n in names if n and n.strip())


@dataclass(frozen=True)
class Meeting:
    """Meeting record as supplied by the storage layer. Never mutated."""
    id: int
    day: date
    start_time: str  # HH:MM
    end_time: str    # HH:MM
    category: str
    mandatory_attendees: FrozenSet[str] = frozenset()
    all_attendees: FrozenSet[str] = frozenset()
    status: str = "confirmed"
    title: str = ""
    location: str = ""

    @property
    def optional_attendees(self) -> FrozenSet[str]:
        return self.all_attendees - self.mandatory_attendees


@dataclass(frozen=True)
class PositionedMeeting:
    """Layout result for one meeting; lifetime is a single layout call."""
    meeting: Meeting
    top: float
    height: float
    width: float   # percent of the day column
    left: float    # percent offset inside the day column
    cluster_id: int
    cluster_size: int


@dataclass(frozen=True)
class DayLayout:
    day: date
    positioned: List[PositionedMeeting]   # input order
    warnings: List[TimeOutOfGridBounds] = field(default_factory=list)

    def by_id(self) -> Dict[int, PositionedMeeting]:
        return {p.meeting.id: p for p in self.positioned}


@dataclass(frozen=True)
class Conflict:
    """Time overlap between `meeting` and `other`, classified by shared mandatory attendees."""
    meeting: Meeting
    other: Meeting
    shared_mandatory: FrozenSet[str]
    severity: str  # "high" | "medium"
    overlap_minutes: int


@dataclass(frozen=True)
class BufferWarning:
    """Advisory: less than the recommended gap between two meetings of a mandatory attendee."""
    meeting: Meeting
    other: Meeting
    attendees: FrozenSet[str]
    gap_minutes: int


@dataclass(frozen=True)
class CandidateSlot:
    day: date
    start_time: str
    end_time: str
    score: float  # 0..100
    reason: str


@dataclass(frozen=True)
class Suggestion:
    """One way out of a conflict. Exactly one of the payload fields is set, per `kind`."""
    kind: str  # "reschedule" | "remove_attendee" | "shorten_duration"
    description: str
    feasibility: float  # 0..100
    slot: Optional[CandidateSlot] = None
    remove_attendees: FrozenSet[str] = frozenset()
    new_duration: Optional[int] = None


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar range."""
    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise InvalidDateRange(
                f"Date range end {self.end.isoformat()} is before start {self.start.isoformat()}"
            )

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1
