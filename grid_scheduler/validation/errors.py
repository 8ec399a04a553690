# grid_scheduler/validation/errors.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScheduleError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


class InvalidFormat(ScheduleError):
    """Time string is not HH:MM with hours 0-23 and minutes 0-59."""


class OutOfRange(ScheduleError):
    """Minute offset outside 0..1439."""


class NonPositiveDuration(ScheduleError):
    """End time is not strictly after start time."""


class OutsideWorkingHours(ScheduleError):
    pass


class DurationTooShort(ScheduleError):
    pass


class InvalidDateRange(ScheduleError):
    pass


class ValidationError(ScheduleError):
    """Meeting record breaks an integrity rule (attendees, category, status, ids)."""


@dataclass(frozen=True)
class ValidationWarning:
    message: str


@dataclass(frozen=True)
class TimeOutOfGridBounds(ValidationWarning):
    """Meeting drawn outside the visual grid; layout still proceeds."""
    meeting_id: int = -1
