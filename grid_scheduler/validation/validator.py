# grid_scheduler/validation/validator.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from grid_scheduler.config import AppConfig, DEFAULT_CONFIG
from grid_scheduler.conflicts.detector import check_buffer_violations, detect_conflicts
from grid_scheduler.domain.models import BufferWarning, Conflict, Meeting
from grid_scheduler.domain.timegrid import TimeGrid, duration_minutes, time_to_minutes
from grid_scheduler.validation.errors import (
    DurationTooShort,
    NonPositiveDuration,
    OutsideWorkingHours,
    ValidationError,
    ValidationWarning,
)

logger = logging.getLogger(__name__)


def validate_meeting_time(
    start_time: str,
    end_time: str,
    cfg: AppConfig = DEFAULT_CONFIG,
    check_window: bool = True,
) -> int:
    """
    Working-hours check applied before conflict detection (meeting creation time).
    Returns the duration in minutes.

    Order: malformed time -> InvalidFormat, start >= end -> NonPositiveDuration,
    outside the working window -> OutsideWorkingHours, below the floor -> DurationTooShort.
    `check_window=False` skips the window check for records that are only drawn.
    """
    start = time_to_minutes(start_time)
    end = time_to_minutes(end_time)
    if start >= end:
        raise NonPositiveDuration(f"End time {end_time} must be after start time {start_time}")

    win_start = time_to_minutes(cfg.working_window.start)
    win_end = time_to_minutes(cfg.working_window.end)
    if check_window and (start < win_start or end > win_end):
        raise OutsideWorkingHours(
            f"Meetings must be scheduled between {cfg.working_window.start} and {cfg.working_window.end}: "
            f"{start_time}-{end_time}"
        )

    minutes = duration_minutes(start_time, end_time)
    if minutes < cfg.min_duration_minutes:
        raise DurationTooShort(
            f"Meeting must last at least {cfg.min_duration_minutes} minutes: {start_time}-{end_time}"
        )
    return minutes


def validate_meeting(
    meeting: Meeting,
    cfg: AppConfig = DEFAULT_CONFIG,
    check_window: bool = True,
) -> List[ValidationWarning]:
    warnings: List[ValidationWarning] = []

    validate_meeting_time(meeting.start_time, meeting.end_time, cfg, check_window)

    if meeting.category not in cfg.categories:
        raise ValidationError(f"Meeting {meeting.id}: unknown category {meeting.category!r}")
    if meeting.status not in cfg.statuses:
        raise ValidationError(f"Meeting {meeting.id}: unknown status {meeting.status!r}")

    # mandatory attendees must also be invited
    stray = meeting.mandatory_attendees - meeting.all_attendees
    if stray:
        raise ValidationError(
            f"Meeting {meeting.id}: mandatory attendees not in attendee list: {', '.join(sorted(stray))}"
        )

    grid = TimeGrid.from_config(cfg)
    for label, value in (("start", meeting.start_time), ("end", meeting.end_time)):
        if not grid.is_aligned(time_to_minutes(value)):
            warnings.append(ValidationWarning(
                f"Meeting {meeting.id}: {label} time {value} is not on the {cfg.grid_minutes}-minute grid"
            ))

    return warnings


def validate_pool(
    meetings: List[Meeting],
    cfg: AppConfig = DEFAULT_CONFIG,
    check_window: bool = True,
) -> List[ValidationWarning]:
    warnings: List[ValidationWarning] = []

    seen: Dict[int, Meeting] = {}
    for m in meetings:
        if m.id in seen:
            raise ValidationError(f"Duplicate meeting id: {m.id}")
        seen[m.id] = m

    for m in meetings:
        warnings.extend(validate_meeting(m, cfg, check_window))

    return warnings


@dataclass(frozen=True)
class RequestCheck:
    conflicts: List[Conflict]
    buffer_warnings: List[BufferWarning]
    warnings: List[ValidationWarning] = field(default_factory=list)

    @property
    def blocking(self) -> bool:
        # only mutual mandatory presence blocks; buffers never do
        return any(c.severity == "high" for c in self.conflicts)


def check_meeting_request(
    candidate: Meeting,
    pool: List[Meeting],
    cfg: AppConfig = DEFAULT_CONFIG,
) -> RequestCheck:
    """Creation-time pipeline: validate the record, then conflicts, then buffer advice."""
    warnings = validate_meeting(candidate, cfg)
    conflicts = detect_conflicts(candidate, pool)
    buffers = check_buffer_violations(candidate, pool, cfg.buffer_minutes)
    for b in buffers:
        warnings.append(ValidationWarning(
            f"Less than {cfg.buffer_minutes} minutes between meeting {candidate.id} and "
            f"meeting {b.other.id} for {', '.join(sorted(b.attendees))}"
        ))

    logger.debug(
        "request check for meeting %s: %d conflicts, %d buffer warnings",
        candidate.id, len(conflicts), len(buffers),
    )
    return RequestCheck(conflicts=conflicts, buffer_warnings=buffers, warnings=warnings)


def summarize(check: RequestCheck) -> Tuple[int, int]:
    """(high, medium) conflict counts."""
    high = sum(1 for c in check.conflicts if c.severity == "high")
    return high, len(check.conflicts) - high
