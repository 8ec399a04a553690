# grid_scheduler/config.py
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class WorkingWindow:
    """Meetings and candidate slots must fall inside this window."""
    start: str = "08:00"
    end: str = "20:00"


@dataclass(frozen=True)
class ExplorationWindow:
    """A time band scanned by slot search, with the score its slots start from."""
    label: str
    start: str
    end: str
    base_score: int
    reason: str


MORNING = ExplorationWindow(
    label="morning",
    start="09:00",
    end="12:00",
    base_score=90,
    reason="Morning slot with good productivity potential",
)
AFTERNOON = ExplorationWindow(
    label="afternoon",
    start="14:00",
    end="17:00",
    base_score=80,
    reason="Afternoon slot with moderate availability",
)


@dataclass(frozen=True)
class SearchConfig:
    windows: Tuple[ExplorationWindow, ...] = (MORNING, AFTERNOON)
    skip_weekends: bool = True
    max_candidates: int = 5
    step_minutes: int = 15
    buffer_penalty: int = 5   # deducted when a required attendee has a tight gap
    lookahead_days: int = 3   # reschedule alternatives: extra days to try
    min_alternatives: int = 3

    # conflict resolutions other than rescheduling
    remove_optional_score: float = 85.0
    shorten_score: float = 70.0
    shorten_step_minutes: int = 15
    shorten_floor_minutes: int = 30


@dataclass(frozen=True)
class AppConfig:
    # 15-minute grid over 08:00-20:00 (49 row labels)
    grid_minutes: int = 15
    working_window: WorkingWindow = WorkingWindow()

    buffer_minutes: int = 10  # advisory only
    min_duration_minutes: int = 15

    categories: Tuple[str, ...] = (
        "liquor", "tobacco", "pnc", "confectionary", "fashion", "destination",
    )
    statuses: Tuple[str, ...] = ("confirmed", "tentative")

    # used by the CLI for the default search range
    timezone_name: str = "Europe/Berlin"

    search: SearchConfig = SearchConfig()


DEFAULT_CONFIG = AppConfig()
