from datetime import date

import pytest

from grid_scheduler.domain.models import Meeting

MONDAY = date(2025, 9, 29)
SUNDAY = date(2025, 9, 28)


def build_meeting(
    mid,
    start,
    end,
    mandatory=(),
    optional=(),
    day=MONDAY,
    category="liquor",
    status="confirmed",
):
    mandatory = frozenset(mandatory)
    return Meeting(
        id=mid,
        day=day,
        start_time=start,
        end_time=end,
        category=category,
        mandatory_attendees=mandatory,
        all_attendees=mandatory | frozenset(optional),
        status=status,
    )


@pytest.fixture
def make_meeting():
    return build_meeting


@pytest.fixture
def scenario():
    """A(09:00-10:00, Alice), B(09:30-10:30, Alice), C(09:15-09:45, Bob) on 2025-09-28."""
    a = build_meeting(1, "09:00", "10:00", ["Alice"], ["Varun Khanna"], day=SUNDAY)
    b = build_meeting(2, "09:30", "10:30", ["Alice"], day=SUNDAY, category="tobacco")
    c = build_meeting(3, "09:15", "09:45", ["Bob"], ["Alice"], day=SUNDAY, status="tentative")
    return a, b, c
