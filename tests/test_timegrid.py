import itertools

import pytest

from grid_scheduler.config import DEFAULT_CONFIG
from grid_scheduler.domain.timegrid import (
    TimeGrid,
    duration_minutes,
    minutes_to_time,
    overlap_minutes,
    overlaps,
    time_ranges_overlap,
    time_to_minutes,
)
from grid_scheduler.validation.errors import InvalidFormat, NonPositiveDuration, OutOfRange, ScheduleError


class TestTimeConversion:
    @pytest.mark.parametrize("value,expected", [
        ("00:00", 0),
        ("08:00", 480),
        ("09:30", 570),
        ("20:00", 1200),
        ("23:59", 1439),
    ])
    def test_time_to_minutes(self, value, expected):
        assert time_to_minutes(value) == expected

    # hours need two ASCII digits
    @pytest.mark.parametrize("value", [
        "", "9:30", "0930", "9h30", "24:00", "12:60", "12:5", "ab:cd", "-1:00", None,
        "\uff10\uff19:\uff13\uff10", "\u0660\u0669:\u0663\u0660",
    ])
    def test_time_to_minutes_rejects_malformed(self, value):
        with pytest.raises(InvalidFormat):
            time_to_minutes(value)

    def test_minutes_to_time(self):
        assert minutes_to_time(0) == "00:00"
        assert minutes_to_time(570) == "09:30"
        assert minutes_to_time(1439) == "23:59"

    @pytest.mark.parametrize("value", [-1, 1440, 5000])
    def test_minutes_to_time_does_not_wrap(self, value):
        with pytest.raises(OutOfRange):
            minutes_to_time(value)

    def test_errors_share_a_base_and_carry_message(self):
        with pytest.raises(ScheduleError) as excinfo:
            time_to_minutes("nope")
        assert "nope" in excinfo.value.message
        assert str(excinfo.value) == excinfo.value.message


class TestOverlap:
    def test_symmetry(self):
        points = [480, 540, 555, 600, 660]
        ranges = [(s, e) for s, e in itertools.product(points, points) if s < e]
        for (a, b), (c, d) in itertools.product(ranges, ranges):
            assert overlaps(a, b, c, d) == overlaps(c, d, a, b)

    def test_touching_endpoints_do_not_overlap(self):
        assert not overlaps(540, 600, 600, 660)
        assert not time_ranges_overlap("09:00", "10:00", "10:00", "11:00")

    def test_containment_overlaps(self):
        assert overlaps(540, 660, 570, 600)
        assert time_ranges_overlap("09:15", "09:45", "09:00", "10:00")

    def test_overlap_minutes(self):
        assert overlap_minutes(540, 600, 570, 630) == 30
        assert overlap_minutes(540, 600, 600, 660) == 0
        assert overlap_minutes(540, 660, 570, 600) == 30


class TestDuration:
    def test_duration(self):
        assert duration_minutes("09:00", "10:30") == 90

    @pytest.mark.parametrize("start,end", [("09:00", "09:00"), ("10:00", "09:00")])
    def test_non_positive(self, start, end):
        with pytest.raises(NonPositiveDuration):
            duration_minutes(start, end)


class TestTimeGrid:
    def setup_method(self, method):
        self.grid = TimeGrid.from_config(DEFAULT_CONFIG)

    def test_rows_cover_window_inclusive(self):
        labels = self.grid.row_labels()
        assert self.grid.rows == 49
        assert labels[0] == "08:00"
        assert labels[-1] == "20:00"
        assert labels[1] == "08:15"

    def test_slot_index(self):
        assert self.grid.slot_index(480) == 0
        assert self.grid.slot_index(570) == 6
        assert self.grid.slot_index(545) == 4
        assert self.grid.slot_index(465) == -1

    def test_end_slot_index_rounds_up(self):
        assert self.grid.end_slot_index(600) == 8
        assert self.grid.end_slot_index(610) == 9
        assert self.grid.end_slot_index(1230) == 50

    def test_slot_to_time(self):
        assert self.grid.slot_to_time(6).strftime("%H:%M") == "09:30"

    def test_window_and_alignment(self):
        assert self.grid.is_within_window(480, 1200)
        assert not self.grid.is_within_window(465, 540)
        assert not self.grid.is_within_window(1140, 1215)
        assert self.grid.is_aligned(555)
        assert not self.grid.is_aligned(545)
