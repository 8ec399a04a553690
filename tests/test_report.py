import pytest

from grid_scheduler.domain.models import CandidateSlot, Suggestion
from grid_scheduler.layout.grid_layout import layout_day
from grid_scheduler.reporting.report import (
    build_attendee_summary,
    build_conflict_table,
    build_layout_table,
    build_meeting_table,
    build_overview,
    build_slot_table,
    build_suggestion_table,
)

from conftest import MONDAY, SUNDAY, build_meeting


class TestReports:
    def test_meeting_table_sorted_by_time(self, scenario):
        df = build_meeting_table(list(scenario))
        assert list(df["id"]) == [1, 3, 2]
        row = df[df["id"] == 1].iloc[0]
        assert row["mandatory"] == "Alice"
        assert row["optional"] == "Varun Khanna"
        assert row["duration_min"] == 60

    def test_conflict_table(self, scenario):
        df = build_conflict_table(list(scenario))
        assert len(df) == 3
        high = df[df["severity"] == "high"]
        assert len(high) == 1
        assert high.iloc[0]["shared_mandatory"] == "Alice"
        assert high.iloc[0]["overlap_min"] == 30

    def test_attendee_summary(self, scenario):
        df = build_attendee_summary(list(scenario)).set_index("attendee")
        assert df.loc["Alice", "total_meetings"] == 3
        assert df.loc["Alice", "mandatory_meetings"] == 2
        assert df.loc["Alice", "high_conflicts"] == 1
        assert df.loc["Bob", "high_conflicts"] == 0
        assert df.index[0] == "Alice"

    def test_overview(self, scenario):
        row = build_overview(list(scenario)).iloc[0]
        assert row["meetings"] == 3
        assert row["confirmed"] == 2
        assert row["tentative"] == 1
        assert row["conflict_rate"] == pytest.approx(0.6667)
        assert row["peak_hour"] == "09:00-10:00"
        assert row["avg_mandatory"] == 1.0

    def test_empty_inputs(self):
        assert build_meeting_table([]).empty
        assert build_conflict_table([]).empty
        assert build_attendee_summary([]).empty
        row = build_overview([]).iloc[0]
        assert row["meetings"] == 0
        assert row["conflict_rate"] == 0.0
        assert row["peak_hour"] == ""

    def test_layout_table(self, scenario):
        late = build_meeting(4, "19:30", "20:30", day=SUNDAY)
        df = build_layout_table(layout_day(list(scenario) + [late], SUNDAY)).set_index("id")
        assert df.loc[1, "width"] == 33.33
        assert df.loc[2, "left"] == 66.67
        assert bool(df.loc[4, "out_of_grid"])
        assert not bool(df.loc[1, "out_of_grid"])

    def test_slot_table(self):
        slots = [CandidateSlot(MONDAY, "09:00", "10:00", 90.0, "Morning slot")]
        df = build_slot_table(slots)
        assert list(df.columns) == ["meeting_date", "start_time", "end_time", "score", "reason"]
        assert df.iloc[0]["meeting_date"] == "2025-09-29"
        assert build_slot_table([]).empty

    def test_suggestion_table(self):
        suggestions = [
            Suggestion("remove_attendee", "Remove 1 optional attendee(s) with conflicts: Dana", 85.0,
                       remove_attendees=frozenset({"Dana"})),
            Suggestion("shorten_duration", "Reduce meeting duration by 15 minutes to 45", 70.0, new_duration=45),
        ]
        df = build_suggestion_table(suggestions)
        assert list(df.columns) == ["kind", "feasibility", "description"]
        assert list(df["kind"]) == ["remove_attendee", "shorten_duration"]
        assert build_suggestion_table([]).empty
