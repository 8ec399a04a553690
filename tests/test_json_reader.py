import json

import pytest

from grid_scheduler.io_layer.json_reader import read_meetings
from grid_scheduler.io_layer.paths import InputPaths

from conftest import MONDAY

RECORDS = [
    {
        "id": 1,
        "date": "2025-09-29",
        "start_time": "09:00",
        "end_time": "10:00",
        "category": "liquor",
        "status": "tentative",
        "title": "Q4 range review",
        "mandatory_attendees": ["Varun Khanna"],
        "all_attendees": ["Varun Khanna", "Ashish Chopra"],
    },
    {
        "id": 2,
        "date": "2025-09-29",
        "start_time": "09:30",
        "end_time": "10:30",
        "category": "pnc",
        "mandatory_attendees": "Payal Lal, Chiragh Oberoi",
        "all_attendees": "Payal Lal, Chiragh Oberoi ,Abhijit Das",
    },
]


def _write(tmp_path, records):
    path = tmp_path / "meetings.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return InputPaths(meetings_file=str(path))


class TestReadMeetings:
    def test_reads_records(self, tmp_path):
        first, second = read_meetings(_write(tmp_path, RECORDS))

        assert first.id == 1
        assert first.day == MONDAY
        assert first.start_time == "09:00"
        assert first.status == "tentative"
        assert first.title == "Q4 range review"
        assert first.mandatory_attendees == frozenset({"Varun Khanna"})
        assert first.optional_attendees == frozenset({"Ashish Chopra"})

        # comma separated cells, missing optional columns
        assert second.mandatory_attendees == frozenset({"Payal Lal", "Chiragh Oberoi"})
        assert second.all_attendees == frozenset({"Payal Lal", "Chiragh Oberoi", "Abhijit Das"})
        assert second.status == "confirmed"
        assert second.title == ""
        assert second.location == ""

    def test_empty_file(self, tmp_path):
        assert read_meetings(_write(tmp_path, [])) == []

    def test_missing_column(self, tmp_path):
        broken = [{k: v for k, v in RECORDS[0].items() if k != "end_time"}]
        with pytest.raises(ValueError, match="end_time"):
            read_meetings(_write(tmp_path, broken))

    def test_bad_date(self, tmp_path):
        broken = [dict(RECORDS[0], date="29/09/2025")]
        with pytest.raises(ValueError, match="date"):
            read_meetings(_write(tmp_path, broken))
