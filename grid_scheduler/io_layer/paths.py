# grid_scheduler/io_layer/paths.py
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class InputPaths:
    """
    meetings_file: JSON array of meeting records exported by the storage layer
    """
    meetings_file: str

    # column names (change here only if the export format changes)
    required_columns: Tuple[str, ...] = (
        "id", "date", "start_time", "end_time", "category",
        "mandatory_attendees", "all_attendees",
    )
    status_column: str = "status"
    title_column: str = "title"
    location_column: str = "location"
