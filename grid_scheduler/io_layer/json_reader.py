# grid_scheduler/io_layer/json_reader.py
from __future__ import annotations

import logging
from typing import List

import pandas as pd
from dateutil import parser as dparser

from grid_scheduler.domain.models import Meeting, attendee_set
from grid_scheduler.io_layer.paths import InputPaths

logger = logging.getLogger(__name__)


def _as_list(value) -> List[str]:
    """Attendee cell: a JSON list, a comma separated string, or empty."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(v) for v in value]
    if isinstance(value, float) and pd.isna(value):
        return []
    return [x for x in str(value).split(",")]


def _optional_str(row, df: pd.DataFrame, column: str, default: str = "") -> str:
    if column not in df.columns:
        return default
    value = row.get(column)
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return default
    return str(value).strip()


def read_meetings(paths: InputPaths) -> List[Meeting]:
    """
    Load meeting records from the JSON export.

    Times are kept as HH:MM strings; validation happens in the engine, so a
    malformed time surfaces later as InvalidFormat. Structural problems (missing
    columns, unparseable dates or ids) raise ValueError here.
    """
    df = pd.read_json(
        paths.meetings_file,
        orient="records",
        dtype=False,
        convert_dates=False,
        keep_default_dates=False,
    )
    if df.empty:
        return []

    for c in paths.required_columns:
        if c not in df.columns:
            raise ValueError(f"{paths.meetings_file}: column {c} is missing")

    out: List[Meeting] = []
    for _, row in df.iterrows():
        try:
            mid = int(row["id"])
        except (TypeError, ValueError):
            raise ValueError(f"{paths.meetings_file}: invalid meeting id {row['id']!r}")
        try:
            day = dparser.isoparse(str(row["date"]).strip()).date()
        except ValueError:
            raise ValueError(f"{paths.meetings_file}: meeting {mid} has invalid date {row['date']!r}")

        out.append(Meeting(
            id=mid,
            day=day,
            start_time=str(row["start_time"]).strip(),
            end_time=str(row["end_time"]).strip(),
            category=str(row["category"]).strip(),
            mandatory_attendees=attendee_set(_as_list(row["mandatory_attendees"])),
            all_attendees=attendee_set(_as_list(row["all_attendees"])),
            status=_optional_str(row, df, paths.status_column, "confirmed"),
            title=_optional_str(row, df, paths.title_column),
            location=_optional_str(row, df, paths.location_column),
        ))

    logger.debug("read %d meetings from %s", len(out), paths.meetings_file)
    return out
