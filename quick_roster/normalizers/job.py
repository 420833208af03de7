from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from quick_roster.models.raw_table import RawRow
from quick_roster.models.records import Job

from .common import FieldReader, ValidationError, as_raw_row
from .timeparse import parse_datetime

_NUMERIC = re.compile(r"^-?\d+(\.\d+)?$")


def _minutes_between(start: datetime, end: datetime) -> int:
    # half-up rounding of whole minutes
    return int(math.floor((end - start).total_seconds() / 60 + 0.5))


class JobRowParser:
    """Raw job row -> Job.

    entry_time/exit_time are required, entry must be strictly before exit,
    and an optional start_time must fall inside [entry_time, exit_time].
    """

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self.reader = FieldReader(mapping)

    def parse_row(self, row: RawRow | Mapping[str, Any]) -> Job:
        row = as_raw_row(row)
        read = self.reader

        entry_raw = read.raw(row, "entry_time")
        exit_raw = read.raw(row, "exit_time")
        if read.text(row, "entry_time") is None or read.text(row, "exit_time") is None:
            missing = "entry_time" if read.text(row, "entry_time") is None else "exit_time"
            raise ValidationError("Entry time and exit time are required", field=missing)

        entry_time = parse_datetime(entry_raw)
        exit_time = parse_datetime(exit_raw)
        if entry_time is None or exit_time is None:
            bad = "entry_time" if entry_time is None else "exit_time"
            raise ValidationError("Invalid date/time format", field=bad)

        if entry_time >= exit_time:
            raise ValidationError("Entry time must be before exit time", field="entry_time")

        duration = self._duration(row)
        if duration is None:
            duration = _minutes_between(entry_time, exit_time)

        return Job(
            entry_time=entry_time,
            exit_time=exit_time,
            duration_min=duration,
            start_time=self._start_time(row, entry_time, exit_time),
            operative_type=read.text(row, "operative_type"),
            client=read.text(row, "client"),
            location=read.text(row, "location"),
            operative=read.text(row, "operative"),
        )

    def _duration(self, row: RawRow) -> int | None:
        raw = self.reader.raw(row, "duration_min")
        if isinstance(raw, bool):
            return None
        if isinstance(raw, int):
            return raw
        if isinstance(raw, float):
            return int(math.floor(raw + 0.5))
        text = self.reader.text(row, "duration_min")
        if text is not None and _NUMERIC.match(text):
            return int(math.floor(float(text) + 0.5))
        return None

    def _start_time(self, row: RawRow, entry_time: datetime, exit_time: datetime) -> datetime | None:
        if self.reader.text(row, "start_time") is None:
            return None
        start_time = parse_datetime(self.reader.raw(row, "start_time"))
        if start_time is None:
            raise ValidationError("Invalid start time format", field="start_time")
        if start_time < entry_time or start_time > exit_time:
            raise ValidationError("Start time must be between entry and exit time", field="start_time")
        return start_time
