from __future__ import annotations

from datetime import date, datetime, time

import pytest

from quick_roster.models.raw_table import RawRow
from quick_roster.normalizers import JobRowParser, ValidationError

MAPPING = {
    "entry_time": "Entry",
    "exit_time": "Exit",
    "duration_min": "Duration",
    "start_time": "Start",
    "client": "Client",
    "location": "Location",
    "operative": "Operative",
    "operative_type": "Type",
}


def _row(**overrides) -> RawRow:
    cells = {
        "Entry": "2024-03-01 09:00",
        "Exit": "2024-03-01 10:30",
        "Duration": "",
        "Start": "",
        "Client": "Acme",
        "Location": "1 Main St",
        "Operative": "Ann Smith",
        "Type": "Cleaner",
    }
    cells.update(overrides)
    return RawRow(cells)


def test_parse_row_computes_duration():
    job = JobRowParser(MAPPING).parse_row(_row())
    assert job.entry_time == datetime(2024, 3, 1, 9, 0)
    assert job.exit_time == datetime(2024, 3, 1, 10, 30)
    assert job.duration_min == 90
    assert job.start_time is None
    assert job.client == "Acme"
    assert job.location == "1 Main St"
    assert job.operative == "Ann Smith"
    assert job.operative_type == "Cleaner"


def test_entry_must_be_before_exit():
    parser = JobRowParser(MAPPING)
    with pytest.raises(ValidationError, match="Entry time must be before exit time"):
        parser.parse_row(_row(Entry="2024-03-01 09:00", Exit="2024-03-01 08:00"))
    with pytest.raises(ValidationError, match="Entry time must be before exit time"):
        parser.parse_row(_row(Entry="2024-03-01 09:00", Exit="2024-03-01 09:00"))


@pytest.mark.parametrize("entry,exit_", [("", "2024-03-01 10:00"), ("2024-03-01 09:00", None)])
def test_entry_and_exit_required(entry, exit_):
    with pytest.raises(ValidationError, match="Entry time and exit time are required"):
        JobRowParser(MAPPING).parse_row(_row(Entry=entry, Exit=exit_))


def test_invalid_date_time():
    with pytest.raises(ValidationError, match="Invalid date/time format") as exc:
        JobRowParser(MAPPING).parse_row(_row(Exit="half past ten"))
    assert exc.value.field == "exit_time"


@pytest.mark.parametrize(
    "duration,expected",
    [(30, 30), ("45", 45), ("45.5", 46), (44.5, 45), (44.4, 44), ("abc", 90), (None, 90)],
)
def test_duration_values(duration, expected):
    assert JobRowParser(MAPPING).parse_row(_row(Duration=duration)).duration_min == expected


@pytest.mark.parametrize(
    "exit_,expected",
    [("2024-03-01T09:00:30", 1), ("2024-03-01T09:00:29", 0), ("2024-03-01T09:44:59", 45)],
)
def test_computed_duration_rounds_half_up(exit_, expected):
    job = JobRowParser(MAPPING).parse_row(_row(Entry="2024-03-01T09:00:00", Exit=exit_))
    assert job.duration_min == expected


def test_start_time_inside_window():
    parser = JobRowParser(MAPPING)
    assert parser.parse_row(_row(Start="2024-03-01 09:30")).start_time == datetime(2024, 3, 1, 9, 30)
    # both ends are inclusive
    assert parser.parse_row(_row(Start="2024-03-01 09:00")).start_time == datetime(2024, 3, 1, 9, 0)
    assert parser.parse_row(_row(Start="2024-03-01 10:30")).start_time == datetime(2024, 3, 1, 10, 30)


def test_start_time_outside_window():
    with pytest.raises(ValidationError, match="Start time must be between entry and exit time"):
        JobRowParser(MAPPING).parse_row(_row(Start="2024-03-01 11:00"))


def test_unparseable_start_time_rejects_row():
    with pytest.raises(ValidationError, match="Invalid start time format"):
        JobRowParser(MAPPING).parse_row(_row(Start="whenever"))


def test_spreadsheet_datetime_cells():
    row = {"Entry": datetime(2024, 3, 1, 9, 0), "Exit": datetime(2024, 3, 1, 9, 45)}
    job = JobRowParser({"entry_time": "Entry", "exit_time": "Exit"}).parse_row(row)
    assert job.duration_min == 45
    assert job.client is None
    assert job.to_record() == {
        "entry_time": "2024-03-01T09:00:00",
        "exit_time": "2024-03-01T09:45:00",
        "duration_min": 45,
    }


def test_time_only_cells_are_jobs_for_today():
    job = JobRowParser({"entry_time": "E", "exit_time": "X"}).parse_row({"E": time(9, 0), "X": time(10, 0)})
    assert job.entry_time == datetime.combine(date.today(), time(9, 0))
    assert job.exit_time == datetime.combine(date.today(), time(10, 0))
    assert job.duration_min == 60


def test_exported_seconds_are_accepted():
    job = JobRowParser(MAPPING).parse_row(_row(Entry="01-03-2024 09:00:00", Exit="01-03-2024 10:30:00"))
    assert job.entry_time == datetime(2024, 3, 1, 9, 0)
    assert job.duration_min == 90
