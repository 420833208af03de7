from __future__ import annotations

import json
import pathlib

import jsonschema
import pytest

from quick_roster.config.loader import SCHEMA_PATH as CONFIG_SCHEMA_PATH
from quick_roster.logging.error_log import ErrorLogBuffer
from quick_roster.models.error_record import ErrorRecord

"""Row error log JSON schema contract test."""

SCHEMA_PATH = CONFIG_SCHEMA_PATH.parent / "error_log_schema.json"


def _schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_error_log_schema_valid_example():
    record = {
        "timestamp": "2025-02-05T10:12:33Z",
        "file": "operatives.xlsx",
        "data_type": "operative",
        "row": 4,
        "error_type": "ROW_VALIDATION",
        "message": "First name is required",
    }
    jsonschema.validate(record, _schema())


def test_error_record_create_matches_schema():
    record = ErrorRecord.create("jobs.csv", "job", 3, "ROW_VALIDATION", "Entry time must be before exit time")
    jsonschema.validate(json.loads(record.to_json_line()), _schema())


def test_file_level_record_matches_schema():
    record = ErrorRecord.create("roster.xlsx", "job", -1, "DECODE_ERROR", "failed to read spreadsheet")
    jsonschema.validate(json.loads(record.to_json_line()), _schema())


def test_flushed_lines_match_schema(tmp_path: pathlib.Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path)
    buf.append(ErrorRecord.create("clients.csv", "client", 2, "ROW_VALIDATION", "Name is required"))
    buf.append(ErrorRecord.create("clients.csv", "client", 5, "ROW_VALIDATION", "Invalid email format: x@"))
    path = buf.flush()
    assert path is not None
    schema = _schema()
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    for line in lines:
        jsonschema.validate(json.loads(line), schema)


def test_error_log_schema_rejects_extra_key():
    record = {
        "timestamp": "2025-02-05T10:12:33Z",
        "file": "operatives.xlsx",
        "data_type": "operative",
        "row": 4,
        "error_type": "ROW_VALIDATION",
        "message": "First name is required",
        "sheet": "Sheet1",
    }
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, _schema())


@pytest.mark.parametrize("data_type", ["salesman", "Job", ""])
def test_error_log_schema_rejects_unknown_data_type(data_type: str):
    record = json.loads(ErrorRecord.create("x.csv", data_type, 2, "ROW_VALIDATION", "bad").to_json_line())
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, _schema())


def test_error_log_schema_rejects_row_below_sentinel():
    record = json.loads(ErrorRecord.create("x.csv", "job", -2, "ROW_VALIDATION", "bad").to_json_line())
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, _schema())
