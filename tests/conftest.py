# Shared pytest fixtures
from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from quick_roster.logging.init import LOGGER_NAME, reset_logging

OPERATIVE_ROWS: list[list[object]] = [
    ["First Name", "Last Name", "Email", "Phone", "Location", "Start Time", "End Time", "Working Days"],
    ["Ann", "Smith", "ann@example.com", "+44 113 496 0000", "Leeds", "9", "17:00", "1111100"],
    ["Bob", "", "bob@example.com", "", "", "08:30", "16:30", "0111110"],
]

JOB_ROWS: list[list[object]] = [
    ["Entry Time", "Exit Time", "Duration", "Client", "Location"],
    ["2024-03-01 09:00", "2024-03-01 10:30", "", "Acme", "Leeds"],
    ["2024-03-01 11:00", "2024-03-01 12:00", "45", "Beta", "York"],
]


@pytest.fixture(autouse=True)
def clean_logging():
    """Every test starts without a configured application logger."""
    reset_logging()
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        # setenv first so teardown also removes values loaded from a .env file
        monkeypatch.setenv("ROSTER_API_ENDPOINT", "")
        monkeypatch.delenv("ROSTER_API_ENDPOINT")
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """api_endpoint: http://scheduler.test
roster_path: /generate_roster
request_timeout: 5
organisation_id: org-1
default_location:
  id: loc-hq
  name: Head Office
database:
  host: localhost
  port: 5432
  user: roster
  password: secret
  database: roster
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "quick_roster.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def _write_csv(path: Path, rows: list[list[object]]) -> Path:
    pd.DataFrame(rows).to_csv(path, header=False, index=False)
    return path


def _write_xlsx(path: Path, rows: list[list[object]], sheet_name: str = "Sheet1") -> Path:
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return path


@pytest.fixture()
def make_csv(temp_workdir: Path) -> Callable[[str, list[list[object]]], Path]:
    def _make(name: str, rows: list[list[object]]) -> Path:
        return _write_csv(temp_workdir / "data" / name, rows)
    return _make


@pytest.fixture()
def make_xlsx(temp_workdir: Path) -> Callable[..., Path]:
    def _make(name: str, rows: list[list[object]], sheet_name: str = "Sheet1") -> Path:
        return _write_xlsx(temp_workdir / "data" / name, rows, sheet_name)
    return _make


@pytest.fixture()
def operatives_csv(make_csv) -> Path:
    return make_csv("operatives.csv", OPERATIVE_ROWS)


@pytest.fixture()
def jobs_csv(make_csv) -> Path:
    return make_csv("jobs.csv", JOB_ROWS)
