from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime, time
from typing import Any

"""Date/time helpers shared by the row normalizers.

parse_time_value: time-of-day cells -> "HH:MM" (or None)
parse_datetime: job date-time cells -> naive local datetime (or None)
Day masks: 7 characters of 0/1, Monday first.
"""

__all__ = [
    "DAY_NAMES",
    "parse_time_value",
    "parse_datetime",
    "format_legacy_time",
    "is_valid_days_mask",
    "format_days_available",
    "days_to_mask",
    "format_time_12h",
]

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_FULL_DAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_TIME_PATTERNS = (
    re.compile(r"^(\d{1,2}):(\d{2})$"),
    re.compile(r"^(\d{1,2}):(\d{2}):\d{2}$"),
    # anything ending in H:MM or H:MM:SS, e.g. "01-03-2024 09:30"
    re.compile(r"^.*?(\d{1,2}):(\d{2})(?::\d{2})?$"),
    re.compile(r"^(\d{1,2})$"),
)

# Numeric date patterns, tried in order. Separators may be "-" or "/".
_DATETIME_PATTERNS = (
    re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})\s+(\d{1,2}):(\d{2})(?::(\d{2}))?$"),
    re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})\s+(\d{1,2}):(\d{2})(?::(\d{2}))?$"),
    re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})$"),
    re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$"),
)

_BARE_TIME = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")

_DAYS_MASK = re.compile(r"^[01]{7}$")


def _hhmm(hours: int, minutes: int) -> str | None:
    if 0 <= hours <= 23 and 0 <= minutes <= 59:
        return f"{hours:02d}:{minutes:02d}"
    return None


def _to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def parse_time_value(value: Any) -> str | None:
    """Normalize a time-of-day cell to ``HH:MM`` (24h). None if unparseable.

    Accepted: ``H:MM``, ``H:MM:SS``, text ending in either (date prefix is
    ignored), a bare hour ``H``/``HH``, spreadsheet time/date-time cells, and
    anything parse_datetime understands.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        value = _to_local_naive(value)
        return _hhmm(value.hour, value.minute)
    if isinstance(value, time):
        return _hhmm(value.hour, value.minute)

    text = str(value).strip()
    if not text:
        return None

    for pattern in _TIME_PATTERNS:
        match = pattern.match(text)
        if match:
            hours = int(match.group(1))
            minutes = int(match.group(2)) if pattern.groups > 1 else 0
            formatted = _hhmm(hours, minutes)
            if formatted is not None:
                return formatted

    parsed = parse_datetime(text)
    if parsed is not None:
        return _hhmm(parsed.hour, parsed.minute)
    return None


def _from_parts(parts: list[int]) -> datetime | None:
    # a first group above 1900 can only be a year
    if parts[0] > 1900:
        year, month, day = parts[0], parts[1], parts[2]
    else:
        day, month, year = parts[0], parts[1], parts[2]
    hours = parts[3] if len(parts) > 3 else 0
    minutes = parts[4] if len(parts) > 4 else 0
    seconds = parts[5] if len(parts) > 5 else 0
    try:
        return datetime(year, month, day, hours, minutes, seconds)
    except ValueError:
        return None


def _on_day(today: date | None, hours: int, minutes: int, seconds: int = 0) -> datetime:
    day = today or date.today()
    return datetime(day.year, day.month, day.day, hours, minutes, seconds)


def parse_datetime(value: Any, today: date | None = None) -> datetime | None:
    """Parse a job date-time cell. Returns a naive local datetime or None.

    Order: spreadsheet date-time values, ISO-8601 text, the numeric patterns
    (``D-M-YYYY H:MM[:SS]``, ``YYYY-M-D H:MM[:SS]``, ``YYYY-M-D``, ``D-M-YYYY``;
    year first whenever the first group is above 1900), then a bare
    ``H:MM[:SS]`` on ``today`` (defaults to the current date). Time-only
    spreadsheet cells are placed on ``today`` the same way. Impossible
    calendar dates are rejected, never rolled over.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _to_local_naive(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, time):
        return _on_day(today, value.hour, value.minute, value.second)

    text = str(value).strip()
    if not text:
        return None

    try:
        return _to_local_naive(datetime.fromisoformat(text))
    except ValueError:
        pass

    for pattern in _DATETIME_PATTERNS:
        match = pattern.match(text)
        if match:
            parsed = _from_parts([int(g) for g in match.groups() if g is not None])
            if parsed is not None:
                return parsed

    match = _BARE_TIME.match(text)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        seconds = int(match.group(3) or 0)
        if _hhmm(hours, minutes) is None or seconds > 59:
            return None
        return _on_day(today, hours, minutes, seconds)

    return None


def format_legacy_time(value: str) -> str:
    """``H:MM`` / ``HH:MM`` / ``HH:MM:SS`` -> ``HH:MM:SS``."""
    pieces = value.strip().split(":")
    hours = int(pieces[0])
    minutes = int(pieces[1]) if len(pieces) > 1 else 0
    seconds = int(pieces[2]) if len(pieces) > 2 else 0
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def is_valid_days_mask(mask: str) -> bool:
    return bool(_DAYS_MASK.match(mask))


def format_days_available(mask: str) -> str:
    """``"1111100"`` -> ``"Mon, Tue, Wed, Thu, Fri"``."""
    return ", ".join(name for flag, name in zip(mask, DAY_NAMES) if flag == "1")


def days_to_mask(days: Iterable[str] | str) -> str:
    """Inverse of format_days_available: day names -> 7 character mask.

    Names are case-insensitive: three letters up to the full name (``Mon``,
    ``Tues``, ``wednesday``). A string is split on commas.
    """
    if isinstance(days, str):
        days = [d for d in (part.strip() for part in days.split(",")) if d]
    wanted: set[int] = set()
    unknown: list[str] = []
    for name in days:
        lowered = name.strip().lower()
        matches = [i for i, full in enumerate(_FULL_DAY_NAMES) if len(lowered) >= 3 and full.startswith(lowered)]
        if matches:
            wanted.add(matches[0])
        else:
            unknown.append(name)
    if unknown:
        raise ValueError(f"unknown day names: {sorted(unknown)}")
    return "".join("1" if i in wanted else "0" for i in range(len(DAY_NAMES)))


def format_time_12h(value: str) -> str:
    """``"14:30"`` -> ``"2:30 PM"``."""
    hours_text, minutes = value.split(":")[:2]
    hours = int(hours_text)
    suffix = "PM" if hours >= 12 else "AM"
    return f"{hours % 12 or 12}:{minutes} {suffix}"
