from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

"""Domain records produced by the row normalizers.

Each record is built exactly once from one raw row and is immutable
afterwards. ``to_record()`` gives the plain dict handed to the record store
(only fields that carry a value; date-times as ISO-8601 strings).
"""

__all__ = [
    "ExpectedField",
    "Location",
    "Operative",
    "Job",
    "Client",
]


@dataclass(frozen=True)
class ExpectedField:
    """A field an upload may provide for a given data type."""
    key: str
    label: str
    required: bool = False


@dataclass(frozen=True)
class Location:
    """A caller-supplied default location (the uploading user's own site)."""
    id: str | None
    name: str


def _plain(values: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in values.items():
        if v is None:
            continue
        out[k] = v.isoformat() if isinstance(v, datetime) else v
    return out


@dataclass(frozen=True)
class Operative:
    first_name: str
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    location_id: str | None = None
    operative_type: str | None = None
    default_start_time: str | None = None  # HH:MM
    default_end_time: str | None = None  # HH:MM
    default_days_available: str | None = None  # 7 x 0/1, Monday first
    id: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()

    def to_record(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class Job:
    entry_time: datetime
    exit_time: datetime
    duration_min: int
    start_time: datetime | None = None
    operative_type: str | None = None
    client: str | None = None
    location: str | None = None
    operative: str | None = None  # free-text assignee name
    id: str | None = None

    def to_record(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class Client:
    name: str
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    location_id: str | None = None

    def to_record(self) -> dict[str, Any]:
        return _plain(asdict(self))
