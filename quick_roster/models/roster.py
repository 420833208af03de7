from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from .records import Job, Operative

"""Roster request/response models (the application's side of the exchange).

The external scheduling service speaks a different vocabulary; translation
happens in quick_roster.legacy.adapter.
"""

__all__ = [
    "RosterRequest",
    "RosterLocation",
    "RosterJob",
    "RosterResponse",
]


@dataclass(frozen=True)
class RosterRequest:
    operatives: list[Operative]
    jobs: list[Job]


@dataclass(frozen=True)
class RosterLocation:
    name: str
    address: str
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class RosterJob:
    """A job as returned by the roster run, assigned or not.

    Date-times are kept as the strings the service returned.
    """
    id: str
    entry_time: str
    exit_time: str
    duration_min: int
    location: RosterLocation
    client: str | None = None
    operative_name: str | None = None
    start_time: str | None = None

    @property
    def assigned(self) -> bool:
        return self.operative_name is not None and self.start_time is not None


@dataclass(frozen=True)
class RosterResponse:
    jobs: list[RosterJob] = field(default_factory=list)
    message: str = ""

    @property
    def assigned_jobs(self) -> list[RosterJob]:
        return [j for j in self.jobs if j.assigned]

    @property
    def unassigned_jobs(self) -> list[RosterJob]:
        return [j for j in self.jobs if not j.assigned]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
