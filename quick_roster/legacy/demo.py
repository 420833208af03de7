from __future__ import annotations

from quick_roster.models.roster import RosterJob, RosterLocation, RosterResponse

"""Illustrative roster for demos (``quick-roster roster --demo``).

Only ever returned when explicitly asked for; a failed service call is
reported as an error, never answered with this data.
"""

_SAMPLE_JOBS = (
    ("1", "09:00", "12:00", 60, "New York 1", 40.7128, -74.006, "123 Main St, New York, NY 10001, USA", "Ann", "09:30"),
    ("2", "11:30", "13:00", 30, "New York 2", 40.714, -74.005, "456 Madison Avenue, New York, NY 10001, USA", "Bob", "11:30"),
    ("3", "14:00", "16:30", 45, "New York 3", 40.711, -74.009, "789 Wall St, New York, NY 10001, USA", None, None),
    ("4", "09:00", "12:00", 60, "New York 4", 40.719, -74.008, "123 Main St, New York, NY 10001, USA", "Ann", "09:30"),
    ("5", "11:30", "13:00", 30, "New York 5", 40.713, -74.015, "456 Madison Avenue, New York, NY 10001, USA", "Ann", "11:30"),
    ("6", "14:00", "16:30", 45, "New York 6", 40.712, -74.01, "789 Wall St, New York, NY 10001, USA", None, None),
)


def sample_response(day: str = "2025-02-05") -> RosterResponse:
    jobs = []
    for job_id, entry, exit_, duration, name, lat, lng, address, operative, start in _SAMPLE_JOBS:
        jobs.append(
            RosterJob(
                id=job_id,
                entry_time=f"{day}T{entry}:00",
                exit_time=f"{day}T{exit_}:00",
                duration_min=duration,
                location=RosterLocation(name=name, address=address, latitude=lat, longitude=lng),
                client=f"Airbnb {job_id}",
                operative_name=operative,
                start_time=f"{day}T{start}:00" if start else None,
            )
        )
    return RosterResponse(jobs=jobs, message="Roster completed with some jobs unassigned")
