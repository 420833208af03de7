from __future__ import annotations

from quick_roster.models.raw_table import DataType
from quick_roster.models.records import ExpectedField

"""Field catalogs and accepted header spellings per data type.

Plain declarative data: the matcher receives these tables as arguments and
keeps no state of its own. Order matters; when two fields accept the same
spelling the one listed first wins.
"""

__all__ = [
    "OPERATIVE_FIELDS",
    "JOB_FIELDS",
    "CLIENT_FIELDS",
    "OPERATIVE_VARIATIONS",
    "JOB_VARIATIONS",
    "CLIENT_VARIATIONS",
    "fields_for",
    "variations_for",
]

OPERATIVE_FIELDS: tuple[ExpectedField, ...] = (
    ExpectedField("first_name", "First Name", required=True),
    ExpectedField("last_name", "Last Name"),
    ExpectedField("email", "Email"),
    ExpectedField("phone", "Phone"),
    ExpectedField("location", "Location"),
    ExpectedField("operative_type", "Operative Type"),
    ExpectedField("default_start_time", "Start Time"),
    ExpectedField("default_end_time", "End Time"),
    ExpectedField("default_days_available", "Working Days"),
)

JOB_FIELDS: tuple[ExpectedField, ...] = (
    ExpectedField("entry_time", "Entry Time", required=True),
    ExpectedField("exit_time", "Exit Time", required=True),
    ExpectedField("duration_min", "Duration (minutes)"),
    ExpectedField("location", "Location"),
    ExpectedField("operative_type", "Operative Type"),
    ExpectedField("client", "Client"),
    ExpectedField("operative", "Operative"),
    ExpectedField("start_time", "Start Time"),
)

CLIENT_FIELDS: tuple[ExpectedField, ...] = (
    ExpectedField("name", "Name", required=True),
    ExpectedField("email", "Email"),
    ExpectedField("phone", "Phone"),
    ExpectedField("location", "Location"),
)

OPERATIVE_VARIATIONS: dict[str, tuple[str, ...]] = {
    "first_name": ("first_name", "first name", "firstname", "given_name", "given name", "givenname"),
    "last_name": ("last_name", "last name", "lastname", "surname", "family_name", "family name"),
    "email": ("email", "email_address", "emailaddress", "e-mail", "e_mail"),
    "phone": ("phone", "phone_number", "phonenumber", "telephone", "tel", "mobile", "contact"),
    "location": ("location", "site", "workplace", "work_location", "branch", "office", "address"),
    "operative_type": ("operative_type", "operative type", "type", "role", "job_type", "job type", "position"),
    "default_start_time": ("default_start_time", "start time", "starttime", "start", "work_start"),
    "default_end_time": ("default_end_time", "end time", "endtime", "end", "work_end"),
    "default_days_available": (
        "default_days_available", "days available", "working_days", "availability", "work_days",
    ),
}

JOB_VARIATIONS: dict[str, tuple[str, ...]] = {
    "entry_time": ("entry_time", "entry time", "start_time", "start time", "starttime", "begin"),
    "exit_time": ("exit_time", "exit time", "end_time", "end time", "endtime", "finish"),
    "duration_min": ("duration_min", "duration", "minutes", "length", "time_required", "job_duration"),
    "location": (
        "location", "site", "workplace", "work_location", "branch", "office", "job_location", "address",
    ),
    "operative_type": (
        "operative_type", "operative type", "type", "role", "job_type", "job type", "worker_type",
    ),
    "client": ("client", "customer", "account", "client_name", "customer_name"),
    "operative": ("operative", "worker", "employee", "staff", "assigned_to", "assignee"),
    "start_time": ("start_time", "scheduled_start", "actual_start", "worker_start"),
}

CLIENT_VARIATIONS: dict[str, tuple[str, ...]] = {
    "name": ("name", "client", "client_name", "customer", "customer_name", "company", "account"),
    "email": OPERATIVE_VARIATIONS["email"],
    "phone": OPERATIVE_VARIATIONS["phone"],
    "location": OPERATIVE_VARIATIONS["location"],
}

_FIELDS = {
    DataType.OPERATIVE: OPERATIVE_FIELDS,
    DataType.JOB: JOB_FIELDS,
    DataType.CLIENT: CLIENT_FIELDS,
}

_VARIATIONS = {
    DataType.OPERATIVE: OPERATIVE_VARIATIONS,
    DataType.JOB: JOB_VARIATIONS,
    DataType.CLIENT: CLIENT_VARIATIONS,
}


def fields_for(data_type: DataType | str) -> tuple[ExpectedField, ...]:
    return _FIELDS[DataType.parse(data_type)]


def variations_for(data_type: DataType | str) -> dict[str, tuple[str, ...]]:
    return _VARIATIONS[DataType.parse(data_type)]
