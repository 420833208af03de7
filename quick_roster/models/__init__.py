"""Domain models for the quick roster import toolkit.

Raw upload data, normalized records, import outcomes and the roster
request/response exchanged with the scheduling service.
"""

from .error_record import ErrorRecord
from .import_result import ImportResult, RowOutcome
from .raw_table import DataType, RawRow, RawTable
from .records import Client, ExpectedField, Job, Location, Operative
from .roster import RosterJob, RosterLocation, RosterRequest, RosterResponse

__all__ = [
    # Raw data
    "DataType",
    "RawRow",
    "RawTable",
    # Records
    "ExpectedField",
    "Location",
    "Operative",
    "Job",
    "Client",
    # Processing
    "RowOutcome",
    "ImportResult",
    "ErrorRecord",
    # Roster
    "RosterRequest",
    "RosterLocation",
    "RosterJob",
    "RosterResponse",
]
