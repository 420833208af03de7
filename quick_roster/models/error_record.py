from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the row error log.

A row that fails normalisation (or a file that cannot be decoded) is written
to the JSON Lines error log as one ErrorRecord. ``row=-1`` marks file-level
failures where no row number applies.

The record shape is fixed and published as
``quick_roster/contracts/error_log_schema.json``.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Source file name (or ``pasted`` for pasted CSV text)
        data_type: operative / job / client
        row: 1-based display row number (header row is 1). -1 for file-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human readable reason
    """
    timestamp: str
    file: str
    data_type: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(file: str, data_type: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            data_type=data_type,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no keys beyond the dataclass fields)."""
        return json.dumps(asdict(self), ensure_ascii=False)
