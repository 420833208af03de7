from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime
from pathlib import Path

from quick_roster.models.error_record import ErrorRecord

"""Row error log for uploads.

Each rejected row (or an upload that could not be decoded at all) becomes one
JSON line in ``logs/errors-YYYYMMDD-HHMMSS.log`` (UTC stamp, one file per
process, created on the first flush that has something to write).
"""

__all__ = [
    "DECODE_ERROR",
    "ROW_VALIDATION",
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

ROW_VALIDATION = "ROW_VALIDATION"
DECODE_ERROR = "DECODE_ERROR"
# file-level failures carry no row number
NO_ROW = -1


class ErrorLogBuffer:
    """Rejected rows of one run, held until flush().

    Single-threaded use only: one buffer belongs to one CLI run.
    """
    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir if logs_dir is not None else LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[ErrorRecord]:
        return list(self._records)

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def reject_row(self, file: str, data_type: str, row: int, reason: str) -> ErrorRecord:
        """Buffer one row that failed validation (``row`` is the display row number)."""
        record = ErrorRecord.create(file, data_type, row, ROW_VALIDATION, reason)
        self.append(record)
        return record

    def fail_file(self, file: str, data_type: str, reason: str) -> ErrorRecord:
        """Buffer an upload that could not be decoded."""
        record = ErrorRecord.create(file, data_type, NO_ROW, DECODE_ERROR, reason)
        self.append(record)
        return record

    def rejected_by_file(self) -> dict[str, int]:
        """Buffered rejected-row counts per upload, in first-seen order."""
        counts = Counter(r.file for r in self._records if r.error_type == ROW_VALIDATION)
        return dict(counts)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the log file and clear the buffer.

        Returns the log path, or None when nothing has ever been written (no
        empty log files are created).
        """
        if not self._records:
            return self._file_path
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
