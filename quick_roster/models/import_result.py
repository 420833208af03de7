from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .raw_table import DataType

"""Per-row outcomes and the aggregated result of normalizing one upload.

Every row is attempted; the result keeps both the accepted records and every
rejected row (1-based display row number + reason). ``first_error()`` gives
the single-message view used when an upload has to be refused as a whole.
"""

__all__ = [
    "RowOutcome",
    "ImportResult",
]


@dataclass(frozen=True)
class RowOutcome:
    """Result of normalizing a single row."""
    row_number: int  # display row number (header row = 1)
    record: Any | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ImportResult:
    data_type: DataType
    source_name: str
    outcomes: list[RowOutcome] = field(default_factory=list)

    @property
    def records(self) -> list[Any]:
        return [o.record for o in self.outcomes if o.ok]

    @property
    def errors(self) -> list[RowOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def total_rows(self) -> int:
        return len(self.outcomes)

    def first_error(self) -> str | None:
        """``Row N: reason`` for the first rejected row, or None."""
        for o in self.outcomes:
            if not o.ok:
                return f"Row {o.row_number}: {o.error}"
        return None

    def error_messages(self) -> list[str]:
        return [f"Row {o.row_number}: {o.error}" for o in self.errors]
