from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum
from typing import Any

import pandas as pd

"""Raw tabular data as produced by the tabular decoder.

RawTable only lives for the duration of one import session. Rows are kept as
RawRow, a string-keyed lookup that answers "absent" for unknown headers and
blank/NaN cells, so any unexpected column in an upload is simply ignored.
"""

__all__ = [
    "DataType",
    "RawRow",
    "RawTable",
]


class DataType(Enum):
    """Kind of records an upload contains."""
    OPERATIVE = "operative"
    JOB = "job"
    CLIENT = "client"

    @classmethod
    def parse(cls, value: str | DataType) -> DataType:
        if isinstance(value, DataType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ValueError(f"unknown data type: {value!r}") from e


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # non-scalar cells (lists etc.) are never "missing"
        return False


@dataclass(frozen=True)
class RawRow:
    """One source row: header -> raw cell value (str / int / float / datetime / None)."""
    cells: Mapping[str, Any] = field(default_factory=dict)

    def get(self, header: str | None) -> Any:
        """Raw cell under ``header``; None when the header is unknown or the cell is empty."""
        if header is None:
            return None
        value = self.cells.get(header)
        if _is_missing(value):
            return None
        return value

    def text(self, header: str | None) -> str | None:
        """Cell rendered as trimmed text; None when absent or blank after trim."""
        value = self.get(header)
        if value is None:
            return None
        if isinstance(value, datetime):
            rendered = value.isoformat(sep=" ")
        elif isinstance(value, time):
            rendered = value.strftime("%H:%M:%S")
        else:
            rendered = str(value)
        rendered = rendered.strip()
        return rendered or None

    def is_empty(self) -> bool:
        return all(self.text(h) is None for h in self.cells)


@dataclass(frozen=True)
class RawTable:
    """Header row plus data rows of one upload."""
    headers: list[str]
    rows: list[RawRow]
    source_name: str = "pasted"

    def __len__(self) -> int:
        return len(self.rows)

    def has_header(self, header: str) -> bool:
        return header in self.headers

    def sample(self, n: int = 3) -> list[dict[str, Any]]:
        """First ``n`` rows as plain dicts (for previews)."""
        return [dict(r.cells) for r in self.rows[:n]]
