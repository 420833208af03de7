from __future__ import annotations

import io
from pathlib import Path
from typing import Any

import pandas as pd

from quick_roster.models.raw_table import DataType, RawRow, RawTable

"""Tabular decoder: uploaded file / pasted text -> RawTable.

- CSV (file or pasted text): standard quoting, every cell read as text
- XLSX / XLS: first sheet only, cells keep their spreadsheet types
  (numbers, dates)
- Fully empty rows are skipped, the first remaining row is the header row
- Fewer than two non-empty rows (no data row) is a DecodeError

pandas does the parsing for both formats (openpyxl / xlrd engines for the
spreadsheets), the same way the rest of the import path reads workbooks.
"""

__all__ = [
    "DecodeError",
    "SUPPORTED_EXTENSIONS",
    "read_table",
    "read_bytes",
    "read_csv_text",
    "frame_to_table",
    "detect_data_type",
]

SUPPORTED_EXTENSIONS = (".csv", ".xlsx", ".xls")

MIN_ROWS_MESSAGE = "File must contain at least a header row and one data row."


class DecodeError(Exception):
    """Raised when an upload cannot be turned into a header row + data rows."""


def _extension(name: str) -> str:
    suffix = Path(name).suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise DecodeError(
            f"Unsupported file type: {suffix or name}. Please upload a CSV or Excel file."
        )
    return suffix


def read_table(path: Path) -> RawTable:
    """Decode a CSV / XLSX / XLS file from disk."""
    path = Path(path)
    suffix = _extension(path.name)
    if not path.exists():
        raise DecodeError(f"file not found: {path}")
    if suffix == ".csv":
        try:
            text = path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as e:
            raise DecodeError(f"{path.name}: CSV must be UTF-8 encoded ({e})") from e
        return read_csv_text(text, source_name=path.name)
    return frame_to_table(_read_first_sheet(path, path.name), path.name)


def read_bytes(data: bytes, filename: str) -> RawTable:
    """Decode an in-memory upload (file picker / drag-and-drop blob)."""
    suffix = _extension(filename)
    name = Path(filename).name
    if suffix == ".csv":
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DecodeError(f"{name}: CSV must be UTF-8 encoded ({e})") from e
        return read_csv_text(text, source_name=name)
    return frame_to_table(_read_first_sheet(io.BytesIO(data), name), name)


def read_csv_text(text: str, source_name: str = "pasted") -> RawTable:
    """Decode comma separated text (file contents or pasted data).

    The header row fixes the column count: data rows with extra cells (a
    trailing comma, say) are cut to that width, short rows are padded with
    blanks.
    """
    if not text or not text.strip():
        raise DecodeError(MIN_ROWS_MESSAGE)
    options: dict[str, Any] = {
        "header": None,
        "dtype": str,
        "keep_default_na": False,  # "NA", "null" etc. stay as text
        "skip_blank_lines": True,
        "engine": "python",
    }
    try:
        width = pd.read_csv(io.StringIO(text), nrows=1, **options).shape[1]
        df = pd.read_csv(
            io.StringIO(text),
            on_bad_lines=lambda cells: cells[:width],
            **options,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DecodeError(f"{source_name}: failed to parse CSV: {e}") from e
    return frame_to_table(df, source_name)


def _read_first_sheet(source: Any, name: str) -> pd.DataFrame:
    try:
        xls = pd.ExcelFile(source)
        if not xls.sheet_names:
            raise DecodeError(f"{name}: workbook has no sheets")
        # header-less read; the first non-empty row becomes the header below
        return xls.parse(xls.sheet_names[0], header=None)
    except DecodeError:
        raise
    except Exception as e:
        raise DecodeError(f"{name}: failed to read spreadsheet: {e}") from e


def _cell(value: Any) -> Any:
    """Convert a pandas cell into a plain Python value (None for NaN/NaT)."""
    if value is None:
        return None
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.to_pydatetime()
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        return value
    if pd.api.types.is_bool(value):
        return bool(value)
    if pd.api.types.is_integer(value):
        return int(value)
    if pd.api.types.is_float(value):
        f = float(value)
        # spreadsheets store whole numbers as floats (9 -> 9.0)
        return int(f) if f.is_integer() else f
    return value


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _unique_headers(raw_headers: list[Any]) -> list[str]:
    headers: list[str] = []
    seen: dict[str, int] = {}
    for i, raw in enumerate(raw_headers):
        name = "" if raw is None else str(raw).strip()
        if not name:
            name = f"Column {i + 1}"
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 1
        headers.append(name)
    return headers


def frame_to_table(df: pd.DataFrame, source_name: str) -> RawTable:
    """Turn a header-less DataFrame into a RawTable.

    Steps:
    1. Convert every cell to a plain value, dropping rows that are entirely blank
    2. Require at least 2 remaining rows (header + one data row)
    3. First row -> trimmed headers (blank -> ``Column N``, duplicates suffixed)
    4. Remaining rows -> RawRow keyed by header
    """
    records: list[list[Any]] = []
    for _, raw in df.iterrows():
        values = [_cell(v) for v in raw.tolist()]
        if all(_is_blank(v) for v in values):
            continue
        records.append(values)

    if len(records) < 2:
        raise DecodeError(MIN_ROWS_MESSAGE)

    headers = _unique_headers(records[0])
    rows = [
        RawRow(dict(zip(headers, values, strict=False)))
        for values in records[1:]
    ]
    return RawTable(headers=headers, rows=rows, source_name=source_name)


def detect_data_type(filename: str) -> DataType:
    """Guess whether a roster upload holds jobs or operatives from its file name."""
    lowered = Path(filename).name.lower()
    if "job" in lowered or "services" in lowered:
        return DataType.JOB
    return DataType.OPERATIVE
