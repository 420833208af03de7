"""Row normalizers: one mapped raw row -> one validated domain record."""

from __future__ import annotations

from collections.abc import Mapping

from quick_roster.models.raw_table import DataType
from quick_roster.models.records import Location

from .client import ClientRowParser
from .common import ValidationError
from .job import JobRowParser
from .operative import OperativeRowParser

__all__ = [
    "ClientRowParser",
    "JobRowParser",
    "OperativeRowParser",
    "RowParser",
    "ValidationError",
    "parser_for",
]

RowParser = OperativeRowParser | JobRowParser | ClientRowParser


def parser_for(
    data_type: DataType | str,
    mapping: Mapping[str, str],
    default_location: Location | None = None,
) -> RowParser:
    data_type = DataType.parse(data_type)
    if data_type is DataType.JOB:
        return JobRowParser(mapping)
    if data_type is DataType.CLIENT:
        return ClientRowParser(mapping, default_location=default_location)
    return OperativeRowParser(mapping, default_location=default_location)
