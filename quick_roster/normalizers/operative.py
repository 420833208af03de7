from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from quick_roster.models.raw_table import RawRow
from quick_roster.models.records import Location, Operative

from .common import FieldReader, ValidationError, as_raw_row
from .timeparse import days_to_mask, is_valid_days_mask, parse_time_value

logger = logging.getLogger(__name__)


class OperativeRowParser:
    """Raw operative row -> Operative.

    Bad time values only drop that field; a malformed working-days mask
    rejects the whole row.
    """

    def __init__(self, mapping: Mapping[str, str], default_location: Location | None = None) -> None:
        self.reader = FieldReader(mapping)
        self.default_location = default_location

    def parse_row(self, row: RawRow | Mapping[str, Any]) -> Operative:
        row = as_raw_row(row)
        read = self.reader

        first_name = read.text(row, "first_name")
        if not first_name:
            raise ValidationError("First name is required", field="first_name")

        location = read.text(row, "location")
        location_id = None
        if location is None and self.default_location is not None:
            location = self.default_location.name
            location_id = self.default_location.id

        return Operative(
            first_name=first_name,
            last_name=read.text(row, "last_name"),
            email=read.email(row),
            phone=read.phone(row),
            location=location,
            location_id=location_id,
            operative_type=read.text(row, "operative_type"),
            default_start_time=self._time(row, "default_start_time"),
            default_end_time=self._time(row, "default_end_time"),
            default_days_available=self._days(row),
        )

    def _time(self, row: RawRow, key: str) -> str | None:
        raw = self.reader.raw(row, key)
        if raw is None:
            return None
        parsed = parse_time_value(raw)
        if parsed is None:
            logger.debug(f"ignoring unparseable {key}: {raw!r}")
        return parsed

    def _days(self, row: RawRow) -> str | None:
        raw = self.reader.raw(row, "default_days_available")
        if isinstance(raw, int) and not isinstance(raw, bool) and 0 <= raw <= 1111111:
            # spreadsheets drop leading zeros ("0111110" -> 111110)
            days = f"{raw:07d}"
        else:
            days = self.reader.text(row, "default_days_available")
        if days is None or is_valid_days_mask(days):
            return days
        try:
            # "Mon, Tue, Wed" as shown by the day picker
            return days_to_mask(days)
        except ValueError:
            raise ValidationError(
                f"Invalid days available format: {days}", field="default_days_available"
            ) from None
