from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from quick_roster.models.raw_table import RawRow
from quick_roster.models.records import Client, Location

from .common import FieldReader, ValidationError, as_raw_row


class ClientRowParser:
    """Raw client row -> Client. Only ``name`` is required."""

    def __init__(self, mapping: Mapping[str, str], default_location: Location | None = None) -> None:
        self.reader = FieldReader(mapping)
        self.default_location = default_location

    def parse_row(self, row: RawRow | Mapping[str, Any]) -> Client:
        row = as_raw_row(row)
        read = self.reader

        name = read.text(row, "name")
        if not name:
            raise ValidationError("Name is required", field="name")

        location = read.text(row, "location")
        location_id = None
        if location is None and self.default_location is not None:
            location = self.default_location.name
            location_id = self.default_location.id

        return Client(
            name=name,
            email=read.email(row),
            phone=read.phone(row),
            location=location,
            location_id=location_id,
        )
