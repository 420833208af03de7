from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from quick_roster.models.raw_table import RawRow

"""Shared pieces of the row normalizers: field lookup, email/phone checks,
and the row-scoped ValidationError."""

__all__ = [
    "ValidationError",
    "FieldReader",
    "as_raw_row",
    "is_valid_email",
    "is_valid_phone",
]

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE = re.compile(r"^[0-9+\-() ]+$")


class ValidationError(Exception):
    """One row broke a business rule. ``str(e)`` is the user-facing reason."""

    def __init__(self, reason: str, field: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.field = field


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL.match(value))


def is_valid_phone(value: str) -> bool:
    return bool(_PHONE.match(value))


def as_raw_row(row: RawRow | Mapping[str, Any]) -> RawRow:
    return row if isinstance(row, RawRow) else RawRow(dict(row))


class FieldReader:
    """Looks up domain fields in a raw row through a column mapping.

    A field that is not mapped, or whose cell is blank, reads as None.
    """

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = dict(mapping)

    @property
    def mapping(self) -> dict[str, str]:
        return dict(self._mapping)

    def raw(self, row: RawRow, key: str) -> Any:
        return row.get(self._mapping.get(key))

    def text(self, row: RawRow, key: str) -> str | None:
        return row.text(self._mapping.get(key))

    def email(self, row: RawRow, key: str = "email") -> str | None:
        value = self.text(row, key)
        if value is not None and not is_valid_email(value):
            raise ValidationError(f"Invalid email format: {value}", field=key)
        return value

    def phone(self, row: RawRow, key: str = "phone") -> str | None:
        value = self.text(row, key)
        if value is not None and not is_valid_phone(value):
            raise ValidationError(f"Invalid phone format: {value}", field=key)
        return value
