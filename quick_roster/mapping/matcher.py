from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping, Sequence

from quick_roster.models.raw_table import DataType, RawTable
from quick_roster.models.records import ExpectedField

from .fields import fields_for, variations_for

"""Header matcher: raw column headers -> field mapping.

Headers and accepted spellings are compared after normalization (lower-case,
non-alphanumerics removed). Each header is tried in file order:

1. exact pass: normalized header equals a normalized spelling
2. substring pass: one contains the other

Fields claimed by an earlier header are skipped. The guess is advisory; the
user edits the resulting ColumnMapping one header at a time.
"""

__all__ = [
    "MappingError",
    "ColumnMapping",
    "normalize_header",
    "find_best_match",
    "guess_mapping",
]

_NON_ALNUM = re.compile(r"[^a-z0-9]")


class MappingError(Exception):
    """Raised for an invalid mapping edit or when required fields are unmapped."""


def normalize_header(text: str) -> str:
    return _NON_ALNUM.sub("", str(text).lower())


def _normalized_variations(
    variations: Mapping[str, Sequence[str]],
) -> list[tuple[str, list[str]]]:
    return [(key, [normalize_header(v) for v in spellings]) for key, spellings in variations.items()]


def find_best_match(
    header: str,
    variations: Mapping[str, Sequence[str]],
    claimed: Iterable[str] = (),
) -> str | None:
    """Field key for ``header`` or None. Fields in ``claimed`` are not considered."""
    normalized = normalize_header(header)
    if not normalized:
        return None
    taken = set(claimed)
    candidates = [(k, vs) for k, vs in _normalized_variations(variations) if k not in taken]

    for key, spellings in candidates:
        if normalized in spellings:
            return key

    for key, spellings in candidates:
        for spelling in spellings:
            if spelling and (spelling in normalized or normalized in spelling):
                return key
    return None


def guess_mapping(
    headers: Sequence[str],
    data_type: DataType | str,
    variations: Mapping[str, Sequence[str]] | None = None,
) -> dict[str, str]:
    """Initial field -> header mapping for an upload (deterministic, no side effects)."""
    table = variations if variations is not None else variations_for(data_type)
    mapping: dict[str, str] = {}
    for header in headers:
        key = find_best_match(header, table, claimed=mapping.keys())
        if key is not None:
            mapping[key] = header
    return mapping


class ColumnMapping(Mapping[str, str]):
    """Field key -> source header, at most one header per key and one key per header.

    Reads like a dict (``mapping["email"]``). Changes go through ``assign`` and
    ``clear``; once edited, the mapping is never re-guessed.
    """

    def __init__(
        self,
        fields: Sequence[ExpectedField],
        headers: Sequence[str],
        initial: Mapping[str, str] | None = None,
    ) -> None:
        self._fields = tuple(fields)
        self._headers = list(headers)
        self._by_field: dict[str, str] = {}
        self.edited = False
        for key, header in (initial or {}).items():
            self._set(key, header)

    @classmethod
    def guess(cls, table: RawTable, data_type: DataType | str) -> ColumnMapping:
        data_type = DataType.parse(data_type)
        return cls(fields_for(data_type), table.headers, guess_mapping(table.headers, data_type))

    # Mapping protocol
    def __getitem__(self, key: str) -> str:
        return self._by_field[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_field)

    def __len__(self) -> int:
        return len(self._by_field)

    def __repr__(self) -> str:
        return f"ColumnMapping({self._by_field!r})"

    @property
    def fields(self) -> tuple[ExpectedField, ...]:
        return self._fields

    def as_dict(self) -> dict[str, str]:
        return dict(self._by_field)

    def field_for(self, header: str) -> str | None:
        for key, mapped in self._by_field.items():
            if mapped == header:
                return key
        return None

    def unmapped_headers(self) -> list[str]:
        """Headers that will not be imported ("don't import")."""
        used = set(self._by_field.values())
        return [h for h in self._headers if h not in used]

    def _set(self, key: str, header: str) -> None:
        if key not in {f.key for f in self._fields}:
            raise MappingError(f"Unknown field: {key}")
        if header not in self._headers:
            raise MappingError(f"Unknown column: {header}")
        # a header feeds at most one field
        for existing in [k for k, h in self._by_field.items() if h == header]:
            del self._by_field[existing]
        self._by_field[key] = header

    def assign(self, header: str, key: str | None) -> None:
        """Map ``header`` to field ``key`` (None clears the header).

        Any field previously fed by ``header`` is unmapped, and any header
        previously feeding ``key`` is replaced.
        """
        if key is None:
            self.clear(header)
            return
        self._set(key, header)
        self.edited = True

    def clear(self, header: str) -> None:
        for existing in [k for k, h in self._by_field.items() if h == header]:
            del self._by_field[existing]
        self.edited = True

    def missing_required(self) -> list[ExpectedField]:
        return [f for f in self._fields if f.required and f.key not in self._by_field]

    def confirm(self) -> dict[str, str]:
        """Check every required field has a header; returns the plain mapping."""
        missing = self.missing_required()
        if missing:
            labels = ", ".join(f.label for f in missing)
            raise MappingError(f"Required fields not mapped: {labels}")
        return self.as_dict()
