from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from psycopg2.extras import execute_values

from quick_roster.models.raw_table import DataType

"""Record store hand-off.

Accepted records are inserted with psycopg2.extras.execute_values, one
statement per batch. The table layout belongs to the record store; this module
only knows table names and that each record is a flat column -> value dict.
"""

logger = logging.getLogger(__name__)

TABLES = {
    DataType.OPERATIVE: "operatives",
    DataType.JOB: "jobs",
    DataType.CLIENT: "clients",
}


class BatchInsertError(Exception):
    pass


@dataclass(frozen=True)
class InsertResult:
    table: str
    inserted_rows: int


def batch_insert(
    cursor: Any,
    table: str,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    page_size: int = 1000,
) -> InsertResult:
    """INSERT ``rows`` into ``table`` using execute_values.

    Parameters
    ----------
    cursor: psycopg2 cursor (transaction handled by the caller)
    table: target table name (not user input)
    columns: column names, same order as each row
    rows: row value sequences
    page_size: execute_values page size
    """
    rows_list = [list(r) for r in rows]
    if not rows_list:
        return InsertResult(table=table, inserted_rows=0)

    cols_sql = ",".join(f'"{c}"' for c in columns)
    sql = f"INSERT INTO {table} ({cols_sql}) VALUES %s"
    try:
        execute_values(cursor, sql, rows_list, page_size=page_size)
    except Exception as e:
        raise BatchInsertError(f"{table}: {e}") from e
    return InsertResult(table=table, inserted_rows=len(rows_list))


def records_to_rows(
    records: Sequence[Any], organisation_id: str | None = None
) -> tuple[list[str], list[list[Any]]]:
    """Domain records -> (columns, rows). Columns are the union of every
    record's populated fields in first-seen order; gaps become NULL."""
    dicts = [r.to_record() for r in records]
    if organisation_id is not None:
        for d in dicts:
            d["organisation_id"] = organisation_id
    columns: list[str] = []
    for d in dicts:
        for key in d:
            if key not in columns:
                columns.append(key)
    return columns, [[d.get(c) for c in columns] for d in dicts]


def insert_records(
    cursor: Any,
    data_type: DataType,
    records: Sequence[Any],
    organisation_id: str | None = None,
) -> InsertResult:
    table = TABLES[data_type]
    columns, rows = records_to_rows(records, organisation_id)
    result = batch_insert(cursor, table, columns, rows)
    logger.info(f"stored table={table} rows={result.inserted_rows}")
    return result
