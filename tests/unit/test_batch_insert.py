from __future__ import annotations

from datetime import datetime

import pytest

from quick_roster.db.batch_insert import (
    BatchInsertError,
    InsertResult,
    batch_insert,
    insert_records,
    records_to_rows,
)
from quick_roster.models.raw_table import DataType
from quick_roster.models.records import Client, Job, Operative


class DummyCursor:
    def __init__(self) -> None:
        self.queries: list[str] = []
        self.rows: list[list] = []
        self.page_size: int | None = None


# execute_values is monkeypatched inside the module so no database is needed
@pytest.fixture(autouse=True)
def patch_execute_values(monkeypatch):
    import quick_roster.db.batch_insert as bi

    def fake_execute_values(cursor, sql, rows, page_size=1000):
        cursor.queries.append(sql)
        cursor.rows.extend(rows)
        cursor.page_size = page_size

    monkeypatch.setattr(bi, "execute_values", fake_execute_values)
    return fake_execute_values


def test_batch_insert_basic():
    cur = DummyCursor()
    res = batch_insert(cur, table="operatives", columns=["first_name", "email"], rows=[["Ann", "a@x.io"], ["Bob", None]])
    assert res == InsertResult(table="operatives", inserted_rows=2)
    assert cur.queries == ['INSERT INTO operatives ("first_name","email") VALUES %s']
    assert cur.rows == [["Ann", "a@x.io"], ["Bob", None]]
    assert cur.page_size == 1000


def test_batch_insert_empty_rows():
    cur = DummyCursor()
    res = batch_insert(cur, table="jobs", columns=["entry_time"], rows=[])
    assert res.inserted_rows == 0
    assert cur.queries == []


def test_batch_insert_wraps_driver_errors(monkeypatch):
    import quick_roster.db.batch_insert as bi

    def failing(cursor, sql, rows, page_size=1000):
        raise RuntimeError("duplicate key value violates unique constraint")

    monkeypatch.setattr(bi, "execute_values", failing)
    with pytest.raises(BatchInsertError, match="clients: duplicate key"):
        batch_insert(DummyCursor(), table="clients", columns=["name"], rows=[["Acme"]])


def test_records_to_rows_union_of_columns():
    records = [Operative(first_name="Ann", email="ann@example.com"), Operative(first_name="Bob", phone="0113")]
    columns, rows = records_to_rows(records, organisation_id="org-1")
    assert columns == ["first_name", "email", "organisation_id", "phone"]
    assert rows == [
        ["Ann", "ann@example.com", "org-1", None],
        ["Bob", None, "org-1", "0113"],
    ]


def test_insert_records_jobs():
    cur = DummyCursor()
    job = Job(entry_time=datetime(2024, 3, 1, 9), exit_time=datetime(2024, 3, 1, 10), duration_min=60, client="Acme")
    res = insert_records(cur, DataType.JOB, [job])
    assert res.table == "jobs"
    assert cur.queries[0].startswith('INSERT INTO jobs ("entry_time","exit_time","duration_min","client")')
    assert cur.rows == [["2024-03-01T09:00:00", "2024-03-01T10:00:00", 60, "Acme"]]


def test_insert_records_clients_table():
    cur = DummyCursor()
    assert insert_records(cur, DataType.CLIENT, [Client(name="Acme")]).table == "clients"
