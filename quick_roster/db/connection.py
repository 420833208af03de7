from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

import psycopg2

from quick_roster.config.loader import DatabaseConfig


def resolve_dsn(db_cfg: DatabaseConfig, env: Mapping[str, str] | None = None) -> str:
    """Connection string; environment first, then the config ``database`` section.

    Order:
        1. DATABASE_URL / PGDSN (whole DSN)
        2. config ``database.dsn``
        3. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, each falling
           back to the matching config value
    """
    env = os.environ if env is None else env
    dsn = env.get("DATABASE_URL") or env.get("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = env.get("PGHOST", db_cfg.host or "localhost")
    port = env.get("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = env.get("PGUSER", db_cfg.user or "postgres")
    password = env.get("PGPASSWORD", db_cfg.password or "")
    database = env.get("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def db_cursor(db_cfg: DatabaseConfig) -> Iterator[Any]:  # pragma: no cover (thin wrapper)
    """Cursor inside one transaction: commit on success, rollback on error."""
    conn = psycopg2.connect(resolve_dsn(db_cfg))
    try:
        with conn:  # commits / rolls back
            with conn.cursor() as cur:
                yield cur
    finally:
        conn.close()
