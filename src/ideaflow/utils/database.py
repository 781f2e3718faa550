"""SQLite helpers for Pydantic-backed rows.

Only the small set of operations the durable state store needs lives here:
connection handling, identifier quoting, typed fetches and upserts.

Note:
    Fields with ``None`` values are excluded from upserts via
    ``exclude_none=True``; a ``None`` value therefore leaves the column at its
    previous value (or NULL for new rows).
"""

import re
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import Literal, cast

from pydantic import BaseModel

# Valid SQL identifier pattern (alphanumeric and underscores, not starting with digit)
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

type SQLValue = str | int | float | bytes | None

type IsolationLevel = Literal["DEFERRED", "EXCLUSIVE", "IMMEDIATE"] | None


@contextmanager
def connect(
    path: str | Path,
    *,
    timeout: float = 30.0,
    isolation_level: IsolationLevel = "IMMEDIATE",
    wal_mode: bool = True,
) -> Iterator[sqlite3.Connection]:
    """Context manager for SQLite connections with automatic transaction handling.

    Commits on successful exit, rolls back and re-raises on any exception,
    and always closes the connection.

    Args:
        path: Database file path, or ``:memory:`` for an in-memory database.
        timeout: Seconds to wait for a lock before raising OperationalError.
        isolation_level: Transaction isolation level.
        wal_mode: If True, enable WAL journal mode for file databases.

    Yields:
        SQLite connection with row_factory set to sqlite3.Row.

    Raises:
        sqlite3.OperationalError: If the database cannot be opened.
    """
    conn = sqlite3.connect(str(path), timeout=timeout, isolation_level=isolation_level)
    conn.row_factory = sqlite3.Row

    if wal_mode and str(path) != ":memory:":
        with suppress(sqlite3.OperationalError):
            _ = conn.execute("PRAGMA journal_mode=WAL")
        _ = conn.execute("PRAGMA busy_timeout=10000")

    try:
        yield conn
        conn.commit()
    except BaseException:
        with suppress(Exception):
            conn.rollback()
        raise
    finally:
        conn.close()


def safe_identifier(name: str) -> str:
    """Validate and quote a SQL identifier.

    Args:
        name: The identifier to validate and quote.

    Returns:
        The quoted identifier (e.g., ``"state_store"``).

    Raises:
        ValueError: If the identifier contains invalid characters.
    """
    if not _IDENTIFIER_RE.match(name):
        msg = f"Invalid SQL identifier: {name!r}"
        raise ValueError(msg)
    return f'"{name}"'


def fetch_one[T: BaseModel](
    conn: sqlite3.Connection,
    model: type[T],
    sql: str,
    params: tuple[SQLValue, ...] = (),
) -> T | None:
    """Fetch a single row and return it as a Pydantic model, or None."""
    row = cast("sqlite3.Row | None", conn.execute(sql, params).fetchone())
    if row is None:
        return None
    return model.model_validate(dict(row))


def fetch_all[T: BaseModel](
    conn: sqlite3.Connection,
    model: type[T],
    sql: str,
    params: tuple[SQLValue, ...] = (),
) -> list[T]:
    """Fetch all rows and return them as Pydantic models."""
    rows = cast("list[sqlite3.Row]", conn.execute(sql, params).fetchall())
    return [model.model_validate(dict(row)) for row in rows]


def upsert(
    conn: sqlite3.Connection,
    table: str,
    obj: BaseModel,
    conflict_columns: list[str],
) -> int:
    """Insert a row, updating the non-conflict columns if it already exists.

    Args:
        conn: SQLite connection.
        table: Table name.
        obj: Pydantic model to upsert.
        conflict_columns: Columns that identify an existing row.

    Returns:
        The lastrowid of the upserted row, or 0 if not available.
    """
    safe_table = safe_identifier(table)
    data = obj.model_dump(exclude_none=True)
    cols = ", ".join(safe_identifier(k) for k in data)
    placeholders = ", ".join(f":{k}" for k in data)
    conflict = ", ".join(safe_identifier(col) for col in conflict_columns)
    updates = ", ".join(
        f"{safe_identifier(k)} = excluded.{safe_identifier(k)}"
        for k in data
        if k not in conflict_columns
    )

    if updates:
        sql = f"""INSERT INTO {safe_table} ({cols}) VALUES ({placeholders})
            ON CONFLICT ({conflict}) DO UPDATE SET {updates}"""  # noqa: S608
    else:
        sql = f"""INSERT INTO {safe_table} ({cols}) VALUES ({placeholders})
            ON CONFLICT ({conflict}) DO NOTHING"""  # noqa: S608

    cursor = conn.execute(sql, data)
    return cursor.lastrowid or 0
