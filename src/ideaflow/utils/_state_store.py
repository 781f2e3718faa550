"""Durable key-value state stores.

A state store is a small, synchronous, scoped key-value mapping with write
metadata. Workflow drafts are mirrored into one so that a session can be
resumed after the process exits. Two implementations are provided: an
in-memory store for tests and ephemeral sessions, and a SQLite store.
"""

import sqlite3
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, cast, runtime_checkable

import pendulum
from pydantic import BaseModel

from ideaflow.utils.database import (
    connect,
    fetch_all,
    fetch_one,
    safe_identifier,
    upsert,
)

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

type StateStoreKey = str
type StateStoreValue = str | int | float | bytes | None

_TABLE = safe_identifier("state_store")
_SCOPE_COL = safe_identifier("scope")
_KEY_COL = safe_identifier("key")

# Scope used when a store is not bound to a particular user or workspace
DEFAULT_SCOPE = ""


class StateEntry(BaseModel):
    """An entry in the state store.

    Attributes:
        scope: Namespace for the entry (empty string for the default scope).
        key: The unique identifier for this entry within its scope.
        value: The stored value.
        created_at: When this entry was first created (ISO 8601 string).
        created_by: Who created this entry.
        updated_at: When this entry was last modified (ISO 8601 string).
        updated_by: Who last modified this entry.
    """

    scope: str = DEFAULT_SCOPE
    key: str
    value: str | int | float | bytes | None
    created_at: str
    created_by: str | None
    updated_at: str
    updated_by: str | None


@runtime_checkable
class StateStore(Protocol):
    """Protocol for state store implementations.

    Implementations support the read side of the Mapping protocol plus
    set/delete/clear. Any method may raise if the backing storage is
    unavailable; callers that need best-effort semantics must catch.
    """

    def __getitem__(self, key: StateStoreKey) -> StateStoreValue:
        """Get the value for a key.

        Raises:
            KeyError: If the key does not exist.
        """
        ...

    def __iter__(self) -> Iterator[StateStoreKey]:
        """Iterate over all keys in the store."""
        ...

    def __len__(self) -> int:
        """Return the number of entries in the store."""
        ...

    def __contains__(self, key: object) -> bool:
        """Check if a key exists in the store."""
        ...

    def get_entry(self, key: StateStoreKey) -> StateEntry | None:
        """Get the full entry for a key, including metadata."""
        ...

    def set(
        self,
        key: StateStoreKey,
        value: StateStoreValue,
        *,
        author: str | None = None,
    ) -> None:
        """Set a value, preserving created_at/created_by on update."""
        ...

    def delete(self, key: StateStoreKey) -> bool:
        """Delete a key. Returns True if it existed."""
        ...

    def clear(self) -> None:
        """Remove all entries in this store's scope."""
        ...


def _now() -> str:
    return pendulum.now("UTC").to_iso8601_string()


class MockStateStore:
    """In-memory implementation of the state store.

    Data lives only as long as the instance. Drop-in replacement for
    SQLiteStateStore in tests.
    """

    _entries: dict[tuple[str, StateStoreKey], StateEntry]
    _scope: str

    def __init__(self, scope: str | None = None) -> None:
        """Initialize an empty in-memory store.

        Args:
            scope: Namespace for keys (None for the default scope).
        """
        self._entries = {}
        self._scope = scope if scope is not None else DEFAULT_SCOPE

    @property
    def scope(self) -> str:
        """Get the scope for this store."""
        return self._scope

    def __getitem__(self, key: StateStoreKey) -> StateStoreValue:
        return self._entries[(self._scope, key)].value

    def __iter__(self) -> Iterator[StateStoreKey]:
        return iter([k for (scope, k) in self._entries if scope == self._scope])

    def __len__(self) -> int:
        return sum(1 for scope, _ in self._entries if scope == self._scope)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return (self._scope, key) in self._entries

    def get_entry(self, key: StateStoreKey) -> StateEntry | None:
        return self._entries.get((self._scope, key))

    def set(
        self,
        key: StateStoreKey,
        value: StateStoreValue,
        *,
        author: str | None = None,
    ) -> None:
        now_str = _now()
        existing = self._entries.get((self._scope, key))
        self._entries[(self._scope, key)] = StateEntry(
            scope=self._scope,
            key=key,
            value=value,
            created_at=existing.created_at if existing else now_str,
            created_by=existing.created_by if existing else author,
            updated_at=now_str,
            updated_by=author,
        )

    def delete(self, key: StateStoreKey) -> bool:
        return self._entries.pop((self._scope, key), None) is not None

    def clear(self) -> None:
        for composite_key in [k for k in self._entries if k[0] == self._scope]:
            del self._entries[composite_key]


_SQLITE_SCHEMA = """
CREATE TABLE IF NOT EXISTS state_store (
    scope TEXT NOT NULL,
    key TEXT NOT NULL,
    value BLOB,
    created_at TEXT NOT NULL,
    created_by TEXT,
    updated_at TEXT NOT NULL,
    updated_by TEXT,
    PRIMARY KEY (scope, key)
);
"""

# S608 is safe: safe_identifier validates all table/column names
_SQL_SELECT_BY_KEY = (
    f"SELECT * FROM {_TABLE} WHERE {_SCOPE_COL} = ? AND {_KEY_COL} = ?"  # noqa: S608
)
_SQL_SELECT_ALL = (
    f"SELECT * FROM {_TABLE} WHERE {_SCOPE_COL} = ? ORDER BY {_KEY_COL}"  # noqa: S608
)
_SQL_COUNT = f"SELECT COUNT(*) FROM {_TABLE} WHERE {_SCOPE_COL} = ?"  # noqa: S608
_SQL_EXISTS = f"SELECT 1 FROM {_TABLE} WHERE {_SCOPE_COL} = ? AND {_KEY_COL} = ?"  # noqa: S608
_SQL_DELETE_ONE = (
    f"DELETE FROM {_TABLE} WHERE {_SCOPE_COL} = ? AND {_KEY_COL} = ?"  # noqa: S608
)
_SQL_DELETE_ALL = f"DELETE FROM {_TABLE} WHERE {_SCOPE_COL} = ?"  # noqa: S608


class SQLiteStateStore:
    """SQLite-backed implementation of the state store.

    Every operation opens its own short-lived connection, so separate
    processes (or separate store instances) observe each other's writes.
    There is no cross-process locking beyond SQLite's own; the last writer
    wins.
    """

    _db_path: str
    _scope: str
    _logger: "FilteringBoundLogger | None"

    def __init__(
        self,
        db_path: str | Path,
        scope: str | None = None,
        *,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        """Initialize a SQLite state store, creating the schema if missing.

        Args:
            db_path: Path to the SQLite database file.
            scope: Namespace for keys (None for the default scope).
            logger: Optional logger for debug-level operation logging.
        """
        self._db_path = str(db_path)
        self._scope = scope if scope is not None else DEFAULT_SCOPE
        self._logger = logger
        self._ensure_schema()

    @property
    def scope(self) -> str:
        """Get the scope for this store."""
        return self._scope

    @property
    def db_path(self) -> str:
        """Path to the backing database file."""
        return self._db_path

    def _ensure_schema(self) -> None:
        with connect(self._db_path) as conn:
            _ = conn.executescript(_SQLITE_SCHEMA)

    def __getitem__(self, key: StateStoreKey) -> StateStoreValue:
        entry = self.get_entry(key)
        if entry is None:
            raise KeyError(key)
        return entry.value

    def __iter__(self) -> Iterator[StateStoreKey]:
        with connect(self._db_path) as conn:
            results = fetch_all(conn, StateEntry, _SQL_SELECT_ALL, (self._scope,))
        return iter([entry.key for entry in results])

    def __len__(self) -> int:
        with connect(self._db_path) as conn:
            row = cast(
                "sqlite3.Row | None", conn.execute(_SQL_COUNT, (self._scope,)).fetchone()
            )
            return int(row[0]) if row else 0  # pyright: ignore[reportAny]

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        with connect(self._db_path) as conn:
            return conn.execute(_SQL_EXISTS, (self._scope, key)).fetchone() is not None

    def get_entry(self, key: StateStoreKey) -> StateEntry | None:
        with connect(self._db_path) as conn:
            return fetch_one(conn, StateEntry, _SQL_SELECT_BY_KEY, (self._scope, key))

    def set(
        self,
        key: StateStoreKey,
        value: StateStoreValue,
        *,
        author: str | None = None,
    ) -> None:
        now_str = _now()
        with connect(self._db_path) as conn:
            existing = fetch_one(
                conn, StateEntry, _SQL_SELECT_BY_KEY, (self._scope, key)
            )
            model = StateEntry(
                scope=self._scope,
                key=key,
                value=value,
                created_at=existing.created_at if existing else now_str,
                created_by=existing.created_by if existing else author,
                updated_at=now_str,
                updated_by=author,
            )
            _ = upsert(conn, "state_store", model, conflict_columns=["scope", "key"])
        if self._logger:
            self._logger.debug("store_set", scope=self._scope, key=key, author=author)

    def delete(self, key: StateStoreKey) -> bool:
        with connect(self._db_path) as conn:
            deleted = conn.execute(_SQL_DELETE_ONE, (self._scope, key)).rowcount > 0
        if self._logger:
            self._logger.debug("store_delete", scope=self._scope, key=key, existed=deleted)
        return deleted

    def clear(self) -> None:
        with connect(self._db_path) as conn:
            count = conn.execute(_SQL_DELETE_ALL, (self._scope,)).rowcount
        if self._logger:
            self._logger.debug("store_clear", scope=self._scope, count=count)


def create_state_store(
    path: str | Path | None,
    scope: str | None = None,
    *,
    logger: "FilteringBoundLogger | None" = None,
) -> StateStore:
    """Create a state store at the given path.

    Args:
        path: SQLite database path. None selects an in-memory store.
        scope: Namespace for keys.
        logger: Optional logger passed to the SQLite store.

    Returns:
        A SQLiteStateStore for a path, a MockStateStore otherwise.
    """
    if path is None:
        return MockStateStore(scope)
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    return SQLiteStateStore(path, scope=scope, logger=logger)
