"""Key-value storage backends."""

import json
import logging
import sqlite3
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """A durable read or write failed."""


class KeyValueStore(Protocol):
    """Protocol for namespaced key-value storage."""

    def items(self, prefix: str | None = None) -> dict[str, Any]:
        """Return every key/value pair, optionally restricted to a key prefix."""
        ...

    def get(self, key: str) -> Any | None:
        """Return the value stored under key, or None."""
        ...

    def put(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under key."""
        ...

    def delete(self, key: str) -> bool:
        """Delete key. Returns True if it existed."""
        ...

    def delete_many(self, keys: Iterable[str]) -> int:
        """Delete several keys at once. Returns the number removed."""
        ...


class MemoryKeyValueStore:
    """Dict-backed store. Values are JSON round-tripped so callers never share objects."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.put(key, value)

    def items(self, prefix: str | None = None) -> dict[str, Any]:
        return {
            key: json.loads(raw)
            for key, raw in sorted(self._data.items())
            if prefix is None or key.startswith(prefix)
        }

    def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def put(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON-serializable: {e}") from e

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def delete_many(self, keys: Iterable[str]) -> int:
        return sum(1 for key in list(keys) if self.delete(key))


class SQLiteKeyValueStore:
    """SQLite-based key-value storage scoped to one namespace (tenant)."""

    def __init__(self, db_path: str | Path, namespace: str = "default"):
        """Initialize storage with database path.

        Args:
            db_path: Path to SQLite database file
            namespace: Namespace isolating this store's keys from other tenants
        """
        self.db_path = Path(db_path).expanduser()
        self.namespace = namespace
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize_db()

    def _initialize_db(self) -> None:
        """Create the table if it doesn't exist."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    namespace TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value TEXT NOT NULL,
                    PRIMARY KEY (namespace, key)
                )
            """)
            conn.commit()

    def _connect(self) -> sqlite3.Connection:
        try:
            return sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open {self.db_path}: {e}") from e

    def items(self, prefix: str | None = None) -> dict[str, Any]:
        """Return stored values keyed by key, in key order.

        Args:
            prefix: Only return keys starting with this prefix

        Returns:
            Mapping of key to decoded value; rows that are not valid JSON are skipped
        """
        query = "SELECT key, value FROM kv WHERE namespace = ?"
        params: list[Any] = [self.namespace]
        if prefix:
            # substr comparison avoids LIKE wildcard escaping
            query += " AND substr(key, 1, ?) = ?"
            params.extend([len(prefix), prefix])
        query += " ORDER BY key"

        try:
            with self._connect() as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list keys: {e}") from e

        values = {}
        for key, value in rows:
            try:
                values[key] = json.loads(value)
            except json.JSONDecodeError:
                logger.warning(
                    "Skipping undecodable value for %r in namespace %s", key, self.namespace
                )
        return values

    def get(self, key: str) -> Any | None:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM kv WHERE namespace = ? AND key = ?",
                    (self.namespace, key),
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e

        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            raise StorageError(f"Value for {key!r} is not valid JSON: {e}") from e

    def put(self, key: str, value: Any) -> None:
        try:
            encoded = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON-serializable: {e}") from e

        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO kv (namespace, key, value) VALUES (?, ?, ?)
                    ON CONFLICT(namespace, key) DO UPDATE SET value = excluded.value
                """,
                    (self.namespace, key, encoded),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write {key!r}: {e}") from e

    def delete(self, key: str) -> bool:
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "DELETE FROM kv WHERE namespace = ? AND key = ?", (self.namespace, key)
                )
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete {key!r}: {e}") from e

    def delete_many(self, keys: Iterable[str]) -> int:
        """Delete several keys in a single transaction.

        Args:
            keys: Keys to delete

        Returns:
            Number of keys that existed and were removed
        """
        params = [(self.namespace, key) for key in keys]
        if not params:
            return 0

        try:
            with self._connect() as conn:
                before = conn.total_changes
                conn.executemany("DELETE FROM kv WHERE namespace = ? AND key = ?", params)
                conn.commit()
                deleted = conn.total_changes - before
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete {len(params)} keys: {e}") from e

        logger.debug("Deleted %d keys from namespace %s", deleted, self.namespace)
        return deleted
