"""Durable key-value storage for loka.

Each tenant owns a namespace of JSON values addressed by string keys. The
record store in :mod:`loka.store` mirrors a namespace into memory and writes
single keys back on every mutation.

Components:

- :class:`KeyValueStore` - Protocol implemented by every backend
- :class:`SQLiteKeyValueStore` - SQLite-backed durable store
- :class:`MemoryKeyValueStore` - Dict-backed store for tests and ephemeral runs
"""

from loka.storage.kv import (
    KeyValueStore,
    MemoryKeyValueStore,
    SQLiteKeyValueStore,
    StorageError,
)

__all__ = ["KeyValueStore", "MemoryKeyValueStore", "SQLiteKeyValueStore", "StorageError"]
