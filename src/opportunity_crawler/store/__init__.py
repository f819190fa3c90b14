"""Store implementations."""

from .base import DisabledStore, PersistenceError, Store, UpsertResult
from .sqlite_store import SQLiteStore

__all__ = ["DisabledStore", "PersistenceError", "SQLiteStore", "Store", "UpsertResult"]
