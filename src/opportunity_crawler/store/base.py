from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any


class PersistenceError(RuntimeError):
    """Raised when a document could not be read or written."""


class UpsertResult(str, Enum):
    INSERTED = "inserted"
    SKIPPED = "skipped"


class Store(ABC):
    @property
    def available(self) -> bool:
        return True

    @abstractmethod
    def init_db(self) -> None:
        """Create any required schema."""

    @abstractmethod
    def upsert_if_absent(
        self,
        collection: str,
        record_id: str,
        document: dict[str, Any],
    ) -> UpsertResult:
        """Write ``document`` under ``record_id`` unless that key already exists.

        Existing documents are never modified.
        """

    @abstractmethod
    def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        """Return the stored document, or None."""

    @abstractmethod
    def count(self, collection: str) -> int:
        """Return the number of documents in ``collection``."""


class DisabledStore(Store):
    """Stand-in used when persistence is not configured."""

    def __init__(self, reason: str) -> None:
        self.reason = reason

    @property
    def available(self) -> bool:
        return False

    def init_db(self) -> None:
        return None

    def upsert_if_absent(
        self,
        collection: str,
        record_id: str,
        document: dict[str, Any],
    ) -> UpsertResult:
        raise PersistenceError(f"persistence disabled: {self.reason}")

    def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        return None

    def count(self, collection: str) -> int:
        return 0
