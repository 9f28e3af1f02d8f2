"""
Durable store for human decisions on uncertain matches.

Keyed by (normalized event title, employee id); the value is the resolved
client name or REJECTED_MATCH_MARKER. Writes are upserts serialized by a
single lock so rapid confirmations from the UI cannot lose updates.
"""

import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from loguru import logger

from core import database
from core.config import DB_PATH, REJECTED_MATCH_MARKER
from core.normalize import normalize
from models.matching import Confirmation, StoreResult


class ConfirmationStoreError(Exception):
    """Backing store could not be read."""


class MatchConfirmationStore(Protocol):
    def get(self, title: str, employee_id: str) -> str | None: ...

    def set(self, title: str, employee_id: str, client_name: str) -> StoreResult: ...

    def get_all(self, employee_id: str) -> dict[str, str]: ...

    def list_confirmations(self, employee_id: str) -> list[Confirmation]: ...

    def delete_all(self, employee_id: str) -> StoreResult: ...


def is_rejection(value: str | None) -> bool:
    return value == REJECTED_MATCH_MARKER


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryMatchConfirmationStore:
    """Process-local store, used by tests and one-off calculations."""

    def __init__(self):
        self._lock = threading.Lock()
        self._items: dict[tuple[str, str], Confirmation] = {}

    def get(self, title: str, employee_id: str) -> str | None:
        confirmation = self._items.get((normalize(title), employee_id))
        return confirmation.client_name if confirmation else None

    def set(self, title: str, employee_id: str, client_name: str) -> StoreResult:
        if not client_name:
            return StoreResult.failure("Client name is required")
        key = (normalize(title), employee_id)
        with self._lock:
            self._items[key] = Confirmation(key[0], employee_id, client_name, _now())
        return StoreResult.success()

    def get_all(self, employee_id: str) -> dict[str, str]:
        with self._lock:
            items = list(self._items.values())
        return {c.normalized_title: c.client_name for c in items if c.employee_id == employee_id}

    def list_confirmations(self, employee_id: str) -> list[Confirmation]:
        with self._lock:
            return [c for c in self._items.values() if c.employee_id == employee_id]

    def delete_all(self, employee_id: str) -> StoreResult:
        with self._lock:
            for key in [k for k in self._items if k[1] == employee_id]:
                del self._items[key]
        return StoreResult.success()


class SqliteMatchConfirmationStore:
    """
    Store backed by the match_confirmations table.

    One connection is shared across threads; the same lock serializes reads,
    since a sqlite3 connection is not safe for concurrent use.
    """

    def __init__(self, db_path: Path = DB_PATH):
        self.db_path = Path(db_path)
        self._lock = threading.Lock()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = database.get_connection(self.db_path)
        database.create_schema(self._conn)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def get(self, title: str, employee_id: str) -> str | None:
        try:
            with self._lock:
                return database.select_confirmation(self._conn, normalize(title), employee_id)
        except sqlite3.Error as e:
            raise ConfirmationStoreError(f"Could not read confirmation: {e}") from e

    def set(self, title: str, employee_id: str, client_name: str) -> StoreResult:
        if not client_name:
            return StoreResult.failure("Client name is required")
        title_normalized = normalize(title)
        try:
            with self._lock:
                database.upsert_confirmation(
                    self._conn,
                    title_normalized,
                    employee_id,
                    client_name,
                    _now().isoformat(),
                )
        except sqlite3.Error as e:
            logger.error(f"Failed to save confirmation for '{title_normalized}': {e}")
            return StoreResult.failure(f"Could not save confirmation: {e}")
        logger.debug(f"Saved confirmation '{title_normalized}' -> '{client_name}' ({employee_id})")
        return StoreResult.success()

    def get_all(self, employee_id: str) -> dict[str, str]:
        return {c.normalized_title: c.client_name for c in self.list_confirmations(employee_id)}

    def list_confirmations(self, employee_id: str) -> list[Confirmation]:
        try:
            with self._lock:
                rows = database.select_confirmations_by_employee(self._conn, employee_id)
        except sqlite3.Error as e:
            raise ConfirmationStoreError(f"Could not read confirmations: {e}") from e
        return [
            Confirmation(title, employee_id, client_name, datetime.fromisoformat(created_at))
            for title, client_name, created_at in rows
        ]

    def delete_all(self, employee_id: str) -> StoreResult:
        try:
            with self._lock:
                deleted = database.delete_confirmations_by_employee(self._conn, employee_id)
        except sqlite3.Error as e:
            logger.error(f"Failed to clear confirmations for {employee_id}: {e}")
            return StoreResult.failure(f"Could not clear confirmations: {e}")
        logger.info(f"Cleared {deleted} confirmation(s) for employee {employee_id}")
        return StoreResult.success()
