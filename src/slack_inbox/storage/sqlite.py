"""SQLite-backed hash store implementation."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Mapping
from pathlib import Path
from types import TracebackType
from typing import Any

from ..core.config import StoreSettings
from ..core.interfaces import HashStore, StoreError
from .codec import decode_value, encode_value, qualify_namespace

LOGGER = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS hash_entries (
    namespace TEXT NOT NULL,
    key TEXT NOT NULL,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    PRIMARY KEY (namespace, key)
);
"""


class SqliteHashStore(HashStore):
    """Persist hash fields as JSON text rows keyed by namespace and key."""

    def __init__(self, settings: StoreSettings) -> None:
        """Open the database and make sure the schema exists."""
        self._key_prefix = settings.key_prefix
        db_path = Path(settings.db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = sqlite3.connect(db_path, check_same_thread=False)
        self._connection.row_factory = sqlite3.Row
        self._apply_schema()

    # Context manager helpers -------------------------------------------------
    def __enter__(self) -> SqliteHashStore:
        """Enter context manager scope."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Ensure the connection is closed when exiting context manager."""
        self.close()

    # HashStore API -----------------------------------------------------------
    def hget(self, namespace: str, key: str) -> Any | None:
        """Return the stored value for ``key`` or ``None``."""
        qualified = qualify_namespace(namespace, self._key_prefix)
        try:
            row = self._connection.execute(
                "SELECT value FROM hash_entries WHERE namespace = ? AND key = ?",
                (qualified, key),
            ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to read {namespace}/{key}: {exc}") from exc
        return decode_value(row["value"]) if row else None

    def hset(self, namespace: str, values: Mapping[str, Any]) -> None:
        """Upsert all ``values`` in one transaction."""
        if not values:
            return
        qualified = qualify_namespace(namespace, self._key_prefix)
        rows = [(qualified, key, encode_value(value)) for key, value in values.items()]
        LOGGER.debug("Writing %d key(s) to %s", len(rows), namespace)
        try:
            with self._connection:
                self._connection.executemany(
                    """
                    INSERT INTO hash_entries (namespace, key, value)
                    VALUES (?, ?, ?)
                    ON CONFLICT(namespace, key) DO UPDATE SET
                        value=excluded.value,
                        updated_at=strftime('%Y-%m-%dT%H:%M:%fZ', 'now')
                    """,
                    rows,
                )
        except sqlite3.Error as exc:
            LOGGER.error(
                "Failed to write %d key(s) to %s: %s",
                len(rows),
                namespace,
                exc,
                exc_info=True,
            )
            raise StoreError(f"Failed to write to {namespace}: {exc}") from exc

    def hmget(self, namespace: str, *keys: str) -> dict[str, Any]:
        """Return stored values for ``keys``; missing keys are omitted."""
        if not keys:
            return {}
        qualified = qualify_namespace(namespace, self._key_prefix)
        placeholders = ",".join("?" for _ in keys)
        try:
            rows = self._connection.execute(
                f"SELECT key, value FROM hash_entries WHERE namespace = ? AND key IN ({placeholders})",
                (qualified, *keys),
            ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to read from {namespace}: {exc}") from exc
        return {row["key"]: decode_value(row["value"]) for row in rows}

    def hkeys(self, namespace: str) -> list[str]:
        """Return every key stored under ``namespace``."""
        qualified = qualify_namespace(namespace, self._key_prefix)
        try:
            rows = self._connection.execute(
                "SELECT key FROM hash_entries WHERE namespace = ? ORDER BY key",
                (qualified,),
            ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to list keys of {namespace}: {exc}") from exc
        return [row["key"] for row in rows]

    def close(self) -> None:
        """Close the database connection."""
        self._connection.close()

    def _apply_schema(self) -> None:
        with self._connection:
            self._connection.executescript(_SCHEMA)


__all__ = ["SqliteHashStore"]
