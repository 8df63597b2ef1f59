"""Key-value state store shared by the settings and career-memory services.

Every read-modify-write goes through ``update`` so it happens as one atomic
operation at the store boundary instead of separate reads and writes.
"""

from __future__ import annotations

import asyncio
import copy
import json
import os
import sqlite3
import threading
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any, Protocol

Mutator = Callable[[Any], Any]


class StateStore(Protocol):
    async def get(self, keys: Sequence[str]) -> dict[str, Any]:
        """Return stored values for the keys that exist."""

    async def set(self, record: Mapping[str, Any]) -> None:
        """Write every key of ``record``."""

    async def remove(self, keys: Sequence[str]) -> None:
        """Delete the keys if present."""

    async def update(self, key: str, mutate: Mutator) -> Any:
        """Atomically replace ``key`` with ``mutate(current)`` and return it."""


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InMemoryStateStore:
    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(initial or {}))
        self._lock = asyncio.Lock()

    async def get(self, keys: Sequence[str]) -> dict[str, Any]:
        return {key: copy.deepcopy(self._data[key]) for key in keys if key in self._data}

    async def set(self, record: Mapping[str, Any]) -> None:
        async with self._lock:
            for key, value in record.items():
                self._data[key] = copy.deepcopy(value)

    async def remove(self, keys: Sequence[str]) -> None:
        async with self._lock:
            for key in keys:
                self._data.pop(key, None)

    async def update(self, key: str, mutate: Mutator) -> Any:
        async with self._lock:
            value = mutate(copy.deepcopy(self._data.get(key)))
            self._data[key] = copy.deepcopy(value)
            return value


class SqliteStateStore:
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._conn_lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn

        directory = os.path.dirname(self._db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        conn = sqlite3.connect(
            self._db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA busy_timeout=5000;")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_state (
                key TEXT PRIMARY KEY,
                value_json TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )
        self._conn = conn
        return conn

    @staticmethod
    def _write(cursor: sqlite3.Cursor, key: str, value: Any) -> None:
        cursor.execute(
            """
            INSERT INTO kv_state (key, value_json, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value_json = excluded.value_json,
                updated_at = excluded.updated_at
            """,
            (key, json.dumps(value, ensure_ascii=False), _utc_now()),
        )

    @staticmethod
    def _read(cursor: sqlite3.Cursor, key: str) -> Any:
        cursor.execute("SELECT value_json FROM kv_state WHERE key = ?", (key,))
        row = cursor.fetchone()
        return json.loads(row[0]) if row else None

    def _get_sync(self, keys: Sequence[str]) -> dict[str, Any]:
        with self._conn_lock:
            cursor = self._get_connection().cursor()
            result: dict[str, Any] = {}
            for key in keys:
                cursor.execute("SELECT value_json FROM kv_state WHERE key = ?", (key,))
                row = cursor.fetchone()
                if row:
                    result[key] = json.loads(row[0])
            return result

    def _transaction(self, work: Callable[[sqlite3.Cursor], Any]) -> Any:
        with self._conn_lock:
            conn = self._get_connection()
            cursor = conn.cursor()
            cursor.execute("BEGIN IMMEDIATE")
            try:
                result = work(cursor)
                conn.commit()
                return result
            except Exception:
                conn.rollback()
                raise

    def _set_sync(self, record: Mapping[str, Any]) -> None:
        def work(cursor: sqlite3.Cursor) -> None:
            for key, value in record.items():
                self._write(cursor, key, value)

        self._transaction(work)

    def _remove_sync(self, keys: Sequence[str]) -> None:
        def work(cursor: sqlite3.Cursor) -> None:
            for key in keys:
                cursor.execute("DELETE FROM kv_state WHERE key = ?", (key,))

        self._transaction(work)

    def _update_sync(self, key: str, mutate: Mutator) -> Any:
        def work(cursor: sqlite3.Cursor) -> Any:
            value = mutate(self._read(cursor, key))
            self._write(cursor, key, value)
            return value

        return self._transaction(work)

    async def get(self, keys: Sequence[str]) -> dict[str, Any]:
        return await asyncio.to_thread(self._get_sync, list(keys))

    async def set(self, record: Mapping[str, Any]) -> None:
        await asyncio.to_thread(self._set_sync, dict(record))

    async def remove(self, keys: Sequence[str]) -> None:
        await asyncio.to_thread(self._remove_sync, list(keys))

    async def update(self, key: str, mutate: Mutator) -> Any:
        return await asyncio.to_thread(self._update_sync, key, mutate)

    def close(self) -> None:
        with self._conn_lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
