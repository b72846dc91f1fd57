"""Key-value store for roster and session blobs (browser local storage stand-in).

MemoryStore keeps everything in a dict for the lifetime of the process.
PostgresStore writes to a single `kv_store` table when DATABASE_URL is set.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

import psycopg

from src.icu_monitor.config.settings import Settings

logger = logging.getLogger(__name__)


class KeyValueStore:
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding malformed JSON under key %r", key)
            return default

    def set_json(self, key: str, obj: Any) -> None:
        self.set(key, json.dumps(obj))


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class PostgresStore(KeyValueStore):
    def __init__(self, database_url: Optional[str]) -> None:
        if not database_url:
            raise RuntimeError("Missing DATABASE_URL. Put it in .env or your environment.")
        self.database_url = database_url

    @contextmanager
    def get_conn(self):
        with psycopg.connect(self.database_url) as conn:
            with conn.cursor() as cur:
                yield conn, cur

    def ensure_schema(self) -> None:
        with self.get_conn() as (conn, cur):
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key   TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );
                """
            )
            conn.commit()

    def get(self, key: str) -> Optional[str]:
        with self.get_conn() as (_, cur):
            cur.execute("SELECT value FROM kv_store WHERE key = %s;", (key,))
            row = cur.fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self.get_conn() as (conn, cur):
            cur.execute(
                """
                INSERT INTO kv_store (key, value)
                VALUES (%s, %s)
                ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value;
                """,
                (key, value),
            )
            conn.commit()

    def remove(self, key: str) -> None:
        with self.get_conn() as (conn, cur):
            cur.execute("DELETE FROM kv_store WHERE key = %s;", (key,))
            conn.commit()


def open_store(settings: Settings) -> KeyValueStore:
    if settings.database_url:
        store = PostgresStore(settings.database_url)
        store.ensure_schema()
        logger.info("Using PostgreSQL key-value store")
        return store
    return MemoryStore()
