"""
Durable key-value string stores.

Every persisted value in the app is a UTF-8 JSON string stored under a
fixed key. Backends:
- InMemoryStore: tests and throwaway runs
- JsonFileStore: one JSON object on disk, replaced atomically per write
- SqlStore: the kv_entries table through SQLAlchemy
"""

import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Protocol

from sqlalchemy import select, update, insert, delete
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from jornada.core.config import Settings, settings
from jornada.core.database import build_engine, create_all_tables, get_db_session, get_database_url, kv_entries
from jornada.core.errors import StorageError

logger = logging.getLogger("jornada")


class DurableStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryStore:
    """Dict-backed store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self.lock = threading.RLock()

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)


class JsonFileStore:
    """
    File-backed store holding every key in one JSON object.

    Writes go to a sibling temp file and are swapped in with os.replace,
    so a crash mid-write leaves the previous file intact.
    """

    def __init__(self, path):
        self.path = Path(path)
        self.lock = threading.RLock()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError, RecursionError) as e:
            raise StorageError(f"Could not read store file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Store file {self.path} does not hold a JSON object")
        return data

    def _dump(self, data: Dict[str, str]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Could not write store file {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        with self.lock:
            value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self.lock:
            data = self._load()
            data[key] = value
            self._dump(data)

    def remove(self, key: str) -> None:
        with self.lock:
            data = self._load()
            if key in data:
                del data[key]
                self._dump(data)


class SqlStore:
    """Store backed by the kv_entries table."""

    def __init__(self, engine: Optional[Engine] = None, database_url: Optional[str] = None, create_tables: bool = True):
        if engine is None:
            url = database_url or get_database_url()
            if not url:
                raise StorageError("DATABASE_URL is not configured for the sql store")
            engine = build_engine(url)
        self.engine = engine
        self.lock = threading.RLock()
        if create_tables:
            try:
                create_all_tables(engine)
            except SQLAlchemyError as e:
                raise StorageError(f"Could not prepare kv_entries: {e}") from e

    def get(self, key: str) -> Optional[str]:
        try:
            with get_db_session(self.engine) as session:
                row = session.execute(
                    select(kv_entries.c.value).where(kv_entries.c.key == key)
                ).first()
        except SQLAlchemyError as e:
            raise StorageError(f"Could not read key {key}: {e}") from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc)
        try:
            with get_db_session(self.engine) as session:
                result = session.execute(
                    update(kv_entries)
                    .where(kv_entries.c.key == key)
                    .values(value=value, updated_at=now)
                )
                if result.rowcount == 0:
                    session.execute(insert(kv_entries).values(key=key, value=value, updated_at=now))
        except SQLAlchemyError as e:
            raise StorageError(f"Could not write key {key}: {e}") from e

    def remove(self, key: str) -> None:
        try:
            with get_db_session(self.engine) as session:
                session.execute(delete(kv_entries).where(kv_entries.c.key == key))
        except SQLAlchemyError as e:
            raise StorageError(f"Could not remove key {key}: {e}") from e


_fallback_lock = threading.RLock()


def store_lock(store: DurableStore):
    """
    Re-entrant lock for read-modify-write sequences on ``store``.

    Request handlers run in a thread pool, so two updates of the same key
    must not interleave their read and write. Stores without their own
    lock share a process-wide one.
    """
    return getattr(store, "lock", None) or _fallback_lock


def build_store(settings_obj: Optional[Settings] = None) -> DurableStore:
    """Build the store selected by STORE_BACKEND."""
    cfg = settings_obj or settings
    backend = (cfg.STORE_BACKEND or "").lower()
    if backend == "memory":
        return InMemoryStore()
    if backend == "file":
        return JsonFileStore(cfg.STORE_PATH)
    if backend == "sql":
        return SqlStore(database_url=cfg.TEST_DATABASE_URL or cfg.DATABASE_URL)
    raise StorageError(f"Unknown STORE_BACKEND: {cfg.STORE_BACKEND}")


_store: Optional[DurableStore] = None


def get_store() -> DurableStore:
    """Process-wide store, built lazily from settings."""
    global _store
    if _store is None:
        _store = build_store()
        logger.info(f"Durable store ready: {type(_store).__name__}")
    return _store


def set_store(store: Optional[DurableStore]) -> None:
    """Swap the process-wide store (tests, embedding hosts)."""
    global _store
    _store = store
