"""
SQL persistence for the durable store.

A single key-value table holds every stored string. The engine is built
per SqlStore from DATABASE_URL (TEST_DATABASE_URL wins when set), so
tests can point a store at a throwaway SQLite file.
"""
import os
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import Column, DateTime, MetaData, String, Table, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.sql import func

from jornada.core.config import settings

metadata = MetaData()

# Pool sizing for server databases; SQLite keeps SQLAlchemy's default pool.
POOL_SIZE = 5
MAX_OVERFLOW = 5
POOL_TIMEOUT = 30
POOL_RECYCLE = 3600

kv_entries = Table(
    "kv_entries",
    metadata,
    Column("key", String(128), primary_key=True),
    Column("value", Text, nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)


def get_database_url() -> Optional[str]:
    return os.getenv("TEST_DATABASE_URL") or settings.TEST_DATABASE_URL or settings.DATABASE_URL


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        return create_engine(url, echo=False)
    return create_engine(
        url,
        pool_size=POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
        pool_timeout=POOL_TIMEOUT,
        pool_recycle=POOL_RECYCLE,
        pool_pre_ping=True,
        echo=False,
    )


@contextmanager
def get_db_session(engine: Engine):
    """
    Transactional session bound to ``engine``.

    Commits when the block exits cleanly, rolls back and re-raises otherwise.
    """
    session: Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_all_tables(engine: Engine) -> None:
    """Create kv_entries if missing; safe to call on every start."""
    metadata.create_all(bind=engine)
