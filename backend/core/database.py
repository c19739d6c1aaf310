"""
Database access — SQLAlchemy engine factory, transaction scope and identifier quoting.
Supports SQLite and PostgreSQL.
"""
import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from config import settings
from core.errors import QueryError

logger = logging.getLogger(__name__)


def build_engine(url: str) -> Engine:
    """Build a pooled SQLAlchemy engine for the given URL."""
    kwargs = {"pool_pre_ping": True}
    if not url.startswith("sqlite"):
        kwargs["pool_size"] = settings.DB_POOL_SIZE
    return create_engine(url, **kwargs)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Process-wide engine for the configured database (FastAPI dependency)."""
    engine = build_engine(settings.DATABASE_URL)
    logger.info("Database engine ready (%s)", engine.dialect.name)
    return engine


def get_default_schema(engine: Engine) -> Optional[str]:
    if engine.dialect.name == "postgresql":
        return settings.DB_SCHEMA
    return None   # SQLite has no schema concept


def is_sqlite(engine: Engine) -> bool:
    return engine.dialect.name == "sqlite"


def quote(engine: Engine, name: str) -> str:
    """Quote an identifier per the engine dialect's rules."""
    return engine.dialect.identifier_preparer.quote(name)


@contextmanager
def transaction(engine: Engine, action: str) -> Iterator[Connection]:
    """
    Yield a connection inside a transaction.
    Commits on success, rolls back on any exception, and always returns the
    connection to the pool. Driver failures surface as QueryError.
    """
    try:
        with engine.begin() as conn:
            yield conn
    except SQLAlchemyError as e:
        raise QueryError(f"Failed to {action}", str(getattr(e, "orig", None) or e)) from e


def ping(engine: Engine) -> None:
    with transaction(engine, "reach the database") as conn:
        conn.execute(text("SELECT 1"))


def qualified_name(engine: Engine, table_name: str) -> str:
    """Schema-qualified, quoted table name for interpolation into SQL text."""
    schema = get_default_schema(engine)
    qt = quote(engine, table_name)
    return f"{quote(engine, schema)}.{qt}" if schema else qt
