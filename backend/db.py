# backend/db.py
# Database access layer: one shared SQLAlchemy engine for PostgreSQL (production) and SQLite (dev/tests)

from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional, Union
from urllib.parse import urlparse

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine, Result

from backend.config import DATABASE_URL

# Global engine, created on first use and shared by every request
_engine: Union[Engine, None] = None


def _configure_sqlite_connection(dbapi_connection, connection_record) -> None:
    """
    SQLite ships with FK enforcement off; ON DELETE CASCADE needs it.

    The built-in LOWER() folds ASCII only; replace it with str.lower so
    search matches non-ASCII text the same way on both sides of LIKE.
    """
    dbapi_connection.create_function("lower", 1, lambda s: s.lower() if isinstance(s, str) else s)
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_engine(url: Optional[str] = None) -> Engine:
    """Initialize the SQLAlchemy engine for DATABASE_URL (or an explicit url)."""
    global _engine

    url = url or DATABASE_URL
    parsed = urlparse(url)
    if not parsed.scheme:
        raise ValueError(f"Invalid DATABASE_URL: {url[:20]}...")

    if url.startswith("sqlite"):
        # FastAPI runs sync endpoints in a threadpool
        _engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=False,
        )
        event.listen(_engine, "connect", _configure_sqlite_connection)
        print(f"[DB] Using SQLite ({parsed.path or 'memory'})")
    else:
        _engine = create_engine(
            url,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,  # Verify connections before use
            echo=False,  # Set True for SQL debugging
        )
        print(f"[DB] Using {parsed.scheme} ({parsed.hostname})")

    return _engine


def get_engine() -> Engine:
    """Return the shared engine, creating it on first use."""
    if _engine is None:
        init_engine()
    return _engine


def dispose_engine() -> None:
    """Drop pooled connections (tests swap databases between sessions)."""
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None


@contextmanager
def get_db_connection() -> Generator[Connection, None, None]:
    """
    Context manager for database connections.

    Nothing is committed implicitly: write paths call commit() themselves,
    anything left uncommitted is rolled back when the connection closes.
    """
    with get_engine().connect() as conn:
        yield conn


def execute_query(
    conn: Connection,
    query: str,
    params: Optional[Dict[str, Any]] = None,
) -> Result:
    """
    Execute a query with named parameters (:name style).

    Args:
        conn: Database connection
        query: SQL query
        params: Named query parameters

    Returns:
        SQLAlchemy Result
    """
    return conn.execute(text(query), params or {})


def commit(conn: Connection) -> None:
    conn.commit()
