# backend/migrate.py
# Table bootstrap for PostgreSQL and SQLite
# Run: python -m backend.migrate

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from backend.db import commit, execute_query, get_db_connection


# Column types are chosen so the same DDL runs on both backends:
# ids are UUID strings and timestamps are ISO-8601 text in UTC.
TABLES = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        email TEXT UNIQUE NOT NULL,
        name TEXT NOT NULL,
        password_hash TEXT NOT NULL,
        role TEXT NOT NULL DEFAULT 'USER',
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS projects (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT,
        status TEXT NOT NULL DEFAULT 'ACTIVE',
        deadline TEXT NOT NULL,
        team_member TEXT NOT NULL,
        budget DOUBLE PRECISION NOT NULL,
        user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
]

INDEXES = [
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_users_email_unique ON users(email)",
    "CREATE INDEX IF NOT EXISTS idx_projects_user_id ON projects(user_id)",
    "CREATE INDEX IF NOT EXISTS idx_projects_user_created ON projects(user_id, created_at)",
    "CREATE INDEX IF NOT EXISTS idx_projects_user_status ON projects(user_id, status)",
]


def run_migrations() -> None:
    """
    Create tables and indexes if missing.
    Safe to run multiple times.
    """
    print("[MIGRATE] Starting database migrations...")

    with get_db_connection() as conn:
        for ddl in TABLES:
            execute_query(conn, ddl)
        for ddl in INDEXES:
            execute_query(conn, ddl)
        commit(conn)

    print("[MIGRATE] All migrations complete!")


if __name__ == "__main__":
    run_migrations()
