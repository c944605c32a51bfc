"""
backend/tenant.py

Ownership guardrails (defense in depth).

All project queries go through these helpers so a query that forgets its
user_id filter fails loudly instead of leaking another user's rows.
Violations are server errors (HTTP 500) in every environment; DEV only adds
more detail to the log line.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from fastapi import HTTPException
from sqlalchemy.engine import Connection, Result

from backend.config import IS_DEV
from backend.db import execute_query

# Tables whose rows belong to a single user
OWNED_TABLES = ("projects",)
OWNER_COLUMN = "user_id"


def require_owner_id(owner_id: Optional[str]) -> str:
    """
    Guardrail: an owner id must be present for owner-scoped operations.

    Raises:
        HTTPException(500): If owner_id is missing
    """
    if not owner_id:
        print(f"[TENANT] Missing owner id: {owner_id!r}")
        raise HTTPException(status_code=500, detail="Owner scope missing - this is a server error")
    return owner_id


def assert_rows_scoped(rows: Sequence[Mapping[str, Any]], owner_id: str, label: str = "") -> None:
    """
    Guardrail: every returned row must belong to owner_id.

    Args:
        rows: Result rows (mappings with a user_id column)
        owner_id: Expected owner
        label: Identifier for logging (e.g., endpoint name)

    Raises:
        RuntimeError: If user_id was not selected (programming error)
        HTTPException(500): If any row belongs to someone else
    """
    mismatches = []

    for i, row in enumerate(rows):
        if OWNER_COLUMN not in row:
            raise RuntimeError(f"[TENANT] Query missing {OWNER_COLUMN} in SELECT for {label or 'unknown endpoint'}")
        if row[OWNER_COLUMN] != owner_id:
            mismatches.append({"index": i, "found": row[OWNER_COLUMN]})

    if mismatches:
        print(f"[TENANT] Ownership violation{f' in {label}' if label else ''}: "
              f"{len(mismatches)} row(s) with mismatched {OWNER_COLUMN}")
        if IS_DEV:
            print(f"[TENANT][DEV] Expected {OWNER_COLUMN}={owner_id}, mismatches: {mismatches[:3]}")
        raise HTTPException(
            status_code=500,
            detail="Ownership violation detected - this is a server error",
        )


def assert_row_scoped(row: Optional[Mapping[str, Any]], owner_id: str, label: str = "") -> None:
    """Single-row variant of assert_rows_scoped; None (the 404 case) passes."""
    if row is None:
        return
    assert_rows_scoped([row], owner_id, label=label)


def execute_scoped(
    conn: Connection,
    sql: str,
    params: Dict[str, Any],
    owner_id: str,
    label: str = "",
) -> Result:
    """
    Execute a query on an owned table after checking it is owner-filtered.

    The check is a substring test: the SQL must mention user_id and bind
    :owner_id, and params["owner_id"] must equal the caller.

    Raises:
        HTTPException(500): If the query is not scoped to owner_id
    """
    require_owner_id(owner_id)

    sql_lower = sql.lower()
    if any(table in sql_lower for table in OWNED_TABLES):
        scoped = (
            OWNER_COLUMN in sql_lower
            and ":owner_id" in sql_lower
            and params.get("owner_id") == owner_id
        )
        if not scoped:
            print(f"[TENANT] Query missing '{OWNER_COLUMN}' filter{f' in {label}' if label else ''}")
            if IS_DEV:
                print(f"[TENANT][DEV] SQL: {' '.join(sql.split())[:100]}...")
            raise HTTPException(
                status_code=500,
                detail=f"Unsafe query detected - missing {OWNER_COLUMN} filter",
            )

    return execute_query(conn, sql, params)
