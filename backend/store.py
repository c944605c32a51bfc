"""
backend/store.py

Persistence gateway for users and projects.

Every project read/update/delete is filtered by the owning user id
(user_id = :owner_id) and goes through tenant.execute_scoped. Each function
opens one connection from the shared engine and performs one logical
operation; there are no multi-statement transactions.
"""

from __future__ import annotations

import math
import uuid
from typing import Any, Dict, List, Optional, Tuple

from backend.db import commit, execute_query, get_db_connection
from backend.models import Project, ProjectStatus, User, UserRole, utc_now_iso
from backend.tenant import assert_row_scoped, assert_rows_scoped, execute_scoped

PROJECT_COLUMNS = (
    "id, name, description, status, deadline, team_member, budget, "
    "user_id, created_at, updated_at"
)
USER_COLUMNS = "id, email, name, password_hash, role, created_at, updated_at"

# Client-facing field -> column; anything else is never written
UPDATABLE_PROJECT_COLUMNS = {
    "name": "name",
    "description": "description",
    "status": "status",
    "deadline": "deadline",
    "team_member": "team_member",
    "budget": "budget",
}

SEARCH_COLUMNS = ("name", "team_member", "description")


def new_id() -> str:
    return str(uuid.uuid4())


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def _db_value(value: Any) -> Any:
    if isinstance(value, (ProjectStatus, UserRole)):
        return value.value
    return value


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the search text is matched literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# ---------------------------------------------------------
# Users
# ---------------------------------------------------------
def create_user(email: str, name: str, password_hash: str, role: UserRole = UserRole.USER) -> User:
    """
    Insert a user.

    Raises:
        sqlalchemy.exc.IntegrityError: If the email is already registered
    """
    now = utc_now_iso()
    user = User(
        id=new_id(),
        email=email,
        name=name,
        password_hash=password_hash,
        role=role,
        created_at=now,
        updated_at=now,
    )
    with get_db_connection() as conn:
        execute_query(
            conn,
            f"INSERT INTO users ({USER_COLUMNS}) "
            "VALUES (:id, :email, :name, :password_hash, :role, :created_at, :updated_at)",
            {k: _db_value(v) for k, v in user.model_dump().items()},
        )
        commit(conn)
    return user


def find_user_by_email(email: str) -> Optional[User]:
    with get_db_connection() as conn:
        row = execute_query(
            conn, f"SELECT {USER_COLUMNS} FROM users WHERE email = :email", {"email": email}
        ).mappings().first()
    return User.from_row(row) if row else None


def find_user_by_id(user_id: str) -> Optional[User]:
    with get_db_connection() as conn:
        row = execute_query(
            conn, f"SELECT {USER_COLUMNS} FROM users WHERE id = :id", {"id": user_id}
        ).mappings().first()
    return User.from_row(row) if row else None


# ---------------------------------------------------------
# Projects
# ---------------------------------------------------------
def create_project(owner_id: str, data: Dict[str, Any]) -> Project:
    """
    Insert a project owned by owner_id.

    Args:
        owner_id: Authenticated caller (never taken from the request body)
        data: Validated fields (name, description, status, deadline, team_member, budget)
    """
    now = utc_now_iso()
    project = Project(
        id=new_id(),
        name=data["name"],
        description=data.get("description"),
        status=data.get("status") or ProjectStatus.ACTIVE,
        deadline=data["deadline"],
        team_member=data["team_member"],
        budget=data["budget"],
        user_id=owner_id,
        created_at=now,
        updated_at=now,
    )
    params = {k: _db_value(v) for k, v in project.model_dump().items() if k != "user_id"}
    params["owner_id"] = owner_id

    with get_db_connection() as conn:
        execute_scoped(
            conn,
            f"INSERT INTO projects ({PROJECT_COLUMNS}) "
            "VALUES (:id, :name, :description, :status, :deadline, :team_member, :budget, "
            ":owner_id, :created_at, :updated_at)",
            params,
            owner_id,
            label="create_project",
        )
        commit(conn)
    return project


def find_project(project_id: str, owner_id: str) -> Optional[Project]:
    """Return the project only if owner_id owns it; missing and not-owned look the same."""
    with get_db_connection() as conn:
        row = execute_scoped(
            conn,
            f"SELECT {PROJECT_COLUMNS} FROM projects WHERE id = :id AND user_id = :owner_id",
            {"id": project_id, "owner_id": owner_id},
            owner_id,
            label="find_project",
        ).mappings().first()
    assert_row_scoped(row, owner_id, label="find_project")
    return Project.from_row(row) if row else None


def _list_filter(
    owner_id: str,
    status: Optional[ProjectStatus],
    search: Optional[str],
) -> Tuple[str, Dict[str, Any]]:
    clauses = ["user_id = :owner_id"]
    params: Dict[str, Any] = {"owner_id": owner_id}

    if status:
        clauses.append("status = :status")
        params["status"] = _db_value(status)

    if search:
        params["pattern"] = f"%{escape_like(search.lower())}%"
        matches = [f"LOWER({col}) LIKE :pattern ESCAPE '\\'" for col in SEARCH_COLUMNS]
        clauses.append("(" + " OR ".join(matches) + ")")

    return " AND ".join(clauses), params


def count_projects(
    owner_id: str,
    status: Optional[ProjectStatus] = None,
    search: Optional[str] = None,
) -> int:
    where, params = _list_filter(owner_id, status, search)
    with get_db_connection() as conn:
        total = execute_scoped(
            conn,
            f"SELECT COUNT(*) FROM projects WHERE {where}",
            params,
            owner_id,
            label="count_projects",
        ).scalar_one()
    return int(total)


def list_projects(
    owner_id: str,
    status: Optional[ProjectStatus] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Project], int]:
    """
    One page of the caller's projects, newest first, plus the total match count.

    Returns:
        (projects, total)
    """
    where, params = _list_filter(owner_id, status, search)
    params["limit"] = limit
    params["offset"] = (page - 1) * limit

    with get_db_connection() as conn:
        rows = execute_scoped(
            conn,
            f"SELECT {PROJECT_COLUMNS} FROM projects WHERE {where} "
            "ORDER BY created_at DESC, id DESC LIMIT :limit OFFSET :offset",
            params,
            owner_id,
            label="list_projects",
        ).mappings().all()

    assert_rows_scoped(rows, owner_id, label="list_projects")
    total = count_projects(owner_id, status, search)
    return [Project.from_row(row) for row in rows], total


def update_project(project_id: str, owner_id: str, changes: Dict[str, Any]) -> Optional[Project]:
    """
    Apply only the supplied fields; updated_at is bumped when anything changes.

    Returns:
        The updated project, or None if it does not exist for owner_id
    """
    fields = []
    params: Dict[str, Any] = {"id": project_id, "owner_id": owner_id}
    for key, value in changes.items():
        column = UPDATABLE_PROJECT_COLUMNS.get(key)
        if column is None:
            continue
        fields.append(f"{column} = :{column}")
        params[column] = _db_value(value)

    if not fields:
        return find_project(project_id, owner_id)

    fields.append("updated_at = :updated_at")
    params["updated_at"] = utc_now_iso()

    with get_db_connection() as conn:
        result = execute_scoped(
            conn,
            f"UPDATE projects SET {', '.join(fields)} WHERE id = :id AND user_id = :owner_id",
            params,
            owner_id,
            label="update_project",
        )
        commit(conn)
        if result.rowcount == 0:
            return None

    return find_project(project_id, owner_id)


def delete_project(project_id: str, owner_id: str) -> bool:
    with get_db_connection() as conn:
        result = execute_scoped(
            conn,
            "DELETE FROM projects WHERE id = :id AND user_id = :owner_id",
            {"id": project_id, "owner_id": owner_id},
            owner_id,
            label="delete_project",
        )
        commit(conn)
        return result.rowcount > 0


# ---------------------------------------------------------
# Bulk reset (seed tooling only, never reachable from HTTP)
# ---------------------------------------------------------
def delete_all() -> None:
    with get_db_connection() as conn:
        execute_query(conn, "DELETE FROM projects")
        execute_query(conn, "DELETE FROM users")
        commit(conn)
