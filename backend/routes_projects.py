"""
backend/routes_projects.py

Project CRUD endpoints with owner-scoped queries.

Security guarantees:
- All endpoints require authentication (require_auth_context)
- All queries filtered by ctx.user_id; no client-provided owner id accepted
- A project that exists but belongs to someone else is a 404, same as a missing one
- Input validation via Pydantic schemas (first failing rule -> 400)
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Request
from sqlalchemy.exc import SQLAlchemyError

from backend import store
from backend.auth_context import AuthContext, require_auth_context
from backend.config import IS_DEV
from backend.models import Project
from backend.responses import internal_error, success_response
from backend.schemas import ProjectCreateRequest, ProjectQuery, ProjectUpdateRequest, parse_or_400

PROJECT_NOT_FOUND = "Project not found"

router = APIRouter(
    prefix="/projects",
    tags=["projects"],
)


def _require_owned(project_id: str, ctx: AuthContext) -> Project:
    """Fetch a project owned by the caller or raise 404."""
    try:
        project = store.find_project(project_id, ctx.user_id)
    except SQLAlchemyError as e:
        raise internal_error(e, "find_project")
    if project is None:
        if IS_DEV:
            print(f"[PROJECTS] Access denied or missing: project_id={project_id}, user_id={ctx.user_id}")
        raise HTTPException(status_code=404, detail=PROJECT_NOT_FOUND)
    return project


@router.get("")
def list_projects(request: Request, ctx: AuthContext = Depends(require_auth_context)):
    """
    List the caller's projects.

    Query params:
        status: ACTIVE | ON_HOLD | COMPLETED
        search: case-insensitive substring of name, team member or description
        page: >= 1 (default 1)
        limit: 1-100 (default 10)

    Returns:
        {projects, total, page, limit, totalPages}
    """
    query = parse_or_400(ProjectQuery, dict(request.query_params))

    try:
        projects, total = store.list_projects(
            ctx.user_id,
            status=query.status,
            search=query.search,
            page=query.page,
            limit=query.limit,
        )
    except SQLAlchemyError as e:
        raise internal_error(e, "list_projects")

    if IS_DEV:
        print(f"[PROJECTS] Listed {len(projects)}/{total} for user_id={ctx.user_id}, page={query.page}")

    return success_response({
        "projects": [p.public() for p in projects],
        "total": total,
        "page": query.page,
        "limit": query.limit,
        "totalPages": store.total_pages(total, query.limit),
    })


@router.post("", status_code=201)
def create_project(payload: Any = Body(None), ctx: AuthContext = Depends(require_auth_context)):
    """Create a project owned by the caller; status defaults to ACTIVE."""
    req = parse_or_400(ProjectCreateRequest, payload)

    try:
        project = store.create_project(ctx.user_id, req.model_dump())
    except SQLAlchemyError as e:
        raise internal_error(e, "create_project")

    print(f"[PROJECTS] Created project_id={project.id}, user_id={ctx.user_id}")
    return success_response(project.public(), 201)


@router.get("/{project_id}")
def get_project(
    project_id: str = Path(...),
    ctx: AuthContext = Depends(require_auth_context),
):
    return success_response(_require_owned(project_id, ctx).public())


@router.put("/{project_id}")
def update_project(
    project_id: str = Path(...),
    payload: Any = Body(None),
    ctx: AuthContext = Depends(require_auth_context),
):
    """
    Partial update. Ownership is checked before the body is validated, so a
    foreign id is a 404 even when the body is invalid.
    """
    _require_owned(project_id, ctx)
    req = parse_or_400(ProjectUpdateRequest, payload)

    try:
        project = store.update_project(project_id, ctx.user_id, req.changes())
    except SQLAlchemyError as e:
        raise internal_error(e, "update_project")

    if project is None:
        # Deleted between the ownership check and the update
        raise internal_error(LookupError(f"project {project_id} vanished during update"), "update_project")

    print(f"[PROJECTS] Updated project_id={project_id}, user_id={ctx.user_id}")
    return success_response(project.public())


@router.delete("/{project_id}")
def delete_project(
    project_id: str = Path(...),
    ctx: AuthContext = Depends(require_auth_context),
):
    _require_owned(project_id, ctx)

    try:
        deleted = store.delete_project(project_id, ctx.user_id)
    except SQLAlchemyError as e:
        raise internal_error(e, "delete_project")

    if not deleted:
        raise internal_error(LookupError(f"project {project_id} vanished during delete"), "delete_project")

    print(f"[PROJECTS] Deleted project_id={project_id}, user_id={ctx.user_id}")
    return success_response({"message": "Project deleted successfully"})
