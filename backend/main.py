# ---------------------------------------------------------
# backend/main.py
# Project Tracker - REST backend
#
# Run: uvicorn backend.main:app --reload (from repo root)
#
# - FastAPI + SQLAlchemy (SQLite locally, PostgreSQL in production)
# - /auth/register, /auth/login, /auth/me : bearer-token auth
# - /projects                              : list (filter/search/paginate), create
# - /projects/{id}                         : get, partial update, delete
# ---------------------------------------------------------

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import CORS_ORIGINS, IS_PROD
from backend.migrate import run_migrations
from backend.responses import register_exception_handlers, success_response
from backend.routes_auth import router as auth_router
from backend.routes_projects import router as projects_router

app = FastAPI(title="Project Tracker API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS if IS_PROD else ["*"],  # Restrict origins in production
    allow_credentials=IS_PROD,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

run_migrations()

# ============================================================================
# API ENDPOINT CLASSIFICATION
# ============================================================================
#
# [PUBLIC] - No authentication required
#   • /health - Health check
#   • /auth/register - User registration
#   • /auth/login - User login
#
# [OWNER_SCOPED] - Requires bearer token; every query filters on the caller
#   • /auth/me - Caller profile
#   • /projects - List / create
#   • /projects/{id} - Get / update / delete (404 when missing OR not owned)
#
# ENFORCEMENT RULES:
# 1. Protected endpoints take AuthContext from require_auth_context()
# 2. Never trust a user id from the payload or query string
# 3. Project SQL goes through tenant.execute_scoped (user_id = :owner_id)
# 4. Every response uses the {success, data|error} envelope
#
# ============================================================================


@app.get("/health")
def health():
    return success_response({"status": "ok"})


app.include_router(auth_router)
app.include_router(projects_router)
