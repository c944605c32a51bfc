"""
backend/auth_context.py

Authentication context for FastAPI dependency injection.

Contains:
- AuthContext: Immutable caller identity derived from the bearer token
- require_auth_context: FastAPI dependency for auth enforcement

Every project query is scoped with ctx.user_id. Never trust a user id
from request bodies or query params.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ConfigDict

from backend.config import IS_DEV
from backend.security import verify_token

UNAUTHORIZED = "Unauthorized"

# auto_error=False: a missing header must yield our 401 envelope, not FastAPI's 403
security = HTTPBearer(auto_error=False)


class AuthContext(BaseModel):
    """
    Caller identity taken from verified token claims.

    Fields:
        user_id: Owning user for every scoped query
        email: Email at the time the token was issued
        role: USER or ADMIN
    """
    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str
    role: str


def require_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthContext:
    """
    Auth dependency for protected routes.

    Usage:
        @router.get("/protected")
        def protected_route(ctx: AuthContext = Depends(require_auth_context)):
            ...

    Raises:
        HTTPException(401): Missing header, bad signature, expired or malformed token
    """
    if credentials is None:
        raise HTTPException(status_code=401, detail=UNAUTHORIZED)

    claims = verify_token(credentials.credentials)
    if claims is None:
        raise HTTPException(status_code=401, detail=UNAUTHORIZED)

    ctx = AuthContext(user_id=claims["userId"], email=claims["email"], role=claims["role"])

    if IS_DEV:
        print(f"[AUTH] Authenticated: user_id={ctx.user_id}, role={ctx.role}")

    return ctx
