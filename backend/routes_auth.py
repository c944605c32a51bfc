"""
backend/routes_auth.py

Registration, login and profile endpoints.

- register/login are public; /auth/me requires a bearer token
- Login failures never reveal whether the email exists
- Password hashes never leave the server
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from backend import store
from backend.auth_context import UNAUTHORIZED, AuthContext, require_auth_context
from backend.config import IS_DEV
from backend.models import User
from backend.responses import internal_error, success_response
from backend.schemas import LoginRequest, RegisterRequest, parse_or_400
from backend.security import create_access_token, hash_password, verify_password

INVALID_CREDENTIALS = "Invalid email or password"
EMAIL_TAKEN = "Email already registered"

# Verified against when the email is unknown so both login failures cost one bcrypt check
DUMMY_PASSWORD_HASH = hash_password("not-a-real-password")

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


def _token_for(user: User) -> str:
    return create_access_token({"userId": user.id, "email": user.email, "role": user.role.value})


@router.post("/register", status_code=201)
def register(payload: Any = Body(None)):
    """
    Create an account and sign the caller in.

    Returns:
        201 {user, token}

    Raises:
        HTTPException(400): Invalid input or email already registered
        HTTPException(500): Database error
    """
    req = parse_or_400(RegisterRequest, payload)

    try:
        if store.find_user_by_email(req.email):
            print("[REGISTER] Rejected: email already registered")
            raise HTTPException(status_code=400, detail=EMAIL_TAKEN)

        user = store.create_user(
            email=req.email,
            name=req.name,
            password_hash=hash_password(req.password),
        )
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        print("[REGISTER] IntegrityError on insert, treating as duplicate email")
        raise HTTPException(status_code=400, detail=EMAIL_TAKEN)
    except SQLAlchemyError as e:
        raise internal_error(e, "register")

    print(f"[REGISTER] User created with id={user.id}")
    return success_response({"user": user.public(), "token": _token_for(user)}, 201)


@router.post("/login")
def login(payload: Any = Body(None)):
    """
    Exchange email + password for a bearer token.

    Raises:
        HTTPException(400): Invalid input
        HTTPException(401): Unknown email or wrong password (same message)
    """
    req = parse_or_400(LoginRequest, payload)

    try:
        user = store.find_user_by_email(req.email)
    except SQLAlchemyError as e:
        raise internal_error(e, "login")

    if user is None:
        verify_password(req.password, DUMMY_PASSWORD_HASH)
        print("[LOGIN] User not found by email")
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

    if not verify_password(req.password, user.password_hash):
        print(f"[LOGIN] Password mismatch for user_id={user.id}")
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

    if IS_DEV:
        print(f"[LOGIN] Token issued: user_id={user.id}, role={user.role.value}")

    return success_response({"user": user.public(), "token": _token_for(user)})


@router.get("/me")
def me(ctx: AuthContext = Depends(require_auth_context)):
    """Profile of the caller; a token for a deleted user is treated as unauthenticated."""
    try:
        user = store.find_user_by_id(ctx.user_id)
    except SQLAlchemyError as e:
        raise internal_error(e, "me")

    if user is None:
        print(f"[AUTH] Token for missing user: user_id={ctx.user_id}")
        raise HTTPException(status_code=401, detail=UNAUTHORIZED)

    return success_response(user.profile())
