"""
backend/security.py

Credential & token service.

- Passwords: bcrypt with a fixed work factor (config.BCRYPT_ROUNDS)
- Tokens: stateless HS256 JWTs carrying {userId, email, role} plus iat/exp

There is no server-side session table and no blocklist: a token stays valid
until it expires.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from backend.config import ALGORITHM, BCRYPT_ROUNDS, IS_DEV, JWT_EXPIRES_IN, SECRET_KEY

# bcrypt only looks at the first 72 bytes; newer releases raise instead of truncating
BCRYPT_MAX_BYTES = 72

_EXPIRY_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)
_EXPIRY_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}

REQUIRED_CLAIMS = ("userId", "email", "role")


def parse_expiry(value: str) -> timedelta:
    """
    Parse an expiry window such as "7d", "12h", "30m", "45s" or "3600".

    Raises:
        ValueError: If the value is not a positive duration
    """
    match = _EXPIRY_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid token expiry window: {value!r}")
    amount = int(match.group(1))
    if amount <= 0:
        raise ValueError(f"Token expiry window must be positive: {value!r}")
    unit = _EXPIRY_UNITS[match.group(2).lower()]
    return timedelta(**{unit: amount})


TOKEN_LIFETIME = parse_expiry(JWT_EXPIRES_IN)


# ---------------------------------------------------------
# Passwords
# ---------------------------------------------------------
def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """One-way adaptive hash; the salt and cost are embedded in the result."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash (e.g. legacy seed data)
        return False


# ---------------------------------------------------------
# Tokens
# ---------------------------------------------------------
def create_access_token(claims: Dict[str, Any], lifetime: Optional[timedelta] = None) -> str:
    """
    Sign {userId, email, role} with the server secret.

    Args:
        claims: Must contain userId, email and role
        lifetime: Override for the configured expiry window

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    payload = {key: claims[key] for key in REQUIRED_CLAIMS}
    payload["iat"] = now
    payload["exp"] = now + (lifetime or TOKEN_LIFETIME)
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Verify a bearer token and return its claims.

    Returns None for a bad signature, an expired token, a malformed token or
    missing claims. Callers must not try to tell these cases apart.
    """
    if not token:
        return None
    try:
        payload = jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"require": ["exp", *REQUIRED_CLAIMS]},
        )
    except jwt.PyJWTError as e:
        if IS_DEV:
            print(f"[AUTH] Token rejected: {type(e).__name__}")
        return None

    if not all(isinstance(payload.get(key), str) and payload.get(key) for key in REQUIRED_CLAIMS):
        return None
    return payload
