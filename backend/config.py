# backend/config.py
# Environment-aware configuration for the project tracker backend

import os
from typing import Literal

# Environment detection
ENV: Literal["dev", "staging", "prod"] = os.environ.get("ENV", "dev")  # type: ignore
IS_DEV = (ENV == "dev")
IS_STAGING = (ENV == "staging")
IS_PROD = (ENV == "prod")

# JWT configuration
# The signing secret has no fallback: the service refuses to start without it.
SECRET_KEY = os.environ.get("JWT_SECRET", "").strip()
if not SECRET_KEY:
    print("[CONFIG] CRITICAL: JWT_SECRET is not set in environment variables!")
    raise RuntimeError("JWT_SECRET environment variable is required")

ALGORITHM = "HS256"
JWT_EXPIRES_IN = os.environ.get("JWT_EXPIRES_IN", "7d").strip() or "7d"

# Password hashing work factor
BCRYPT_ROUNDS = 12

# Database configuration
# Render and Heroku still hand out postgres:// URLs, which SQLAlchemy rejects
DATABASE_URL = os.environ.get("DATABASE_URL", "").strip()
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = "postgresql://" + DATABASE_URL[len("postgres://"):]

if not DATABASE_URL:
    if IS_DEV:
        DATABASE_URL = "sqlite:///project_tracker.db"
    else:
        print("[CONFIG] CRITICAL: DATABASE_URL is not set")
        raise RuntimeError("DATABASE_URL environment variable is required")

IS_POSTGRES = DATABASE_URL.startswith("postgresql")
IS_SQLITE = DATABASE_URL.startswith("sqlite")

# CORS origins (expand for staging/prod)
CORS_ORIGINS = [
    "http://localhost:8501",  # Streamlit default
    "http://127.0.0.1:8501",
]

if IS_STAGING or IS_PROD:
    extra_origins = os.environ.get("CORS_ORIGINS", "")
    if extra_origins:
        CORS_ORIGINS.extend(o.strip() for o in extra_origins.split(",") if o.strip())

print(f"[CONFIG] Environment: {ENV}")
print(f"[CONFIG] Database: {'PostgreSQL' if IS_POSTGRES else 'SQLite' if IS_SQLITE else 'other'}")
print(f"[CONFIG] Token expiry: {JWT_EXPIRES_IN}")
