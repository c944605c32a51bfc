"""
backend/schemas.py

Pydantic request schemas for auth and projects.

Handlers surface only the first violated rule (first_error); all_errors keeps
the full per-field map for callers that want it.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

from email_validator import EmailNotValidError, validate_email
from fastapi import HTTPException
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from backend.models import ProjectStatus

MAX_BUDGET = 10_000_000
MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500
MIN_PASSWORD_LENGTH = 6
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10

# Messages for fields that are absent altogether
REQUIRED_MESSAGES = {
    "email": "Email is required",
    "password": "Password is required",
    "name": "Name is required",
    "deadline": "Deadline is required",
    "teamMember": "Team member is required",
    "budget": "Budget is required",
}

FIELD_LABELS = {
    "email": "Email",
    "password": "Password",
    "name": "Name",
    "description": "Description",
    "status": "Status",
    "deadline": "Deadline",
    "teamMember": "Team member",
    "budget": "Budget",
    "page": "Page",
    "limit": "Limit",
    "search": "Search",
}

StatusChoices = ", ".join(s.value for s in ProjectStatus)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


# ========================================================================
# ERROR FORMATTING
# ========================================================================

def _field_name(error: Dict[str, Any]) -> str:
    loc = [part for part in error.get("loc", ()) if isinstance(part, str)]
    return loc[-1] if loc else "body"


def error_message(error: Dict[str, Any]) -> str:
    """Turn one pydantic error dict into a client-facing sentence."""
    field = _field_name(error)
    label = FIELD_LABELS.get(field, field)
    kind = error.get("type", "")

    if kind == "value_error":
        return str(error.get("ctx", {}).get("error", error.get("msg", "Invalid value")))
    if kind == "missing":
        return REQUIRED_MESSAGES.get(field, f"{label} is required")
    if kind == "enum":
        return f"{label} must be one of {StatusChoices}"
    if kind in ("int_parsing", "int_type", "int_from_float", "float_type", "float_parsing"):
        return f"{label} must be a number"
    if kind in ("string_type",):
        return f"{label} must be a string"
    if kind == "model_type" or field == "body":
        return "Request body must be a JSON object"
    if kind == "extra_forbidden":
        return f"Unknown field: {field}"
    return f"{label}: {error.get('msg', 'invalid value')}"


def first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    return error_message(errors[0])


def all_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Aggregate {field: [messages]} map."""
    grouped: Dict[str, List[str]] = {}
    for error in exc.errors():
        grouped.setdefault(_field_name(error), []).append(error_message(error))
    return grouped


def parse_or_400(schema: Type[SchemaT], data: Any) -> SchemaT:
    """
    Validate raw input against a schema.

    Raises:
        HTTPException(400): With the first violated rule as detail
    """
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=first_error(e))


# ========================================================================
# FIELD RULES
# ========================================================================

def _check_length(value: str, minimum: int, maximum: int, required_msg: str, too_long_msg: str) -> str:
    if len(value) < minimum:
        raise ValueError(required_msg)
    if len(value) > maximum:
        raise ValueError(too_long_msg)
    return value


def _normalize_email(value: str) -> str:
    try:
        result = validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Invalid email address")
    return result.normalized.lower()


def parse_deadline(value: str) -> str:
    """
    Accept a calendar date or an ISO-8601 datetime and keep only the date part.

    Raises:
        ValueError: If the value cannot be parsed
    """
    text = value.strip()
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        pass
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date().isoformat()
    except ValueError:
        raise ValueError("Invalid date format")


# ========================================================================
# AUTH SCHEMAS
# ========================================================================

class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v: str) -> str:
        return _normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v


class RegisterRequest(LoginRequest):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_length(v.strip(), 1, MAX_NAME_LENGTH, "Name is required", "Name too long")


# ========================================================================
# PROJECT SCHEMAS
# ========================================================================

class ProjectFields(BaseModel):
    """Shared per-field rules for create and update."""
    model_config = ConfigDict(populate_by_name=True)

    @field_validator("name", check_fields=False)
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_length(v.strip(), 1, MAX_NAME_LENGTH, "Project name is required", "Name too long")

    @field_validator("description", check_fields=False)
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > MAX_DESCRIPTION_LENGTH:
            raise ValueError("Description too long")
        return v

    @field_validator("deadline", check_fields=False)
    @classmethod
    def validate_deadline(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return parse_deadline(v)

    @field_validator("team_member", check_fields=False)
    @classmethod
    def validate_team_member(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_length(v.strip(), 1, MAX_NAME_LENGTH, "Team member is required", "Name too long")

    @field_validator("budget", check_fields=False)
    @classmethod
    def validate_budget(cls, v: Optional[float]) -> Optional[float]:
        if v is None:
            return v
        if math.isnan(v):
            raise ValueError("Budget must be a number")
        if v < 0:
            raise ValueError("Budget must be positive")
        if v > MAX_BUDGET:
            raise ValueError("Budget too high")
        return float(v)


class ProjectCreateRequest(ProjectFields):
    name: str
    description: Optional[str] = Field(None)
    status: ProjectStatus = ProjectStatus.ACTIVE
    deadline: str
    team_member: str = Field(..., alias="teamMember")
    # strict: "1000" is rejected, 1000 and 1000.5 are accepted
    budget: float = Field(..., strict=True)


class ProjectUpdateRequest(ProjectFields):
    """
    Partial update. Use changes() to get only what the client supplied.

    A null description clears it; null for any other field is ignored.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    deadline: Optional[str] = None
    team_member: Optional[str] = Field(None, alias="teamMember")
    budget: Optional[float] = Field(None, strict=True)

    def changes(self) -> Dict[str, Any]:
        supplied = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in supplied.items()
            if value is not None or key == "description"
        }


class ProjectQuery(BaseModel):
    """List query parameters; string values from the URL are coerced."""
    status: Optional[ProjectStatus] = None
    search: Optional[str] = None
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @model_validator(mode="before")
    @classmethod
    def drop_empty_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v not in ("", None)}
        return data

    @field_validator("search")
    @classmethod
    def trim_search(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None

    @field_validator("page")
    @classmethod
    def validate_page(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Page must be at least 1")
        return v

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v: int) -> int:
        if v < 1 or v > MAX_PAGE_SIZE:
            raise ValueError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
        return v
