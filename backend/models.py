from pydantic import BaseModel, Field
from typing import Any, Dict, Mapping, Optional
from datetime import datetime, timezone
from enum import Enum


def utc_now_iso() -> str:
    """UTC timestamp with fixed microsecond precision so text ordering matches time ordering."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


# Enums
class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class ProjectStatus(str, Enum):
    ACTIVE = "ACTIVE"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"


# Models
class User(BaseModel):
    id: str
    email: str
    name: str
    password_hash: str
    role: UserRole = UserRole.USER
    created_at: str = Field(default_factory=utc_now_iso)
    updated_at: str = Field(default_factory=utc_now_iso)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "User":
        return cls(**dict(row))

    def public(self) -> Dict[str, Any]:
        """Identity fields safe to return to the client (never the hash)."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
        }

    def profile(self) -> Dict[str, Any]:
        data = self.public()
        data["createdAt"] = self.created_at
        return data


class Project(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    deadline: str
    team_member: str
    budget: float
    user_id: str
    created_at: str = Field(default_factory=utc_now_iso)
    updated_at: str = Field(default_factory=utc_now_iso)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Project":
        data = dict(row)
        # Postgres may hand back Decimal/date objects depending on driver settings
        data["budget"] = float(data["budget"])
        data["deadline"] = str(data["deadline"])
        return cls(**data)

    def public(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "deadline": self.deadline,
            "teamMember": self.team_member,
            "budget": self.budget,
            "userId": self.user_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
