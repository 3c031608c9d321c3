"""Typed records for payloads returned by the remote REST backend.

One record per endpoint shape. Optional fields are nullable rather than
left as open dicts so the reconciler can rely on their presence.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, field_validator
from services.staff_service.models import Role

# The backend and older clients still use "trainer" for coaches.
_ROLE_ALIASES = {"trainer": Role.COACH}


def coerce_role(value: Any) -> Role:
    """Map a backend role string onto ``Role``; unknown values become coach."""
    if isinstance(value, Role):
        return value
    text = str(value or "").strip().lower()
    if text in _ROLE_ALIASES:
        return _ROLE_ALIASES[text]
    try:
        return Role(text)
    except ValueError:
        return Role.COACH


class _RoleField(BaseModel):
    @field_validator("role", mode="before", check_fields=False)
    @classmethod
    def normalize_role(cls, value: Any) -> Role:
        return coerce_role(value)


# --- Team (GET /team/) ---


class ClubAndRole(_RoleField):
    club_id: int
    club_name: Optional[str] = None
    role: Role = Role.COACH
    is_active: bool = True
    joined_at: Optional[datetime] = None
    sections_count: Optional[int] = None


class MembershipRecord(BaseModel):
    id: int
    telegram_id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    username: Optional[str] = None
    photo_url: Optional[str] = None
    clubs_and_roles: List[ClubAndRole] = []
    created_at: Optional[datetime] = None


# --- Invitations (GET /invitations/club/{club_id}) ---


class InvitationRecord(_RoleField):
    id: int
    phone_number: str
    role: Role = Role.COACH
    club_id: Optional[int] = None
    status: str = "pending"
    is_used: bool = False
    created_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        """Still awaiting an answer: pending and not consumed."""
        return self.status == "pending" and not self.is_used


# --- Clubs (GET /clubs/my) ---


class ClubRecord(BaseModel):
    id: int
    name: Optional[str] = None


class ClubWithRole(_RoleField):
    club: ClubRecord
    role: Role = Role.COACH
    is_owner: bool = False


# --- Sections (GET /sections/my) ---


class GroupSummary(BaseModel):
    id: int
    name: Optional[str] = None
    level: Optional[str] = None
    capacity: Optional[int] = None


class SectionRecord(BaseModel):
    id: int
    club_id: int
    name: Optional[str] = None
    groups: List[GroupSummary] = []
