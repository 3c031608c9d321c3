from typing import Any, List, Optional

from pydantic import BaseModel, field_validator
from services.staff_service.models import Role
from services.staff_service.schemas.backend import coerce_role
from services.staff_service.schemas.roster import Employee


class InvitationDraft(BaseModel):
    first_name: str = ""
    last_name: str = ""
    phone: str = "+7"
    role: Role = Role.COACH
    club_ids: List[int] = []

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> Role:
        return coerce_role(value)


class RoleChangeRequest(BaseModel):
    role: Role


class InviteResponse(BaseModel):
    invited_club_ids: List[int]
    alerts: List[str] = []


class StaffActionResponse(BaseModel):
    """Outcome of a roster mutation plus the alerts the UI should show."""

    ok: bool
    alerts: List[str] = []
    employee: Optional[Employee] = None
