from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field
from services.staff_service.models import Role, RoleOrigin, RoleStatus
from services.staff_service.services.roles import primary_role


class ClubRoleState(BaseModel):
    """One person's role in one club."""

    club_id: int
    role: Role
    status: RoleStatus
    origin: RoleOrigin = RoleOrigin.MEMBERSHIP
    invitation_id: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self.status == RoleStatus.ACTIVE


class Employee(BaseModel):
    """A reconciled roster entry: one per distinct phone identity key."""

    identity_key: str
    id: Optional[int] = None  # backend user id; None for ghosts
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    telegram_username: Optional[str] = None
    photo_url: Optional[str] = None
    primary_role: Role = Role.COACH
    club_ids: List[int] = []
    club_roles: List[ClubRoleState] = []
    status: RoleStatus = RoleStatus.PENDING
    invitation_id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_ghost(self) -> bool:
        """Exists only because of an unaccepted invitation."""
        return (
            not self.first_name
            and not self.last_name
            and self.status == RoleStatus.PENDING
        )

    def club_role(self, club_id: int) -> Optional[ClubRoleState]:
        for state in self.club_roles:
            if state.club_id == club_id:
                return state
        return None

    def add_club_role(self, state: ClubRoleState) -> bool:
        """Append ``state`` unless this club already has one. Returns True if added."""
        if self.club_role(state.club_id) is not None:
            return False
        self.club_roles.append(state)
        if state.club_id not in self.club_ids:
            self.club_ids.append(state.club_id)
        return True

    def refresh(self) -> None:
        """Recompute the primary role and the top-level status."""
        self.primary_role = primary_role(s.role for s in self.club_roles)
        self.status = (
            RoleStatus.ACTIVE
            if any(s.is_active for s in self.club_roles)
            else RoleStatus.PENDING
        )


class ClubPermissions(BaseModel):
    """What the current actor may do to an employee within one club."""

    club_id: int
    is_owner: bool = False  # actor owns this club
    can_delete: bool = False
    can_change_role: bool = False


class RosterEntry(Employee):
    can_edit: bool = False
    permissions: List[ClubPermissions] = []


class EmployeeFilters(BaseModel):
    search: str = ""
    role: Optional[Role] = None
    club_id: Optional[int] = None


class RosterResponse(BaseModel):
    employees: List[RosterEntry]
    total: int
    failed_club_ids: List[int] = Field(
        default_factory=list,
        description="Clubs whose invitations could not be loaded",
    )
