"""
Roster mutations: role changes, removals, invitation management.

Each operation calls the backend first and touches the held roster only
after the call succeeded. Failures are reported through the host bridge and
leave local state as it was.
"""

import re
from typing import Iterable, Optional, Sequence

from libs.auth.bridge import HostBridge
from libs.common.errors import BackendError, ValidationFailed
from libs.common.logging import get_logger
from libs.common.service_client import BackendClient
from services.staff_service.models import Role, RoleOrigin, StaffAction
from services.staff_service.schemas.backend import ClubWithRole
from services.staff_service.schemas.roster import Employee, EmployeeFilters
from services.staff_service.schemas.staff import InvitationDraft
from services.staff_service.services.identity import identity_key
from services.staff_service.services.permissions import is_allowed
from services.staff_service.services.reconciler import remove_invitation

logger = get_logger(__name__)

ASSIGNABLE_ROLES = (Role.ADMIN, Role.COACH)

# +7 followed by ten digits once everything but digits and "+" is dropped.
_PHONE_PATTERN = re.compile(r"^\+7\d{10}$")
_PHONE_JUNK = re.compile(r"[^0-9+]")

MSG_ROLE_CHANGED = "Role changed"
MSG_ROLE_CHANGE_FAILED = "Failed to change role"
MSG_REMOVED = "Employee removed from club"
MSG_REMOVE_FAILED = "Failed to remove employee from club"
MSG_INVITATION_DELETED = "Invitation deleted"
MSG_INVITATION_DELETE_FAILED = "Failed to delete invitation"
MSG_INVITED = "Invitation sent"
MSG_INVITE_FAILED = "Failed to send invitation"
MSG_NOT_ALLOWED = "You do not have permission for this action"


def clean_phone(phone: str) -> str:
    return _PHONE_JUNK.sub("", phone or "")


def is_phone_valid(phone: str) -> bool:
    return bool(_PHONE_PATTERN.match(clean_phone(phone)))


def phone_exists(phone: str, existing: Iterable[Employee]) -> bool:
    key = identity_key(phone)
    return any(employee.identity_key == key for employee in existing)


def validate_invitation(
    draft: InvitationDraft, existing: Iterable[Employee]
) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not draft.first_name.strip():
        errors["first_name"] = "first_name_required"
    if not draft.last_name.strip():
        errors["last_name"] = "last_name_required"
    if not is_phone_valid(draft.phone):
        errors["phone"] = "phone_invalid"
    elif phone_exists(draft.phone, existing):
        errors["phone"] = "phone_exists"
    if not draft.club_ids:
        errors["clubs"] = "club_required"
    if draft.role not in ASSIGNABLE_ROLES:
        errors["role"] = "role_not_assignable"
    return errors


async def invite_employee(
    client: BackendClient,
    bridge: HostBridge,
    draft: InvitationDraft,
    existing: Sequence[Employee],
) -> list[int]:
    """Send an invitation to every selected club, in order.

    Returns the ids of clubs that accepted the invitation. A failure stops
    the sequence; invitations already sent stay sent.

    Raises:
        ValidationFailed: before any request when the draft is invalid.
    """
    errors = validate_invitation(draft, existing)
    if errors:
        raise ValidationFailed(errors)

    invited: list[int] = []
    for club_id in dict.fromkeys(draft.club_ids):
        try:
            await client.create_invitation(
                club_id, phone_number=clean_phone(draft.phone), role=draft.role.value
            )
        except BackendError as e:
            logger.error("Invitation to club %s failed: %s", club_id, e)
            bridge.show_alert(MSG_INVITE_FAILED)
            return invited
        invited.append(club_id)

    bridge.show_alert(MSG_INVITED)
    return invited


async def change_role(
    client: BackendClient,
    bridge: HostBridge,
    actor_clubs: Sequence[ClubWithRole],
    employee: Employee,
    club_id: int,
    role: Role,
) -> bool:
    state = employee.club_role(club_id)
    if (
        state is None
        or state.origin == RoleOrigin.INVITATION
        or employee.id is None
        or role not in ASSIGNABLE_ROLES
        or not is_allowed(actor_clubs, employee, club_id, StaffAction.CHANGE_ROLE)
    ):
        bridge.show_alert(MSG_NOT_ALLOWED)
        return False

    try:
        await client.change_role(club_id, employee.id, role.value)
    except BackendError as e:
        logger.error(
            "Role change for user %s in club %s failed: %s", employee.id, club_id, e
        )
        bridge.show_alert(MSG_ROLE_CHANGE_FAILED)
        return False

    state.role = role
    employee.refresh()
    bridge.show_alert(MSG_ROLE_CHANGED)
    return True


async def remove_from_club(
    client: BackendClient,
    bridge: HostBridge,
    actor_clubs: Sequence[ClubWithRole],
    employee: Employee,
    club_id: int,
) -> bool:
    """Remove a confirmed member from one club.

    Pending invitation slots are cancelled with ``delete_invitation`` instead.
    """
    state = employee.club_role(club_id)
    if (
        state is None
        or employee.id is None
        or state.origin == RoleOrigin.INVITATION
        or not is_allowed(actor_clubs, employee, club_id, StaffAction.REMOVE)
    ):
        bridge.show_alert(MSG_NOT_ALLOWED)
        return False

    try:
        await client.remove_member(club_id, employee.id)
    except BackendError as e:
        logger.error(
            "Removing user %s from club %s failed: %s", employee.id, club_id, e
        )
        bridge.show_alert(MSG_REMOVE_FAILED)
        return False

    employee.club_roles = [s for s in employee.club_roles if s.club_id != club_id]
    employee.club_ids = [c for c in employee.club_ids if c != club_id]
    employee.refresh()
    bridge.show_alert(MSG_REMOVED)
    return True


async def delete_invitation(
    client: BackendClient,
    bridge: HostBridge,
    employees: list[Employee],
    invitation_id: int,
) -> bool:
    try:
        await client.delete_invitation(invitation_id)
    except BackendError as e:
        logger.error("Deleting invitation %s failed: %s", invitation_id, e)
        bridge.show_alert(MSG_INVITATION_DELETE_FAILED)
        return False

    remove_invitation(employees, invitation_id)
    bridge.show_alert(MSG_INVITATION_DELETED)
    return True


def find_employee(
    employees: Iterable[Employee],
    *,
    user_id: Optional[int] = None,
    invitation_id: Optional[int] = None,
) -> Optional[Employee]:
    for employee in employees:
        if user_id is not None and employee.id == user_id:
            return employee
        if invitation_id is not None and any(
            s.invitation_id == invitation_id for s in employee.club_roles
        ):
            return employee
    return None


def filter_employees(
    employees: Iterable[Employee], filters: EmployeeFilters
) -> list[Employee]:
    """Search by name or phone, then narrow by primary role and club."""
    search = filters.search.strip()
    search_lower = search.lower()
    search_phone = identity_key(search)

    result = []
    for employee in employees:
        if search:
            name_match = search_lower in employee.full_name.lower()
            phone_match = bool(search_phone) and search_phone in identity_key(
                employee.phone
            )
            if not name_match and not phone_match:
                continue
        if filters.role and employee.primary_role != filters.role:
            continue
        if filters.club_id is not None and filters.club_id not in employee.club_ids:
            continue
        result.append(employee)
    return result
