"""
Role and permission resolution for staff management.

The actor's authority is per club and comes from ``GET /clubs/my``. A club
record grants owner authority when ``role == owner`` or ``is_owner`` is set;
both are checked everywhere.

Rules:
- owner may change the role of, or remove, anyone in the club except another
  owner;
- admin may remove a coach, and nothing else;
- coach has no management authority.

The backend re-validates every action; these checks only decide what the UI
offers and short-circuit calls that would be rejected.
"""

from typing import Iterable, Optional

from services.staff_service.models import Role, RoleOrigin, StaffAction
from services.staff_service.schemas.backend import ClubWithRole
from services.staff_service.schemas.roster import ClubPermissions, Employee, RosterEntry
from services.staff_service.services.roles import outranks


def can_act_on(
    actor_role: Optional[Role],
    target_role: Role,
    action: StaffAction,
    *,
    actor_is_owner: bool = False,
) -> bool:
    """Whether an actor holding ``actor_role`` in a club may perform ``action``
    on a target holding ``target_role`` in the same club."""
    if actor_role == Role.OWNER or actor_is_owner:
        return outranks(Role.OWNER, target_role)
    if actor_role == Role.ADMIN:
        return action == StaffAction.REMOVE and outranks(Role.ADMIN, target_role)
    return False


def find_club(actor_clubs: Iterable[ClubWithRole], club_id: int) -> Optional[ClubWithRole]:
    for club_role in actor_clubs:
        if club_role.club.id == club_id:
            return club_role
    return None


def is_owner_of_club(actor_clubs: Iterable[ClubWithRole], club_id: int) -> bool:
    club_role = find_club(actor_clubs, club_id)
    return bool(club_role and (club_role.role == Role.OWNER or club_role.is_owner))


def is_manager_of_club(actor_clubs: Iterable[ClubWithRole], club_id: int) -> bool:
    """Owner or admin of the club."""
    club_role = find_club(actor_clubs, club_id)
    if club_role is None:
        return False
    return club_role.role in (Role.OWNER, Role.ADMIN) or club_role.is_owner


def manageable_clubs(actor_clubs: Iterable[ClubWithRole]) -> list[int]:
    """Ids of clubs where the actor is owner or admin."""
    actor_clubs = list(actor_clubs)
    return [
        cr.club.id for cr in actor_clubs if is_manager_of_club(actor_clubs, cr.club.id)
    ]


def target_role_in_club(employee: Employee, club_id: int) -> Role:
    """The employee's role in ``club_id``, else their primary role."""
    state = employee.club_role(club_id)
    return state.role if state else employee.primary_role


def is_allowed(
    actor_clubs: Iterable[ClubWithRole],
    employee: Employee,
    club_id: int,
    action: StaffAction,
) -> bool:
    club_role = find_club(actor_clubs, club_id)
    if club_role is None:
        return False
    return can_act_on(
        club_role.role,
        target_role_in_club(employee, club_id),
        action,
        actor_is_owner=club_role.is_owner,
    )


def club_permissions(
    actor_clubs: Iterable[ClubWithRole], employee: Employee, club_id: int
) -> dict[str, bool]:
    """Pending invitation slots are never editable here; the invitation is
    deleted instead."""
    state = employee.club_role(club_id)
    if state is not None and state.origin == RoleOrigin.INVITATION:
        return {"can_delete": False, "can_change_role": False}
    actor_clubs = list(actor_clubs)
    return {
        "can_delete": is_allowed(actor_clubs, employee, club_id, StaffAction.REMOVE),
        "can_change_role": is_allowed(
            actor_clubs, employee, club_id, StaffAction.CHANGE_ROLE
        ),
    }


def can_manage_employee(actor_clubs: Iterable[ClubWithRole], employee: Employee) -> bool:
    """Owner or admin in at least one of the employee's clubs."""
    actor_clubs = list(actor_clubs)
    return any(is_manager_of_club(actor_clubs, club_id) for club_id in employee.club_ids)


def annotate_employee(
    actor_clubs: Iterable[ClubWithRole], employee: Employee
) -> RosterEntry:
    """Copy of ``employee`` carrying the actor's permissions in each of its clubs."""
    actor_clubs = list(actor_clubs)
    permissions = [
        ClubPermissions(
            club_id=club_id,
            is_owner=is_owner_of_club(actor_clubs, club_id),
            **club_permissions(actor_clubs, employee, club_id),
        )
        for club_id in employee.club_ids
    ]
    return RosterEntry(
        **employee.model_dump(),
        can_edit=can_manage_employee(actor_clubs, employee),
        permissions=permissions,
    )
