"""
Staff roster reconciliation.

Combines confirmed team members and per-club pending invitations into one
roster with a single Employee per phone identity key.

Rules:
- Members are folded by identity key; each club role becomes an active
  ClubRoleState unless the backend marks it inactive.
- An open invitation (pending, not used) for a known person adds a pending
  state for its club, unless that person already has a state for the club.
  Membership data always wins the slot.
- Invitations for unknown phones are grouped into one "ghost" Employee per
  key with empty names.
- Primary role and top-level status are derived after merging.

Pure functions with no I/O; ``roster_loader`` does the fetching.
"""

from typing import Iterable, Mapping, Optional, Sequence

from services.staff_service.models import RoleOrigin, RoleStatus
from services.staff_service.schemas.backend import InvitationRecord, MembershipRecord
from services.staff_service.schemas.roster import ClubRoleState, Employee
from services.staff_service.services.identity import (
    identity_key,
    member_identity_key,
)


def _employee_from_member(key: str, member: MembershipRecord) -> Employee:
    return Employee(
        identity_key=key,
        id=member.id,
        first_name=member.first_name or "",
        last_name=member.last_name or "",
        phone=member.phone_number or "",
        telegram_username=member.username,
        photo_url=member.photo_url,
        created_at=member.created_at,
    )


def _add_membership_roles(employee: Employee, member: MembershipRecord) -> None:
    for club_role in member.clubs_and_roles:
        employee.add_club_role(
            ClubRoleState(
                club_id=club_role.club_id,
                role=club_role.role,
                status=(
                    RoleStatus.ACTIVE if club_role.is_active else RoleStatus.PENDING
                ),
                origin=RoleOrigin.MEMBERSHIP,
            )
        )


def _invitation_state(invitation: InvitationRecord, club_id: int) -> ClubRoleState:
    return ClubRoleState(
        club_id=club_id,
        role=invitation.role,
        status=RoleStatus.PENDING,
        origin=RoleOrigin.INVITATION,
        invitation_id=invitation.id,
    )


def _open_invitations(
    invitations_by_club: Mapping[int, Sequence[InvitationRecord]],
) -> Iterable[tuple[int, InvitationRecord]]:
    """Yield ``(club_id, invitation)`` for every open invitation."""
    for club_id, invitations in invitations_by_club.items():
        for invitation in invitations:
            if not invitation.is_open:
                continue
            target_club = (
                invitation.club_id if invitation.club_id is not None else club_id
            )
            yield target_club, invitation


def merge(
    members: Sequence[MembershipRecord],
    invitations_by_club: Mapping[int, Sequence[InvitationRecord]],
) -> list[Employee]:
    """Reconcile members and invitations into a deduplicated roster.

    Inputs are not modified; calling twice on the same inputs gives equal
    results.
    """
    by_key: dict[str, Employee] = {}

    for member in members:
        key = member_identity_key(member.phone_number, member.id)
        employee = by_key.get(key)
        if employee is None:
            employee = _employee_from_member(key, member)
            by_key[key] = employee
        _add_membership_roles(employee, member)

    ghosts: dict[str, Employee] = {}

    for club_id, invitation in _open_invitations(invitations_by_club):
        key = identity_key(invitation.phone_number)
        state = _invitation_state(invitation, club_id)

        employee = by_key.get(key)
        if employee is not None:
            # A state for this club already exists: membership wins.
            employee.add_club_role(state)
            continue

        ghost = ghosts.get(key)
        if ghost is None:
            ghost = Employee(
                identity_key=key,
                phone=invitation.phone_number,
                invitation_id=invitation.id,
                created_at=invitation.created_at,
            )
            ghosts[key] = ghost
        ghost.add_club_role(state)

    roster = list(by_key.values()) + list(ghosts.values())
    for employee in roster:
        employee.refresh()
    return roster


def remove_invitation(employees: list[Employee], invitation_id: int) -> Optional[Employee]:
    """Drop the club state tied to ``invitation_id`` from the held roster.

    Used as the optimistic update after the backend confirmed the delete.
    The employee stays in the list even if it has no states left; it drops
    out on the next reconciliation. Returns the affected employee, if any.
    """
    for employee in employees:
        remaining = [s for s in employee.club_roles if s.invitation_id != invitation_id]
        if len(remaining) == len(employee.club_roles) and (
            employee.invitation_id != invitation_id
        ):
            continue
        employee.club_roles = remaining
        employee.club_ids = [
            club_id
            for club_id in employee.club_ids
            if any(s.club_id == club_id for s in remaining)
        ]
        if employee.invitation_id == invitation_id:
            employee.invitation_id = next(
                (s.invitation_id for s in remaining if s.invitation_id is not None),
                None,
            )
        employee.refresh()
        return employee
    return None
