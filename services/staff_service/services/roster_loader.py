"""Fetches roster sources from the backend and reconciles them.

The team list and the caller's clubs are loaded first; then invitations are
requested for every visible club concurrently. A failed invitation request
only empties that club's invitations; the other clubs are unaffected.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional, Sequence

from libs.common.logging import get_logger
from libs.common.service_client import BackendClient
from services.staff_service.schemas.backend import (
    ClubWithRole,
    InvitationRecord,
    MembershipRecord,
    SectionRecord,
)
from services.staff_service.schemas.roster import Employee
from services.staff_service.services.reconciler import merge

logger = get_logger(__name__)


@dataclass
class RosterSnapshot:
    employees: list[Employee]
    clubs: list[ClubWithRole]
    failed_club_ids: list[int] = field(default_factory=list)


async def fetch_members(client: BackendClient) -> list[MembershipRecord]:
    raw = await client.get_staff_members()
    return [MembershipRecord.model_validate(item) for item in raw]


async def fetch_clubs(client: BackendClient) -> list[ClubWithRole]:
    raw = await client.get_clubs_with_role()
    return [ClubWithRole.model_validate(item) for item in raw]


async def fetch_sections(client: BackendClient) -> list[SectionRecord]:
    raw = await client.get_sections()
    return [SectionRecord.model_validate(item) for item in raw]


async def fetch_club_invitations(
    client: BackendClient, club_id: int
) -> list[InvitationRecord]:
    raw = await client.get_club_invitations(club_id)
    return [InvitationRecord.model_validate(item) for item in raw]


async def fetch_invitations_by_club(
    client: BackendClient, club_ids: Sequence[int]
) -> tuple[dict[int, list[InvitationRecord]], list[int]]:
    """Invitations per club plus the ids of clubs whose request failed."""
    club_ids = list(dict.fromkeys(club_ids))
    results = await asyncio.gather(
        *(fetch_club_invitations(client, club_id) for club_id in club_ids),
        return_exceptions=True,
    )

    invitations_by_club: dict[int, list[InvitationRecord]] = {}
    failed: list[int] = []
    for club_id, result in zip(club_ids, results):
        if isinstance(result, Exception):
            logger.warning(
                "Could not load invitations for club %s: %s", club_id, result
            )
            invitations_by_club[club_id] = []
            failed.append(club_id)
            continue
        invitations_by_club[club_id] = result
    return invitations_by_club, failed


async def load_roster(
    client: BackendClient, club_ids: Optional[Sequence[int]] = None
) -> RosterSnapshot:
    """Load and reconcile the roster for ``club_ids`` (default: all visible clubs)."""
    members, clubs = await asyncio.gather(fetch_members(client), fetch_clubs(client))
    if club_ids is None:
        club_ids = [club_role.club.id for club_role in clubs]

    invitations_by_club, failed = await fetch_invitations_by_club(client, club_ids)
    employees = merge(members, invitations_by_club)
    logger.info(
        "Roster reconciled: %d employees from %d members, %d clubs (%d failed)",
        len(employees),
        len(members),
        len(club_ids),
        len(failed),
    )
    return RosterSnapshot(employees=employees, clubs=clubs, failed_club_ids=failed)
