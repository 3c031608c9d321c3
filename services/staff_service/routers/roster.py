from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.auth.bridge import RequestBridge
from libs.auth.dependencies import get_backend_client, get_bridge
from libs.common.service_client import BackendClient
from services.staff_service.models import Role
from services.staff_service.schemas.roster import EmployeeFilters, RosterResponse
from services.staff_service.schemas.staff import (
    InvitationDraft,
    InviteResponse,
    RoleChangeRequest,
    StaffActionResponse,
)
from services.staff_service.services import roster_ops
from services.staff_service.services.permissions import annotate_employee
from services.staff_service.services.roster_loader import RosterSnapshot, load_roster

router = APIRouter(prefix="/staff/roster", tags=["roster"])

Client = Annotated[BackendClient, Depends(get_backend_client)]
Bridge = Annotated[RequestBridge, Depends(get_bridge)]


def _member_or_404(snapshot: RosterSnapshot, user_id: int):
    employee = roster_ops.find_employee(snapshot.employees, user_id=user_id)
    if employee is None:
        raise HTTPException(status_code=404, detail="Staff member not found")
    return employee


@router.get("", response_model=RosterResponse)
async def get_roster(
    client: Client,
    search: str = "",
    role: Optional[Role] = None,
    club_id: Optional[int] = Query(None, ge=1),
):
    """Reconciled roster: members plus pending invitations, one entry per phone.

    Each entry says what the caller may do to it, overall and per club.
    """
    snapshot = await load_roster(client)
    employees = [
        annotate_employee(snapshot.clubs, employee)
        for employee in roster_ops.filter_employees(
            snapshot.employees,
            EmployeeFilters(search=search, role=role, club_id=club_id),
        )
    ]
    return RosterResponse(
        employees=employees,
        total=len(employees),
        failed_club_ids=snapshot.failed_club_ids,
    )


@router.post("/invitations", response_model=InviteResponse, status_code=201)
async def invite_staff(draft: InvitationDraft, client: Client, bridge: Bridge):
    snapshot = await load_roster(client)
    invited = await roster_ops.invite_employee(
        client, bridge, draft, snapshot.employees
    )
    return InviteResponse(invited_club_ids=invited, alerts=bridge.alerts)


@router.delete("/invitations/{invitation_id}", response_model=StaffActionResponse)
async def delete_invitation(invitation_id: int, client: Client, bridge: Bridge):
    snapshot = await load_roster(client)
    employee = roster_ops.find_employee(
        snapshot.employees, invitation_id=invitation_id
    )
    ok = await roster_ops.delete_invitation(
        client, bridge, snapshot.employees, invitation_id
    )
    return StaffActionResponse(ok=ok, alerts=bridge.alerts, employee=employee)


@router.patch(
    "/clubs/{club_id}/members/{user_id}/role", response_model=StaffActionResponse
)
async def change_member_role(
    club_id: int,
    user_id: int,
    body: RoleChangeRequest,
    client: Client,
    bridge: Bridge,
):
    snapshot = await load_roster(client)
    employee = _member_or_404(snapshot, user_id)
    ok = await roster_ops.change_role(
        client, bridge, snapshot.clubs, employee, club_id, body.role
    )
    return StaffActionResponse(ok=ok, alerts=bridge.alerts, employee=employee)


@router.delete(
    "/clubs/{club_id}/members/{user_id}", response_model=StaffActionResponse
)
async def remove_member(club_id: int, user_id: int, client: Client, bridge: Bridge):
    snapshot = await load_roster(client)
    employee = _member_or_404(snapshot, user_id)
    ok = await roster_ops.remove_from_club(
        client, bridge, snapshot.clubs, employee, club_id
    )
    return StaffActionResponse(ok=ok, alerts=bridge.alerts, employee=employee)
