import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends
from libs.auth.dependencies import get_backend_client
from libs.common.errors import ValidationFailed
from libs.common.service_client import BackendClient
from services.staff_service.schemas.tariff import (
    NodeState,
    ScopeRequest,
    ScopeResponse,
    ScopeSelection,
    TariffRequest,
    TariffValidationResponse,
)
from services.staff_service.services.access_scope import (
    AccessScopeSelector,
    ContainmentIndex,
)
from services.staff_service.services.permissions import manageable_clubs
from services.staff_service.services.roster_loader import fetch_clubs, fetch_sections
from services.staff_service.services.tariffs import build_tariff_payload

router = APIRouter(prefix="/staff/tariffs", tags=["tariffs"])

Client = Annotated[BackendClient, Depends(get_backend_client)]


async def _scope_index(client: BackendClient) -> ContainmentIndex:
    """The hierarchy under the clubs a tariff may target."""
    clubs, sections = await asyncio.gather(fetch_clubs(client), fetch_sections(client))
    return ContainmentIndex.from_sections(sections, club_ids=manageable_clubs(clubs))


def _selector(index: ContainmentIndex, selection: ScopeSelection) -> AccessScopeSelector:
    return AccessScopeSelector(
        index,
        clubs=selection.club_ids,
        sections=selection.section_ids,
        groups=selection.group_ids,
    )


def _node_states(
    index: ContainmentIndex, selector: AccessScopeSelector
) -> dict[str, list[NodeState]]:
    clubs, sections, groups = [], [], []
    for club_id in index.club_ids:
        club_selected = selector.is_club_fully_selected(club_id)
        clubs.append(NodeState(id=club_id, selected=club_selected))
        for section_id in index.sections_of(club_id):
            section_selected = selector.is_section_fully_selected(section_id)
            sections.append(
                NodeState(id=section_id, selected=section_selected, locked=club_selected)
            )
            for group_id in index.groups_of_section(section_id):
                groups.append(
                    NodeState(
                        id=group_id,
                        selected=selector.is_group_selected(group_id, section_id),
                        locked=section_selected,
                    )
                )
    return {"clubs": clubs, "sections": sections, "groups": groups}


@router.post("/scope", response_model=ScopeResponse)
async def toggle_scope(body: ScopeRequest, client: Client):
    """Apply one checkbox toggle to a selection and return every node's state."""
    index = await _scope_index(client)
    selector = _selector(index, body.selection)

    if body.toggle is not None:
        toggle = {
            "club": selector.toggle_club,
            "section": selector.toggle_section,
            "group": selector.toggle_group,
        }[body.toggle.level]
        toggle(body.toggle.id)

    return ScopeResponse(
        selection=ScopeSelection(**selector.as_lists()),
        package_type=selector.package_type(),
        summary=selector.selection_summary(),
        errors=selector.validate(),
        **_node_states(index, selector),
    )


@router.post("/validate", response_model=TariffValidationResponse)
async def validate_tariff(body: TariffRequest, client: Client):
    """Check a tariff before submission and return the payload to submit."""
    index = await _scope_index(client)
    selector = _selector(index, body.selection)
    try:
        payload = build_tariff_payload(body.tariff, selector)
    except ValidationFailed as e:
        return TariffValidationResponse(valid=False, errors=e.errors)
    return TariffValidationResponse(valid=True, payload=payload)
