from typing import Annotated

from fastapi import APIRouter, Depends, Query
from libs.auth.bridge import RequestBridge
from libs.auth.dependencies import get_backend_client, get_bridge
from libs.common.service_client import BackendClient
from services.staff_service.schemas.schedule import ScheduleEntry, ScheduleRequest
from services.staff_service.schemas.section import (
    PipelineReport,
    SectionCreateRequest,
    SectionDraft,
)
from services.staff_service.services.schedule_builder import build, build_strict
from services.staff_service.services.section_pipeline import (
    create_section_with_groups,
    delete_section,
    update_section,
)

router = APIRouter(prefix="/staff", tags=["sections"])

Client = Annotated[BackendClient, Depends(get_backend_client)]
Bridge = Annotated[RequestBridge, Depends(get_bridge)]


@router.post("/sections", response_model=PipelineReport, status_code=201)
async def create_section(
    body: SectionCreateRequest,
    client: Client,
    bridge: Bridge,
):
    """Create a section and its groups, generating lessons where scheduled."""
    report = await create_section_with_groups(client, bridge, body.section, body.groups)
    report.alerts = bridge.alerts
    return report


@router.put("/sections/{section_id}", response_model=PipelineReport)
async def edit_section(
    section_id: int, body: SectionDraft, client: Client, bridge: Bridge
):
    report = await update_section(client, bridge, section_id, body)
    report.alerts = bridge.alerts
    return report


@router.delete("/sections/{section_id}", response_model=PipelineReport)
async def remove_section(section_id: int, client: Client, bridge: Bridge):
    report = await delete_section(client, bridge, section_id)
    report.alerts = bridge.alerts
    return report


@router.post("/schedules/preview", response_model=ScheduleEntry)
async def preview_schedule(body: ScheduleRequest, strict: bool = Query(False)):
    if strict:
        return build_strict(body.rows, body.valid_from, body.valid_until)
    return build(body.rows, body.valid_from, body.valid_until)
