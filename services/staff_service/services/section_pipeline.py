"""
Section creation pipeline: section, then each group, then lessons per group.

The steps run strictly in order within one call. Nothing is rolled back:
a failure part-way leaves earlier steps committed and the returned report
says which ones succeeded.

- Section creation failure ends the pipeline.
- Group creation failure ends the pipeline (later groups are not created).
- Lesson generation failure is recorded and the next group proceeds.

Updating and deleting a section are single requests reported the same way.
"""

from typing import Optional, Sequence

from libs.auth.bridge import HostBridge
from libs.common.errors import BackendError, ValidationFailed
from libs.common.logging import get_logger
from libs.common.service_client import BackendClient
from services.staff_service.models import PipelineStep
from services.staff_service.schemas.section import (
    GroupDraft,
    PipelineReport,
    SectionDraft,
    StepResult,
)
from services.staff_service.services.schedule_builder import build

logger = get_logger(__name__)

MSG_SECTION_CREATED = "Section created"
MSG_GROUPS_CREATED = "Groups created"
MSG_GROUPS_AND_LESSONS_CREATED = "Groups and lessons created"
MSG_SECTION_FAILED = "Failed to create section"
MSG_GROUPS_FAILED = "Failed to create groups"
MSG_SECTION_UPDATED = "Section updated"
MSG_SECTION_UPDATE_FAILED = "Failed to update section"
MSG_SECTION_DELETED = "Section deleted"
MSG_SECTION_DELETE_FAILED = "Failed to delete section"


def validate_section(section: SectionDraft, groups: Sequence[GroupDraft]) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not section.name.strip():
        errors["name"] = "name_required"
    if not section.club_id:
        errors["club"] = "club_required"
    if not section.coach_ids:
        errors["coaches"] = "coach_required"
    for n, group in enumerate(groups):
        if not group.name.strip():
            errors[f"groups.{n}.name"] = "name_required"
    return errors


def section_error_detail(error: BackendError) -> dict:
    """Explain a failed section create in terms the form can show."""
    if error.status == 409:
        return {"reason": "section_name_exists"}
    payload = error.payload if isinstance(error.payload, dict) else {}
    details = payload.get("details") or {}
    if (
        error.status == 400
        and error.error_code == "BUSINESS_LOGIC_ERROR"
        and details.get("resource") == "sections"
    ):
        return {
            "reason": "section_limit_reached",
            "current": details.get("current") or 0,
            "max": details.get("limit") or 0,
        }
    return {"reason": "backend_error", "message": payload.get("message")}


def _section_payload(section: SectionDraft) -> dict:
    return {
        "club_id": section.club_id,
        "name": section.name,
        "description": section.description or "",
        "coach_id": section.coach_ids[0],
        "coach_ids": section.coach_ids,
        "active": True,
    }


def _group_payload(section_id: int, section: SectionDraft, group: GroupDraft) -> dict:
    schedule = build(group.schedule, group.valid_from, group.valid_until)
    return {
        "section_id": section_id,
        "name": group.name,
        "description": group.description or "",
        "schedule": schedule.model_dump(),
        "price": group.price or 0,
        "capacity": group.capacity or 0,
        "level": group.level or "all",
        "coach_id": section.coach_ids[0],
        "coach_ids": section.coach_ids,
        "tags": [],
        "active": True,
    }


def _wants_lessons(group: GroupDraft) -> bool:
    return bool(group.schedule and group.valid_from and group.valid_until)


async def create_section_with_groups(
    client: BackendClient,
    bridge: HostBridge,
    section: SectionDraft,
    groups: Sequence[GroupDraft],
) -> PipelineReport:
    """
    Raises:
        ValidationFailed: before any request when a draft is incomplete.
    """
    errors = validate_section(section, groups)
    if errors:
        raise ValidationFailed(errors)

    report = PipelineReport()

    try:
        created = await client.create_section(_section_payload(section))
    except BackendError as e:
        logger.error("Section creation failed: %s", e)
        report.steps.append(
            StepResult(
                kind=PipelineStep.CREATE_SECTION,
                target=section.name,
                ok=False,
                detail=section_error_detail(e),
            )
        )
        bridge.show_alert(MSG_SECTION_FAILED)
        return report

    section_id = created["id"]
    report.section_id = section_id
    report.steps.append(
        StepResult(kind=PipelineStep.CREATE_SECTION, target=section.name, ok=True)
    )

    for group in groups:
        group_id = await _create_group(client, report, section_id, section, group)
        if group_id is None:
            bridge.show_alert(MSG_GROUPS_FAILED)
            return report
        if _wants_lessons(group):
            await _generate_lessons(client, report, group_id, group)

    report.completed = True
    if report.lessons_generated:
        bridge.show_alert(MSG_GROUPS_AND_LESSONS_CREATED)
    elif groups:
        bridge.show_alert(MSG_GROUPS_CREATED)
    else:
        bridge.show_alert(MSG_SECTION_CREATED)
    return report


async def _create_group(
    client: BackendClient,
    report: PipelineReport,
    section_id: int,
    section: SectionDraft,
    group: GroupDraft,
) -> Optional[int]:
    try:
        created = await client.create_group(_group_payload(section_id, section, group))
    except BackendError as e:
        logger.error("Group %r creation failed: %s", group.name, e)
        report.steps.append(
            StepResult(
                kind=PipelineStep.CREATE_GROUP,
                target=group.name,
                ok=False,
                detail=e.message,
            )
        )
        return None

    group_id = created["id"]
    report.group_ids.append(group_id)
    report.steps.append(
        StepResult(kind=PipelineStep.CREATE_GROUP, target=group.name, ok=True)
    )
    return group_id


async def _generate_lessons(
    client: BackendClient, report: PipelineReport, group_id: int, group: GroupDraft
) -> None:
    try:
        await client.generate_lessons(
            group_id,
            {
                "start_date": group.valid_from,
                "end_date": group.valid_until,
                "overwrite_existing": False,
                "exclude_holidays": True,
            },
        )
    except BackendError as e:
        logger.error("Lesson generation for group %s failed: %s", group_id, e)
        report.steps.append(
            StepResult(
                kind=PipelineStep.GENERATE_LESSONS,
                target=str(group_id),
                ok=False,
                detail=e.message,
            )
        )
        return

    report.lessons_generated += 1
    report.steps.append(
        StepResult(kind=PipelineStep.GENERATE_LESSONS, target=str(group_id), ok=True)
    )


async def update_section(
    client: BackendClient,
    bridge: HostBridge,
    section_id: int,
    section: SectionDraft,
) -> PipelineReport:
    """Replace a section's own fields; its groups are left untouched.

    Raises:
        ValidationFailed: before any request when the draft is incomplete.
    """
    errors = validate_section(section, ())
    if errors:
        raise ValidationFailed(errors)

    report = PipelineReport(section_id=section_id)
    try:
        await client.update_section(section_id, _section_payload(section))
    except BackendError as e:
        logger.error("Update of section %s failed: %s", section_id, e)
        report.steps.append(
            StepResult(
                kind=PipelineStep.UPDATE_SECTION,
                target=section.name,
                ok=False,
                detail=section_error_detail(e),
            )
        )
        bridge.show_alert(MSG_SECTION_UPDATE_FAILED)
        return report

    report.steps.append(
        StepResult(kind=PipelineStep.UPDATE_SECTION, target=section.name, ok=True)
    )
    report.completed = True
    bridge.show_alert(MSG_SECTION_UPDATED)
    return report


async def delete_section(
    client: BackendClient, bridge: HostBridge, section_id: int
) -> PipelineReport:
    report = PipelineReport(section_id=section_id)
    try:
        await client.delete_section(section_id)
    except BackendError as e:
        logger.error("Deletion of section %s failed: %s", section_id, e)
        report.steps.append(
            StepResult(
                kind=PipelineStep.DELETE_SECTION,
                target=str(section_id),
                ok=False,
                detail=e.message,
            )
        )
        bridge.show_alert(MSG_SECTION_DELETE_FAILED)
        return report

    report.steps.append(
        StepResult(kind=PipelineStep.DELETE_SECTION, target=str(section_id), ok=True)
    )
    report.completed = True
    bridge.show_alert(MSG_SECTION_DELETED)
    return report
