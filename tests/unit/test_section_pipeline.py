"""Unit tests for the section -> groups -> lessons creation pipeline."""

import itertools

import httpx
import pytest
from libs.common.errors import BackendError, ValidationFailed
from services.staff_service.models import PipelineStep
from services.staff_service.schemas.schedule import ScheduleRow
from services.staff_service.schemas.section import GroupDraft, SectionDraft
from services.staff_service.services import section_pipeline
from services.staff_service.services.section_pipeline import (
    create_section_with_groups,
    delete_section,
    section_error_detail,
    update_section,
    validate_section,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _section(**overrides) -> SectionDraft:
    data = {"name": "Swimming", "club_id": 1, "coach_ids": [7, 8]}
    data.update(overrides)
    return SectionDraft(**data)


def _group(name="Kids", scheduled=True) -> GroupDraft:
    if not scheduled:
        return GroupDraft(name=name)
    return GroupDraft(
        name=name,
        schedule=[ScheduleRow(day="Понедельник", start="10:00", end="09:00")],
        valid_from="2025-09-01",
        valid_until="2025-12-01",
    )


def _group_responses(*statuses):
    """Answer successive POST /groups/ calls with the given statuses."""
    ids = itertools.count(60)
    queue = iter(statuses)

    def handler(request: httpx.Request) -> httpx.Response:
        status = next(queue)
        if status >= 400:
            return httpx.Response(status, json={"error": "INTERNAL"})
        return httpx.Response(status, json={"id": next(ids)})

    return handler


# ---------------------------------------------------------------------------
# Validation and error mapping
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_validate_section():
    errors = validate_section(
        SectionDraft(name=" ", club_id=None, coach_ids=[]), [GroupDraft(name="")]
    )

    assert errors == {
        "name": "name_required",
        "club": "club_required",
        "coaches": "coach_required",
        "groups.0.name": "name_required",
    }


@pytest.mark.unit
def test_section_error_detail():
    assert section_error_detail(BackendError("x", status=409)) == {
        "reason": "section_name_exists"
    }

    limit = BackendError(
        "x",
        status=400,
        payload={
            "error": "BUSINESS_LOGIC_ERROR",
            "message": "Limit reached",
            "details": {"resource": "sections", "current": 5, "limit": 5},
        },
    )
    assert section_error_detail(limit) == {
        "reason": "section_limit_reached",
        "current": 5,
        "max": 5,
    }

    other = BackendError("x", status=500, payload={"message": "boom"})
    assert section_error_detail(other) == {"reason": "backend_error", "message": "boom"}


# ---------------------------------------------------------------------------
# create_section_with_groups
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_invalid_draft_sends_nothing(backend, backend_client, bridge):
    with pytest.raises(ValidationFailed):
        await create_section_with_groups(
            backend_client, bridge, _section(coach_ids=[]), []
        )

    assert backend.calls == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_full_pipeline(backend, backend_client, bridge):
    backend.on("POST", "/sections/", {"id": 50}, status=201)
    backend.on("POST", "/groups/", _group_responses(201, 201))
    backend.on("POST", "/schedule/groups/60/generate-lessons", {"created": 12})

    report = await create_section_with_groups(
        backend_client, bridge, _section(), [_group("Kids"), _group("Adults", False)]
    )

    assert report.completed is True
    assert report.section_id == 50
    assert report.group_ids == [60, 61]
    assert report.lessons_generated == 1
    assert [s.kind for s in report.steps] == [
        PipelineStep.CREATE_SECTION,
        PipelineStep.CREATE_GROUP,
        PipelineStep.GENERATE_LESSONS,
        PipelineStep.CREATE_GROUP,
    ]
    assert bridge.alerts == [section_pipeline.MSG_GROUPS_AND_LESSONS_CREATED]

    _, _, section_payload = backend.called("POST", "/sections/")[0]
    assert section_payload["coach_id"] == 7
    assert section_payload["coach_ids"] == [7, 8]

    _, _, group_payload = backend.called("POST", "/groups/")[0]
    assert group_payload["section_id"] == 50
    assert group_payload["schedule"]["weekly_pattern"] == {
        "monday": [{"time": "10:00", "duration": 60}]
    }

    _, _, lessons_payload = backend.called(
        "POST", "/schedule/groups/60/generate-lessons"
    )[0]
    assert lessons_payload == {
        "start_date": "2025-09-01",
        "end_date": "2025-12-01",
        "overwrite_existing": False,
        "exclude_holidays": True,
    }


@pytest.mark.asyncio
@pytest.mark.unit
async def test_section_only(backend, backend_client, bridge):
    backend.on("POST", "/sections/", {"id": 51}, status=201)

    report = await create_section_with_groups(backend_client, bridge, _section(), [])

    assert report.completed is True
    assert report.group_ids == []
    assert bridge.alerts == [section_pipeline.MSG_SECTION_CREATED]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_section_failure_stops_everything(backend, backend_client, bridge):
    backend.fail("POST", "/sections/", status=409)

    report = await create_section_with_groups(
        backend_client, bridge, _section(), [_group()]
    )

    assert report.completed is False
    assert report.section_id is None
    assert report.steps[0].ok is False
    assert report.steps[0].detail == {"reason": "section_name_exists"}
    assert backend.called("POST", "/groups/") == []
    assert bridge.alerts == [section_pipeline.MSG_SECTION_FAILED]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_group_failure_keeps_earlier_steps(backend, backend_client, bridge):
    backend.on("POST", "/sections/", {"id": 52}, status=201)
    backend.on("POST", "/groups/", _group_responses(201, 500, 201))
    backend.on("POST", "/schedule/groups/60/generate-lessons", {"created": 4})

    report = await create_section_with_groups(
        backend_client,
        bridge,
        _section(),
        [_group("A"), _group("B"), _group("C")],
    )

    assert report.completed is False
    assert report.section_id == 52
    assert report.group_ids == [60]
    assert report.lessons_generated == 1
    assert len(backend.called("POST", "/groups/")) == 2
    assert report.steps[-1].kind == PipelineStep.CREATE_GROUP
    assert report.steps[-1].ok is False
    assert bridge.alerts == [section_pipeline.MSG_GROUPS_FAILED]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_lesson_failure_does_not_stop_later_groups(
    backend, backend_client, bridge
):
    backend.on("POST", "/sections/", {"id": 53}, status=201)
    backend.on("POST", "/groups/", _group_responses(201, 201))
    backend.fail("POST", "/schedule/groups/60/generate-lessons")
    backend.on("POST", "/schedule/groups/61/generate-lessons", {"created": 4})

    report = await create_section_with_groups(
        backend_client, bridge, _section(), [_group("A"), _group("B")]
    )

    assert report.completed is True
    assert report.group_ids == [60, 61]
    assert report.lessons_generated == 1
    failed = [s for s in report.steps if not s.ok]
    assert [(s.kind, s.target) for s in failed] == [
        (PipelineStep.GENERATE_LESSONS, "60")
    ]


# ---------------------------------------------------------------------------
# Update and delete
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_section(backend, backend_client, bridge):
    backend.on("PUT", "/sections/51", {"id": 51})

    report = await update_section(
        backend_client, bridge, 51, _section(name="Diving", coach_ids=[8])
    )

    assert report.completed is True
    assert report.section_id == 51
    assert report.steps[0].kind == PipelineStep.UPDATE_SECTION
    assert backend.calls == [
        (
            "PUT",
            "/sections/51",
            {
                "club_id": 1,
                "name": "Diving",
                "description": "",
                "coach_id": 8,
                "coach_ids": [8],
                "active": True,
            },
        )
    ]
    assert bridge.alerts == [section_pipeline.MSG_SECTION_UPDATED]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_section_rejects_incomplete_draft(backend, backend_client, bridge):
    with pytest.raises(ValidationFailed) as exc_info:
        await update_section(backend_client, bridge, 51, _section(coach_ids=[]))

    assert exc_info.value.errors == {"coaches": "coach_required"}
    assert backend.calls == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_section_name_conflict(backend, backend_client, bridge):
    backend.fail("PUT", "/sections/51", status=409)

    report = await update_section(backend_client, bridge, 51, _section())

    assert report.completed is False
    assert report.steps[0].detail == {"reason": "section_name_exists"}
    assert bridge.alerts == [section_pipeline.MSG_SECTION_UPDATE_FAILED]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_section(backend, backend_client, bridge):
    backend.on("DELETE", "/sections/51", status=204)

    report = await delete_section(backend_client, bridge, 51)

    assert report.completed is True
    assert report.steps[0].kind == PipelineStep.DELETE_SECTION
    assert bridge.alerts == [section_pipeline.MSG_SECTION_DELETED]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_failed_delete_section(backend, backend_client, bridge):
    backend.fail("DELETE", "/sections/51", status=503)

    report = await delete_section(backend_client, bridge, 51)

    assert report.completed is False
    assert report.steps[0].ok is False
    assert bridge.alerts == [section_pipeline.MSG_SECTION_DELETE_FAILED]
