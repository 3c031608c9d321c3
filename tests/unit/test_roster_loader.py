"""Unit tests for roster loading and the backend client."""

import httpx
import pytest
from libs.common.errors import BackendError
from services.staff_service.services.roster_loader import (
    fetch_invitations_by_club,
    load_roster,
)
from libs.common.service_client import BackendClient
from tests.factories import (
    INIT_DATA,
    ClubRoleFactory,
    ClubWithRoleFactory,
    InvitationFactory,
    MemberFactory,
    paged,
)


def _clubs_payload(*club_ids):
    return {"clubs": [ClubWithRoleFactory.create(club_id=c) for c in club_ids]}


# ---------------------------------------------------------------------------
# BackendClient
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_client_forwards_init_data(backend, backend_client):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["authorization"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"clubs": []})

    backend.on("GET", "/clubs/my", handler)

    assert await backend_client.get_clubs_with_role() == []
    assert seen["authorization"] == f"tma {INIT_DATA}"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_client_raises_backend_error(backend, backend_client):
    backend.fail(
        "GET",
        "/sections/my",
        status=400,
        body={"error": "BUSINESS_LOGIC_ERROR", "message": "nope"},
    )

    with pytest.raises(BackendError) as exc_info:
        await backend_client.get_sections()

    assert exc_info.value.status == 400
    assert exc_info.value.error_code == "BUSINESS_LOGIC_ERROR"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_client_wraps_transport_errors():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = BackendClient(
        INIT_DATA, base_url="http://backend.test/api", transport=httpx.MockTransport(handler)
    )

    with pytest.raises(BackendError) as exc_info:
        await client.get("/team/")

    assert exc_info.value.status is None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_get_all_pages_follows_page_count(backend, backend_client):
    pages = {
        1: [MemberFactory.create(first_name="One")],
        2: [MemberFactory.create(first_name="Two")],
        3: [MemberFactory.create(first_name="Three")],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params["page"])
        return httpx.Response(200, json=paged("staff_members", pages[page], page, 3))

    backend.on("GET", "/team/", handler)

    members = await backend_client.get_staff_members()

    assert [m["first_name"] for m in members] == ["One", "Two", "Three"]
    assert len(backend.called("GET", "/team/")) == 3


# ---------------------------------------------------------------------------
# load_roster
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_load_roster_merges_all_clubs(backend, backend_client):
    member = MemberFactory.create(
        phone_number="+7 700 100 00 01",
        clubs=[ClubRoleFactory.create(club_id=1, role="admin")],
    )
    backend.on("GET", "/team/", paged("staff_members", [member]))
    backend.on("GET", "/clubs/my", _clubs_payload(1, 2))
    backend.on("GET", "/invitations/club/1", paged("invitations", []))
    backend.on(
        "GET",
        "/invitations/club/2",
        paged(
            "invitations",
            [
                InvitationFactory.create(phone_number="+77001000001", club_id=2),
                InvitationFactory.create(phone_number="+77001000002", club_id=2),
            ],
        ),
    )

    snapshot = await load_roster(backend_client)

    assert snapshot.failed_club_ids == []
    assert [c.club.id for c in snapshot.clubs] == [1, 2]
    assert len(snapshot.employees) == 2
    assert snapshot.employees[0].club_ids == [1, 2]
    assert snapshot.employees[1].is_ghost


@pytest.mark.asyncio
@pytest.mark.unit
async def test_failed_club_does_not_affect_others(backend, backend_client):
    backend.on("GET", "/team/", paged("staff_members", []))
    backend.on("GET", "/clubs/my", _clubs_payload(1, 2, 3))
    backend.on(
        "GET",
        "/invitations/club/1",
        paged("invitations", [InvitationFactory.create(phone_number="+77001000011")]),
    )
    backend.fail("GET", "/invitations/club/2", status=500)
    backend.on(
        "GET",
        "/invitations/club/3",
        paged(
            "invitations",
            [InvitationFactory.create(phone_number="+77001000033", club_id=3)],
        ),
    )

    snapshot = await load_roster(backend_client)

    assert snapshot.failed_club_ids == [2]
    assert sorted(e.phone for e in snapshot.employees) == [
        "+77001000011",
        "+77001000033",
    ]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_load_roster_for_selected_clubs(backend, backend_client):
    backend.on("GET", "/team/", paged("staff_members", []))
    backend.on("GET", "/clubs/my", _clubs_payload(1, 2))
    backend.on("GET", "/invitations/club/2", paged("invitations", []))

    snapshot = await load_roster(backend_client, club_ids=[2])

    assert backend.called("GET", "/invitations/club/1") == []
    assert snapshot.employees == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_fetch_invitations_by_club_dedupes_clubs(backend, backend_client):
    backend.on("GET", "/invitations/club/4", paged("invitations", []))

    by_club, failed = await fetch_invitations_by_club(backend_client, [4, 4])

    assert by_club == {4: []}
    assert failed == []
    assert len(backend.called("GET", "/invitations/club/4")) == 1
