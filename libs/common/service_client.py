"""Async HTTP client for the remote club-management REST backend.

Every backend call made by the staff service goes through ``BackendClient``.
The caller's Telegram ``initData`` string is the credential; it is forwarded
as ``Authorization: tma <initData>`` on every request.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from libs.common.config import get_settings
from libs.common.errors import BackendError
from libs.common.logging import get_logger, get_request_id

logger = get_logger(__name__)


class BackendClient:
    """Thin wrapper over ``httpx.AsyncClient`` bound to one caller.

    ``transport`` lets tests route requests to an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        init_data: str,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        page_size: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.init_data = init_data
        self.base_url = (base_url or settings.BACKEND_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.BACKEND_TIMEOUT
        self.page_size = page_size or settings.BACKEND_PAGE_SIZE
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Authorization": f"tma {self.init_data}"}
        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (``None`` if empty).

        Raises:
            BackendError: on a non-2xx response or a transport failure.
        """
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method,
                    url,
                    headers=self._headers(),
                    json=json,
                    params=params,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            payload = _safe_json(e.response)
            raise BackendError(
                f"{method} {path} returned {e.response.status_code}",
                status=e.response.status_code,
                payload=payload,
            ) from e
        except httpx.RequestError as e:
            raise BackendError(f"{method} {path} failed: {e}") from e

        if not response.content:
            return None
        return response.json()

    async def get(self, path: str, params: Optional[dict] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def get_all_pages(self, path: str, items_key: str) -> list[dict]:
        """Collect ``items_key`` from every page of a paginated list endpoint.

        Pages are 1-based; the backend reports the page count as ``pages``.
        """
        items: list[dict] = []
        page = 1
        while True:
            body = await self.get(path, params={"page": page, "size": self.page_size})
            body = body or {}
            items.extend(body.get(items_key) or [])
            pages = body.get("pages") or 1
            if page >= pages:
                return items
            page += 1

    # ------------------------------------------------------------------
    # Endpoint helpers
    # ------------------------------------------------------------------

    async def get_staff_members(self) -> list[dict]:
        """Confirmed team members with their per-club roles."""
        return await self.get_all_pages("/team/", "staff_members")

    async def get_club_invitations(self, club_id: int) -> list[dict]:
        return await self.get_all_pages(f"/invitations/club/{club_id}", "invitations")

    async def create_invitation(
        self, club_id: int, *, phone_number: str, role: str
    ) -> Optional[dict]:
        return await self.post(
            f"/invitations/club/{club_id}",
            json={"phone_number": phone_number, "role": role},
        )

    async def delete_invitation(self, invitation_id: int) -> None:
        await self.delete(f"/invitations/{invitation_id}")

    async def change_role(self, club_id: int, user_id: int, role: str) -> Any:
        return await self.patch(
            f"/team/{club_id}/member/{user_id}/role", json={"role": role}
        )

    async def remove_member(self, club_id: int, user_id: int) -> None:
        await self.delete(f"/team/{club_id}/member/{user_id}")

    async def get_clubs_with_role(self) -> list[dict]:
        """Clubs visible to the caller, each as ``{club, role, is_owner}``."""
        body = await self.get("/clubs/my")
        return (body or {}).get("clubs") or []

    async def get_sections(self) -> list[dict]:
        return await self.get("/sections/my") or []

    async def create_section(self, payload: dict) -> dict:
        return await self.post("/sections/", json=payload)

    async def update_section(self, section_id: int, payload: dict) -> Any:
        return await self.put(f"/sections/{section_id}", json=payload)

    async def delete_section(self, section_id: int) -> None:
        await self.delete(f"/sections/{section_id}")

    async def create_group(self, payload: dict) -> dict:
        return await self.post("/groups/", json=payload)

    async def generate_lessons(self, group_id: int, payload: dict) -> Any:
        return await self.post(
            f"/schedule/groups/{group_id}/generate-lessons", json=payload
        )


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None
