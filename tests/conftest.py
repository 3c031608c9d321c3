import json
from typing import Any, AsyncGenerator, Callable, Optional, Union

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from libs.auth.dependencies import get_backend_client
from libs.common.service_client import BackendClient
from services.staff_service.app.main import app
from tests.factories import INIT_DATA

BACKEND_URL = "http://backend.test/api"

Responder = Union[Any, Callable[[httpx.Request], httpx.Response]]


class FakeBackend:
    """
    In-process stand-in for the remote REST backend.

    Register responses per (method, path) with ``on``; unregistered routes
    answer 404. Every request is recorded in ``calls``.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, Responder]] = {}
        self.calls: list[tuple[str, str, Optional[Any]]] = []
        self.transport = httpx.MockTransport(self._handle)

    def on(self, method: str, path: str, body: Responder = None, status: int = 200):
        self.routes[(method.upper(), path)] = (status, body)
        return self

    def fail(self, method: str, path: str, status: int = 500, body: Any = None):
        return self.on(method, path, body or {"error": "INTERNAL"}, status=status)

    def called(self, method: str, path: str) -> list:
        return [c for c in self.calls if c[0] == method.upper() and c[1] == path]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api")
        payload = json.loads(request.content) if request.content else None
        self.calls.append((request.method, path, payload))

        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"error": "NOT_FOUND"})
        status, body = route
        if callable(body):
            return body(request)
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def backend_client(backend) -> BackendClient:
    return BackendClient(INIT_DATA, base_url=BACKEND_URL, transport=backend.transport)


class RecordingBridge:
    def __init__(self, init_data: str = INIT_DATA):
        self.init_data = init_data
        self.alerts: list[str] = []

    def show_alert(self, message: str) -> None:
        self.alerts.append(message)

    def request_contact(self) -> Optional[str]:
        return None


@pytest.fixture
def bridge() -> RecordingBridge:
    return RecordingBridge()


@pytest_asyncio.fixture
async def client(backend_client) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient bound to the staff app, with the backend client
    routed to the fake backend.
    """
    app.dependency_overrides[get_backend_client] = lambda: backend_client

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-Telegram-Init-Data": INIT_DATA},
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
