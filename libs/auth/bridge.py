"""Host-bridge capability standing in for the Telegram WebApp object.

Core operations never reach for a global WebApp; they receive a ``HostBridge``
and report user-facing outcomes through ``show_alert``.
"""

from typing import Optional, Protocol

from libs.auth.models import parse_init_data_user


class HostBridge(Protocol):
    init_data: str

    def show_alert(self, message: str) -> None: ...

    def request_contact(self) -> Optional[str]: ...


class RequestBridge:
    """Bridge for one HTTP request: alerts are collected and returned to the UI."""

    def __init__(self, init_data: str):
        self.init_data = init_data
        self.alerts: list[str] = []

    def show_alert(self, message: str) -> None:
        self.alerts.append(message)

    def request_contact(self) -> Optional[str]:
        """Phone number shared by the user in ``initData``, if any."""
        user = parse_init_data_user(self.init_data)
        return user.phone_number if user else None
