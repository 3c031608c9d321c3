import json
from typing import Optional
from urllib.parse import parse_qsl

from pydantic import BaseModel, ValidationError


class TelegramUser(BaseModel):
    """
    The ``user`` object embedded in Telegram WebApp ``initData``.
    """

    id: int
    first_name: str = ""
    last_name: Optional[str] = None
    username: Optional[str] = None
    photo_url: Optional[str] = None
    phone_number: Optional[str] = None


def parse_init_data_user(init_data: str) -> Optional[TelegramUser]:
    """Extract the user from a raw ``initData`` query string.

    The signature is not checked here; the backend verifies it on every call.
    Returns None when the field is absent or malformed.
    """
    fields = dict(parse_qsl(init_data, keep_blank_values=True))
    raw_user = fields.get("user")
    if not raw_user:
        return None
    try:
        return TelegramUser.model_validate(json.loads(raw_user))
    except (ValueError, ValidationError):
        return None
