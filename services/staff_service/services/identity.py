"""Identity keys for matching people across the team and invitation sources."""

import re
from typing import Optional

_WHITESPACE = re.compile(r"\s+")


def identity_key(phone: Optional[str]) -> str:
    """Phone number with all whitespace removed.

    Country prefixes are not unified: "+7 700 ..." and "8 700 ..." give
    different keys.
    """
    return _WHITESPACE.sub("", phone or "")


def member_identity_key(phone: Optional[str], user_id: int) -> str:
    """Key for a confirmed member; members without a phone key on their user id."""
    key = identity_key(phone)
    return key or f"user:{user_id}"
