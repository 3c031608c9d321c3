"""
Payload factories shaped like the remote backend's JSON.

Every factory returns a plain dict; override any field via kwargs.

Usage:
    member = MemberFactory.create(phone_number="+7 701 111 22 33")
    record = MembershipRecord.model_validate(member)
"""

import itertools

# Raw Telegram initData as the mini app sends it; the backend checks the hash.
INIT_DATA = (
    'query_id=AAE&user={"id":42,"first_name":"Owner",'
    '"phone_number":"+77000000042"}&hash=abc'
)

_ids = itertools.count(1000)


def _next_id() -> int:
    return next(_ids)


# ---------------------------------------------------------------------------
# Team
# ---------------------------------------------------------------------------


class ClubRoleFactory:
    @staticmethod
    def create(**overrides):
        defaults = {
            "club_id": 1,
            "club_name": "Central",
            "role": "coach",
            "joined_at": "2025-01-10T09:00:00Z",
            "is_active": True,
            "sections_count": 0,
        }
        defaults.update(overrides)
        return defaults


class MemberFactory:
    @staticmethod
    def create(clubs=None, **overrides):
        defaults = {
            "id": _next_id(),
            "telegram_id": _next_id(),
            "first_name": "Test",
            "last_name": "Coach",
            "username": "test_coach",
            "phone_number": "+7 700 000 00 01",
            "photo_url": None,
            "created_at": "2025-01-10T09:00:00Z",
            "updated_at": "2025-01-10T09:00:00Z",
            "clubs_and_roles": (
                clubs if clubs is not None else [ClubRoleFactory.create()]
            ),
        }
        defaults.update(overrides)
        return defaults


# ---------------------------------------------------------------------------
# Invitations
# ---------------------------------------------------------------------------


class InvitationFactory:
    @staticmethod
    def create(**overrides):
        defaults = {
            "id": _next_id(),
            "phone_number": "+7 700 000 00 99",
            "role": "coach",
            "club_id": 1,
            "club": None,
            "created_by_id": 1,
            "status": "pending",
            "is_used": False,
            "created_at": "2025-02-01T12:00:00Z",
        }
        defaults.update(overrides)
        return defaults


# ---------------------------------------------------------------------------
# Clubs and sections
# ---------------------------------------------------------------------------


class ClubWithRoleFactory:
    @staticmethod
    def create(club_id=1, role="owner", is_owner=None, name=None):
        return {
            "club": {"id": club_id, "name": name or f"Club {club_id}"},
            "role": role,
            "is_owner": role == "owner" if is_owner is None else is_owner,
        }


class SectionFactory:
    @staticmethod
    def create(section_id, club_id, group_ids=(), **overrides):
        defaults = {
            "id": section_id,
            "club_id": club_id,
            "name": f"Section {section_id}",
            "groups": [
                {"id": gid, "name": f"Group {gid}", "level": "all", "capacity": 10}
                for gid in group_ids
            ],
        }
        defaults.update(overrides)
        return defaults


def paged(key, items, page=1, pages=1):
    return {key: items, "total": len(items), "page": page, "size": 100, "pages": pages}
