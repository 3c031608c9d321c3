"""
Role priority.

Pure functions with no I/O so they can be shared by the reconciler, the
permission checks and the response schemas.
"""

from typing import Iterable

from services.staff_service.models import Role

# Role priority for sorting and comparison
ROLE_PRIORITY = {Role.OWNER: 3, Role.ADMIN: 2, Role.COACH: 1}

DEFAULT_ROLE = Role.COACH


def primary_role(roles: Iterable[Role]) -> Role:
    """Highest-priority role in ``roles``; coach when there are none."""
    return max(roles, key=ROLE_PRIORITY.__getitem__, default=DEFAULT_ROLE)


def outranks(role: Role, other: Role) -> bool:
    return ROLE_PRIORITY[role] > ROLE_PRIORITY[other]
