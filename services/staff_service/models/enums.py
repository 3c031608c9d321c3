"""Enum definitions for the staff service."""

import enum


class Role(str, enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"
    COACH = "coach"


class RoleStatus(str, enum.Enum):
    ACTIVE = "active"
    PENDING = "pending"


class RoleOrigin(str, enum.Enum):
    """Which backend source produced a club role."""

    MEMBERSHIP = "membership"
    INVITATION = "invitation"


class StaffAction(str, enum.Enum):
    CHANGE_ROLE = "change_role"
    REMOVE = "remove"


class PackageType(str, enum.Enum):
    FULL_CLUB = "full_club"
    FULL_SECTION = "full_section"
    SINGLE_GROUP = "single_group"
    MULTIPLE_GROUPS = "multiple_groups"


class PaymentType(str, enum.Enum):
    MONTHLY = "monthly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"
    SESSION_PACK = "session_pack"


class PipelineStep(str, enum.Enum):
    CREATE_SECTION = "create_section"
    UPDATE_SECTION = "update_section"
    DELETE_SECTION = "delete_section"
    CREATE_GROUP = "create_group"
    GENERATE_LESSONS = "generate_lessons"
