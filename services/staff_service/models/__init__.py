"""Staff service enums."""

from services.staff_service.models.enums import (
    PackageType,
    PaymentType,
    PipelineStep,
    Role,
    RoleOrigin,
    RoleStatus,
    StaffAction,
)

__all__ = [
    "PackageType",
    "PaymentType",
    "PipelineStep",
    "Role",
    "RoleOrigin",
    "RoleStatus",
    "StaffAction",
]
