"""Staff Service schemas package.

Schema files:
  - schemas/backend.py : records parsed from the remote backend's payloads
  - schemas/roster.py  : reconciled roster (ClubRoleState, Employee, RosterEntry)
  - schemas/staff.py   : roster mutation requests and responses
  - schemas/tariff.py  : tariff drafts and access scope selection
  - schemas/schedule.py: weekly schedule rows and entries
  - schemas/section.py : section/group drafts and the pipeline report
"""

from services.staff_service.schemas.backend import (  # noqa: F401
    ClubAndRole,
    ClubRecord,
    ClubWithRole,
    GroupSummary,
    InvitationRecord,
    MembershipRecord,
    SectionRecord,
    coerce_role,
)
from services.staff_service.schemas.roster import (  # noqa: F401
    ClubPermissions,
    ClubRoleState,
    Employee,
    EmployeeFilters,
    RosterEntry,
    RosterResponse,
)
from services.staff_service.schemas.schedule import (  # noqa: F401
    ScheduleEntry,
    ScheduleRequest,
    ScheduleRow,
    ScheduleSlot,
)
from services.staff_service.schemas.section import (  # noqa: F401
    GroupDraft,
    PipelineReport,
    SectionCreateRequest,
    SectionDraft,
    StepResult,
)
from services.staff_service.schemas.staff import (  # noqa: F401
    InvitationDraft,
    InviteResponse,
    RoleChangeRequest,
    StaffActionResponse,
)
from services.staff_service.schemas.tariff import (  # noqa: F401
    NodeState,
    ScopeRequest,
    ScopeResponse,
    ScopeSelection,
    ScopeToggle,
    TariffDraft,
    TariffPayload,
    TariffRequest,
    TariffValidationResponse,
)
