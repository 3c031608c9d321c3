from typing import Any, List, Optional

from pydantic import BaseModel
from services.staff_service.models import PipelineStep
from services.staff_service.schemas.schedule import ScheduleRow


class SectionDraft(BaseModel):
    name: str = ""
    club_id: Optional[int] = None
    coach_ids: List[int] = []
    description: str = ""


class GroupDraft(BaseModel):
    name: str = ""
    level: str = ""
    capacity: Optional[int] = None
    price: Optional[float] = None
    description: str = ""
    schedule: List[ScheduleRow] = []
    valid_from: str = ""
    valid_until: str = ""


class SectionCreateRequest(BaseModel):
    section: SectionDraft
    groups: List[GroupDraft] = []


class StepResult(BaseModel):
    kind: PipelineStep
    target: str
    ok: bool
    detail: Optional[Any] = None


class PipelineReport(BaseModel):
    """What a multi-step section creation actually committed.

    Steps already sent stay committed on the backend even when a later step
    fails; ``completed`` is False in that case.
    """

    section_id: Optional[int] = None
    group_ids: List[int] = []
    lessons_generated: int = 0
    steps: List[StepResult] = []
    completed: bool = False
    alerts: List[str] = []
