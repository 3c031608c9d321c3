from typing import Dict, List, Optional

from pydantic import BaseModel


class ScheduleRow(BaseModel):
    day: str
    start: str = ""
    end: str = ""


class ScheduleSlot(BaseModel):
    time: str
    duration: int  # minutes


class ScheduleEntry(BaseModel):
    """Weekly pattern in the shape the backend's group endpoints expect."""

    weekly_pattern: Dict[str, List[ScheduleSlot]] = {}
    valid_from: str = ""
    valid_until: str = ""


class ScheduleRequest(BaseModel):
    rows: List[ScheduleRow] = []
    valid_from: Optional[str] = None
    valid_until: Optional[str] = None
