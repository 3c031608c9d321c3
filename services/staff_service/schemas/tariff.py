from typing import List, Literal, Optional

from pydantic import BaseModel
from services.staff_service.models import PackageType, PaymentType


class TariffDraft(BaseModel):
    name: str = ""
    payment_type: PaymentType = PaymentType.MONTHLY
    price: float = 0
    sessions_count: Optional[int] = 8
    validity_days: Optional[int] = 30
    features: List[str] = []
    active: bool = True


class TariffPayload(BaseModel):
    name: str
    type: PackageType
    payment_type: PaymentType
    price: float
    club_ids: List[int]
    section_ids: List[int]
    group_ids: List[int]
    sessions_count: Optional[int] = None
    validity_days: Optional[int] = None
    features: List[str] = []
    active: bool = True


class ScopeSelection(BaseModel):
    club_ids: List[int] = []
    section_ids: List[int] = []
    group_ids: List[int] = []


class ScopeToggle(BaseModel):
    level: Literal["club", "section", "group"]
    id: int


class ScopeRequest(BaseModel):
    selection: ScopeSelection = ScopeSelection()
    toggle: Optional[ScopeToggle] = None


class NodeState(BaseModel):
    id: int
    selected: bool
    locked: bool = False  # covered by an ancestor, control disabled


class ScopeResponse(BaseModel):
    selection: ScopeSelection
    package_type: PackageType
    summary: dict
    clubs: List[NodeState]
    sections: List[NodeState]
    groups: List[NodeState]
    errors: dict[str, str] = {}


class TariffRequest(BaseModel):
    tariff: TariffDraft
    selection: ScopeSelection


class TariffValidationResponse(BaseModel):
    valid: bool
    errors: dict[str, str] = {}
    payload: Optional[TariffPayload] = None
