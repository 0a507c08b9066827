"""Sales Order Pydantic Schemas"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from app.models.enums import (
    ContractType, ContractStatus, BusinessType, PricingType, PricingUnit, ExportType,
)
from app.schemas.base import PartialUpdate
from app.schemas.customer import CustomerBrief
from app.schemas.user import UserBrief

MAX_CONTRACT_AMOUNT = Decimal("999999999999.99")


def _to_decimal(value: Any) -> Any:
    """Accept '1,200,000' style strings from spreadsheet-like inputs."""
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    return value


# ---------------------------------------------------------------------------
# Attachments
# ---------------------------------------------------------------------------

class AttachmentMetadata(BaseModel):
    name: str
    path: str
    size: int = 0
    uploaded_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def from_legacy(cls, data: Any) -> Any:
        # Early rows stored attachments as bare path strings
        if isinstance(data, str):
            return {"name": data, "path": data, "size": 0, "uploaded_at": None}
        if isinstance(data, dict) and "uploadedAt" in data and "uploaded_at" not in data:
            data = {**data, "uploaded_at": data["uploadedAt"] or None}
        return data


class ContractInfo(BaseModel):
    type: ContractType
    name: str
    order_number: str


class TaggedAttachment(AttachmentMetadata):
    """Attachment annotated with the contract it belongs to."""
    contract_info: ContractInfo


class AttachmentDownload(BaseModel):
    path: str
    url: str
    expires_in: int


# ---------------------------------------------------------------------------
# Line items & reference lists
# ---------------------------------------------------------------------------

class PollutantInput(BaseModel):
    pollutant_id: UUID
    concentration: Decimal = Field(..., ge=0)
    group_name: Optional[str] = None

    @field_validator("concentration", mode="before")
    @classmethod
    def parse_concentration(cls, v: Any) -> Any:
        return _to_decimal(v)


class PollutantResponse(BaseModel):
    id: UUID
    name: str
    category: Optional[str] = None
    unit: Optional[str] = None
    sort_order: int = 0

    model_config = ConfigDict(from_attributes=True)


class MethodResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    sort_order: int = 0

    model_config = ConfigDict(from_attributes=True)


class OrderPollutantResponse(BaseModel):
    id: UUID
    pollutant_id: UUID
    concentration: Decimal
    group_name: Optional[str] = None
    pollutant: Optional[PollutantResponse] = None

    model_config = ConfigDict(from_attributes=True)


class OrderMethodResponse(BaseModel):
    id: UUID
    method_id: UUID
    method: Optional[MethodResponse] = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

class OrderBase(BaseModel):
    contract_type: ContractType
    contract_status: ContractStatus
    business_type: BusinessType
    pricing_type: PricingType
    contract_unit: Optional[PricingUnit] = None
    contract_name: str = Field(..., min_length=1, max_length=500)
    contract_date: date
    contract_amount: Decimal = Field(..., ge=0, le=MAX_CONTRACT_AMOUNT)
    customer_id: UUID
    verification_company_id: Optional[UUID] = None
    manager_id: Optional[UUID] = None
    parent_order_id: Optional[UUID] = None
    export_type: ExportType
    notes: Optional[str] = None

    @field_validator("contract_amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        return _to_decimal(v)


class OrderCreate(OrderBase):
    pollutants: List[PollutantInput] = Field(..., min_length=1)
    methods: List[UUID] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_parent_reference(self) -> "OrderCreate":
        if self.contract_type == ContractType.CHANGE and self.parent_order_id is None:
            raise ValueError("변경계약의 경우 원본 계약을 선택해주세요")
        if self.contract_type == ContractType.NEW and self.parent_order_id is not None:
            raise ValueError("신규계약은 원본 계약을 가질 수 없습니다")
        return self


class OrderUpdate(PartialUpdate):
    """Partial update. pollutants/methods, when given, replace the existing sets."""
    non_nullable = frozenset({
        "contract_type", "contract_status", "business_type", "pricing_type", "contract_name",
        "contract_date", "contract_amount", "customer_id", "export_type", "pollutants", "methods",
    })

    contract_type: Optional[ContractType] = None
    contract_status: Optional[ContractStatus] = None
    business_type: Optional[BusinessType] = None
    pricing_type: Optional[PricingType] = None
    contract_unit: Optional[PricingUnit] = None
    contract_name: Optional[str] = Field(None, min_length=1, max_length=500)
    contract_date: Optional[date] = None
    contract_amount: Optional[Decimal] = Field(None, ge=0, le=MAX_CONTRACT_AMOUNT)
    customer_id: Optional[UUID] = None
    verification_company_id: Optional[UUID] = None
    manager_id: Optional[UUID] = None
    parent_order_id: Optional[UUID] = None
    export_type: Optional[ExportType] = None
    notes: Optional[str] = None
    pollutants: Optional[List[PollutantInput]] = None
    methods: Optional[List[UUID]] = None

    @field_validator("contract_amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        return _to_decimal(v)


class OrderBrief(BaseModel):
    id: UUID
    order_number: str
    contract_name: str

    model_config = ConfigDict(from_attributes=True)


class NewOrderOption(OrderBrief):
    """Candidate parent for a change contract."""
    contract_date: date


class OrderResponse(OrderBase):
    id: UUID
    order_number: str
    attachments: List[AttachmentMetadata] = []
    pollutants: List[OrderPollutantResponse] = []
    methods: List[OrderMethodResponse] = []
    customer: Optional[CustomerBrief] = None
    verification_company: Optional[CustomerBrief] = None
    manager: Optional[UserBrief] = None
    parent_order: Optional[OrderBrief] = None
    created_by: Optional[UUID] = None
    updated_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("attachments", mode="before")
    @classmethod
    def default_attachments(cls, v: Any) -> Any:
        return v or []


class OrderRow(OrderResponse):
    """
    Display row produced by the hierarchy aggregator: a `new` order with its
    `change` orders nested under it, plus roll-up fields.
    """
    children: List["OrderRow"] = []
    total_amount: Decimal
    contract_type_label: str
    all_attachments: List[TaggedAttachment] = []


OrderRow.model_rebuild()
