"""Billing, Collection and Receivable Pydantic Schemas"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict, field_validator

from app.models.enums import (
    BillingType, InvoiceStatus, CollectionMethod, ReceivableStatus, ReceivableClassification,
)
from app.schemas.base import PartialUpdate
from app.schemas.customer import CustomerBrief
from app.schemas.order import OrderBrief
from app.schemas.user import UserBrief


def _strip_thousands(value: Any) -> Any:
    if isinstance(value, str):
        value = value.replace(",", "").strip()
    return value


# ---------------------------------------------------------------------------
# Billings
# ---------------------------------------------------------------------------

class BillingBase(BaseModel):
    billing_date: date
    order_id: UUID
    customer_id: UUID
    billing_type: BillingType
    billing_amount: Decimal = Field(..., gt=0)
    expected_payment_date: date
    invoice_status: InvoiceStatus = InvoiceStatus.NOT_ISSUED
    notes: Optional[str] = None

    @field_validator("billing_amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        return _strip_thousands(v)


class BillingCreate(BillingBase):
    """billing_number is generated as B{year}-{seq} when omitted."""
    billing_number: Optional[str] = Field(None, min_length=1, max_length=20)


class BillingUpdate(PartialUpdate):
    non_nullable = frozenset({
        "billing_date", "order_id", "customer_id", "billing_type", "billing_amount",
        "expected_payment_date", "invoice_status",
    })

    billing_number: Optional[str] = Field(None, min_length=1, max_length=20)
    billing_date: Optional[date] = None
    order_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None
    billing_type: Optional[BillingType] = None
    billing_amount: Optional[Decimal] = Field(None, gt=0)
    expected_payment_date: Optional[date] = None
    invoice_status: Optional[InvoiceStatus] = None
    notes: Optional[str] = None

    @field_validator("billing_amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        return _strip_thousands(v)


class BillingResponse(BaseModel):
    id: UUID
    billing_number: str
    billing_date: date
    order_id: UUID
    customer_id: UUID
    billing_type: BillingType
    billing_amount: Decimal
    expected_payment_date: date
    invoice_status: InvoiceStatus
    notes: Optional[str] = None
    order: Optional[OrderBrief] = None
    customer: Optional[CustomerBrief] = None
    created_by: Optional[UUID] = None
    updated_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BillableOrder(BaseModel):
    """`new` order offered when registering a billing."""
    id: UUID
    order_number: str
    contract_name: str
    contract_amount: Decimal
    customer_id: UUID
    customer_name: str


class BillingNumberCheck(BaseModel):
    billing_number: str
    is_duplicate: bool


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------

class CollectionBase(BaseModel):
    billing_id: UUID
    collection_date: date
    collection_amount: Decimal = Field(..., gt=0)
    collection_method: CollectionMethod = CollectionMethod.BANK_TRANSFER
    bank_account_id: Optional[UUID] = None
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    depositor: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("collection_amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        return _strip_thousands(v)


class CollectionCreate(CollectionBase):
    pass


class CollectionUpdate(PartialUpdate):
    non_nullable = frozenset({"collection_date", "collection_amount", "collection_method"})

    collection_date: Optional[date] = None
    collection_amount: Optional[Decimal] = Field(None, gt=0)
    collection_method: Optional[CollectionMethod] = None
    bank_account_id: Optional[UUID] = None
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    depositor: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("collection_amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Any:
        return _strip_thousands(v)


class BillingBrief(BaseModel):
    id: UUID
    billing_number: str
    billing_amount: Decimal
    expected_payment_date: date
    order: Optional[OrderBrief] = None
    customer: Optional[CustomerBrief] = None

    model_config = ConfigDict(from_attributes=True)


class CollectionResponse(CollectionBase):
    id: UUID
    billing: Optional[BillingBrief] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BillingCollectionStatus(BaseModel):
    """Billed / collected / remaining figures shown when booking a collection."""
    billing_id: UUID
    billing_number: str
    contract_name: str
    customer_name: str
    billing_amount: Decimal
    collected_amount: Decimal
    remaining_amount: Decimal


# ---------------------------------------------------------------------------
# Receivables
# ---------------------------------------------------------------------------

class ReceivableResponse(BaseModel):
    """Derived outstanding-balance view of one billing. ``id`` is the billing id."""
    id: UUID
    billing_number: str
    billing_date: date
    billing_type: BillingType
    expected_payment_date: date
    order_id: UUID
    order_number: str
    contract_name: str
    customer_id: UUID
    customer_name: str
    billing_amount: Decimal
    collected_amount: Decimal
    remaining_amount: Decimal
    status: ReceivableStatus
    classification: ReceivableClassification
    days_elapsed: int
    last_collection_date: Optional[date] = None
    notes: Optional[str] = None


class ReceivableActivityCreate(BaseModel):
    activity_date: date
    activity_content: str = Field(..., min_length=1)


class ReceivableActivityUpdate(PartialUpdate):
    non_nullable = frozenset({"activity_date", "activity_content"})

    activity_date: Optional[date] = None
    activity_content: Optional[str] = Field(None, min_length=1)


class ReceivableActivityResponse(BaseModel):
    id: UUID
    billing_id: UUID
    activity_date: date
    activity_content: str
    created_by: Optional[UUID] = None
    author: Optional[UserBrief] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReceivableDetail(ReceivableResponse):
    activities: List[ReceivableActivityResponse] = []
    collections: List[CollectionResponse] = []


class ReceivableClassificationUpdate(BaseModel):
    classification: ReceivableClassification
    notes: Optional[str] = None
