from typing import Optional
from uuid import UUID
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, ConfigDict

from app.models.enums import CustomerType, CustomerStatus
from app.schemas.base import PartialUpdate
from app.schemas.company import BUSINESS_NUMBER_PATTERN


class CustomerBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    customer_type: CustomerType
    status: CustomerStatus = CustomerStatus.ACTIVE
    business_number: Optional[str] = Field(None, pattern=BUSINESS_NUMBER_PATTERN)
    representative_name: Optional[str] = None
    manager_name: Optional[str] = None
    phone: Optional[str] = Field(None, pattern=r"^\d{2,3}-\d{3,4}-\d{4}$")
    email: Optional[EmailStr] = None
    notes: Optional[str] = None
    sort_order: int = Field(0, ge=0)


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(PartialUpdate):
    non_nullable = frozenset({"name", "customer_type", "status", "sort_order"})

    name: Optional[str] = Field(None, min_length=2, max_length=255)
    customer_type: Optional[CustomerType] = None
    status: Optional[CustomerStatus] = None
    business_number: Optional[str] = Field(None, pattern=BUSINESS_NUMBER_PATTERN)
    representative_name: Optional[str] = None
    manager_name: Optional[str] = None
    phone: Optional[str] = Field(None, pattern=r"^\d{2,3}-\d{3,4}-\d{4}$")
    email: Optional[EmailStr] = None
    notes: Optional[str] = None
    sort_order: Optional[int] = Field(None, ge=0)


class CustomerBrief(BaseModel):
    """Customer info embedded in orders and billings."""
    id: UUID
    name: str
    business_number: Optional[str] = None
    customer_type: CustomerType

    model_config = ConfigDict(from_attributes=True)


class CustomerResponse(CustomerBase):
    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
