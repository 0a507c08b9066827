from decimal import Decimal
from typing import Optional
from uuid import UUID
from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict

from app.schemas.base import PartialUpdate

BUSINESS_NUMBER_PATTERN = r"^\d{3}-\d{2}-\d{5}$"


class CompanyBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    business_number: Optional[str] = Field(None, pattern=BUSINESS_NUMBER_PATTERN)
    sort_order: int = Field(0, ge=0)


class CompanyCreate(CompanyBase):
    pass


class CompanyUpdate(PartialUpdate):
    non_nullable = frozenset({"name", "sort_order"})

    name: Optional[str] = Field(None, min_length=2, max_length=255)
    business_number: Optional[str] = Field(None, pattern=BUSINESS_NUMBER_PATTERN)
    sort_order: Optional[int] = Field(None, ge=0)


class CompanyResponse(CompanyBase):
    id: UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BankAccountBase(BaseModel):
    company_id: UUID
    bank_name: str = Field(..., min_length=2, max_length=100)
    account_number: str = Field(..., min_length=10, max_length=50)
    initial_balance: Decimal = Field(Decimal("0"), ge=0)
    current_balance: Decimal = Field(Decimal("0"), ge=0)


class BankAccountCreate(BankAccountBase):
    pass


class BankAccountUpdate(PartialUpdate):
    non_nullable = frozenset({"bank_name", "account_number", "initial_balance", "current_balance"})

    bank_name: Optional[str] = Field(None, min_length=2, max_length=100)
    account_number: Optional[str] = Field(None, min_length=10, max_length=50)
    initial_balance: Optional[Decimal] = Field(None, ge=0)
    current_balance: Optional[Decimal] = Field(None, ge=0)


class BankAccountResponse(BankAccountBase):
    id: UUID

    model_config = ConfigDict(from_attributes=True)
