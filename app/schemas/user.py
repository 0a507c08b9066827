"""User (Employee) Pydantic Schemas"""

import re
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator

from app.models.enums import UserRole, EmploymentStatus
from app.schemas.base import PartialUpdate


def _check_password_strength(value: str) -> str:
    if not re.search(r"[a-z]", value):
        raise ValueError("소문자가 최소 1개 이상 포함되어야 합니다")
    if not re.search(r"[0-9]", value):
        raise ValueError("숫자가 최소 1개 이상 포함되어야 합니다")
    if not re.search(r"[^A-Za-z0-9]", value):
        raise ValueError("특수문자가 최소 1개 이상 포함되어야 합니다")
    return value


class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=100)
    role: UserRole = UserRole.USER
    phone: Optional[str] = Field(None, pattern=r"^\d{2,3}-\d{3,4}-\d{4}$")
    department: Optional[str] = None
    position: Optional[str] = None
    hire_date: Optional[date] = None


class UserCreate(UserBase):
    """Schema for creating an employee account"""
    password: str = Field(..., min_length=8, description="At least 8 chars with lowercase, digit and symbol")

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return _check_password_strength(v)


class UserUpdate(PartialUpdate):
    """Partial update; omitted fields are left untouched"""
    non_nullable = frozenset({"email", "name", "role", "employment_status", "password"})

    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    role: Optional[UserRole] = None
    phone: Optional[str] = Field(None, pattern=r"^\d{2,3}-\d{3,4}-\d{4}$")
    department: Optional[str] = None
    position: Optional[str] = None
    hire_date: Optional[date] = None
    employment_status: Optional[EmploymentStatus] = None
    password: Optional[str] = Field(None, min_length=8)

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: Optional[str]) -> Optional[str]:
        return _check_password_strength(v) if v is not None else v


class UserBrief(BaseModel):
    """Minimal user info embedded in orders, billings and activities."""
    id: UUID
    name: str
    email: EmailStr

    model_config = ConfigDict(from_attributes=True)


class UserResponse(UserBase):
    id: UUID
    employment_status: EmploymentStatus
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
