from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ModuleResponse(BaseModel):
    id: UUID
    code: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    href: str
    sort_order: int = 0
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class ModulePageResponse(BaseModel):
    id: UUID
    module_id: UUID
    code: str
    name: str
    description: Optional[str] = None
    href: str
    icon: Optional[str] = None
    parent_id: Optional[UUID] = None
    sort_order: int = 0
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class ModuleWithPages(ModuleResponse):
    pages: List[ModulePageResponse] = []


class UserModuleWithAccess(ModuleResponse):
    """Every module, annotated with the user's flag (false when no row exists)."""
    access_id: Optional[UUID] = None
    is_enabled: bool = False
    user_id: UUID


class UserPageWithAccess(ModulePageResponse):
    access_id: Optional[UUID] = None
    is_enabled: bool = False
    user_id: UUID


class AccessToggle(BaseModel):
    is_enabled: bool


class AccessFlagResponse(BaseModel):
    id: UUID
    user_id: UUID
    is_enabled: bool
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
