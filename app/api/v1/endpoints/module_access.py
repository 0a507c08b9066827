"""Module / Page Access Endpoints"""

from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.user import User
from app.schemas.access import (
    AccessFlagResponse, AccessToggle, ModuleWithPages, UserModuleWithAccess, UserPageWithAccess,
)
from app.schemas.responses import SuccessResponse
from app.services.access_control import AccessService

router = APIRouter()


@router.get("/me", response_model=SuccessResponse[List[ModuleWithPages]])
async def my_modules(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Modules and pages the caller can open (sidebar)."""
    return SuccessResponse(data=await AccessService.get_accessible_modules(db, current_user))


@router.get("/modules", response_model=SuccessResponse[List[ModuleWithPages]])
async def list_modules(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    modules = await AccessService.get_all_modules(db)
    return SuccessResponse(data=[ModuleWithPages.model_validate(m, from_attributes=True) for m in modules])


@router.get("/users/{user_id}/modules", response_model=SuccessResponse[List[UserModuleWithAccess]])
async def list_user_modules(
    user_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    return SuccessResponse(data=await AccessService.get_user_module_access(db, user_id))


@router.put("/users/{user_id}/modules/{module_id}", response_model=SuccessResponse[AccessFlagResponse])
async def toggle_user_module(
    user_id: UUID,
    module_id: UUID,
    toggle: AccessToggle,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    access = await AccessService.toggle_module_access(db, user_id, module_id, toggle.is_enabled)
    return SuccessResponse(data=AccessFlagResponse.model_validate(access), message="모듈 권한이 변경되었습니다")


@router.get("/users/{user_id}/pages", response_model=SuccessResponse[List[UserPageWithAccess]])
async def list_user_pages(
    user_id: UUID,
    module_id: Optional[UUID] = None,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    return SuccessResponse(data=await AccessService.get_user_page_access(db, user_id, module_id))


@router.put("/users/{user_id}/pages/{page_id}", response_model=SuccessResponse[AccessFlagResponse])
async def toggle_user_page(
    user_id: UUID,
    page_id: UUID,
    toggle: AccessToggle,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    access = await AccessService.toggle_page_access(db, user_id, page_id, toggle.is_enabled)
    return SuccessResponse(data=AccessFlagResponse.model_validate(access), message="페이지 권한이 변경되었습니다")
