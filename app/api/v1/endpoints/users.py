"""User (employee) Management Endpoints"""

import math
from typing import Any, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.schemas.responses import PaginatedResponse, SuccessResponse
from app.services.user_service import UserService
from app.api.deps import require_admin
from app.core.exceptions import NotFoundError
from app.models.user import User
from app.models.enums import EmploymentStatus, UserRole

router = APIRouter()


@router.get("", response_model=PaginatedResponse[UserResponse])
async def list_users(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    role: Optional[UserRole] = None,
    employment_status: Optional[EmploymentStatus] = None,
    search: Optional[str] = Query(None, description="Name or email contains"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> Any:
    """
    Get paginated list of employees.
    """
    skip = (page - 1) * page_size
    users, total = await UserService.get_users(
        db, skip=skip, limit=page_size, role=role, employment_status=employment_status, search=search
    )
    return PaginatedResponse(
        data=[UserResponse.model_validate(u) for u in users],
        meta={
            "page": page,
            "page_size": page_size,
            "total": total,
            "total_pages": math.ceil(total / page_size),
        }
    )


@router.get("/{user_id}", response_model=SuccessResponse[UserResponse])
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> Any:
    user = await UserService.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("사용자를 찾을 수 없습니다")
    return SuccessResponse(data=UserResponse.model_validate(user))


@router.post("", response_model=SuccessResponse[UserResponse], status_code=201)
async def create_user(
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> Any:
    user = await UserService.create_user(db, user_in)
    return SuccessResponse(data=UserResponse.model_validate(user), message="사용자가 등록되었습니다")


@router.put("/{user_id}", response_model=SuccessResponse[UserResponse])
async def update_user(
    user_id: UUID,
    user_in: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> Any:
    user = await UserService.update_user(db, user_id, user_in)
    return SuccessResponse(data=UserResponse.model_validate(user), message="사용자 정보가 수정되었습니다")


@router.delete("/{user_id}", response_model=SuccessResponse[UserResponse])
async def deactivate_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> Any:
    """Deactivate (퇴사 처리). Rows referenced by orders and billings are kept."""
    user = await UserService.deactivate_user(db, user_id)
    return SuccessResponse(data=UserResponse.model_validate(user), message="사용자가 비활성화되었습니다")
