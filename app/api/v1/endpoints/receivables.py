"""Receivable Endpoints"""

from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.enums import ReceivableClassification, ReceivableStatus
from app.models.user import User
from app.schemas.finance import (
    ReceivableActivityCreate, ReceivableActivityResponse, ReceivableActivityUpdate,
    ReceivableClassificationUpdate, ReceivableDetail, ReceivableResponse,
)
from app.schemas.responses import SuccessResponse
from app.services.receivable_service import ReceivableService

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[ReceivableResponse]])
async def list_receivables(
    status: Optional[ReceivableStatus] = None,
    classification: Optional[ReceivableClassification] = None,
    customer_id: Optional[UUID] = None,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Receivables derived from billings and their collections.
    """
    receivables = await ReceivableService.get_receivables(
        db, status=status, classification=classification, customer_id=customer_id
    )
    return SuccessResponse(data=receivables)


@router.get("/{billing_id}", response_model=SuccessResponse[ReceivableDetail])
async def get_receivable(
    billing_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    return SuccessResponse(data=await ReceivableService.get_receivable(db, billing_id))


@router.put("/{billing_id}/classification", response_model=SuccessResponse[ReceivableDetail])
async def classify_receivable(
    billing_id: UUID,
    classification_in: ReceivableClassificationUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    """대손처리 (written_off) only; other classifications follow the receivable's age."""
    detail = await ReceivableService.classify(db, billing_id, classification_in, current_user)
    return SuccessResponse(data=detail, message="미수금 분류가 변경되었습니다")


@router.post(
    "/{billing_id}/activities",
    response_model=SuccessResponse[ReceivableActivityResponse],
    status_code=201,
)
async def create_activity(
    billing_id: UUID,
    activity_in: ReceivableActivityCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    activity = await ReceivableService.create_activity(db, billing_id, activity_in, current_user)
    return SuccessResponse(data=ReceivableActivityResponse.model_validate(activity), message="활동이 등록되었습니다")


@router.put("/activities/{activity_id}", response_model=SuccessResponse[ReceivableActivityResponse])
async def update_activity(
    activity_id: UUID,
    activity_in: ReceivableActivityUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Author or admin only."""
    activity = await ReceivableService.update_activity(db, activity_id, activity_in, current_user)
    return SuccessResponse(data=ReceivableActivityResponse.model_validate(activity), message="활동이 수정되었습니다")


@router.delete("/activities/{activity_id}", response_model=SuccessResponse)
async def delete_activity(
    activity_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Author or admin only."""
    await ReceivableService.delete_activity(db, activity_id, current_user)
    return SuccessResponse(message="활동이 삭제되었습니다")
