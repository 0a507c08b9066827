"""Collection Endpoints"""

from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.user import User
from app.schemas.finance import (
    BillingCollectionStatus, CollectionCreate, CollectionResponse, CollectionUpdate,
)
from app.schemas.responses import SuccessResponse
from app.services.collection_service import CollectionService

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[CollectionResponse]])
async def list_collections(
    billing_id: Optional[UUID] = None,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    collections = await CollectionService.get_collections(db, billing_id=billing_id)
    return SuccessResponse(data=[CollectionResponse.model_validate(c) for c in collections])


@router.get("/billing-status", response_model=SuccessResponse[List[BillingCollectionStatus]])
async def list_billing_status(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Billed, collected and remaining amount for every billing."""
    return SuccessResponse(data=await CollectionService.get_billing_statuses(db))


@router.post("", response_model=SuccessResponse[CollectionResponse], status_code=201)
async def create_collection(
    collection_in: CollectionCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_manager_or_admin),
) -> Any:
    collection = await CollectionService.create_collection(db, collection_in)
    return SuccessResponse(data=CollectionResponse.model_validate(collection), message="수금이 등록되었습니다")


@router.put("/{collection_id}", response_model=SuccessResponse[CollectionResponse])
async def update_collection(
    collection_id: UUID,
    collection_in: CollectionUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_manager_or_admin),
) -> Any:
    collection = await CollectionService.update_collection(db, collection_id, collection_in)
    return SuccessResponse(data=CollectionResponse.model_validate(collection), message="수금이 수정되었습니다")


@router.delete("/{collection_id}", response_model=SuccessResponse)
async def delete_collection(
    collection_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    await CollectionService.delete_collection(db, collection_id)
    return SuccessResponse(message="수금이 삭제되었습니다")
