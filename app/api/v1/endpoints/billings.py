"""Billing Endpoints"""

from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.enums import BillingType, InvoiceStatus
from app.models.user import User
from app.schemas.finance import (
    BillableOrder, BillingCreate, BillingNumberCheck, BillingResponse, BillingUpdate,
)
from app.schemas.responses import SuccessResponse
from app.services.billing_service import BillingService

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[BillingResponse]])
async def list_billings(
    order_id: Optional[UUID] = None,
    customer_id: Optional[UUID] = None,
    billing_type: Optional[BillingType] = None,
    invoice_status: Optional[InvoiceStatus] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    billings = await BillingService.get_billings(
        db,
        order_id=order_id,
        customer_id=customer_id,
        billing_type=billing_type,
        invoice_status=invoice_status,
        search=search,
    )
    return SuccessResponse(data=[BillingResponse.model_validate(b) for b in billings])


@router.get("/orders", response_model=SuccessResponse[List[BillableOrder]])
async def list_billable_orders(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """New contracts that can be billed."""
    return SuccessResponse(data=await BillingService.get_billable_orders(db))


@router.get("/check-number", response_model=SuccessResponse[BillingNumberCheck])
async def check_billing_number(
    billing_number: str = Query(..., min_length=1),
    exclude_id: Optional[UUID] = Query(None, description="Billing being edited"),
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    taken = await BillingService.is_billing_number_taken(db, billing_number, exclude_id=exclude_id)
    return SuccessResponse(data=BillingNumberCheck(billing_number=billing_number, is_duplicate=taken))


@router.get("/{billing_id}", response_model=SuccessResponse[BillingResponse])
async def get_billing(
    billing_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    billing = await BillingService.get_billing(db, billing_id)
    return SuccessResponse(data=BillingResponse.model_validate(billing))


@router.post("", response_model=SuccessResponse[BillingResponse], status_code=201)
async def create_billing(
    billing_in: BillingCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    billing = await BillingService.create_billing(db, billing_in, user_id=current_user.id)
    return SuccessResponse(data=BillingResponse.model_validate(billing), message="청구가 등록되었습니다")


@router.put("/{billing_id}", response_model=SuccessResponse[BillingResponse])
async def update_billing(
    billing_id: UUID,
    billing_in: BillingUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    billing = await BillingService.update_billing(db, billing_id, billing_in, user_id=current_user.id)
    return SuccessResponse(data=BillingResponse.model_validate(billing), message="청구가 수정되었습니다")


@router.delete("/{billing_id}", response_model=SuccessResponse)
async def delete_billing(
    billing_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Rejected with 409 while collections are booked against the billing."""
    await BillingService.delete_billing(db, billing_id)
    return SuccessResponse(message="청구가 삭제되었습니다")
