import math
from typing import Any, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.enums import CustomerStatus, CustomerType
from app.models.user import User
from app.schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate
from app.schemas.responses import PaginatedResponse, SuccessResponse
from app.services.customer_service import CustomerService

router = APIRouter()


@router.get("", response_model=PaginatedResponse[CustomerResponse])
async def list_customers(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
    customer_type: Optional[CustomerType] = None,
    status: Optional[CustomerStatus] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    List customers. Filter by type (발주처/검증업체) and status (거래중/중단).
    """
    customers, total = await CustomerService.get_customers(
        db,
        customer_type=customer_type,
        status=status,
        search=search,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return PaginatedResponse(
        data=[CustomerResponse.model_validate(c) for c in customers],
        meta={
            "page": page,
            "page_size": page_size,
            "total": total,
            "total_pages": math.ceil(total / page_size),
        }
    )


@router.get("/{customer_id}", response_model=SuccessResponse[CustomerResponse])
async def get_customer(
    customer_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    customer = await CustomerService.get_customer(db, customer_id)
    return SuccessResponse(data=CustomerResponse.model_validate(customer))


@router.post("", response_model=SuccessResponse[CustomerResponse], status_code=201)
async def create_customer(
    customer_in: CustomerCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_manager_or_admin),
) -> Any:
    customer = await CustomerService.create_customer(db, customer_in)
    return SuccessResponse(data=CustomerResponse.model_validate(customer), message="고객이 등록되었습니다")


@router.put("/{customer_id}", response_model=SuccessResponse[CustomerResponse])
async def update_customer(
    customer_id: UUID,
    customer_in: CustomerUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_manager_or_admin),
) -> Any:
    customer = await CustomerService.update_customer(db, customer_id, customer_in)
    return SuccessResponse(data=CustomerResponse.model_validate(customer), message="고객 정보가 수정되었습니다")


@router.delete("/{customer_id}", response_model=SuccessResponse)
async def delete_customer(
    customer_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    """Rejected with 409 while orders or billings reference the customer."""
    await CustomerService.delete_customer(db, customer_id)
    return SuccessResponse(message="고객이 삭제되었습니다")
