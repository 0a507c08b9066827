"""Sales Order Endpoints"""

from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.config import settings
from app.models.enums import ContractStatus, ContractType
from app.models.user import User
from app.schemas.order import (
    AttachmentDownload, AttachmentMetadata, MethodResponse, NewOrderOption,
    OrderCreate, OrderResponse, OrderRow, OrderUpdate, PollutantResponse,
)
from app.schemas.responses import SuccessResponse
from app.services.attachment_service import AttachmentService
from app.services.order_service import OrderService

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[OrderResponse]])
async def list_orders(
    contract_type: Optional[ContractType] = None,
    contract_status: Optional[ContractStatus] = None,
    customer_id: Optional[UUID] = None,
    search: Optional[str] = Query(None, description="Contract name or order number contains"),
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Flat order list, newest order number first."""
    orders = await OrderService.get_orders(
        db, contract_type=contract_type, contract_status=contract_status, customer_id=customer_id, search=search
    )
    return SuccessResponse(data=[OrderResponse.model_validate(o) for o in orders])


@router.get("/hierarchy", response_model=SuccessResponse[List[OrderRow]])
async def list_order_hierarchy(
    contract_status: Optional[ContractStatus] = None,
    customer_id: Optional[UUID] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Orders grouped for display: each new contract with its change contracts
    nested, the combined amount, a type label and all attachments.
    """
    rows = await OrderService.get_order_hierarchy(
        db, contract_status=contract_status, customer_id=customer_id, search=search
    )
    return SuccessResponse(data=rows)


@router.get("/new", response_model=SuccessResponse[List[NewOrderOption]])
async def list_parent_candidates(
    exclude_id: Optional[UUID] = None,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """New contracts a change contract can point at."""
    orders = await OrderService.get_new_orders(db, exclude_id=exclude_id)
    return SuccessResponse(data=[NewOrderOption.model_validate(o) for o in orders])


@router.get("/pollutants", response_model=SuccessResponse[List[PollutantResponse]])
async def list_pollutants(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    pollutants = await OrderService.get_pollutants(db)
    return SuccessResponse(data=[PollutantResponse.model_validate(p) for p in pollutants])


@router.get("/methods", response_model=SuccessResponse[List[MethodResponse]])
async def list_methods(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    methods = await OrderService.get_methods(db)
    return SuccessResponse(data=[MethodResponse.model_validate(m) for m in methods])


@router.get("/{order_id}", response_model=SuccessResponse[OrderResponse])
async def get_order(
    order_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    order = await OrderService.get_order(db, order_id)
    return SuccessResponse(data=OrderResponse.model_validate(order))


@router.post("", response_model=SuccessResponse[OrderResponse], status_code=201)
async def create_order(
    order_in: OrderCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    order = await OrderService.create_order(db, order_in, user_id=current_user.id)
    return SuccessResponse(data=OrderResponse.model_validate(order), message="수주가 등록되었습니다")


@router.put("/{order_id}", response_model=SuccessResponse[OrderResponse])
async def update_order(
    order_id: UUID,
    order_in: OrderUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    order = await OrderService.update_order(db, order_id, order_in, user_id=current_user.id)
    return SuccessResponse(data=OrderResponse.model_validate(order), message="수주가 수정되었습니다")


@router.delete("/{order_id}", response_model=SuccessResponse)
async def delete_order(
    order_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    """Rejected with 409 while billings or change contracts reference the order."""
    await OrderService.delete_order(db, order_id)
    return SuccessResponse(message="수주가 삭제되었습니다")


# Attachments

@router.get("/{order_id}/attachments", response_model=SuccessResponse[List[AttachmentMetadata]])
async def list_attachments(
    order_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    attachments = await AttachmentService.list_attachments(db, order_id)
    return SuccessResponse(data=attachments)


@router.post("/{order_id}/attachments", response_model=SuccessResponse[AttachmentMetadata], status_code=201)
async def upload_attachment(
    order_id: UUID,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Upload a file (max 20 MB) to the order. Returns 413 for larger files.
    """
    # One byte past the cap is enough to know the file is too large
    content = await file.read(settings.max_attachment_bytes + 1)
    attachment = await AttachmentService.upload_attachment(
        db,
        order_id,
        filename=file.filename or "file",
        content=content,
        content_type=file.content_type,
        user_id=current_user.id,
    )
    return SuccessResponse(data=attachment, message="파일이 업로드되었습니다")


@router.get("/{order_id}/attachments/download", response_model=SuccessResponse[AttachmentDownload])
async def get_attachment_download_url(
    order_id: UUID,
    path: str = Query(..., description="Storage path of the attachment"),
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """Presigned download URL, valid for one hour."""
    download = await AttachmentService.get_download_url(db, order_id, path)
    return SuccessResponse(data=download)


@router.delete("/{order_id}/attachments", response_model=SuccessResponse[List[AttachmentMetadata]])
async def delete_attachment(
    order_id: UUID,
    path: str = Query(..., description="Storage path of the attachment"),
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    remaining = await AttachmentService.delete_attachment(db, order_id, path, user_id=current_user.id)
    return SuccessResponse(data=remaining, message="파일이 삭제되었습니다")
