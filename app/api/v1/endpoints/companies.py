"""Company and Bank Account Endpoints (admin)"""

from typing import Any, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.models.user import User
from app.schemas.company import (
    BankAccountCreate, BankAccountResponse, BankAccountUpdate,
    CompanyCreate, CompanyResponse, CompanyUpdate,
)
from app.schemas.responses import SuccessResponse
from app.services.company_service import CompanyService

router = APIRouter()


@router.get("", response_model=SuccessResponse[List[CompanyResponse]])
async def list_companies(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    companies = await CompanyService.get_companies(db)
    return SuccessResponse(data=[CompanyResponse.model_validate(c) for c in companies])


@router.post("", response_model=SuccessResponse[CompanyResponse], status_code=201)
async def create_company(
    company_in: CompanyCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    company = await CompanyService.create_company(db, company_in)
    return SuccessResponse(data=CompanyResponse.model_validate(company), message="회사가 등록되었습니다")


# Declared before /{company_id} so the literal path wins
@router.get("/bank-accounts", response_model=SuccessResponse[List[BankAccountResponse]])
async def list_bank_accounts(
    company_id: Optional[UUID] = None,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    accounts = await CompanyService.get_bank_accounts(db, company_id)
    return SuccessResponse(data=[BankAccountResponse.model_validate(a) for a in accounts])


@router.post("/bank-accounts", response_model=SuccessResponse[BankAccountResponse], status_code=201)
async def create_bank_account(
    account_in: BankAccountCreate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    account = await CompanyService.create_bank_account(db, account_in)
    return SuccessResponse(data=BankAccountResponse.model_validate(account), message="계좌가 등록되었습니다")


@router.put("/bank-accounts/{account_id}", response_model=SuccessResponse[BankAccountResponse])
async def update_bank_account(
    account_id: UUID,
    account_in: BankAccountUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    account = await CompanyService.update_bank_account(db, account_id, account_in)
    return SuccessResponse(data=BankAccountResponse.model_validate(account), message="계좌가 수정되었습니다")


@router.delete("/bank-accounts/{account_id}", response_model=SuccessResponse)
async def delete_bank_account(
    account_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    await CompanyService.delete_bank_account(db, account_id)
    return SuccessResponse(message="계좌가 삭제되었습니다")


@router.get("/{company_id}", response_model=SuccessResponse[CompanyResponse])
async def get_company(
    company_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    company = await CompanyService.get_company(db, company_id)
    return SuccessResponse(data=CompanyResponse.model_validate(company))


@router.put("/{company_id}", response_model=SuccessResponse[CompanyResponse])
async def update_company(
    company_id: UUID,
    company_in: CompanyUpdate,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    company = await CompanyService.update_company(db, company_id, company_in)
    return SuccessResponse(data=CompanyResponse.model_validate(company), message="회사 정보가 수정되었습니다")


@router.delete("/{company_id}", response_model=SuccessResponse)
async def delete_company(
    company_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.require_admin),
) -> Any:
    await CompanyService.delete_company(db, company_id)
    return SuccessResponse(message="회사가 삭제되었습니다")
