"""Company and bank account administration"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError
from app.models.company import BankAccount, Company
from app.models.finance import Collection
from app.schemas.company import (
    BankAccountCreate, BankAccountUpdate, CompanyCreate, CompanyUpdate,
)

logger = logging.getLogger(__name__)


class CompanyService:
    """Service layer for Company and BankAccount operations"""

    @staticmethod
    async def get_companies(db: AsyncSession) -> List[Company]:
        result = await db.execute(select(Company).order_by(Company.sort_order, Company.name))
        return list(result.scalars().all())

    @staticmethod
    async def get_company(db: AsyncSession, company_id: UUID) -> Company:
        company = await db.get(Company, company_id)
        if not company:
            raise NotFoundError("회사를 찾을 수 없습니다")
        return company

    @staticmethod
    async def _ensure_unique_name(db: AsyncSession, name: str, exclude_id: Optional[UUID] = None) -> None:
        query = select(Company.id).where(Company.name == name)
        if exclude_id:
            query = query.where(Company.id != exclude_id)
        if await db.scalar(query):
            raise ConflictError("이미 등록된 회사명입니다")

    @staticmethod
    async def create_company(db: AsyncSession, company_in: CompanyCreate) -> Company:
        await CompanyService._ensure_unique_name(db, company_in.name)
        company = Company(**company_in.model_dump())
        db.add(company)
        await db.commit()
        await db.refresh(company)
        logger.info("Company created", extra={"company_id": str(company.id)})
        return company

    @staticmethod
    async def update_company(db: AsyncSession, company_id: UUID, company_update: CompanyUpdate) -> Company:
        company = await CompanyService.get_company(db, company_id)
        update_data = company_update.model_dump(exclude_unset=True)
        if update_data.get("name"):
            await CompanyService._ensure_unique_name(db, update_data["name"], exclude_id=company_id)
        for field, value in update_data.items():
            setattr(company, field, value)
        await db.commit()
        await db.refresh(company)
        return company

    @staticmethod
    async def delete_company(db: AsyncSession, company_id: UUID) -> None:
        company = await CompanyService.get_company(db, company_id)
        await db.delete(company)
        await db.commit()
        logger.info("Company deleted", extra={"company_id": str(company_id)})

    # -- Bank accounts -------------------------------------------------------

    @staticmethod
    async def get_bank_accounts(db: AsyncSession, company_id: Optional[UUID] = None) -> List[BankAccount]:
        query = select(BankAccount).order_by(BankAccount.bank_name)
        if company_id:
            query = query.where(BankAccount.company_id == company_id)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_bank_account(db: AsyncSession, account_id: UUID) -> BankAccount:
        account = await db.get(BankAccount, account_id)
        if not account:
            raise NotFoundError("계좌를 찾을 수 없습니다")
        return account

    @staticmethod
    async def create_bank_account(db: AsyncSession, account_in: BankAccountCreate) -> BankAccount:
        await CompanyService.get_company(db, account_in.company_id)
        account = BankAccount(**account_in.model_dump())
        db.add(account)
        await db.commit()
        await db.refresh(account)
        logger.info("Bank account created", extra={"bank_account_id": str(account.id)})
        return account

    @staticmethod
    async def update_bank_account(
        db: AsyncSession, account_id: UUID, account_update: BankAccountUpdate
    ) -> BankAccount:
        account = await CompanyService.get_bank_account(db, account_id)
        for field, value in account_update.model_dump(exclude_unset=True).items():
            setattr(account, field, value)
        await db.commit()
        await db.refresh(account)
        return account

    @staticmethod
    async def delete_bank_account(db: AsyncSession, account_id: UUID) -> None:
        account = await CompanyService.get_bank_account(db, account_id)
        # Collections keep their bank name/number snapshot; the FK is SET NULL
        used = await db.scalar(
            select(func.count(Collection.id)).where(Collection.bank_account_id == account_id)
        )
        await db.delete(account)
        await db.commit()
        logger.info(
            "Bank account deleted",
            extra={"bank_account_id": str(account_id), "detached_collections": used or 0},
        )
