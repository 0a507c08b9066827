"""Collection Service - Business Logic Layer"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import DomainValidationError, NotFoundError
from app.models.company import BankAccount
from app.models.finance import Billing, Collection
from app.schemas.finance import BillingCollectionStatus, CollectionCreate, CollectionUpdate

logger = logging.getLogger(__name__)


def _collection_load_options():
    return (
        selectinload(Collection.billing).selectinload(Billing.order),
        selectinload(Collection.billing).selectinload(Billing.customer),
    )


class CollectionService:
    """Service layer for Collection operations"""

    @staticmethod
    async def get_collections(db: AsyncSession, billing_id: Optional[UUID] = None) -> List[Collection]:
        query = select(Collection).options(*_collection_load_options())
        if billing_id:
            query = query.where(Collection.billing_id == billing_id)
        result = await db.execute(
            query.order_by(Collection.collection_date.desc(), Collection.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_collection(db: AsyncSession, collection_id: UUID) -> Collection:
        result = await db.execute(
            select(Collection)
            .options(*_collection_load_options())
            .where(Collection.id == collection_id)
            .execution_options(populate_existing=True)
        )
        collection = result.scalar_one_or_none()
        if not collection:
            raise NotFoundError("수금 내역을 찾을 수 없습니다")
        return collection

    @staticmethod
    async def collected_amounts(db: AsyncSession, billing_ids: Optional[List[UUID]] = None) -> Dict[UUID, Decimal]:
        """Sum of collections per billing, in one query."""
        query = select(Collection.billing_id, func.sum(Collection.collection_amount)).group_by(Collection.billing_id)
        if billing_ids is not None:
            query = query.where(Collection.billing_id.in_(billing_ids))
        result = await db.execute(query)
        return {billing_id: Decimal(total or 0) for billing_id, total in result.all()}

    @staticmethod
    async def get_billing_statuses(db: AsyncSession) -> List[BillingCollectionStatus]:
        """Billed / collected / remaining per billing, for the collection form."""
        result = await db.execute(
            select(Billing)
            .options(selectinload(Billing.order), selectinload(Billing.customer))
            .order_by(Billing.billing_date.desc())
        )
        billings = result.scalars().all()
        collected = await CollectionService.collected_amounts(db)

        statuses = []
        for billing in billings:
            amount = collected.get(billing.id, Decimal("0"))
            statuses.append(BillingCollectionStatus(
                billing_id=billing.id,
                billing_number=billing.billing_number,
                contract_name=billing.order.contract_name if billing.order else "",
                customer_name=billing.customer.name if billing.customer else "",
                billing_amount=billing.billing_amount,
                collected_amount=amount,
                remaining_amount=max(billing.billing_amount - amount, Decimal("0")),
            ))
        return statuses

    @staticmethod
    async def _apply_bank_snapshot(db: AsyncSession, collection: Collection, bank_account_id: Optional[UUID]) -> None:
        # Keep bank name/number on the row so history survives account edits
        if bank_account_id is None:
            return
        account = await db.get(BankAccount, bank_account_id)
        if not account:
            raise DomainValidationError("계좌를 찾을 수 없습니다")
        collection.bank_name = account.bank_name
        collection.account_number = account.account_number

    @staticmethod
    async def create_collection(db: AsyncSession, collection_in: CollectionCreate) -> Collection:
        billing = await db.get(Billing, collection_in.billing_id)
        if not billing:
            raise DomainValidationError("청구를 찾을 수 없습니다")

        collection = Collection(**collection_in.model_dump())
        await CollectionService._apply_bank_snapshot(db, collection, collection_in.bank_account_id)
        db.add(collection)
        await db.commit()

        already = (await CollectionService.collected_amounts(db, [billing.id])).get(billing.id, Decimal("0"))
        if already > billing.billing_amount:
            logger.warning(
                "Collections exceed billing amount",
                extra={"billing_id": str(billing.id), "collected": str(already), "billed": str(billing.billing_amount)},
            )
        logger.info(
            "Collection created",
            extra={"collection_id": str(collection.id), "billing_id": str(billing.id)},
        )
        return await CollectionService.get_collection(db, collection.id)

    @staticmethod
    async def update_collection(
        db: AsyncSession, collection_id: UUID, collection_update: CollectionUpdate
    ) -> Collection:
        collection = await CollectionService.get_collection(db, collection_id)
        update_data = collection_update.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            setattr(collection, field, value)
        if update_data.get("bank_account_id"):
            await CollectionService._apply_bank_snapshot(db, collection, update_data["bank_account_id"])
        elif "bank_account_id" in update_data:
            # Account unlinked: drop the snapshot unless the caller sent its own
            for field in ("bank_name", "account_number"):
                if field not in update_data:
                    setattr(collection, field, None)

        await db.commit()
        logger.info("Collection updated", extra={"collection_id": str(collection_id), "fields": sorted(update_data)})
        return await CollectionService.get_collection(db, collection_id)

    @staticmethod
    async def delete_collection(db: AsyncSession, collection_id: UUID) -> None:
        collection = await CollectionService.get_collection(db, collection_id)
        await db.delete(collection)
        await db.commit()
        logger.info("Collection deleted", extra={"collection_id": str(collection_id)})
