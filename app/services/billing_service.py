"""Billing Service - Business Logic Layer"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, func, cast, Integer, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ConflictError, DomainValidationError, NotFoundError
from app.models.customer import Customer
from app.models.enums import BillingType, ContractType, InvoiceStatus
from app.models.finance import Billing, Collection
from app.models.order import Order
from app.schemas.finance import BillableOrder, BillingCreate, BillingUpdate
from app.utils.time import get_business_today

logger = logging.getLogger(__name__)

BILLING_NUMBER_PREFIX = "B"


class BillingService:
    """Service layer for Billing operations"""

    @staticmethod
    async def generate_next_billing_number(db: AsyncSession) -> str:
        """Generate next billing_number in format B{year}-{seq} (e.g. B2025-0001)."""
        year = get_business_today().year
        prefix = f"{BILLING_NUMBER_PREFIX}{year}-"
        start_pos = len(prefix) + 1
        pattern = f"^{BILLING_NUMBER_PREFIX}{year}-\\d+$"
        result = await db.execute(
            select(func.max(cast(func.substring(Billing.billing_number, start_pos), Integer))).where(
                Billing.billing_number.op("~")(pattern)
            )
        )
        max_seq = result.scalar_one_or_none()
        return f"{prefix}{(max_seq or 0) + 1:04d}"

    @staticmethod
    async def is_billing_number_taken(
        db: AsyncSession, billing_number: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        query = select(Billing.id).where(Billing.billing_number == billing_number)
        if exclude_id:
            query = query.where(Billing.id != exclude_id)
        return (await db.scalar(query.limit(1))) is not None

    @staticmethod
    async def get_billings(
        db: AsyncSession,
        order_id: Optional[UUID] = None,
        customer_id: Optional[UUID] = None,
        billing_type: Optional[BillingType] = None,
        invoice_status: Optional[InvoiceStatus] = None,
        search: Optional[str] = None,
    ) -> List[Billing]:
        query = select(Billing).options(selectinload(Billing.order), selectinload(Billing.customer))
        if order_id:
            query = query.where(Billing.order_id == order_id)
        if customer_id:
            query = query.where(Billing.customer_id == customer_id)
        if billing_type:
            query = query.where(Billing.billing_type == billing_type)
        if invoice_status:
            query = query.where(Billing.invoice_status == invoice_status)
        if search:
            pattern = f"%{search}%"
            query = query.join(Billing.order).where(
                or_(Billing.billing_number.ilike(pattern), Order.contract_name.ilike(pattern))
            )
        result = await db.execute(query.order_by(Billing.billing_number.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def get_billing(db: AsyncSession, billing_id: UUID) -> Billing:
        result = await db.execute(
            select(Billing)
            .options(selectinload(Billing.order), selectinload(Billing.customer))
            .where(Billing.id == billing_id)
            .execution_options(populate_existing=True)
        )
        billing = result.scalar_one_or_none()
        if not billing:
            raise NotFoundError("청구를 찾을 수 없습니다")
        return billing

    @staticmethod
    async def get_billable_orders(db: AsyncSession) -> List[BillableOrder]:
        """Only `new` orders are billed; change contracts roll into their parent."""
        result = await db.execute(
            select(Order)
            .options(selectinload(Order.customer))
            .where(Order.contract_type == ContractType.NEW)
            .order_by(Order.contract_date.desc(), Order.order_number.desc())
        )
        return [
            BillableOrder(
                id=order.id,
                order_number=order.order_number,
                contract_name=order.contract_name,
                contract_amount=order.contract_amount,
                customer_id=order.customer_id,
                customer_name=order.customer.name if order.customer else "",
            )
            for order in result.scalars().all()
        ]

    @staticmethod
    async def _validate_references(db: AsyncSession, order_id: UUID, customer_id: UUID) -> None:
        order = await db.get(Order, order_id)
        if not order:
            raise DomainValidationError("수주를 찾을 수 없습니다")
        if order.contract_type != ContractType.NEW:
            raise DomainValidationError("신규계약에만 청구를 등록할 수 있습니다")
        if not await db.get(Customer, customer_id):
            raise DomainValidationError("고객을 찾을 수 없습니다")

    @staticmethod
    async def create_billing(db: AsyncSession, billing_in: BillingCreate, user_id: Optional[UUID] = None) -> Billing:
        await BillingService._validate_references(db, billing_in.order_id, billing_in.customer_id)

        billing_number = billing_in.billing_number
        if billing_number:
            if await BillingService.is_billing_number_taken(db, billing_number):
                raise ConflictError("이미 사용 중인 청구번호입니다", code="DUPLICATE_BILLING_NUMBER")
        else:
            billing_number = await BillingService.generate_next_billing_number(db)

        billing = Billing(
            **billing_in.model_dump(exclude={"billing_number"}),
            billing_number=billing_number,
            created_by=user_id,
            updated_by=user_id,
        )
        db.add(billing)
        await db.commit()

        logger.info(
            "Billing created",
            extra={"billing_id": str(billing.id), "billing_number": billing_number, "order_id": str(billing.order_id)},
        )
        return await BillingService.get_billing(db, billing.id)

    @staticmethod
    async def update_billing(
        db: AsyncSession, billing_id: UUID, billing_update: BillingUpdate, user_id: Optional[UUID] = None
    ) -> Billing:
        billing = await BillingService.get_billing(db, billing_id)
        update_data = billing_update.model_dump(exclude_unset=True)

        if "order_id" in update_data or "customer_id" in update_data:
            await BillingService._validate_references(
                db,
                update_data.get("order_id") or billing.order_id,
                update_data.get("customer_id") or billing.customer_id,
            )
        if update_data.get("billing_number") and update_data["billing_number"] != billing.billing_number:
            if await BillingService.is_billing_number_taken(db, update_data["billing_number"], exclude_id=billing_id):
                raise ConflictError("이미 사용 중인 청구번호입니다", code="DUPLICATE_BILLING_NUMBER")
        elif "billing_number" in update_data and not update_data["billing_number"]:
            update_data.pop("billing_number")

        for field, value in update_data.items():
            setattr(billing, field, value)
        billing.updated_by = user_id

        await db.commit()
        logger.info("Billing updated", extra={"billing_id": str(billing_id), "fields": sorted(update_data)})
        return await BillingService.get_billing(db, billing_id)

    @staticmethod
    async def delete_billing(db: AsyncSession, billing_id: UUID) -> None:
        """
        Delete a billing and its receivable activities.

        Raises:
            ConflictError: Collections are booked against it
        """
        billing = await BillingService.get_billing(db, billing_id)

        collections = await db.scalar(select(func.count(Collection.id)).where(Collection.billing_id == billing_id))
        if collections:
            logger.warning("Billing delete rejected: collections exist", extra={"billing_id": str(billing_id)})
            raise ConflictError("수금 내역이 있는 청구는 삭제할 수 없습니다", code="BILLING_HAS_COLLECTIONS")

        await db.delete(billing)
        await db.commit()
        logger.info("Billing deleted", extra={"billing_id": str(billing_id)})
