"""Customer master data"""

import logging
import re
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError
from app.models.customer import Customer
from app.models.enums import CustomerStatus, CustomerType
from app.models.finance import Billing
from app.models.order import Order
from app.schemas.customer import CustomerCreate, CustomerUpdate

logger = logging.getLogger(__name__)


class CustomerService:
    """Service layer for Customer operations"""

    @staticmethod
    async def get_customers(
        db: AsyncSession,
        customer_type: Optional[CustomerType] = None,
        status: Optional[CustomerStatus] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[List[Customer], int]:
        filters = []
        if customer_type:
            filters.append(Customer.customer_type == customer_type)
        if status:
            filters.append(Customer.status == status)
        if search:
            pattern = f"%{search}%"
            filters.append(or_(Customer.name.ilike(pattern), Customer.business_number.ilike(pattern)))

        total = await db.scalar(select(func.count(Customer.id)).where(*filters))
        result = await db.execute(
            select(Customer)
            .where(*filters)
            .order_by(Customer.sort_order, Customer.name)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    @staticmethod
    async def get_customer(db: AsyncSession, customer_id: UUID) -> Customer:
        customer = await db.get(Customer, customer_id)
        if not customer:
            raise NotFoundError("고객을 찾을 수 없습니다")
        return customer

    @staticmethod
    async def is_business_number_taken(
        db: AsyncSession, business_number: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        """Compare digits only, so 123-45-67890 and 1234567890 collide."""
        digits = re.sub(r"\D", "", business_number)
        if not digits:
            return False
        query = select(Customer.id).where(
            func.regexp_replace(Customer.business_number, r"\D", "", "g") == digits
        )
        if exclude_id is not None:
            query = query.where(Customer.id != exclude_id)
        return await db.scalar(query.limit(1)) is not None

    @staticmethod
    async def _check_business_number(
        db: AsyncSession, business_number: Optional[str], exclude_id: Optional[UUID] = None
    ) -> None:
        if business_number and await CustomerService.is_business_number_taken(db, business_number, exclude_id):
            logger.warning("Duplicate business number rejected", extra={"business_number": business_number})
            raise ConflictError("이미 등록된 사업자등록번호입니다", code="DUPLICATE_BUSINESS_NUMBER")

    @staticmethod
    async def create_customer(db: AsyncSession, customer_in: CustomerCreate) -> Customer:
        await CustomerService._check_business_number(db, customer_in.business_number)
        customer = Customer(**customer_in.model_dump())
        db.add(customer)
        await db.commit()
        await db.refresh(customer)
        logger.info("Customer created", extra={"customer_id": str(customer.id)})
        return customer

    @staticmethod
    async def update_customer(db: AsyncSession, customer_id: UUID, customer_update: CustomerUpdate) -> Customer:
        customer = await CustomerService.get_customer(db, customer_id)
        update_data = customer_update.model_dump(exclude_unset=True)
        if "business_number" in update_data:
            await CustomerService._check_business_number(db, update_data.get("business_number"), exclude_id=customer_id)

        for field, value in update_data.items():
            setattr(customer, field, value)
        await db.commit()
        await db.refresh(customer)
        return customer

    @staticmethod
    async def delete_customer(db: AsyncSession, customer_id: UUID) -> None:
        """Delete a customer no order or billing points at."""
        customer = await CustomerService.get_customer(db, customer_id)

        order_refs = await db.scalar(
            select(func.count(Order.id)).where(
                or_(Order.customer_id == customer_id, Order.verification_company_id == customer_id)
            )
        )
        billing_refs = await db.scalar(select(func.count(Billing.id)).where(Billing.customer_id == customer_id))
        if order_refs or billing_refs:
            logger.warning(
                "Customer delete rejected: referenced",
                extra={"customer_id": str(customer_id), "orders": order_refs, "billings": billing_refs},
            )
            raise ConflictError("수주 또는 청구에 사용 중인 고객은 삭제할 수 없습니다")

        await db.delete(customer)
        await db.commit()
        logger.info("Customer deleted", extra={"customer_id": str(customer_id)})
