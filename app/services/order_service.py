"""Order (sales contract) Service - Business Logic Layer"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, func, cast, Integer, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import ConflictError, DomainValidationError, NotFoundError
from app.models.customer import Customer
from app.models.enums import ContractStatus, ContractType
from app.models.finance import Billing
from app.models.order import Method, Order, OrderMethod, OrderPollutant, Pollutant
from app.schemas.order import OrderCreate, OrderResponse, OrderRow, OrderUpdate, PollutantInput
from app.services.order_hierarchy import build_order_hierarchy
from app.utils.time import get_business_today

logger = logging.getLogger(__name__)


def _order_load_options():
    return (
        selectinload(Order.customer),
        selectinload(Order.verification_company),
        selectinload(Order.manager),
        selectinload(Order.parent_order),
        selectinload(Order.pollutants).selectinload(OrderPollutant.pollutant),
        selectinload(Order.methods).selectinload(OrderMethod.method),
    )


def _pollutant_rows(pollutants: List[PollutantInput]) -> List[OrderPollutant]:
    return [
        OrderPollutant(
            pollutant_id=p.pollutant_id,
            concentration=p.concentration,
            group_name=p.group_name or None,
        )
        for p in pollutants
    ]


def _method_rows(methods: List[UUID]) -> List[OrderMethod]:
    return [OrderMethod(method_id=method_id) for method_id in methods]


class OrderService:
    """Service layer for Order operations"""

    @staticmethod
    async def generate_next_order_number(db: AsyncSession) -> str:
        """Generate next order_number in format {year}-{seq} (e.g. 2025-0001)."""
        year = get_business_today().year
        prefix = f"{year}-"
        start_pos = len(prefix) + 1
        # Only consider numbers matching {year}-{digits}; imported legacy numbers are skipped
        pattern = f"^{year}-\\d+$"
        result = await db.execute(
            select(func.max(cast(func.substring(Order.order_number, start_pos), Integer))).where(
                Order.order_number.op("~")(pattern)
            )
        )
        max_seq = result.scalar_one_or_none()
        return f"{year}-{(max_seq or 0) + 1:04d}"

    @staticmethod
    async def get_orders(
        db: AsyncSession,
        contract_type: Optional[ContractType] = None,
        contract_status: Optional[ContractStatus] = None,
        customer_id: Optional[UUID] = None,
        search: Optional[str] = None,
    ) -> List[Order]:
        """Flat order list, newest order number first."""
        query = select(Order).options(*_order_load_options())
        if contract_type:
            query = query.where(Order.contract_type == contract_type)
        if contract_status:
            query = query.where(Order.contract_status == contract_status)
        if customer_id:
            query = query.where(Order.customer_id == customer_id)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(Order.contract_name.ilike(pattern), Order.order_number.ilike(pattern)))

        result = await db.execute(query.order_by(Order.order_number.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def get_order_hierarchy(
        db: AsyncSession,
        contract_status: Optional[ContractStatus] = None,
        customer_id: Optional[UUID] = None,
        search: Optional[str] = None,
    ) -> List[OrderRow]:
        """
        Orders grouped for the list screen: each `new` order with its change
        contracts nested. A change contract filtered away from its parent
        shows up as its own row.
        """
        orders = await OrderService.get_orders(
            db, contract_status=contract_status, customer_id=customer_id, search=search
        )
        return build_order_hierarchy([OrderResponse.model_validate(order) for order in orders])

    @staticmethod
    async def get_order(db: AsyncSession, order_id: UUID) -> Order:
        result = await db.execute(
            select(Order)
            .options(*_order_load_options())
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        order = result.scalar_one_or_none()
        if not order:
            raise NotFoundError("수주를 찾을 수 없습니다")
        return order

    @staticmethod
    async def get_new_orders(db: AsyncSession, exclude_id: Optional[UUID] = None) -> List[Order]:
        """`new` orders offered as parent candidates for a change contract."""
        query = select(Order).where(Order.contract_type == ContractType.NEW)
        if exclude_id:
            query = query.where(Order.id != exclude_id)
        result = await db.execute(query.order_by(Order.order_number.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def get_pollutants(db: AsyncSession) -> List[Pollutant]:
        result = await db.execute(select(Pollutant).order_by(Pollutant.sort_order, Pollutant.name))
        return list(result.scalars().all())

    @staticmethod
    async def get_methods(db: AsyncSession) -> List[Method]:
        result = await db.execute(select(Method).order_by(Method.sort_order, Method.name))
        return list(result.scalars().all())

    @staticmethod
    async def _validate_parent(
        db: AsyncSession,
        contract_type: ContractType,
        parent_order_id: Optional[UUID],
        order_id: Optional[UUID] = None,
    ) -> None:
        if contract_type == ContractType.NEW:
            if parent_order_id is not None:
                raise DomainValidationError("신규계약은 원본 계약을 가질 수 없습니다")
            return

        if parent_order_id is None:
            raise DomainValidationError("변경계약의 경우 원본 계약을 선택해주세요")
        if order_id is not None and parent_order_id == order_id:
            raise DomainValidationError("자기 자신을 원본 계약으로 지정할 수 없습니다")

        parent = await db.get(Order, parent_order_id)
        if not parent:
            raise DomainValidationError("원본 계약을 찾을 수 없습니다")
        if parent.contract_type != ContractType.NEW:
            raise DomainValidationError("변경계약의 원본은 신규계약이어야 합니다")

    @staticmethod
    async def _validate_customers(
        db: AsyncSession, customer_id: UUID, verification_company_id: Optional[UUID]
    ) -> None:
        if not await db.get(Customer, customer_id):
            raise DomainValidationError("고객을 찾을 수 없습니다")
        if verification_company_id and not await db.get(Customer, verification_company_id):
            raise DomainValidationError("검증업체를 찾을 수 없습니다")

    @staticmethod
    async def create_order(db: AsyncSession, order_in: OrderCreate, user_id: Optional[UUID] = None) -> Order:
        """
        Create an order with its pollutant and method rows in one transaction.

        Raises:
            DomainValidationError: Bad parent reference or unknown customer
        """
        await OrderService._validate_parent(db, order_in.contract_type, order_in.parent_order_id)
        await OrderService._validate_customers(db, order_in.customer_id, order_in.verification_company_id)

        data = order_in.model_dump(exclude={"pollutants", "methods"})
        order = Order(
            **data,
            order_number=await OrderService.generate_next_order_number(db),
            attachments=[],
            created_by=user_id,
            updated_by=user_id,
        )
        order.pollutants = _pollutant_rows(order_in.pollutants)
        order.methods = _method_rows(order_in.methods)
        db.add(order)
        await db.commit()

        logger.info(
            "Order created",
            extra={
                "order_id": str(order.id),
                "order_number": order.order_number,
                "contract_type": order.contract_type.value,
            },
        )
        return await OrderService.get_order(db, order.id)

    @staticmethod
    async def update_order(
        db: AsyncSession, order_id: UUID, order_update: OrderUpdate, user_id: Optional[UUID] = None
    ) -> Order:
        """Partial update; pollutants/methods, when given, replace the existing rows."""
        order = await OrderService.get_order(db, order_id)
        update_data = order_update.model_dump(exclude_unset=True, exclude={"pollutants", "methods"})

        contract_type = update_data.get("contract_type") or order.contract_type
        parent_order_id = update_data.get("parent_order_id", order.parent_order_id)
        if contract_type == ContractType.NEW and "contract_type" in update_data and "parent_order_id" not in update_data:
            parent_order_id = None
            update_data["parent_order_id"] = None
        await OrderService._validate_parent(db, contract_type, parent_order_id, order_id=order.id)

        if contract_type == ContractType.CHANGE and order.contract_type == ContractType.NEW:
            # Only new contracts may carry billings
            billings = await db.scalar(select(func.count(Billing.id)).where(Billing.order_id == order.id))
            if billings:
                logger.warning("Order type change rejected: billings exist", extra={"order_id": str(order_id)})
                raise ConflictError(
                    "청구 내역이 있는 신규계약은 변경계약으로 바꿀 수 없습니다", code="ORDER_HAS_BILLINGS"
                )
            children = await db.scalar(select(func.count(Order.id)).where(Order.parent_order_id == order.id))
            if children:
                raise DomainValidationError("변경계약이 연결된 신규계약은 변경계약으로 바꿀 수 없습니다")

        if "customer_id" in update_data or "verification_company_id" in update_data:
            await OrderService._validate_customers(
                db,
                update_data.get("customer_id") or order.customer_id,
                update_data.get("verification_company_id", order.verification_company_id),
            )

        for field, value in update_data.items():
            setattr(order, field, value)
        if order_update.pollutants is not None:
            order.pollutants = _pollutant_rows(order_update.pollutants)
        if order_update.methods is not None:
            order.methods = _method_rows(order_update.methods)
        order.updated_by = user_id

        await db.commit()
        logger.info("Order updated", extra={"order_id": str(order_id), "fields": sorted(update_data)})
        return await OrderService.get_order(db, order_id)

    @staticmethod
    async def delete_order(db: AsyncSession, order_id: UUID) -> None:
        """
        Delete an order and its line items.

        Raises:
            ConflictError: Billings or change contracts still reference it
        """
        order = await OrderService.get_order(db, order_id)

        billings = await db.scalar(select(func.count(Billing.id)).where(Billing.order_id == order_id))
        if billings:
            logger.warning("Order delete rejected: billings exist", extra={"order_id": str(order_id)})
            raise ConflictError("청구 내역이 있는 수주는 삭제할 수 없습니다", code="ORDER_HAS_BILLINGS")

        change_orders = await db.scalar(select(func.count(Order.id)).where(Order.parent_order_id == order_id))
        if change_orders:
            logger.warning("Order delete rejected: change orders exist", extra={"order_id": str(order_id)})
            raise ConflictError("변경계약이 연결된 수주는 삭제할 수 없습니다", code="ORDER_HAS_CHANGE_ORDERS")

        await db.delete(order)
        await db.commit()
        logger.info("Order deleted", extra={"order_id": str(order_id), "order_number": order.order_number})
