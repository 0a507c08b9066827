"""Unit tests for OrderService."""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, DomainValidationError
from app.models.customer import Customer
from app.models.enums import ContractType, CustomerType
from app.models.order import Order
from app.schemas.order import OrderCreate, OrderUpdate
from app.services.order_service import OrderService


def order_payload(**overrides) -> dict:
    payload = {
        "contract_type": "new",
        "contract_status": "contract",
        "business_type": "government",
        "pricing_type": "total",
        "contract_name": "○○부지 토양정화",
        "contract_date": "2025-04-01",
        "contract_amount": "150,000,000",
        "customer_id": str(uuid4()),
        "export_type": "on_site",
        "pollutants": [{"pollutant_id": str(uuid4()), "concentration": "12.5", "group_name": "중금속"}],
        "methods": [str(uuid4())],
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_order_builds_line_items_and_number():
    db = AsyncMock(spec=AsyncSession)
    user_id = uuid4()
    order_in = OrderCreate(**order_payload())
    db.get.return_value = Customer(id=order_in.customer_id, name="한국토지주택공사", customer_type=CustomerType.CLIENT)

    with patch(
        "app.services.order_service.OrderService.generate_next_order_number", new_callable=AsyncMock
    ) as mock_number, patch(
        "app.services.order_service.OrderService.get_order", new_callable=AsyncMock
    ) as mock_get:
        mock_number.return_value = "2025-0007"
        mock_get.return_value = "reloaded"

        result = await OrderService.create_order(db, order_in, user_id=user_id)

    assert result == "reloaded"
    added = db.add.call_args[0][0]
    assert isinstance(added, Order)
    assert added.order_number == "2025-0007"
    assert added.contract_amount == Decimal("150000000")
    assert added.created_by == user_id
    assert len(added.pollutants) == 1
    assert added.pollutants[0].concentration == Decimal("12.5")
    assert len(added.methods) == 1
    assert db.commit.called


@pytest.mark.asyncio
async def test_create_change_order_requires_new_parent():
    db = AsyncMock(spec=AsyncSession)
    parent_id = uuid4()
    order_in = OrderCreate(**order_payload(contract_type="change", parent_order_id=str(parent_id)))
    db.get.return_value = Order(id=parent_id, contract_type=ContractType.CHANGE)

    with pytest.raises(DomainValidationError) as exc:
        await OrderService.create_order(db, order_in)

    assert "신규계약" in exc.value.message
    assert not db.add.called
    assert not db.commit.called


@pytest.mark.asyncio
async def test_create_change_order_with_missing_parent():
    db = AsyncMock(spec=AsyncSession)
    order_in = OrderCreate(**order_payload(contract_type="change", parent_order_id=str(uuid4())))
    db.get.return_value = None

    with pytest.raises(DomainValidationError):
        await OrderService.create_order(db, order_in)
    assert not db.commit.called


@pytest.mark.asyncio
async def test_validate_parent_rejects_self_reference():
    db = AsyncMock(spec=AsyncSession)
    order_id = uuid4()

    with pytest.raises(DomainValidationError):
        await OrderService._validate_parent(db, ContractType.CHANGE, order_id, order_id=order_id)


@pytest.mark.asyncio
async def test_delete_order_with_billings_conflicts():
    db = AsyncMock(spec=AsyncSession)
    order = Order(id=uuid4(), order_number="2025-0001", contract_type=ContractType.NEW)
    db.scalar.return_value = 2

    with patch("app.services.order_service.OrderService.get_order", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = order
        with pytest.raises(ConflictError) as exc:
            await OrderService.delete_order(db, order.id)

    assert exc.value.status_code == 409
    assert exc.value.code == "ORDER_HAS_BILLINGS"
    assert not db.delete.called


@pytest.mark.asyncio
async def test_delete_order_with_change_orders_conflicts():
    db = AsyncMock(spec=AsyncSession)
    order = Order(id=uuid4(), order_number="2025-0001", contract_type=ContractType.NEW)
    db.scalar.side_effect = [0, 1]

    with patch("app.services.order_service.OrderService.get_order", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = order
        with pytest.raises(ConflictError) as exc:
            await OrderService.delete_order(db, order.id)

    assert exc.value.code == "ORDER_HAS_CHANGE_ORDERS"


@pytest.mark.asyncio
async def test_delete_order_success():
    db = AsyncMock(spec=AsyncSession)
    order = Order(id=uuid4(), order_number="2025-0001", contract_type=ContractType.NEW)
    db.scalar.side_effect = [0, 0]

    with patch("app.services.order_service.OrderService.get_order", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = order
        await OrderService.delete_order(db, order.id)

    db.delete.assert_awaited_once_with(order)
    assert db.commit.called


@pytest.mark.asyncio
async def test_update_new_order_with_children_cannot_become_change():
    db = AsyncMock(spec=AsyncSession)
    parent_id = uuid4()
    order = Order(id=uuid4(), order_number="2025-0002", contract_type=ContractType.NEW, parent_order_id=None)
    db.get.return_value = Order(id=parent_id, contract_type=ContractType.NEW)
    db.scalar.side_effect = [0, 1]

    with patch("app.services.order_service.OrderService.get_order", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = order
        with pytest.raises(DomainValidationError):
            await OrderService.update_order(
                db, order.id, OrderUpdate(contract_type="change", parent_order_id=parent_id)
            )
    assert not db.commit.called


@pytest.mark.asyncio
async def test_update_billed_new_order_cannot_become_change():
    db = AsyncMock(spec=AsyncSession)
    parent_id = uuid4()
    order = Order(id=uuid4(), order_number="2025-0003", contract_type=ContractType.NEW, parent_order_id=None)
    db.get.return_value = Order(id=parent_id, contract_type=ContractType.NEW)
    db.scalar.side_effect = [1, 0]

    with patch("app.services.order_service.OrderService.get_order", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = order
        with pytest.raises(ConflictError) as exc:
            await OrderService.update_order(
                db, order.id, OrderUpdate(contract_type="change", parent_order_id=parent_id)
            )

    assert exc.value.code == "ORDER_HAS_BILLINGS"
    assert order.contract_type == ContractType.NEW
    assert order.parent_order_id is None
    assert not db.commit.called


@pytest.mark.asyncio
async def test_update_unbilled_new_order_becomes_change():
    db = AsyncMock(spec=AsyncSession)
    parent_id = uuid4()
    order = Order(id=uuid4(), order_number="2025-0004", contract_type=ContractType.NEW, parent_order_id=None)
    db.get.return_value = Order(id=parent_id, contract_type=ContractType.NEW)
    db.scalar.side_effect = [0, 0]

    with patch("app.services.order_service.OrderService.get_order", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = order
        await OrderService.update_order(
            db, order.id, OrderUpdate(contract_type="change", parent_order_id=parent_id)
        )

    assert db.scalar.await_count == 2
    assert order.contract_type == ContractType.CHANGE
    assert order.parent_order_id == parent_id
    assert db.commit.called


@pytest.mark.asyncio
async def test_generate_next_order_number():
    db = AsyncMock(spec=AsyncSession)
    result = MagicMock()
    result.scalar_one_or_none.return_value = 41
    db.execute.return_value = result

    with patch("app.services.order_service.get_business_today", return_value=date(2025, 6, 1)):
        number = await OrderService.generate_next_order_number(db)

    assert number == "2025-0042"


@pytest.mark.asyncio
async def test_generate_first_order_number_of_year():
    db = AsyncMock(spec=AsyncSession)
    result = MagicMock()
    result.scalar_one_or_none.return_value = None
    db.execute.return_value = result

    with patch("app.services.order_service.get_business_today", return_value=date(2026, 1, 1)):
        number = await OrderService.generate_next_order_number(db)

    assert number == "2026-0001"
