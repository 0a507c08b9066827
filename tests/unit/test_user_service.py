"""Unit tests for UserService and CustomerService."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError
from app.core.security import get_password_hash
from app.models.customer import Customer
from app.models.enums import CustomerType, EmploymentStatus, UserRole
from app.schemas.customer import CustomerCreate, CustomerUpdate
from app.schemas.user import UserCreate, UserUpdate
from app.services.customer_service import CustomerService
from app.services.user_service import UserService
from tests.conftest import make_user

USER_LOOKUP = "app.services.user_service.UserService"


@pytest.mark.asyncio
async def test_create_user_lowercases_email_and_hashes_password():
    db = AsyncMock(spec=AsyncSession)
    user_in = UserCreate(email="Park@Inkwang.co.kr", name="박민수", password="secret1!pw", role="manager")

    with patch(f"{USER_LOOKUP}.get_user_by_email", new_callable=AsyncMock) as mock_email:
        mock_email.return_value = None
        user = await UserService.create_user(db, user_in)

    assert user.email == "park@inkwang.co.kr"
    assert user.role == UserRole.MANAGER
    assert user.hashed_password != "secret1!pw"
    db.add.assert_called_once_with(user)
    assert db.commit.called


@pytest.mark.asyncio
async def test_create_user_duplicate_email():
    db = AsyncMock(spec=AsyncSession)
    user_in = UserCreate(email="kim@inkwang.co.kr", name="김철수", password="secret1!pw")

    with patch(f"{USER_LOOKUP}.get_user_by_email", new_callable=AsyncMock) as mock_email:
        mock_email.return_value = make_user(email="kim@inkwang.co.kr")
        with pytest.raises(ConflictError) as exc:
            await UserService.create_user(db, user_in)

    assert exc.value.code == "EMAIL_EXISTS"
    assert not db.add.called


@pytest.mark.asyncio
async def test_update_user_status_drives_is_active():
    db = AsyncMock(spec=AsyncSession)
    user = make_user(UserRole.USER)

    with patch(f"{USER_LOOKUP}.get_user_by_id", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = user
        await UserService.update_user(db, user.id, UserUpdate(employment_status="inactive"))

    assert user.employment_status == EmploymentStatus.INACTIVE
    assert user.is_active is False


@pytest.mark.asyncio
async def test_update_user_password_is_rehashed():
    db = AsyncMock(spec=AsyncSession)
    user = make_user(UserRole.USER)

    with patch(f"{USER_LOOKUP}.get_user_by_id", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = user
        await UserService.update_user(db, user.id, UserUpdate(password="newpass1!"))

    assert user.hashed_password.startswith("$2")
    assert not hasattr(user, "password")


@pytest.mark.asyncio
async def test_deactivate_unknown_user():
    db = AsyncMock(spec=AsyncSession)

    with patch(f"{USER_LOOKUP}.get_user_by_id", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = None
        with pytest.raises(NotFoundError):
            await UserService.deactivate_user(db, uuid4())


@pytest.mark.asyncio
async def test_authenticate_rejects_inactive_user():
    db = AsyncMock(spec=AsyncSession)
    user = make_user(UserRole.USER, hashed_password=get_password_hash("secret1!pw"), is_active=False)

    with patch(f"{USER_LOOKUP}.get_user_by_email", new_callable=AsyncMock) as mock_email:
        mock_email.return_value = user
        assert await UserService.authenticate_user(db, user.email, "secret1!pw") is None

        user.is_active = True
        assert await UserService.authenticate_user(db, user.email, "secret1!pw") is user
        assert await UserService.authenticate_user(db, user.email, "wrong") is None


@pytest.mark.asyncio
async def test_get_users_returns_total():
    db = AsyncMock(spec=AsyncSession)
    db.scalar.return_value = 3
    result = MagicMock()
    result.scalars.return_value.all.return_value = [make_user()]
    db.execute.return_value = result

    users, total = await UserService.get_users(db, skip=0, limit=1, search="홍")

    assert total == 3
    assert len(users) == 1


@pytest.mark.asyncio
async def test_delete_referenced_customer_conflicts():
    db = AsyncMock(spec=AsyncSession)
    customer = Customer(id=uuid4(), name="발주처", customer_type=CustomerType.CLIENT)
    db.scalar.side_effect = [1, 0]

    with patch(
        "app.services.customer_service.CustomerService.get_customer", new_callable=AsyncMock
    ) as mock_get:
        mock_get.return_value = customer
        with pytest.raises(ConflictError):
            await CustomerService.delete_customer(db, customer.id)

    assert not db.delete.called


@pytest.mark.asyncio
async def test_delete_unreferenced_customer():
    db = AsyncMock(spec=AsyncSession)
    customer = Customer(id=uuid4(), name="검증기관", customer_type=CustomerType.VERIFICATION_COMPANY)
    db.scalar.side_effect = [0, 0]

    with patch(
        "app.services.customer_service.CustomerService.get_customer", new_callable=AsyncMock
    ) as mock_get:
        mock_get.return_value = customer
        await CustomerService.delete_customer(db, customer.id)

    db.delete.assert_awaited_once_with(customer)


@pytest.mark.asyncio
async def test_create_customer_duplicate_business_number():
    db = AsyncMock(spec=AsyncSession)
    db.scalar.return_value = uuid4()
    customer_in = CustomerCreate(
        name="한국토지주택공사", customer_type=CustomerType.CLIENT, business_number="123-45-67890"
    )

    with pytest.raises(ConflictError) as exc:
        await CustomerService.create_customer(db, customer_in)

    assert exc.value.code == "DUPLICATE_BUSINESS_NUMBER"
    assert not db.add.called


@pytest.mark.asyncio
async def test_update_customer_duplicate_business_number():
    db = AsyncMock(spec=AsyncSession)
    customer = Customer(
        id=uuid4(), name="발주처", customer_type=CustomerType.CLIENT, business_number="111-11-11111"
    )
    db.scalar.return_value = uuid4()

    with patch(
        "app.services.customer_service.CustomerService.get_customer", new_callable=AsyncMock
    ) as mock_get:
        mock_get.return_value = customer
        with pytest.raises(ConflictError) as exc:
            await CustomerService.update_customer(
                db, customer.id, CustomerUpdate(business_number="123-45-67890")
            )

    assert exc.value.code == "DUPLICATE_BUSINESS_NUMBER"
    assert customer.business_number == "111-11-11111"
    assert not db.commit.called


@pytest.mark.asyncio
async def test_update_customer_without_business_number_skips_check():
    db = AsyncMock(spec=AsyncSession)
    customer = Customer(
        id=uuid4(), name="발주처", customer_type=CustomerType.CLIENT, business_number="111-11-11111"
    )

    with patch(
        "app.services.customer_service.CustomerService.get_customer", new_callable=AsyncMock
    ) as mock_get:
        mock_get.return_value = customer
        await CustomerService.update_customer(db, customer.id, CustomerUpdate(manager_name="이담당"))

    assert not db.scalar.called
    assert customer.manager_name == "이담당"
    assert db.commit.called


@pytest.mark.asyncio
async def test_business_number_check_ignores_blank_digits():
    db = AsyncMock(spec=AsyncSession)
    assert await CustomerService.is_business_number_taken(db, "---") is False
    assert not db.scalar.called
