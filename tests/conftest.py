"""Shared pytest fixtures for unit, integration and E2E tests."""

import os
import uuid
from datetime import date
from decimal import Decimal
from typing import Callable, Optional
from unittest.mock import AsyncMock

import pytest
from dotenv import load_dotenv

# Load .env so DATABASE_URL, SECRET_KEY available for requires_db check
load_dotenv()
# Many requests come from one test client address
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.main import app
from app.api import deps
from app.config import settings
from app.database import get_db
from app.models.enums import (
    BusinessType, ContractStatus, ContractType, EmploymentStatus, ExportType, ModuleCode, PricingType, UserRole,
)
from app.models.user import User
from app.schemas.order import OrderResponse
from app.services.access_control import CapabilityTable
from app.utils.time import get_utc_now

# Skip DB-backed tests if DATABASE_URL or SECRET_KEY not set
requires_db = pytest.mark.skipif(
    not os.getenv("DATABASE_URL") or not os.getenv("SECRET_KEY"),
    reason="DATABASE_URL and SECRET_KEY must be set",
)

ALL_MODULES = frozenset(code.value for code in ModuleCode)


def _get_api_base() -> str:
    """API base URL. In CI (TEST_USE_LIVE_SERVER=true), hit running server to avoid async teardown issues."""
    if os.getenv("TEST_USE_LIVE_SERVER", "").lower() == "true":
        base = os.getenv("LIVE_SERVER_URL", "http://localhost:8000")
        return f"{base}{settings.API_V1_PREFIX}"
    return f"http://test{settings.API_V1_PREFIX}"


@pytest.fixture
def api_base() -> str:
    """Base URL for API requests."""
    return _get_api_base()


@pytest.fixture
async def async_client(api_base: str):
    """Async HTTP client. Uses live server in CI to avoid RuntimeError: Task pending during teardown."""
    use_live = os.getenv("TEST_USE_LIVE_SERVER", "").lower() == "true"
    if use_live:
        client = AsyncClient(base_url=api_base, timeout=30.0)
    else:
        transport = ASGITransport(app=app)
        client = AsyncClient(transport=transport, base_url=api_base, timeout=30.0)
    yield client
    await client.aclose()


@pytest.fixture
def unique_suffix() -> str:
    """Unique suffix for test data to avoid collisions."""
    return str(uuid.uuid4())[:8]


def make_user(role: UserRole = UserRole.ADMIN, **overrides) -> User:
    """Detached User instance for service and API tests."""
    now = get_utc_now()
    fields = dict(
        id=uuid.uuid4(),
        email=f"{role.value}_{uuid.uuid4().hex[:6]}@inkwang.co.kr",
        hashed_password="x",
        name="홍길동",
        role=role,
        employment_status=EmploymentStatus.ACTIVE,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    fields.update(overrides)
    return User(**fields)


def make_order_response(**overrides) -> OrderResponse:
    """Validated order as the hierarchy aggregator receives it."""
    now = get_utc_now()
    fields = dict(
        id=uuid.uuid4(),
        order_number="2025-0001",
        contract_type=ContractType.NEW,
        contract_status=ContractStatus.CONTRACT,
        business_type=BusinessType.GOVERNMENT,
        pricing_type=PricingType.TOTAL,
        contract_name="토양정화 공사",
        contract_date=date(2025, 3, 1),
        contract_amount=Decimal("0"),
        customer_id=uuid.uuid4(),
        export_type=ExportType.ON_SITE,
        created_at=now,
        updated_at=now,
    )
    fields.update(overrides)
    return OrderResponse(**fields)


@pytest.fixture
def mock_db() -> AsyncMock:
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def override_db(mock_db: AsyncMock) -> AsyncMock:
    """Route get_db to the mock session for endpoints that need no login."""
    async def _db():
        yield mock_db

    app.dependency_overrides[get_db] = _db
    yield mock_db
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def login_as(mock_db: AsyncMock) -> Callable:
    """
    Override auth, DB and module gating for API tests without a database.

    Usage:
        user = login_as(UserRole.MANAGER, modules={"inkwang-es"})
    """
    def _login(role: UserRole = UserRole.ADMIN, modules: Optional[frozenset] = None) -> User:
        user = make_user(role)
        enabled = ALL_MODULES if modules is None else frozenset(modules)
        caps = CapabilityTable(
            is_admin=role == UserRole.ADMIN,
            active_modules=ALL_MODULES,
            enabled_modules=enabled,
        )

        async def _db():
            yield mock_db

        app.dependency_overrides[get_db] = _db
        app.dependency_overrides[deps.get_current_user] = lambda: user
        app.dependency_overrides[deps.get_capabilities] = lambda: caps
        return user

    yield _login
    app.dependency_overrides.clear()
