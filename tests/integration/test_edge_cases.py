"""
Edge case tests across endpoints.
Covers: validation, RBAC, malformed ids and pagination bounds.
"""

import uuid
import pytest
from httpx import AsyncClient

from app.models.enums import UserRole


# --- Validation ---


@pytest.mark.asyncio
async def test_change_order_without_parent(async_client: AsyncClient, api_base: str, login_as):
    login_as(UserRole.ADMIN)
    resp = await async_client.post(
        f"{api_base}/orders",
        json={
            "contract_type": "change",
            "contract_status": "contract",
            "business_type": "civilian",
            "pricing_type": "total",
            "contract_name": "변경계약",
            "contract_date": "2025-04-01",
            "contract_amount": "100",
            "customer_id": str(uuid.uuid4()),
            "export_type": "on_site",
            "pollutants": [{"pollutant_id": str(uuid.uuid4()), "concentration": "1"}],
            "methods": [str(uuid.uuid4())],
        },
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_order_missing_fields(async_client: AsyncClient, api_base: str, login_as):
    login_as(UserRole.ADMIN)
    resp = await async_client.post(f"{api_base}/orders", json={})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_billing_zero_amount(async_client: AsyncClient, api_base: str, login_as):
    login_as(UserRole.USER)
    resp = await async_client.post(
        f"{api_base}/billings",
        json={
            "billing_date": "2025-05-01",
            "order_id": str(uuid.uuid4()),
            "customer_id": str(uuid.uuid4()),
            "billing_type": "final",
            "billing_amount": "0",
            "expected_payment_date": "2025-05-31",
        },
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_billing_invalid_type(async_client: AsyncClient, api_base: str, login_as):
    login_as(UserRole.USER)
    resp = await async_client.post(
        f"{api_base}/billings",
        json={
            "billing_date": "2025-05-01",
            "order_id": str(uuid.uuid4()),
            "customer_id": str(uuid.uuid4()),
            "billing_type": "deposit",
            "billing_amount": "100",
            "expected_payment_date": "2025-05-31",
        },
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_customer_malformed_business_number(async_client: AsyncClient, api_base: str, login_as):
    login_as(UserRole.MANAGER)
    resp = await async_client.post(
        f"{api_base}/customers",
        json={"name": "발주처", "customer_type": "발주처", "business_number": "12-345"},
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_upload_without_file(async_client: AsyncClient, api_base: str, login_as):
    login_as(UserRole.USER)
    resp = await async_client.post(f"{api_base}/orders/{uuid.uuid4()}/attachments")
    assert resp.status_code == 422


# --- Malformed ids & pagination ---


@pytest.mark.asyncio
async def test_order_malformed_id(async_client: AsyncClient, api_base: str, login_as):
    login_as(UserRole.USER)
    resp = await async_client.get(f"{api_base}/orders/not-a-uuid")
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_users_page_zero(async_client: AsyncClient, api_base: str, login_as):
    login_as(UserRole.ADMIN)
    resp = await async_client.get(f"{api_base}/users", params={"page": 0})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_users_page_size_too_large(async_client: AsyncClient, api_base: str, login_as):
    login_as(UserRole.ADMIN)
    resp = await async_client.get(f"{api_base}/users", params={"page_size": 1000})
    assert resp.status_code == 422


# --- RBAC ---


@pytest.mark.asyncio
async def test_user_cannot_create_customer(async_client: AsyncClient, api_base: str, login_as):
    login_as(UserRole.USER)
    resp = await async_client.post(
        f"{api_base}/customers", json={"name": "발주처", "customer_type": "발주처"}
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_manager_cannot_delete_customer(async_client: AsyncClient, api_base: str, login_as):
    login_as(UserRole.MANAGER)
    resp = await async_client.delete(f"{api_base}/customers/{uuid.uuid4()}")
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_companies_need_admin_module(async_client: AsyncClient, api_base: str, login_as):
    login_as(UserRole.MANAGER, modules={"inkwang-es"})
    resp = await async_client.get(f"{api_base}/companies")
    assert resp.status_code == 403
