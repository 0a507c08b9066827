"""E2E tests: order -> change order -> billing -> collection -> receivable."""

import re
from decimal import Decimal

import pytest
from httpx import AsyncClient

from tests.conftest import requires_db

pytestmark = requires_db


@pytest.fixture
async def admin_headers(async_client: AsyncClient, api_base: str, unique_suffix: str) -> dict:
    """Seed reference data plus a fresh admin, then log in."""
    from scripts.seed_data import seed

    email = f"admin_{unique_suffix}@inkwang.co.kr"
    password = "e2e-pass1!"
    await seed(admin_email=email, admin_password=password)

    resp = await async_client.post(f"{api_base}/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}


@pytest.mark.asyncio
async def test_order_to_receivable_flow(
    async_client: AsyncClient, api_base: str, admin_headers: dict, unique_suffix: str
):
    headers = admin_headers

    # 1. Admin sees the sales module in the sidebar
    resp = await async_client.get(f"{api_base}/module-access/me", headers=headers)
    assert resp.status_code == 200, resp.text
    assert "inkwang-es" in [m["code"] for m in resp.json()["data"]]

    # 2. Customer and reference lists
    resp = await async_client.post(
        f"{api_base}/customers",
        headers=headers,
        json={"name": f"발주처 {unique_suffix}", "customer_type": "발주처"},
    )
    assert resp.status_code == 201, resp.text
    customer_id = resp.json()["data"]["id"]

    pollutant_id = (await async_client.get(f"{api_base}/orders/pollutants", headers=headers)).json()["data"][0]["id"]
    method_id = (await async_client.get(f"{api_base}/orders/methods", headers=headers)).json()["data"][0]["id"]

    def order_payload(**overrides):
        payload = {
            "contract_type": "new",
            "contract_status": "contract",
            "business_type": "government",
            "pricing_type": "total",
            "contract_name": f"정화공사 {unique_suffix}",
            "contract_date": "2025-04-01",
            "contract_amount": "1,000,000",
            "customer_id": customer_id,
            "export_type": "on_site",
            "pollutants": [{"pollutant_id": pollutant_id, "concentration": "3.2"}],
            "methods": [method_id],
        }
        payload.update(overrides)
        return payload

    # 3. New order, then a change order under it
    resp = await async_client.post(f"{api_base}/orders", headers=headers, json=order_payload())
    assert resp.status_code == 201, resp.text
    parent = resp.json()["data"]
    assert re.fullmatch(r"\d{4}-\d{4}", parent["order_number"])

    resp = await async_client.post(
        f"{api_base}/orders",
        headers=headers,
        json=order_payload(
            contract_type="change",
            parent_order_id=parent["id"],
            contract_name=f"정화공사 {unique_suffix} 1차 변경",
            contract_amount="250,000",
        ),
    )
    assert resp.status_code == 201, resp.text
    change = resp.json()["data"]

    # 4. Hierarchy groups them
    resp = await async_client.get(
        f"{api_base}/orders/hierarchy", headers=headers, params={"search": unique_suffix}
    )
    assert resp.status_code == 200, resp.text
    rows = resp.json()["data"]
    assert len(rows) == 1
    assert rows[0]["id"] == parent["id"]
    assert [c["id"] for c in rows[0]["children"]] == [change["id"]]
    assert Decimal(rows[0]["total_amount"]) == Decimal("1250000")
    assert rows[0]["contract_type_label"] == "신규 + 변경(1)"

    # 5. Billing against the change order is refused; against the parent it works
    billing_payload = {
        "billing_date": "2025-05-01",
        "order_id": change["id"],
        "customer_id": customer_id,
        "billing_type": "contract",
        "billing_amount": "600,000",
        "expected_payment_date": "2025-05-31",
    }
    resp = await async_client.post(f"{api_base}/billings", headers=headers, json=billing_payload)
    assert resp.status_code == 400, resp.text

    resp = await async_client.post(
        f"{api_base}/billings", headers=headers, json={**billing_payload, "order_id": parent["id"]}
    )
    assert resp.status_code == 201, resp.text
    billing = resp.json()["data"]
    assert re.fullmatch(r"B\d{4}-\d{4}", billing["billing_number"])

    # 6. Partial collection
    resp = await async_client.post(
        f"{api_base}/collections",
        headers=headers,
        json={"billing_id": billing["id"], "collection_date": "2025-05-20", "collection_amount": "200,000"},
    )
    assert resp.status_code == 201, resp.text

    # 7. Receivable reflects it
    resp = await async_client.get(f"{api_base}/receivables/{billing['id']}", headers=headers)
    assert resp.status_code == 200, resp.text
    receivable = resp.json()["data"]
    assert receivable["status"] == "partial"
    assert Decimal(receivable["remaining_amount"]) == Decimal("400000")
    assert len(receivable["collections"]) == 1

    # 8. Referenced rows cannot be deleted
    resp = await async_client.delete(f"{api_base}/orders/{parent['id']}", headers=headers)
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "ORDER_HAS_BILLINGS"

    resp = await async_client.delete(f"{api_base}/billings/{billing['id']}", headers=headers)
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "BILLING_HAS_COLLECTIONS"
