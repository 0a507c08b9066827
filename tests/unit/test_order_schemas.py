"""Unit tests for order and finance request schemas."""

import pytest
from decimal import Decimal
from uuid import uuid4
from pydantic import ValidationError

from app.models.enums import InvoiceStatus
from app.schemas.customer import CustomerUpdate
from app.schemas.finance import (
    BillingCreate, BillingUpdate, CollectionCreate, CollectionUpdate, ReceivableClassificationUpdate,
)
from app.schemas.order import AttachmentMetadata, OrderCreate, OrderUpdate


def _order(**overrides):
    payload = dict(
        contract_type="new",
        contract_status="quotation",
        business_type="civilian",
        pricing_type="unit_price",
        contract_unit="Ton",
        contract_name="공장부지 정화",
        contract_date="2025-02-10",
        contract_amount="1,200,000",
        customer_id=str(uuid4()),
        export_type="export",
        pollutants=[{"pollutant_id": str(uuid4()), "concentration": "0.5"}],
        methods=[str(uuid4())],
    )
    payload.update(overrides)
    return payload


def test_amount_with_thousand_separators():
    order = OrderCreate(**_order())
    assert order.contract_amount == Decimal("1200000")


def test_amount_must_not_be_negative():
    with pytest.raises(ValidationError):
        OrderCreate(**_order(contract_amount="-1"))


def test_change_order_requires_parent():
    with pytest.raises(ValidationError) as exc:
        OrderCreate(**_order(contract_type="change"))
    assert "원본 계약" in str(exc.value)


def test_new_order_cannot_have_parent():
    with pytest.raises(ValidationError):
        OrderCreate(**_order(parent_order_id=str(uuid4())))


def test_order_requires_pollutants_and_methods():
    with pytest.raises(ValidationError):
        OrderCreate(**_order(pollutants=[]))
    with pytest.raises(ValidationError):
        OrderCreate(**_order(methods=[]))


def test_order_update_is_partial():
    update = OrderUpdate(contract_amount="3,000")
    assert update.model_dump(exclude_unset=True) == {"contract_amount": Decimal("3000")}


def test_order_update_rejects_null_required_columns():
    with pytest.raises(ValidationError) as exc:
        OrderUpdate.model_validate({"contract_type": None, "contract_name": None})
    assert "contract_name, contract_type" in str(exc.value)


def test_order_update_allows_null_optional_columns():
    update = OrderUpdate.model_validate({"manager_id": None, "notes": None, "verification_company_id": None})
    assert update.model_dump(exclude_unset=True) == {
        "manager_id": None, "notes": None, "verification_company_id": None,
    }


def test_finance_updates_reject_null_required_columns():
    with pytest.raises(ValidationError):
        BillingUpdate.model_validate({"billing_amount": None})
    with pytest.raises(ValidationError):
        CollectionUpdate.model_validate({"collection_date": None})
    with pytest.raises(ValidationError):
        CustomerUpdate.model_validate({"name": None})

    # billing_number null means "keep the current number"
    assert BillingUpdate.model_validate({"billing_number": None}).billing_number is None
    assert CollectionUpdate.model_validate({"bank_account_id": None}).bank_account_id is None


def test_attachment_metadata_accepts_camel_case_timestamp():
    attachment = AttachmentMetadata.model_validate(
        {"name": "도면.dwg", "path": "o/1.dwg", "size": 10, "uploadedAt": "2025-03-01T09:00:00"}
    )
    assert attachment.uploaded_at.year == 2025


def test_billing_defaults_and_amount_parsing():
    billing = BillingCreate(
        billing_date="2025-05-01",
        order_id=str(uuid4()),
        customer_id=str(uuid4()),
        billing_type="contract",
        billing_amount="5,000,000",
        expected_payment_date="2025-05-31",
    )
    assert billing.billing_amount == Decimal("5000000")
    assert billing.invoice_status == InvoiceStatus.NOT_ISSUED
    assert billing.billing_number is None


def test_collection_amount_must_be_positive():
    with pytest.raises(ValidationError):
        CollectionCreate(billing_id=str(uuid4()), collection_date="2025-06-01", collection_amount="0")


def test_classification_rejects_unknown_value():
    with pytest.raises(ValidationError):
        ReceivableClassificationUpdate(classification="lost")
