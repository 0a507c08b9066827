"""Unit tests for order attachments and the object storage wrapper."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    DomainValidationError, NotFoundError, PayloadTooLargeError, StorageError,
)
from app.models.enums import ContractType
from app.models.order import Order
from app.services import storage_service
from app.services.attachment_service import AttachmentService, build_storage_key, normalize_attachments

ORDER_LOOKUP = "app.services.attachment_service.OrderService.get_order"
STORAGE = "app.services.attachment_service.storage_service"


def _order(attachments=None) -> Order:
    return Order(id=uuid4(), order_number="2025-0001", contract_type=ContractType.NEW, attachments=attachments or [])


def test_storage_key_keeps_extension_only():
    order_id = uuid4()

    assert build_storage_key(order_id, "현장 사진.JPG", 1700000000000) == f"{order_id}/1700000000000.jpg"
    assert build_storage_key(order_id, "README", 5) == f"{order_id}/5"


def test_normalize_attachments_handles_mixed_rows():
    rows = normalize_attachments(
        ["legacy.pdf", {"name": "a.pdf", "path": "x/1.pdf", "size": 3, "uploadedAt": "2025-01-01T00:00:00"}]
    )

    assert rows[0].path == "legacy.pdf"
    assert rows[1].uploaded_at is not None
    assert normalize_attachments(None) == []


@pytest.mark.asyncio
async def test_upload_rejects_oversized_file_before_storage():
    db = AsyncMock(spec=AsyncSession)
    content = b"0" * (settings.max_attachment_bytes + 1)

    with patch(f"{STORAGE}.upload", new_callable=AsyncMock) as mock_upload:
        with pytest.raises(PayloadTooLargeError) as exc:
            await AttachmentService.upload_attachment(db, uuid4(), "big.pdf", content)

    assert exc.value.status_code == 413
    assert not mock_upload.called


@pytest.mark.asyncio
async def test_upload_rejects_empty_file():
    db = AsyncMock(spec=AsyncSession)

    with pytest.raises(DomainValidationError):
        await AttachmentService.upload_attachment(db, uuid4(), "empty.pdf", b"")


@pytest.mark.asyncio
async def test_upload_appends_metadata():
    db = AsyncMock(spec=AsyncSession)
    order = _order(attachments=["old.hwp"])
    user_id = uuid4()

    with patch(ORDER_LOOKUP, new_callable=AsyncMock) as mock_get, \
            patch(f"{STORAGE}.upload", new_callable=AsyncMock) as mock_upload:
        mock_get.return_value = order
        metadata = await AttachmentService.upload_attachment(
            db, order.id, "계약서.pdf", b"%PDF-1.4", "application/pdf", user_id=user_id
        )

    key = mock_upload.call_args[0][0]
    assert key.startswith(f"{order.id}/") and key.endswith(".pdf")
    assert metadata.name == "계약서.pdf"
    assert metadata.size == 8
    assert [a["path"] for a in order.attachments] == ["old.hwp", key]
    assert order.updated_by == user_id
    assert db.commit.called


@pytest.mark.asyncio
async def test_upload_removes_object_when_save_fails():
    db = AsyncMock(spec=AsyncSession)
    db.commit.side_effect = RuntimeError("connection lost")
    order = _order()

    with patch(ORDER_LOOKUP, new_callable=AsyncMock) as mock_get, \
            patch(f"{STORAGE}.upload", new_callable=AsyncMock) as mock_upload, \
            patch(f"{STORAGE}.delete", new_callable=AsyncMock) as mock_delete:
        mock_get.return_value = order
        with pytest.raises(RuntimeError):
            await AttachmentService.upload_attachment(db, order.id, "a.pdf", b"data")

    assert db.rollback.called
    mock_delete.assert_awaited_once_with(mock_upload.call_args[0][0])


@pytest.mark.asyncio
async def test_download_url_only_for_listed_paths():
    db = AsyncMock(spec=AsyncSession)
    order = _order(attachments=[{"name": "a.pdf", "path": "o/1.pdf", "size": 1}])

    with patch(ORDER_LOOKUP, new_callable=AsyncMock) as mock_get, \
            patch(f"{STORAGE}.presigned_url", new_callable=AsyncMock) as mock_sign:
        mock_get.return_value = order
        mock_sign.return_value = "https://storage.example/o/1.pdf?sig=abc"

        download = await AttachmentService.get_download_url(db, order.id, "o/1.pdf")
        assert download.url.startswith("https://storage.example/")
        assert download.expires_in == settings.ATTACHMENT_URL_EXPIRES_SECONDS

        with pytest.raises(NotFoundError):
            await AttachmentService.get_download_url(db, order.id, "someone-else/2.pdf")
    assert mock_sign.await_count == 1


@pytest.mark.asyncio
async def test_delete_attachment_removes_object_then_metadata():
    db = AsyncMock(spec=AsyncSession)
    order = _order(attachments=[
        {"name": "a.pdf", "path": "o/1.pdf", "size": 1},
        {"name": "b.pdf", "path": "o/2.pdf", "size": 2},
    ])

    with patch(ORDER_LOOKUP, new_callable=AsyncMock) as mock_get, \
            patch(f"{STORAGE}.delete", new_callable=AsyncMock) as mock_delete:
        mock_get.return_value = order
        remaining = await AttachmentService.delete_attachment(db, order.id, "o/1.pdf")

    mock_delete.assert_awaited_once_with("o/1.pdf")
    assert [a.path for a in remaining] == ["o/2.pdf"]
    assert [a["path"] for a in order.attachments] == ["o/2.pdf"]


@pytest.mark.asyncio
async def test_delete_unknown_attachment_leaves_storage_alone():
    db = AsyncMock(spec=AsyncSession)

    with patch(ORDER_LOOKUP, new_callable=AsyncMock) as mock_get, \
            patch(f"{STORAGE}.delete", new_callable=AsyncMock) as mock_delete:
        mock_get.return_value = _order()
        with pytest.raises(NotFoundError):
            await AttachmentService.delete_attachment(db, uuid4(), "missing.pdf")

    assert not mock_delete.called
    assert not db.commit.called


@pytest.mark.asyncio
async def test_storage_requires_credentials():
    with patch.object(settings, "STORAGE_ACCESS_KEY_ID", ""):
        with pytest.raises(StorageError) as exc:
            await storage_service.upload("k", b"x")

    assert exc.value.code == "STORAGE_NOT_CONFIGURED"


@pytest.mark.asyncio
async def test_storage_upload_uses_configured_bucket():
    client = MagicMock()

    with patch("app.services.storage_service._s3_client", return_value=client):
        key = await storage_service.upload("o/1.pdf", b"abc", "application/pdf")

    assert key == "o/1.pdf"
    _, bucket, uploaded_key = client.upload_fileobj.call_args[0]
    assert bucket == settings.ORDER_ATTACHMENTS_BUCKET
    assert uploaded_key == "o/1.pdf"
    assert client.upload_fileobj.call_args[1]["ExtraArgs"] == {"ContentType": "application/pdf"}
