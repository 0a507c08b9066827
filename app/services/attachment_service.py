"""Order attachment handling: object storage plus the order's attachments list."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import DomainValidationError, NotFoundError, PayloadTooLargeError, StorageError
from app.schemas.order import AttachmentDownload, AttachmentMetadata
from app.services import storage_service
from app.services.order_service import OrderService
from app.utils.time import get_utc_now

logger = logging.getLogger(__name__)


def build_storage_key(order_id: UUID, filename: str, timestamp_ms: int) -> str:
    """
    Object key ``{order_id}/{timestamp}.{ext}``. The original (often Korean)
    file name is kept only in the metadata.
    """
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return f"{order_id}/{timestamp_ms}.{ext}" if ext else f"{order_id}/{timestamp_ms}"


def normalize_attachments(raw: Optional[list]) -> List[AttachmentMetadata]:
    return [AttachmentMetadata.model_validate(item) for item in (raw or [])]


class AttachmentService:
    """Service layer for order attachments"""

    @staticmethod
    async def list_attachments(db: AsyncSession, order_id: UUID) -> List[AttachmentMetadata]:
        order = await OrderService.get_order(db, order_id)
        return normalize_attachments(order.attachments)

    @staticmethod
    async def upload_attachment(
        db: AsyncSession,
        order_id: UUID,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
        user_id: Optional[UUID] = None,
    ) -> AttachmentMetadata:
        """
        Store a file and append its metadata to the order.

        The stored object is removed again if the order update fails.

        Raises:
            PayloadTooLargeError: File exceeds MAX_ATTACHMENT_SIZE_MB
        """
        if not content:
            raise DomainValidationError("파일을 선택해주세요")
        if len(content) > settings.max_attachment_bytes:
            raise PayloadTooLargeError(f"파일 크기는 {settings.MAX_ATTACHMENT_SIZE_MB}MB 이하여야 합니다")

        order = await OrderService.get_order(db, order_id)

        now = get_utc_now()
        key = build_storage_key(order.id, filename, int(now.timestamp() * 1000))
        await storage_service.upload(key, content, content_type)

        metadata = AttachmentMetadata(name=filename, path=key, size=len(content), uploaded_at=now)
        try:
            existing = normalize_attachments(order.attachments)
            order.attachments = [a.model_dump(mode="json") for a in [*existing, metadata]]
            order.updated_by = user_id
            await db.commit()
        except Exception:
            await db.rollback()
            logger.error("Attachment metadata save failed; removing stored object", extra={"key": key}, exc_info=True)
            try:
                await storage_service.delete(key)
            except StorageError:
                logger.error("Orphaned attachment object", extra={"key": key}, exc_info=True)
            raise

        logger.info(
            "Attachment uploaded",
            extra={"order_id": str(order_id), "key": key, "size": len(content)},
        )
        return metadata

    @staticmethod
    async def get_download_url(db: AsyncSession, order_id: UUID, path: str) -> AttachmentDownload:
        attachments = await AttachmentService.list_attachments(db, order_id)
        if not any(a.path == path for a in attachments):
            raise NotFoundError("첨부파일을 찾을 수 없습니다")

        expires_in = settings.ATTACHMENT_URL_EXPIRES_SECONDS
        url = await storage_service.presigned_url(path, expires_in=expires_in)
        return AttachmentDownload(path=path, url=url, expires_in=expires_in)

    @staticmethod
    async def delete_attachment(
        db: AsyncSession, order_id: UUID, path: str, user_id: Optional[UUID] = None
    ) -> List[AttachmentMetadata]:
        """Remove the stored object, then drop it from the order's list."""
        order = await OrderService.get_order(db, order_id)
        existing = normalize_attachments(order.attachments)
        remaining = [a for a in existing if a.path != path]
        if len(remaining) == len(existing):
            raise NotFoundError("첨부파일을 찾을 수 없습니다")

        await storage_service.delete(path)

        order.attachments = [a.model_dump(mode="json") for a in remaining]
        order.updated_by = user_id
        await db.commit()

        logger.info("Attachment deleted", extra={"order_id": str(order_id), "key": path})
        return remaining
