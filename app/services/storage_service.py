"""
S3-compatible object storage for order attachments. Uses global config; no per-call reconfiguration.
"""
import asyncio
import logging
from io import BytesIO
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings
from app.core.exceptions import StorageError

logger = logging.getLogger(__name__)


def _s3_client():
    if not settings.STORAGE_ACCESS_KEY_ID or not settings.STORAGE_SECRET_ACCESS_KEY:
        raise StorageError(
            "파일 저장소가 설정되지 않았습니다",
            code="STORAGE_NOT_CONFIGURED",
        )
    return boto3.client(
        service_name="s3",
        endpoint_url=settings.STORAGE_ENDPOINT_URL or None,
        aws_access_key_id=settings.STORAGE_ACCESS_KEY_ID,
        aws_secret_access_key=settings.STORAGE_SECRET_ACCESS_KEY,
        region_name=settings.STORAGE_REGION,
        config=boto3.session.Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
        ),
    )


async def upload(
    key: str,
    content: bytes,
    content_type: Optional[str] = None,
    bucket: Optional[str] = None,
) -> str:
    """Upload bytes under ``key`` and return the key."""
    client = _s3_client()
    bucket = bucket or settings.ORDER_ATTACHMENTS_BUCKET
    extra = {"ContentType": content_type} if content_type else {}

    def _put():
        try:
            client.upload_fileobj(BytesIO(content), bucket, key, ExtraArgs=extra)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"파일 업로드에 실패했습니다: {e}") from e

    await asyncio.to_thread(_put)
    logger.info("Object uploaded", extra={"bucket": bucket, "key": key, "size": len(content)})
    return key


async def delete(key: str, bucket: Optional[str] = None) -> None:
    client = _s3_client()
    bucket = bucket or settings.ORDER_ATTACHMENTS_BUCKET

    def _delete():
        try:
            client.delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"파일 삭제에 실패했습니다: {e}") from e

    await asyncio.to_thread(_delete)
    logger.info("Object deleted", extra={"bucket": bucket, "key": key})


async def presigned_url(key: str, expires_in: Optional[int] = None, bucket: Optional[str] = None) -> str:
    """Time-limited download URL for a private object."""
    client = _s3_client()
    bucket = bucket or settings.ORDER_ATTACHMENTS_BUCKET
    expires_in = expires_in or settings.ATTACHMENT_URL_EXPIRES_SECONDS

    def _sign():
        try:
            return client.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"다운로드 URL 생성에 실패했습니다: {e}") from e

    return await asyncio.to_thread(_sign)
