"""Receivable Service - derived views over billings plus collection activities"""

import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import DomainValidationError, NotFoundError, PermissionDeniedError
from app.models.enums import ReceivableClassification, ReceivableStatus
from app.models.finance import Billing, ReceivableActivity
from app.models.user import User
from app.schemas.finance import (
    CollectionResponse, ReceivableActivityCreate, ReceivableActivityResponse,
    ReceivableActivityUpdate, ReceivableClassificationUpdate, ReceivableDetail, ReceivableResponse,
)
from app.services.receivable_calc import compute_receivable
from app.utils.time import get_business_today

logger = logging.getLogger(__name__)


def to_receivable(billing: Billing, as_of: date) -> ReceivableResponse:
    """Project a billing (with collections, order and customer loaded) into its receivable."""
    collections = list(billing.collections)
    figures = compute_receivable(
        billing_amount=billing.billing_amount,
        collection_amounts=[c.collection_amount for c in collections],
        billing_date=billing.billing_date,
        as_of=as_of,
        manual_classification=billing.receivable_classification,
    )
    return ReceivableResponse(
        id=billing.id,
        billing_number=billing.billing_number,
        billing_date=billing.billing_date,
        billing_type=billing.billing_type,
        expected_payment_date=billing.expected_payment_date,
        order_id=billing.order_id,
        order_number=billing.order.order_number if billing.order else "",
        contract_name=billing.order.contract_name if billing.order else "",
        customer_id=billing.customer_id,
        customer_name=billing.customer.name if billing.customer else "",
        billing_amount=figures.billing_amount,
        collected_amount=figures.collected_amount,
        remaining_amount=figures.remaining_amount,
        status=figures.status,
        classification=figures.classification,
        days_elapsed=figures.days_elapsed,
        last_collection_date=max((c.collection_date for c in collections), default=None),
        notes=billing.receivable_notes,
    )


class ReceivableService:
    """Service layer for receivables and their activities"""

    @staticmethod
    async def get_receivables(
        db: AsyncSession,
        status: Optional[ReceivableStatus] = None,
        classification: Optional[ReceivableClassification] = None,
        customer_id: Optional[UUID] = None,
        as_of: Optional[date] = None,
    ) -> List[ReceivableResponse]:
        """
        Receivables for every billing, newest billing first.

        Status and classification are derived, so filtering happens after
        the figures are computed.
        """
        as_of = as_of or get_business_today()
        query = select(Billing).options(
            selectinload(Billing.order),
            selectinload(Billing.customer),
            selectinload(Billing.collections),
        )
        if customer_id:
            query = query.where(Billing.customer_id == customer_id)
        result = await db.execute(query.order_by(Billing.billing_date.desc(), Billing.billing_number.desc()))

        receivables = [to_receivable(billing, as_of) for billing in result.scalars().all()]
        if status:
            receivables = [r for r in receivables if r.status == status]
        if classification:
            receivables = [r for r in receivables if r.classification == classification]
        return receivables

    @staticmethod
    async def _load_billing(db: AsyncSession, billing_id: UUID) -> Billing:
        result = await db.execute(
            select(Billing)
            .options(
                selectinload(Billing.order),
                selectinload(Billing.customer),
                selectinload(Billing.collections),
                selectinload(Billing.activities).selectinload(ReceivableActivity.author),
            )
            .where(Billing.id == billing_id)
            .execution_options(populate_existing=True)
        )
        billing = result.scalar_one_or_none()
        if not billing:
            raise NotFoundError("미수금을 찾을 수 없습니다")
        return billing

    @staticmethod
    async def get_receivable(db: AsyncSession, billing_id: UUID, as_of: Optional[date] = None) -> ReceivableDetail:
        billing = await ReceivableService._load_billing(db, billing_id)
        receivable = to_receivable(billing, as_of or get_business_today())
        activities = sorted(billing.activities, key=lambda a: (a.activity_date, a.created_at), reverse=True)
        return ReceivableDetail(
            **receivable.model_dump(),
            activities=[ReceivableActivityResponse.model_validate(a) for a in activities],
            collections=[
                CollectionResponse.model_validate(c).model_copy(update={"billing": None})
                for c in billing.collections
            ],
        )

    @staticmethod
    async def classify(
        db: AsyncSession, billing_id: UUID, classification_in: ReceivableClassificationUpdate, user: User
    ) -> ReceivableDetail:
        """Mark a receivable as written off (대손처리). Other classes are age-derived."""
        if not user.is_admin:
            raise PermissionDeniedError("관리자만 미수금 분류를 변경할 수 있습니다")
        if classification_in.classification != ReceivableClassification.WRITTEN_OFF:
            raise DomainValidationError("대손처리만 수동으로 변경할 수 있습니다")

        billing = await ReceivableService._load_billing(db, billing_id)
        billing.receivable_classification = ReceivableClassification.WRITTEN_OFF
        if classification_in.notes is not None:
            billing.receivable_notes = classification_in.notes
        billing.updated_by = user.id
        await db.commit()

        logger.info("Receivable written off", extra={"billing_id": str(billing_id), "user_id": str(user.id)})
        return await ReceivableService.get_receivable(db, billing_id)

    # -- Activities ----------------------------------------------------------

    @staticmethod
    async def _get_activity(db: AsyncSession, activity_id: UUID) -> ReceivableActivity:
        result = await db.execute(
            select(ReceivableActivity)
            .options(selectinload(ReceivableActivity.author))
            .where(ReceivableActivity.id == activity_id)
            .execution_options(populate_existing=True)
        )
        activity = result.scalar_one_or_none()
        if not activity:
            raise NotFoundError("활동 내역을 찾을 수 없습니다")
        return activity

    @staticmethod
    def _ensure_can_edit(activity: ReceivableActivity, user: User) -> None:
        if activity.created_by != user.id and not user.is_admin:
            logger.warning(
                "Activity change rejected: not author",
                extra={"activity_id": str(activity.id), "user_id": str(user.id)},
            )
            raise PermissionDeniedError("본인이 작성한 활동만 수정/삭제할 수 있습니다")

    @staticmethod
    async def create_activity(
        db: AsyncSession, billing_id: UUID, activity_in: ReceivableActivityCreate, user: User
    ) -> ReceivableActivity:
        if not await db.get(Billing, billing_id):
            raise NotFoundError("미수금을 찾을 수 없습니다")

        activity = ReceivableActivity(
            billing_id=billing_id,
            activity_date=activity_in.activity_date,
            activity_content=activity_in.activity_content,
            created_by=user.id,
        )
        db.add(activity)
        await db.commit()
        logger.info("Receivable activity created", extra={"activity_id": str(activity.id), "billing_id": str(billing_id)})
        return await ReceivableService._get_activity(db, activity.id)

    @staticmethod
    async def update_activity(
        db: AsyncSession, activity_id: UUID, activity_update: ReceivableActivityUpdate, user: User
    ) -> ReceivableActivity:
        activity = await ReceivableService._get_activity(db, activity_id)
        ReceivableService._ensure_can_edit(activity, user)

        for field, value in activity_update.model_dump(exclude_unset=True).items():
            setattr(activity, field, value)
        await db.commit()
        return await ReceivableService._get_activity(db, activity_id)

    @staticmethod
    async def delete_activity(db: AsyncSession, activity_id: UUID, user: User) -> None:
        activity = await ReceivableService._get_activity(db, activity_id)
        ReceivableService._ensure_can_edit(activity, user)

        await db.delete(activity)
        await db.commit()
        logger.info("Receivable activity deleted", extra={"activity_id": str(activity_id)})
